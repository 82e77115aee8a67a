"""Minimal auth dependency.

Stub implementation that extracts role/user_id from a bearer token or uses a
dev admin. Real token validation is outside this service.
"""

from typing import Annotated

from fastapi import Header, HTTPException, status

from backend.app.db.context import RequestContext
from backend.app.models.common import Role

DEV_USER_ID = "dev-admin"


async def get_current_context(
    authorization: Annotated[str | None, Header()] = None,
) -> RequestContext:
    """Extract request context from authorization header.

    Stub implementation that either:
    - Parses a simple "Bearer <role>:<user_id>" format
    - Returns a dev admin if no header

    Args:
        authorization: Authorization header (e.g., "Bearer sales:alice")

    Returns:
        RequestContext with user_id and role

    Raises:
        HTTPException: If authorization is invalid
    """
    if not authorization:
        return RequestContext(user_id=DEV_USER_ID, role=Role.admin)

    if not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = authorization[7:]  # Strip "Bearer "

    if ":" in token:
        role_str, user_id = token.split(":", 1)
        try:
            role = Role(role_str)
        except ValueError as e:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token format (expected role:user_id)",
                headers={"WWW-Authenticate": "Bearer"},
            ) from e
        if not user_id:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token format (expected role:user_id)",
                headers={"WWW-Authenticate": "Bearer"},
            )
        return RequestContext(user_id=user_id, role=role)

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid bearer token",
        headers={"WWW-Authenticate": "Bearer"},
    )
