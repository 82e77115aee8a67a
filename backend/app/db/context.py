"""Request context identifying the acting back-office user."""

from dataclasses import dataclass

from backend.app.models.common import Role


@dataclass(frozen=True)
class RequestContext:
    """Acting user and role.

    Agents only see the clients they created; every other role sees all
    clients.
    """

    user_id: str
    role: Role

    @property
    def owner_filter(self) -> str | None:
        """`created_by` value to scope client queries by, or None for no scoping."""
        return self.user_id if self.role == Role.agent else None
