"""Client and follow-up endpoints."""

import uuid
from datetime import UTC, date, datetime, time
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from backend.app.api.auth import get_current_context
from backend.app.api.deps import get_catalog, get_followup_service, get_itinerary_service
from backend.app.api.schemas import ClientInput
from backend.app.catalog.snapshot import CatalogSnapshot
from backend.app.db.context import RequestContext
from backend.app.models.client import Client
from backend.app.models.common import FollowUpStage
from backend.app.models.itinerary import Itinerary
from backend.app.services.followup_service import FollowUpService
from backend.app.services.itinerary_service import ItineraryService

router = APIRouter(tags=["clients"])


class UpdateClientResponse(BaseModel):
    """Response for PUT /clients/{client_id}."""

    client: Client
    itinerary: Itinerary | None


class FollowUpRequest(BaseModel):
    """Request body for POST /clients/{client_id}/follow-ups."""

    status: FollowUpStage
    remarks: str
    next_follow_up_date: date | None = None
    next_follow_up_time: time | None = None


class FollowUpOptionsResponse(BaseModel):
    """Response for GET /clients/{client_id}/follow-ups/options."""

    current: FollowUpStage
    options: list[FollowUpStage]


@router.post("/clients", response_model=Client, status_code=status.HTTP_201_CREATED)
def create_client(
    request: ClientInput,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[ItineraryService, Depends(get_itinerary_service)],
) -> Client:
    """Create a client."""
    return service.create_client(request.to_client(uuid.uuid4().hex), actor=ctx.user_id)


@router.get("/clients", response_model=list[Client])
def list_clients(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[ItineraryService, Depends(get_itinerary_service)],
) -> list[Client]:
    """List clients visible to the caller, newest first."""
    return service.list_clients(ctx.owner_filter)


@router.get("/clients/{client_id}", response_model=Client)
def get_client(
    client_id: str,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[ItineraryService, Depends(get_itinerary_service)],
) -> Client:
    """Get one client."""
    return service.get_client(client_id, ctx.owner_filter)


@router.put("/clients/{client_id}", response_model=UpdateClientResponse)
def update_client(
    client_id: str,
    request: ClientInput,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    catalog: Annotated[CatalogSnapshot, Depends(get_catalog)],
    service: Annotated[ItineraryService, Depends(get_itinerary_service)],
    expected_version: int | None = None,
) -> UpdateClientResponse:
    """Edit trip parameters; an existing itinerary gets a new version."""
    client, itinerary = service.update_client(
        client_id,
        request.to_client(client_id),
        actor=ctx.user_id,
        catalog=catalog,
        owner=ctx.owner_filter,
        expected_version=expected_version,
    )
    return UpdateClientResponse(client=client, itinerary=itinerary)


@router.post("/clients/{client_id}/follow-ups", response_model=Client)
def record_follow_up(
    client_id: str,
    request: FollowUpRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[FollowUpService, Depends(get_followup_service)],
) -> Client:
    """Move the client along the sales pipeline."""
    return service.record(
        client_id,
        request.status,
        request.remarks,
        actor=ctx.user_id,
        next_follow_up_date=request.next_follow_up_date,
        next_follow_up_time=request.next_follow_up_time,
        owner=ctx.owner_filter,
    )


@router.get("/clients/{client_id}/follow-ups/options", response_model=FollowUpOptionsResponse)
def follow_up_options(
    client_id: str,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[FollowUpService, Depends(get_followup_service)],
) -> FollowUpOptionsResponse:
    """Stages the client may move to next."""
    client = service.get_client(client_id, ctx.owner_filter)
    return FollowUpOptionsResponse(
        current=client.current_stage,
        options=service.options(client_id, ctx.owner_filter),
    )


@router.get("/follow-ups/due", response_model=list[Client])
def due_follow_ups(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[FollowUpService, Depends(get_followup_service)],
    day: Annotated[date | None, Query(description="Defaults to today (UTC)")] = None,
) -> list[Client]:
    """Clients whose next follow-up is scheduled on `day`."""
    return service.due(day or datetime.now(UTC).date(), ctx.owner_filter)


@router.get("/follow-ups/confirmed", response_model=list[Client])
def confirmed_clients(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[FollowUpService, Depends(get_followup_service)],
) -> list[Client]:
    """Clients who paid the advance."""
    return service.confirmed(ctx.owner_filter)
