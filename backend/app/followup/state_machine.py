"""Sales follow-up pipeline transitions."""

import uuid
from datetime import UTC, date, datetime, time

from backend.app.errors import FollowUpTransitionError
from backend.app.models.client import Client, FollowUpRecord, FollowUpStatus
from backend.app.models.common import FollowUpStage

TERMINAL_STAGES: frozenset[FollowUpStage] = frozenset(
    {FollowUpStage.advance_paid_confirmed, FollowUpStage.dead}
)

_CLOSE_OUT = (
    FollowUpStage.itinerary_edited,
    FollowUpStage.advance_paid_confirmed,
    FollowUpStage.dead,
)

TRANSITIONS: dict[FollowUpStage, tuple[FollowUpStage, ...]] = {
    FollowUpStage.itinerary_created: (
        FollowUpStage.itinerary_sent,
        FollowUpStage.first_follow_up,
        *_CLOSE_OUT,
    ),
    FollowUpStage.itinerary_sent: (
        FollowUpStage.itinerary_sent,
        FollowUpStage.first_follow_up,
        *_CLOSE_OUT,
    ),
    FollowUpStage.first_follow_up: (FollowUpStage.second_follow_up, *_CLOSE_OUT),
    FollowUpStage.second_follow_up: (FollowUpStage.third_follow_up, *_CLOSE_OUT),
    FollowUpStage.third_follow_up: (FollowUpStage.fourth_follow_up, *_CLOSE_OUT),
    FollowUpStage.fourth_follow_up: _CLOSE_OUT,
    FollowUpStage.itinerary_edited: (
        FollowUpStage.updated_itinerary_sent,
        FollowUpStage.advance_paid_confirmed,
        FollowUpStage.dead,
    ),
    FollowUpStage.updated_itinerary_sent: (
        FollowUpStage.first_follow_up,
        FollowUpStage.advance_paid_confirmed,
        FollowUpStage.dead,
    ),
    FollowUpStage.advance_paid_confirmed: (),
    FollowUpStage.dead: (),
}


def allowed_next_stages(current: FollowUpStage) -> list[FollowUpStage]:
    return list(TRANSITIONS[current])


def is_confirmed(client: Client) -> bool:
    return client.current_stage == FollowUpStage.advance_paid_confirmed


def requires_next_follow_up(stage: FollowUpStage) -> bool:
    """Every non-terminal stage needs a scheduled next follow-up."""
    return stage not in TERMINAL_STAGES


def apply_follow_up(
    client: Client,
    stage: FollowUpStage,
    remarks: str,
    *,
    actor: str,
    next_follow_up_date: date | None = None,
    next_follow_up_time: time | None = None,
    now: datetime | None = None,
) -> Client:
    """Move a client to `stage`, appending a history record.

    Args:
        client: Client in its current stage
        stage: Target stage
        remarks: Free-text remarks (required)
        actor: ID of the user recording the follow-up
        next_follow_up_date: Required unless `stage` is terminal
        next_follow_up_time: Required unless `stage` is terminal
        now: Timestamp override

    Returns:
        Updated copy of the client; the input is not modified

    Raises:
        FollowUpTransitionError: If the transition is not allowed or a
            required field is missing
    """
    current = client.current_stage
    if stage not in TRANSITIONS[current]:
        raise FollowUpTransitionError(
            f"Cannot move client {client.id} from {current.value} to {stage.value}"
        )

    if not remarks or not remarks.strip():
        raise FollowUpTransitionError("Remarks are required")

    if requires_next_follow_up(stage):
        if next_follow_up_date is None or next_follow_up_time is None:
            raise FollowUpTransitionError(
                f"Next follow-up date and time are required for {stage.value}"
            )
    else:
        next_follow_up_date = None
        next_follow_up_time = None

    timestamp = now or datetime.now(UTC)
    record = FollowUpRecord(
        id=uuid.uuid4().hex,
        client_id=client.id,
        status=stage,
        remarks=remarks.strip(),
        updated_at=timestamp,
        updated_by=actor,
        next_follow_up_date=next_follow_up_date,
        next_follow_up_time=next_follow_up_time,
    )
    status = FollowUpStatus(
        status=stage,
        updated_at=timestamp,
        remarks=record.remarks,
        next_follow_up_date=next_follow_up_date,
        next_follow_up_time=next_follow_up_time,
    )

    return client.model_copy(
        update={
            "follow_up_status": status,
            "follow_up_history": [*client.follow_up_history, record],
        },
        deep=True,
    )
