"""Unit tests for the sales follow-up pipeline."""

from datetime import date, time

import pytest

from backend.app.errors import FollowUpTransitionError
from backend.app.followup.state_machine import (
    allowed_next_stages,
    apply_follow_up,
    is_confirmed,
    requires_next_follow_up,
)
from backend.app.models.client import Client
from backend.app.models.common import FollowUpStage
from tests.factories import NOW, make_client

NEXT_DATE = date(2024, 3, 5)
NEXT_TIME = time(11, 30)


def advance(client: Client, stage: FollowUpStage, remarks: str = "Called") -> Client:
    return apply_follow_up(
        client,
        stage,
        remarks,
        actor="sales-1",
        next_follow_up_date=NEXT_DATE,
        next_follow_up_time=NEXT_TIME,
        now=NOW,
    )


class TestApplyFollowUp:
    """Stage transitions and history records."""

    def test_new_client_starts_at_itinerary_created(self) -> None:
        assert make_client().current_stage == FollowUpStage.itinerary_created

    def test_transition_appends_history(self) -> None:
        client = make_client()

        sent = advance(client, FollowUpStage.itinerary_sent, "  Sent on WhatsApp  ")

        assert sent.current_stage == FollowUpStage.itinerary_sent
        assert sent.follow_up_status is not None
        assert sent.follow_up_status.remarks == "Sent on WhatsApp"
        assert sent.follow_up_status.next_follow_up_date == NEXT_DATE
        assert len(sent.follow_up_history) == 1
        record = sent.follow_up_history[0]
        assert record.status == FollowUpStage.itinerary_sent
        assert record.updated_by == "sales-1"
        assert record.updated_at == NOW
        assert record.client_id == client.id
        # Input left untouched
        assert client.follow_up_history == []

    def test_full_follow_up_chain(self) -> None:
        client = make_client()
        for stage in (
            FollowUpStage.itinerary_sent,
            FollowUpStage.first_follow_up,
            FollowUpStage.second_follow_up,
            FollowUpStage.third_follow_up,
            FollowUpStage.fourth_follow_up,
            FollowUpStage.itinerary_edited,
            FollowUpStage.updated_itinerary_sent,
            FollowUpStage.first_follow_up,
        ):
            client = advance(client, stage)

        assert client.current_stage == FollowUpStage.first_follow_up
        assert len(client.follow_up_history) == 8

    def test_illegal_transition_rejected(self) -> None:
        client = advance(make_client(), FollowUpStage.itinerary_sent)

        with pytest.raises(FollowUpTransitionError, match="Cannot move"):
            advance(client, FollowUpStage.third_follow_up)

    def test_terminal_stage_has_no_exits(self) -> None:
        dead = apply_follow_up(make_client(), FollowUpStage.dead, "Not interested", actor="sales-1")

        assert allowed_next_stages(dead.current_stage) == []
        with pytest.raises(FollowUpTransitionError):
            advance(dead, FollowUpStage.itinerary_sent)

    def test_remarks_required(self) -> None:
        with pytest.raises(FollowUpTransitionError, match="Remarks"):
            advance(make_client(), FollowUpStage.itinerary_sent, remarks="   ")

    def test_next_follow_up_required_for_open_stages(self) -> None:
        with pytest.raises(FollowUpTransitionError, match="Next follow-up"):
            apply_follow_up(
                make_client(),
                FollowUpStage.itinerary_sent,
                "Sent",
                actor="sales-1",
                next_follow_up_date=NEXT_DATE,
            )

    def test_terminal_stage_clears_schedule(self) -> None:
        confirmed = advance(make_client(), FollowUpStage.advance_paid_confirmed, "Advance received")

        assert confirmed.follow_up_status is not None
        assert confirmed.follow_up_status.next_follow_up_date is None
        assert confirmed.follow_up_status.next_follow_up_time is None
        assert is_confirmed(confirmed)


def test_sent_can_be_resent() -> None:
    assert FollowUpStage.itinerary_sent in allowed_next_stages(FollowUpStage.itinerary_sent)


def test_requires_next_follow_up() -> None:
    assert requires_next_follow_up(FollowUpStage.first_follow_up)
    assert not requires_next_follow_up(FollowUpStage.dead)
    assert not requires_next_follow_up(FollowUpStage.advance_paid_confirmed)


def test_is_confirmed_false_for_open_client() -> None:
    assert not is_confirmed(make_client())
