"""Integration tests for SQL stores on SQLite."""

from datetime import date, time

import pytest
from sqlalchemy.orm import Session

from backend.app.catalog.snapshot import CatalogSnapshot
from backend.app.db.engine import create_engine_from_url, create_session_factory
from backend.app.db.models import Base, ItineraryVersionRow
from backend.app.db.sql_repositories import (
    SqlCatalogSource,
    SqlClientStore,
    SqlItineraryStore,
    replace_catalog,
)
from backend.app.errors import VersionConflictError
from backend.app.followup.state_machine import apply_follow_up
from backend.app.models.common import ChangeType, FollowUpStage
from backend.app.models.itinerary import Itinerary
from backend.app.versioning.manager import build_next_version
from tests.factories import NOW, e2e_day_plans, make_catalog, make_client


def next_version(previous: Itinerary | None, catalog: CatalogSnapshot, actor: str = "sales-1") -> Itinerary:
    return build_next_version(
        previous,
        make_client(),
        e2e_day_plans(),
        45,
        83,
        actor=actor,
        change_type=ChangeType.created if previous is None else ChangeType.general_edit,
        description="edit",
        catalog=catalog,
        now=NOW,
    )


class TestSqlItineraryStore:
    """Versions persisted one row each."""

    def test_round_trip(self, sqlite_session: Session, catalog: CatalogSnapshot) -> None:
        SqlClientStore(sqlite_session).save_client(make_client())
        store = SqlItineraryStore(sqlite_session)

        v1 = store.save_itinerary(next_version(None, catalog))
        store.save_itinerary(next_version(v1, catalog))

        latest = store.load_latest_itinerary("client-1")
        assert latest is not None
        assert latest.version == 2
        assert latest.total_base_cost == 155
        assert latest.last_updated == NOW
        assert len(latest.change_log) == 2
        assert store.get_version("client-1", 1) == v1
        assert store.get_version("client-1", 5) is None
        assert [s.version for s in store.list_versions("client-1")] == [2, 1]
        assert sqlite_session.query(ItineraryVersionRow).count() == 2

    def test_concurrent_edit_rejected(self, sqlite_session: Session, catalog: CatalogSnapshot) -> None:
        SqlClientStore(sqlite_session).save_client(make_client())
        store = SqlItineraryStore(sqlite_session)
        v1 = store.save_itinerary(next_version(None, catalog))
        alice = next_version(v1, catalog, actor="alice")
        bob = next_version(v1, catalog, actor="bob")

        store.save_itinerary(alice)
        with pytest.raises(VersionConflictError) as exc_info:
            store.save_itinerary(bob)

        assert exc_info.value.actual_version == 2
        latest = store.load_latest_itinerary("client-1")
        assert latest is not None
        assert latest.updated_by == "alice"

    def test_unique_constraint_maps_to_conflict(self, catalog: CatalogSnapshot) -> None:
        """Two sessions that both pass the version check race on the insert."""
        engine = create_engine_from_url("sqlite://")
        Base.metadata.create_all(engine)
        session_factory = create_session_factory(engine)

        with session_factory() as first, session_factory() as second:
            SqlClientStore(first).save_client(make_client())
            SqlItineraryStore(first).save_itinerary(next_version(None, catalog))

            # `second` read latest=0 before `first` committed; the re-check sees the truth
            store = SqlItineraryStore(second)
            real_latest = store._latest_version
            reads: list[str] = []

            def stale_first_read(client_id: str) -> int:
                reads.append(client_id)
                return 0 if len(reads) == 1 else real_latest(client_id)

            store._latest_version = stale_first_read  # type: ignore[method-assign]

            with pytest.raises(VersionConflictError):
                store.save_itinerary(next_version(None, catalog))

        engine.dispose()


class TestSqlClientStore:
    def test_round_trip_with_follow_ups(self, sqlite_session: Session) -> None:
        store = SqlClientStore(sqlite_session)
        client = store.save_client(make_client())
        sent = apply_follow_up(
            client,
            FollowUpStage.itinerary_sent,
            "Sent on WhatsApp",
            actor="sales-1",
            next_follow_up_date=date(2024, 3, 5),
            next_follow_up_time=time(10, 30),
            now=NOW,
        )
        store.save_client(sent)
        first_call = apply_follow_up(
            sent,
            FollowUpStage.first_follow_up,
            "No answer",
            actor="sales-1",
            next_follow_up_date=date(2024, 3, 7),
            next_follow_up_time=time(9, 0),
            now=NOW,
        )
        store.save_client(first_call)

        stored = store.get_client("client-1")
        assert stored is not None
        assert stored.created_at == NOW
        assert stored.number_of_days == 2
        assert stored.current_stage == FollowUpStage.first_follow_up
        assert [r.status for r in stored.follow_up_history] == [
            FollowUpStage.itinerary_sent,
            FollowUpStage.first_follow_up,
        ]
        assert stored.follow_up_history[0].updated_at == NOW
        assert stored.follow_up_status is not None
        assert stored.follow_up_status.next_follow_up_time == time(9, 0)

    def test_stale_copy_keeps_history(self, sqlite_session: Session) -> None:
        store = SqlClientStore(sqlite_session)
        client = store.save_client(make_client())
        store.save_client(
            apply_follow_up(
                client,
                FollowUpStage.dead,
                "Booked elsewhere",
                actor="sales-1",
            )
        )

        store.save_client(client.model_copy(update={"name": "Asha R."}))

        stored = store.get_client("client-1")
        assert stored is not None
        assert stored.name == "Asha R."
        assert len(stored.follow_up_history) == 1

    def test_flexible_dates_round_trip(self, sqlite_session: Session) -> None:
        store = SqlClientStore(sqlite_session)
        store.save_client(make_client(start=None, days=4))

        stored = store.get_client("client-1")
        assert stored is not None
        assert stored.travel_dates.is_flexible
        assert stored.travel_dates.flexible_month == "2024-09"
        assert stored.number_of_days == 4

    def test_list_and_due(self, sqlite_session: Session) -> None:
        store = SqlClientStore(sqlite_session)
        day = date(2024, 3, 5)
        for client_id, owner, at in (
            ("late", "agent-1", time(16, 0)),
            ("early", "agent-2", time(9, 0)),
        ):
            client = apply_follow_up(
                make_client(client_id, created_by=owner),
                FollowUpStage.itinerary_sent,
                "Sent",
                actor=owner,
                next_follow_up_date=day,
                next_follow_up_time=at,
            )
            store.save_client(client)

        assert {c.id for c in store.list_clients()} == {"late", "early"}
        assert [c.id for c in store.list_clients("agent-1")] == ["late"]
        assert [c.id for c in store.list_due_follow_ups(day)] == ["early", "late"]
        assert [c.id for c in store.list_due_follow_ups(day, "agent-1")] == ["late"]
        assert store.list_due_follow_ups(date(2024, 3, 6)) == []


def test_catalog_round_trip() -> None:
    """Test replace_catalog output reads back through SqlCatalogSource."""
    engine = create_engine_from_url("sqlite://")
    Base.metadata.create_all(engine)
    session_factory = create_session_factory(engine)
    catalog = make_catalog()

    with session_factory() as session:
        replace_catalog(session, catalog)

    loaded = SqlCatalogSource(session_factory).fetch_snapshot()

    assert {h.id for h in loaded.hotels} == {"h1", "h2"}
    room = loaded.get_room_type("h1", "r1")
    assert room is not None
    assert room.off_season_price == 80
    assert loaded.find_transportation_by_name("Rental Car") is not None
    cab_spot = loaded.get_sightseeing("cab-a")
    assert cab_spot is not None
    assert cab_spot.vehicle_costs == {"avanza": 100, "hiace": 150, "miniBus": 200, "bus32": 250, "bus39": 300}
    activity = loaded.get_activity("act-1")
    assert activity is not None
    assert [o.id for o in activity.options] == ["opt-1a", "opt-1b"]
    assert {t.id for t in loaded.entry_tickets} == {"tk-1", "tk-2", "tk-3"}
    assert {m.id for m in loaded.meals} == {"m-1", "m-2", "m-3"}

    # Replacing again swaps prices in place
    with session_factory() as session:
        replace_catalog(session, make_catalog(room_off_season_price=150))

    repriced = SqlCatalogSource(session_factory).fetch_snapshot().get_room_type("h1", "r1")
    assert repriced is not None
    assert repriced.off_season_price == 150

    engine.dispose()
