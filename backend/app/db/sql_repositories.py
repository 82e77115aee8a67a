"""SQL implementations of repository interfaces."""

import logging
from datetime import UTC, date, datetime

from sqlalchemy import delete, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from backend.app.catalog.snapshot import CatalogSnapshot
from backend.app.db.inmemory import summarize
from backend.app.db.models import (
    ActivityOptionRow,
    ActivityRow,
    ClientRow,
    EntryTicketRow,
    FollowUpRecordRow,
    HotelRow,
    ItineraryVersionRow,
    MealRow,
    RoomTypeRow,
    SightseeingRow,
    TransportationRow,
)
from backend.app.db.queries import query_clients, query_itinerary_versions
from backend.app.errors import StoreError, VersionConflictError
from backend.app.models.catalog import (
    Activity,
    ActivityOption,
    EntryTicket,
    Hotel,
    Meal,
    RoomType,
    Sightseeing,
    Transportation,
)
from backend.app.models.client import (
    Client,
    FollowUpRecord,
    FollowUpStatus,
    PartySize,
    TravelDates,
)
from backend.app.models.common import FollowUpStage
from backend.app.models.itinerary import Itinerary, ItinerarySummary

logger = logging.getLogger(__name__)


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite drops tzinfo on round-trip
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


class SqlItineraryStore:
    """SQL implementation of ItineraryStore."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def _latest_version(self, client_id: str) -> int:
        latest = (
            self._session.query(func.max(ItineraryVersionRow.version))
            .filter(ItineraryVersionRow.client_id == client_id)
            .scalar()
        )
        return int(latest or 0)

    def load_latest_itinerary(self, client_id: str) -> Itinerary | None:
        """Get the highest stored version for a client."""
        row = (
            query_itinerary_versions(self._session, client_id)
            .order_by(ItineraryVersionRow.version.desc())
            .first()
        )

        if row is None:
            return None

        return Itinerary.model_validate(row.data)

    def save_itinerary(self, itinerary: Itinerary) -> Itinerary:
        """Persist a new version, rejecting anything but latest + 1.

        The (client_id, version) unique constraint catches writers that pass
        the version check concurrently.
        """
        client_id = itinerary.client_id
        latest = self._latest_version(client_id)
        if itinerary.version != latest + 1:
            raise VersionConflictError(client_id, itinerary.version - 1, latest)

        row = ItineraryVersionRow(
            itinerary_id=itinerary.id,
            client_id=client_id,
            version=itinerary.version,
            total_base_cost=itinerary.total_base_cost,
            final_price=itinerary.final_price,
            updated_by=itinerary.updated_by,
            last_updated=itinerary.last_updated,
            data=itinerary.model_dump(mode="json"),
        )

        try:
            self._session.add(row)
            self._session.commit()
        except IntegrityError as exc:
            self._session.rollback()
            actual = self._latest_version(client_id)
            if actual >= itinerary.version:
                raise VersionConflictError(client_id, itinerary.version - 1, actual) from exc
            raise StoreError(f"Failed to save itinerary for client {client_id}") from exc
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise StoreError(f"Failed to save itinerary for client {client_id}") from exc

        return itinerary

    def get_version(self, client_id: str, version: int) -> Itinerary | None:
        """Get a specific version."""
        row = (
            query_itinerary_versions(self._session, client_id)
            .filter(ItineraryVersionRow.version == version)
            .first()
        )

        if row is None:
            return None

        return Itinerary.model_validate(row.data)

    def list_versions(self, client_id: str) -> list[ItinerarySummary]:
        """List all versions for a client, newest first."""
        rows = (
            query_itinerary_versions(self._session, client_id)
            .order_by(ItineraryVersionRow.version.desc())
            .all()
        )
        return [summarize(Itinerary.model_validate(row.data)) for row in rows]


def _record_from_row(row: FollowUpRecordRow) -> FollowUpRecord:
    return FollowUpRecord(
        id=row.record_id,
        client_id=row.client_id,
        status=FollowUpStage(row.status),
        remarks=row.remarks,
        updated_at=_as_utc(row.updated_at),
        updated_by=row.updated_by,
        next_follow_up_date=row.next_follow_up_date,
        next_follow_up_time=row.next_follow_up_time,
    )


def _client_from_row(row: ClientRow) -> Client:
    status = None
    if row.follow_up_stage is not None:
        status = FollowUpStatus(
            status=FollowUpStage(row.follow_up_stage),
            updated_at=_as_utc(row.follow_up_updated_at),
            remarks=row.follow_up_remarks or "",
            next_follow_up_date=row.next_follow_up_date,
            next_follow_up_time=row.next_follow_up_time,
        )

    return Client(
        id=row.client_id,
        name=row.name,
        whatsapp=row.whatsapp,
        country_code=row.country_code,
        travel_dates=TravelDates(
            start_date=row.start_date,
            end_date=row.end_date,
            is_flexible=row.is_flexible,
            flexible_month=row.flexible_month,
        ),
        pax=PartySize(adults=row.adults, children=row.children),
        number_of_days=row.number_of_days,
        transportation_mode=row.transportation_mode,
        created_at=_as_utc(row.created_at),
        created_by=row.created_by,
        follow_up_status=status,
        follow_up_history=[_record_from_row(record) for record in row.follow_up_records],
    )


class SqlClientStore:
    """SQL implementation of ClientStore."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_client(self, client_id: str) -> Client | None:
        """Get client by ID."""
        row = self._session.get(ClientRow, client_id)

        if row is None:
            return None

        return _client_from_row(row)

    def save_client(self, client: Client) -> Client:
        """Insert or update a client; history rows are only ever appended."""
        row = self._session.get(ClientRow, client.id)
        if row is None:
            row = ClientRow(client_id=client.id, created_at=client.created_at or datetime.now(UTC))
            self._session.add(row)

        row.name = client.name
        row.whatsapp = client.whatsapp
        row.country_code = client.country_code
        row.start_date = client.travel_dates.start_date
        row.end_date = client.travel_dates.end_date
        row.is_flexible = client.travel_dates.is_flexible
        row.flexible_month = client.travel_dates.flexible_month
        row.adults = client.pax.adults
        row.children = client.pax.children
        row.number_of_days = client.number_of_days
        row.transportation_mode = client.transportation_mode
        row.created_by = client.created_by

        status = client.follow_up_status
        row.follow_up_stage = status.status.value if status else None
        row.follow_up_updated_at = status.updated_at if status else None
        row.follow_up_remarks = status.remarks if status else None
        row.next_follow_up_date = status.next_follow_up_date if status else None
        row.next_follow_up_time = status.next_follow_up_time if status else None

        known = {record.record_id for record in row.follow_up_records}
        seq = len(row.follow_up_records)
        for record in client.follow_up_history:
            if record.id in known:
                continue
            row.follow_up_records.append(
                FollowUpRecordRow(
                    record_id=record.id,
                    seq=seq,
                    status=record.status.value,
                    remarks=record.remarks,
                    updated_at=record.updated_at,
                    updated_by=record.updated_by,
                    next_follow_up_date=record.next_follow_up_date,
                    next_follow_up_time=record.next_follow_up_time,
                )
            )
            seq += 1

        try:
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise StoreError(f"Failed to save client {client.id}") from exc

        self._session.refresh(row)
        return _client_from_row(row)

    def list_clients(self, created_by: str | None = None) -> list[Client]:
        """List clients, newest first."""
        rows = query_clients(self._session, created_by).order_by(ClientRow.created_at.desc()).all()
        return [_client_from_row(row) for row in rows]

    def list_due_follow_ups(self, day: date, created_by: str | None = None) -> list[Client]:
        """Clients whose next follow-up falls on `day`, earliest time first."""
        rows = (
            query_clients(self._session, created_by)
            .filter(ClientRow.next_follow_up_date == day)
            .order_by(ClientRow.next_follow_up_time.asc())
            .all()
        )
        return [_client_from_row(row) for row in rows]


def _snapshot_from_session(session: Session) -> CatalogSnapshot:
    hotels = [
        Hotel(
            id=row.hotel_id,
            name=row.name,
            place=row.place,
            star_category=row.star_category,
            room_types=[
                RoomType(
                    id=room.room_type_id,
                    name=room.name,
                    peak_season_price=room.peak_season_price,
                    season_price=room.season_price,
                    off_season_price=room.off_season_price,
                )
                for room in row.room_types
            ],
            area_id=row.area_id,
            area_name=row.area_name,
        )
        for row in session.query(HotelRow).order_by(HotelRow.hotel_id).all()
    ]
    transportation = [
        Transportation(
            id=row.transportation_id,
            type=row.type,
            vehicle_name=row.vehicle_name,
            cost_per_day=row.cost_per_day,
            min_occupancy=row.min_occupancy,
            max_occupancy=row.max_occupancy,
            area_id=row.area_id,
            area_name=row.area_name,
        )
        for row in session.query(TransportationRow)
        .order_by(TransportationRow.transportation_id)
        .all()
    ]
    sightseeing = [
        Sightseeing(
            id=row.sightseeing_id,
            name=row.name,
            display_name=row.display_name,
            description=row.description,
            transportation_mode=row.transportation_mode,
            vehicle_costs=row.vehicle_costs,
            entry_ticket_ids=row.entry_ticket_ids or [],
            area_id=row.area_id,
            area_name=row.area_name,
        )
        for row in session.query(SightseeingRow).order_by(SightseeingRow.sightseeing_id).all()
    ]
    activities = [
        Activity(
            id=row.activity_id,
            name=row.name,
            location=row.location,
            options=[
                ActivityOption(
                    id=option.option_id,
                    name=option.name,
                    cost=option.cost,
                    cost_for_how_many=option.cost_for_how_many,
                )
                for option in row.options
            ],
            area_id=row.area_id,
            area_name=row.area_name,
        )
        for row in session.query(ActivityRow).order_by(ActivityRow.activity_id).all()
    ]
    entry_tickets = [
        EntryTicket(
            id=row.ticket_id,
            name=row.name,
            cost=row.cost,
            adult_cost=row.adult_cost,
            child_cost=row.child_cost,
            sightseeing_id=row.sightseeing_id,
            area_id=row.area_id,
            area_name=row.area_name,
        )
        for row in session.query(EntryTicketRow).order_by(EntryTicketRow.ticket_id).all()
    ]
    meals = [
        Meal(
            id=row.meal_id,
            type=row.type,
            place=row.place,
            cost=row.cost,
            area_id=row.area_id,
            area_name=row.area_name,
        )
        for row in session.query(MealRow).order_by(MealRow.meal_id).all()
    ]

    return CatalogSnapshot(
        hotels=hotels,
        transportation=transportation,
        sightseeing=sightseeing,
        activities=activities,
        entry_tickets=entry_tickets,
        meals=meals,
    )


def replace_catalog(session: Session, snapshot: CatalogSnapshot) -> None:
    """Overwrite all catalog tables with the contents of `snapshot`.

    Args:
        session: SQLAlchemy session (committed on success)
        snapshot: Catalog data to store
    """
    for model in (
        RoomTypeRow,
        HotelRow,
        TransportationRow,
        SightseeingRow,
        ActivityOptionRow,
        ActivityRow,
        EntryTicketRow,
        MealRow,
    ):
        session.execute(delete(model))

    for hotel in snapshot.hotels:
        session.add(
            HotelRow(
                hotel_id=hotel.id,
                name=hotel.name,
                place=hotel.place,
                star_category=hotel.star_category.value,
                area_id=hotel.area_id,
                area_name=hotel.area_name,
                room_types=[
                    RoomTypeRow(
                        room_type_id=room.id,
                        position=position,
                        name=room.name,
                        peak_season_price=room.peak_season_price,
                        season_price=room.season_price,
                        off_season_price=room.off_season_price,
                    )
                    for position, room in enumerate(hotel.room_types)
                ],
            )
        )

    for entry in snapshot.transportation:
        session.add(
            TransportationRow(
                transportation_id=entry.id,
                type=entry.type.value,
                vehicle_name=entry.vehicle_name,
                cost_per_day=entry.cost_per_day,
                min_occupancy=entry.min_occupancy,
                max_occupancy=entry.max_occupancy,
                area_id=entry.area_id,
                area_name=entry.area_name,
            )
        )

    for spot in snapshot.sightseeing:
        session.add(
            SightseeingRow(
                sightseeing_id=spot.id,
                name=spot.name,
                display_name=spot.display_name,
                description=spot.description,
                transportation_mode=spot.transportation_mode.value,
                vehicle_costs=spot.vehicle_costs,
                entry_ticket_ids=list(spot.entry_ticket_ids),
                area_id=spot.area_id,
                area_name=spot.area_name,
            )
        )

    for activity in snapshot.activities:
        session.add(
            ActivityRow(
                activity_id=activity.id,
                name=activity.name,
                location=activity.location,
                area_id=activity.area_id,
                area_name=activity.area_name,
                options=[
                    ActivityOptionRow(
                        option_id=option.id,
                        position=position,
                        name=option.name,
                        cost=option.cost,
                        cost_for_how_many=option.cost_for_how_many,
                    )
                    for position, option in enumerate(activity.options)
                ],
            )
        )

    for ticket in snapshot.entry_tickets:
        session.add(
            EntryTicketRow(
                ticket_id=ticket.id,
                name=ticket.name,
                cost=ticket.cost,
                adult_cost=ticket.adult_cost,
                child_cost=ticket.child_cost,
                sightseeing_id=ticket.sightseeing_id,
                area_id=ticket.area_id,
                area_name=ticket.area_name,
            )
        )

    for meal in snapshot.meals:
        session.add(
            MealRow(
                meal_id=meal.id,
                type=meal.type.value,
                place=meal.place,
                cost=meal.cost,
                area_id=meal.area_id,
                area_name=meal.area_name,
            )
        )

    session.commit()


class SqlCatalogSource:
    """SQL implementation of CatalogSource.

    Opens its own short-lived session per fetch, so it can be shared by a
    process-wide catalog cache.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def fetch_snapshot(self) -> CatalogSnapshot:
        """Load every catalog table into a snapshot."""
        with self._session_factory() as session:
            snapshot = _snapshot_from_session(session)
        logger.debug(
            f"[catalog] Loaded SQL catalog: {len(snapshot.hotels)} hotels, "
            f"{len(snapshot.sightseeing)} sightseeing"
        )
        return snapshot
