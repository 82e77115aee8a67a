"""SQLAlchemy ORM models for clients, itinerary versions and the catalog."""

from datetime import date, datetime, time
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    Text,
    Time,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JsonType = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class ClientRow(Base):
    """Client table - trip parameters plus the current follow-up snapshot."""

    __tablename__ = "client"
    __table_args__ = (
        Index("idx_client_created_by", "created_by"),
        Index("idx_client_next_follow_up", "next_follow_up_date", "next_follow_up_time"),
    )

    client_id: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    whatsapp: Mapped[str] = mapped_column(Text, nullable=False, default="")
    country_code: Mapped[str] = mapped_column(Text, nullable=False, default="")
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_flexible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    flexible_month: Mapped[str | None] = mapped_column(Text, nullable=True)
    adults: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    children: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    number_of_days: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    transportation_mode: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    created_by: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Current follow-up snapshot; full trail lives in follow_up_record
    follow_up_stage: Mapped[str | None] = mapped_column(Text, nullable=True)
    follow_up_updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    follow_up_remarks: Mapped[str | None] = mapped_column(Text, nullable=True)
    next_follow_up_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    next_follow_up_time: Mapped[time | None] = mapped_column(Time, nullable=True)

    # Relationships
    follow_up_records: Mapped[list["FollowUpRecordRow"]] = relationship(
        "FollowUpRecordRow",
        back_populates="client",
        cascade="all, delete-orphan",
        order_by="FollowUpRecordRow.seq",
    )
    itinerary_versions: Mapped[list["ItineraryVersionRow"]] = relationship(
        "ItineraryVersionRow", back_populates="client"
    )


class FollowUpRecordRow(Base):
    """Follow-up history table - append-only."""

    __tablename__ = "follow_up_record"
    __table_args__ = (Index("idx_follow_up_client", "client_id", "seq"),)

    record_id: Mapped[str] = mapped_column(Text, primary_key=True)
    client_id: Mapped[str] = mapped_column(
        Text, ForeignKey("client.client_id", ondelete="CASCADE"), nullable=False
    )
    seq: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(Text, nullable=False)
    remarks: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_by: Mapped[str] = mapped_column(Text, nullable=False)
    next_follow_up_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    next_follow_up_time: Mapped[time | None] = mapped_column(Time, nullable=True)

    # Relationships
    client: Mapped["ClientRow"] = relationship("ClientRow", back_populates="follow_up_records")


class ItineraryVersionRow(Base):
    """Itinerary version table - one immutable row per (client, version)."""

    __tablename__ = "itinerary_version"
    __table_args__ = (
        UniqueConstraint("client_id", "version", name="uq_itinerary_client_version"),
        Index("idx_itinerary_client", "client_id", "version"),
    )

    row_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    itinerary_id: Mapped[str] = mapped_column(Text, nullable=False)
    client_id: Mapped[str] = mapped_column(
        Text, ForeignKey("client.client_id"), nullable=False
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    total_base_cost: Mapped[float] = mapped_column(Float, nullable=False)
    final_price: Mapped[float] = mapped_column(Float, nullable=False)
    updated_by: Mapped[str] = mapped_column(Text, nullable=False)
    last_updated: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    data: Mapped[dict[str, Any]] = mapped_column(JsonType, nullable=False)

    # Relationships
    client: Mapped["ClientRow"] = relationship("ClientRow", back_populates="itinerary_versions")


class HotelRow(Base):
    """Hotel table."""

    __tablename__ = "hotel"

    hotel_id: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    place: Mapped[str] = mapped_column(Text, nullable=False)
    star_category: Mapped[str] = mapped_column(Text, nullable=False)
    area_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    area_name: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    room_types: Mapped[list["RoomTypeRow"]] = relationship(
        "RoomTypeRow",
        back_populates="hotel",
        cascade="all, delete-orphan",
        order_by="RoomTypeRow.position",
    )


class RoomTypeRow(Base):
    """Room type table - seasonal nightly prices per hotel."""

    __tablename__ = "room_type"
    __table_args__ = (UniqueConstraint("hotel_id", "room_type_id", name="uq_room_type_hotel"),)

    row_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    hotel_id: Mapped[str] = mapped_column(
        Text, ForeignKey("hotel.hotel_id", ondelete="CASCADE"), nullable=False
    )
    room_type_id: Mapped[str] = mapped_column(Text, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    peak_season_price: Mapped[float] = mapped_column(Float, nullable=False)
    season_price: Mapped[float] = mapped_column(Float, nullable=False)
    off_season_price: Mapped[float] = mapped_column(Float, nullable=False)

    # Relationships
    hotel: Mapped["HotelRow"] = relationship("HotelRow", back_populates="room_types")


class TransportationRow(Base):
    """Transportation table."""

    __tablename__ = "transportation"

    transportation_id: Mapped[str] = mapped_column(Text, primary_key=True)
    type: Mapped[str] = mapped_column(Text, nullable=False)
    vehicle_name: Mapped[str] = mapped_column(Text, nullable=False)
    cost_per_day: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    min_occupancy: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    max_occupancy: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    area_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    area_name: Mapped[str | None] = mapped_column(Text, nullable=True)


class SightseeingRow(Base):
    """Sightseeing table - vehicle cost table stored as JSON."""

    __tablename__ = "sightseeing"
    __table_args__ = (Index("idx_sightseeing_mode", "transportation_mode"),)

    sightseeing_id: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    display_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    transportation_mode: Mapped[str] = mapped_column(Text, nullable=False)
    vehicle_costs: Mapped[dict[str, float] | None] = mapped_column(JsonType, nullable=True)
    entry_ticket_ids: Mapped[list[str]] = mapped_column(JsonType, nullable=False, default=list)
    area_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    area_name: Mapped[str | None] = mapped_column(Text, nullable=True)


class ActivityRow(Base):
    """Activity table."""

    __tablename__ = "activity"

    activity_id: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    location: Mapped[str] = mapped_column(Text, nullable=False, default="")
    area_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    area_name: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    options: Mapped[list["ActivityOptionRow"]] = relationship(
        "ActivityOptionRow",
        back_populates="activity",
        cascade="all, delete-orphan",
        order_by="ActivityOptionRow.position",
    )


class ActivityOptionRow(Base):
    """Activity option table - priced per group of cost_for_how_many people."""

    __tablename__ = "activity_option"
    __table_args__ = (
        UniqueConstraint("activity_id", "option_id", name="uq_activity_option"),
    )

    row_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    activity_id: Mapped[str] = mapped_column(
        Text, ForeignKey("activity.activity_id", ondelete="CASCADE"), nullable=False
    )
    option_id: Mapped[str] = mapped_column(Text, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    cost: Mapped[float] = mapped_column(Float, nullable=False)
    cost_for_how_many: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    # Relationships
    activity: Mapped["ActivityRow"] = relationship("ActivityRow", back_populates="options")


class EntryTicketRow(Base):
    """Entry ticket table."""

    __tablename__ = "entry_ticket"
    __table_args__ = (Index("idx_entry_ticket_sightseeing", "sightseeing_id"),)

    ticket_id: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    cost: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    adult_cost: Mapped[float | None] = mapped_column(Float, nullable=True)
    child_cost: Mapped[float | None] = mapped_column(Float, nullable=True)
    sightseeing_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    area_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    area_name: Mapped[str | None] = mapped_column(Text, nullable=True)


class MealRow(Base):
    """Meal table."""

    __tablename__ = "meal"

    meal_id: Mapped[str] = mapped_column(Text, primary_key=True)
    type: Mapped[str] = mapped_column(Text, nullable=False)
    place: Mapped[str] = mapped_column(Text, nullable=False)
    cost: Mapped[float] = mapped_column(Float, nullable=False)
    area_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    area_name: Mapped[str | None] = mapped_column(Text, nullable=True)
