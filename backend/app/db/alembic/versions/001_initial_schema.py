"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-18

Creates:
- client, follow_up_record
- itinerary_version
- hotel, room_type, transportation, sightseeing
- activity, activity_option, entry_ticket, meal
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    """Create all tables."""
    # client table
    op.create_table(
        "client",
        sa.Column("client_id", sa.Text(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("whatsapp", sa.Text(), nullable=False),
        sa.Column("country_code", sa.Text(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("is_flexible", sa.Boolean(), nullable=False),
        sa.Column("flexible_month", sa.Text(), nullable=True),
        sa.Column("adults", sa.Integer(), nullable=False),
        sa.Column("children", sa.Integer(), nullable=False),
        sa.Column("number_of_days", sa.Integer(), nullable=False),
        sa.Column("transportation_mode", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("created_by", sa.Text(), nullable=True),
        sa.Column("follow_up_stage", sa.Text(), nullable=True),
        sa.Column("follow_up_updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("follow_up_remarks", sa.Text(), nullable=True),
        sa.Column("next_follow_up_date", sa.Date(), nullable=True),
        sa.Column("next_follow_up_time", sa.Time(), nullable=True),
    )
    op.create_index("idx_client_created_by", "client", ["created_by"])
    op.create_index(
        "idx_client_next_follow_up", "client", ["next_follow_up_date", "next_follow_up_time"]
    )

    # follow_up_record table
    op.create_table(
        "follow_up_record",
        sa.Column("record_id", sa.Text(), primary_key=True),
        sa.Column("client_id", sa.Text(), nullable=False),
        sa.Column("seq", sa.Integer(), nullable=False),
        sa.Column("status", sa.Text(), nullable=False),
        sa.Column("remarks", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_by", sa.Text(), nullable=False),
        sa.Column("next_follow_up_date", sa.Date(), nullable=True),
        sa.Column("next_follow_up_time", sa.Time(), nullable=True),
        sa.ForeignKeyConstraint(["client_id"], ["client.client_id"], ondelete="CASCADE"),
    )
    op.create_index("idx_follow_up_client", "follow_up_record", ["client_id", "seq"])

    # itinerary_version table
    op.create_table(
        "itinerary_version",
        sa.Column("row_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("itinerary_id", sa.Text(), nullable=False),
        sa.Column("client_id", sa.Text(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("total_base_cost", sa.Float(), nullable=False),
        sa.Column("final_price", sa.Float(), nullable=False),
        sa.Column("updated_by", sa.Text(), nullable=False),
        sa.Column("last_updated", sa.DateTime(timezone=True), nullable=False),
        sa.Column("data", JSON_TYPE, nullable=False),
        sa.ForeignKeyConstraint(["client_id"], ["client.client_id"]),
        sa.UniqueConstraint("client_id", "version", name="uq_itinerary_client_version"),
    )
    op.create_index("idx_itinerary_client", "itinerary_version", ["client_id", "version"])

    # hotel table
    op.create_table(
        "hotel",
        sa.Column("hotel_id", sa.Text(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("place", sa.Text(), nullable=False),
        sa.Column("star_category", sa.Text(), nullable=False),
        sa.Column("area_id", sa.Text(), nullable=True),
        sa.Column("area_name", sa.Text(), nullable=True),
    )

    # room_type table
    op.create_table(
        "room_type",
        sa.Column("row_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("hotel_id", sa.Text(), nullable=False),
        sa.Column("room_type_id", sa.Text(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("peak_season_price", sa.Float(), nullable=False),
        sa.Column("season_price", sa.Float(), nullable=False),
        sa.Column("off_season_price", sa.Float(), nullable=False),
        sa.ForeignKeyConstraint(["hotel_id"], ["hotel.hotel_id"], ondelete="CASCADE"),
        sa.UniqueConstraint("hotel_id", "room_type_id", name="uq_room_type_hotel"),
    )

    # transportation table
    op.create_table(
        "transportation",
        sa.Column("transportation_id", sa.Text(), primary_key=True),
        sa.Column("type", sa.Text(), nullable=False),
        sa.Column("vehicle_name", sa.Text(), nullable=False),
        sa.Column("cost_per_day", sa.Float(), nullable=False),
        sa.Column("min_occupancy", sa.Integer(), nullable=False),
        sa.Column("max_occupancy", sa.Integer(), nullable=False),
        sa.Column("area_id", sa.Text(), nullable=True),
        sa.Column("area_name", sa.Text(), nullable=True),
    )

    # sightseeing table
    op.create_table(
        "sightseeing",
        sa.Column("sightseeing_id", sa.Text(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("display_name", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("transportation_mode", sa.Text(), nullable=False),
        sa.Column("vehicle_costs", JSON_TYPE, nullable=True),
        sa.Column("entry_ticket_ids", JSON_TYPE, nullable=False),
        sa.Column("area_id", sa.Text(), nullable=True),
        sa.Column("area_name", sa.Text(), nullable=True),
    )
    op.create_index("idx_sightseeing_mode", "sightseeing", ["transportation_mode"])

    # activity table
    op.create_table(
        "activity",
        sa.Column("activity_id", sa.Text(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("location", sa.Text(), nullable=False),
        sa.Column("area_id", sa.Text(), nullable=True),
        sa.Column("area_name", sa.Text(), nullable=True),
    )

    # activity_option table
    op.create_table(
        "activity_option",
        sa.Column("row_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("activity_id", sa.Text(), nullable=False),
        sa.Column("option_id", sa.Text(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("cost", sa.Float(), nullable=False),
        sa.Column("cost_for_how_many", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["activity_id"], ["activity.activity_id"], ondelete="CASCADE"),
        sa.UniqueConstraint("activity_id", "option_id", name="uq_activity_option"),
    )

    # entry_ticket table
    op.create_table(
        "entry_ticket",
        sa.Column("ticket_id", sa.Text(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("cost", sa.Float(), nullable=False),
        sa.Column("adult_cost", sa.Float(), nullable=True),
        sa.Column("child_cost", sa.Float(), nullable=True),
        sa.Column("sightseeing_id", sa.Text(), nullable=True),
        sa.Column("area_id", sa.Text(), nullable=True),
        sa.Column("area_name", sa.Text(), nullable=True),
    )
    op.create_index("idx_entry_ticket_sightseeing", "entry_ticket", ["sightseeing_id"])

    # meal table
    op.create_table(
        "meal",
        sa.Column("meal_id", sa.Text(), primary_key=True),
        sa.Column("type", sa.Text(), nullable=False),
        sa.Column("place", sa.Text(), nullable=False),
        sa.Column("cost", sa.Float(), nullable=False),
        sa.Column("area_id", sa.Text(), nullable=True),
        sa.Column("area_name", sa.Text(), nullable=True),
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("meal")
    op.drop_index("idx_entry_ticket_sightseeing", table_name="entry_ticket")
    op.drop_table("entry_ticket")
    op.drop_table("activity_option")
    op.drop_table("activity")
    op.drop_index("idx_sightseeing_mode", table_name="sightseeing")
    op.drop_table("sightseeing")
    op.drop_table("transportation")
    op.drop_table("room_type")
    op.drop_table("hotel")
    op.drop_index("idx_itinerary_client", table_name="itinerary_version")
    op.drop_table("itinerary_version")
    op.drop_index("idx_follow_up_client", table_name="follow_up_record")
    op.drop_table("follow_up_record")
    op.drop_index("idx_client_next_follow_up", table_name="client")
    op.drop_index("idx_client_created_by", table_name="client")
    op.drop_table("client")
