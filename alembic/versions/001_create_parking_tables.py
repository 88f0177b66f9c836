"""Create users, cars, parking_lots and parking_sessions tables

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Initial schema for the parking backend.
How:   Portable column types (sa.Uuid, TIMESTAMP WITH TIME ZONE, NUMERIC) so the
       same migration runs on PostgreSQL and on SQLite for local development.

Rollback: downgrade() drops all four tables (destructive: session history is lost).
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default=sa.text("'user'")),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "cars",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("plate", sa.String(20), nullable=False),
        sa.Column("owner_name", sa.String(255), nullable=False),
        sa.Column("owner_email", sa.String(255), nullable=True),
        sa.Column("owner_phone", sa.String(50), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("plate", name="uq_cars_plate"),
    )

    op.create_table(
        "parking_lots",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("hourly_rate", sa.Numeric(10, 2), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", name="uq_parking_lots_name"),
        sa.CheckConstraint("capacity > 0", name="ck_parking_lots_capacity_positive"),
        sa.CheckConstraint("hourly_rate >= 0", name="ck_parking_lots_rate_non_negative"),
    )

    # Sessions are never deleted; RESTRICT keeps cars and lots with history in place
    op.create_table(
        "parking_sessions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("car_id", sa.Uuid(), nullable=False),
        sa.Column("parking_lot_id", sa.Uuid(), nullable=False),
        sa.Column("entry_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("exit_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("fee", sa.Numeric(10, 2), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["car_id"], ["cars.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["parking_lot_id"], ["parking_lots.id"], ondelete="RESTRICT"),
    )

    # Report query paths: incoming (entry_time), outgoing/revenue (exit_time),
    # occupancy and entry capacity check (lot + open sessions), and the
    # already-parked rule as a partial unique index (one open session per car)
    op.create_index("idx_parking_sessions_entry_time", "parking_sessions", ["entry_time"])
    op.create_index("idx_parking_sessions_exit_time", "parking_sessions", ["exit_time"])
    op.create_index("idx_parking_sessions_lot_exit", "parking_sessions", ["parking_lot_id", "exit_time"])
    op.create_index(
        "uq_parking_sessions_open_car",
        "parking_sessions",
        ["car_id"],
        unique=True,
        postgresql_where=sa.text("exit_time IS NULL"),
        sqlite_where=sa.text("exit_time IS NULL"),
    )


def downgrade() -> None:
    op.drop_index("uq_parking_sessions_open_car", table_name="parking_sessions")
    op.drop_index("idx_parking_sessions_lot_exit", table_name="parking_sessions")
    op.drop_index("idx_parking_sessions_exit_time", table_name="parking_sessions")
    op.drop_index("idx_parking_sessions_entry_time", table_name="parking_sessions")
    op.drop_table("parking_sessions")
    op.drop_table("parking_lots")
    op.drop_table("cars")
    op.drop_table("users")
