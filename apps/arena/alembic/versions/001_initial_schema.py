"""initial_schema

Revision ID: 001
Revises:
Create Date: 2026-10-01 00:00:00.000000

Creates the Champions Arena schema:
- users, profiles, user_roles
- turfs, bookings
- tournaments, tournament_registrations
- team_requests
- notifications
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


app_role = postgresql.ENUM("admin", "moderator", "user", name="app_role", create_type=False)
primary_sport = postgresql.ENUM(
    "basketball", "soccer", "tennis", "football", "other", name="primary_sport", create_type=False
)


def _timestamp(name: str = "created_at") -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=True)


def upgrade() -> None:
    """Create enum types, tables, constraints and indexes."""
    bind = op.get_bind()
    app_role.create(bind, checkfirst=True)
    primary_sport.create(bind, checkfirst=True)

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        _timestamp(),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("idx_users_email", "users", ["email"])

    op.create_table(
        "profiles",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("matches_played", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("reputation_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("primary_sport", primary_sport, nullable=False, server_default="other"),
        _timestamp(),
        _timestamp("updated_at"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id"),
    )
    op.create_index("idx_profiles_user", "profiles", ["user_id"])

    op.create_table(
        "user_roles",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("role", app_role, nullable=False, server_default="user"),
        _timestamp(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),
    )
    op.create_index("idx_user_roles_user", "user_roles", ["user_id"])

    op.create_table(
        "turfs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("location", sa.String(), nullable=False),
        sa.Column("hourly_rate", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("sport", primary_sport, nullable=False, server_default="football"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image_url", sa.String(500), nullable=True),
        _timestamp(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("hourly_rate >= 0", name="ck_turfs_hourly_rate_non_negative"),
    )
    op.create_index("idx_turfs_name", "turfs", ["name"])
    op.create_index("idx_turfs_sport", "turfs", ["sport"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("turf_id", sa.Integer(), nullable=False),
        sa.Column("booking_date", sa.Date(), nullable=False),
        sa.Column("time_slot", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="confirmed"),
        _timestamp(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["turf_id"], ["turfs.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "turf_id", "booking_date", "time_slot", name="uq_bookings_turf_date_slot"
        ),
    )
    op.create_index("idx_bookings_turf_date", "bookings", ["turf_id", "booking_date"])
    op.create_index("idx_bookings_user", "bookings", ["user_id"])

    op.create_table(
        "tournaments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("sport", primary_sport, nullable=False),
        sa.Column("location", sa.String(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("entry_fee", sa.Numeric(10, 2), nullable=True, server_default="0"),
        sa.Column("prize_pool", sa.Numeric(12, 2), nullable=True, server_default="0"),
        sa.Column("image_url", sa.String(500), nullable=True),
        sa.Column("max_participants", sa.Integer(), nullable=False, server_default="32"),
        sa.Column("current_participants", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_verified_only", sa.Boolean(), nullable=False, server_default="false"),
        _timestamp(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "current_participants <= max_participants", name="ck_tournaments_capacity"
        ),
        sa.CheckConstraint(
            "current_participants >= 0", name="ck_tournaments_participants_non_negative"
        ),
    )
    op.create_index("idx_tournaments_date", "tournaments", ["date"])

    op.create_table(
        "tournament_registrations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("tournament_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        _timestamp("registered_at"),
        sa.ForeignKeyConstraint(["tournament_id"], ["tournaments.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "tournament_id", "user_id", name="uq_tournament_registrations_tournament_user"
        ),
    )
    op.create_index(
        "idx_tournament_registrations_user", "tournament_registrations", ["user_id"]
    )

    op.create_table(
        "team_requests",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("sport", primary_sport, nullable=False),
        sa.Column("position_needed", sa.String(), nullable=False),
        sa.Column("location", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        _timestamp(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_team_requests_active_created", "team_requests", ["is_active", "created_at"]
    )
    op.create_index("idx_team_requests_user", "team_requests", ["user_id"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("data", sa.Text(), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("link_url", sa.String(500), nullable=True),
        _timestamp(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_notifications_user_unread", "notifications", ["user_id", "is_read", "created_at"]
    )
    op.create_index("idx_notifications_user_created", "notifications", ["user_id", "created_at"])


def downgrade() -> None:
    """Drop all tables and enum types."""
    for table in (
        "notifications",
        "team_requests",
        "tournament_registrations",
        "tournaments",
        "bookings",
        "turfs",
        "user_roles",
        "profiles",
        "users",
    ):
        op.drop_table(table)

    bind = op.get_bind()
    primary_sport.drop(bind, checkfirst=True)
    app_role.drop(bind, checkfirst=True)
