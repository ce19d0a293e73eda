"""
SQLAlchemy ORM models for the Champions Arena athlete dashboard.
"""

import enum
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Boolean,
    Numeric,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    UniqueConstraint,
    CheckConstraint,
    Index,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from arena.database.db import Base


class AppRole(str, enum.Enum):
    """Application role enum."""

    ADMIN = "admin"
    MODERATOR = "moderator"
    USER = "user"


class Sport(str, enum.Enum):
    """Sports an athlete, turf, tournament or team request can belong to."""

    BASKETBALL = "basketball"
    SOCCER = "soccer"
    TENNIS = "tennis"
    FOOTBALL = "football"
    OTHER = "other"


class BookingStatus(str, enum.Enum):
    """Booking status enum."""

    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class NotificationType(str, enum.Enum):
    """Notification type enum."""

    BOOKING_CONFIRMED = "booking_confirmed"
    BOOKING_CANCELLED = "booking_cancelled"
    TOURNAMENT_REGISTERED = "tournament_registered"
    TEAM_REQUEST_POSTED = "team_request_posted"
    TEAM_REQUEST_DELETED = "team_request_deleted"
    PROFILE_VERIFIED = "profile_verified"


def _enum_values(enum_cls):
    """Persist enum values (lowercase) rather than member names."""
    return [member.value for member in enum_cls]


# Shared by every table so Postgres sees a single primary_sport type
SportEnum = Enum(Sport, name="primary_sport", values_callable=_enum_values)


class User(Base):
    """User accounts with email/password authentication."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String, nullable=False, unique=True)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    profile = relationship(
        "Profile", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    roles = relationship("UserRole", back_populates="user", cascade="all, delete-orphan")
    bookings = relationship("Booking", back_populates="user")
    team_requests = relationship("TeamRequest", back_populates="user")

    __table_args__ = (Index("idx_users_email", "email"),)


class Profile(Base):
    """Athlete profiles (1:1 with users)."""

    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    name = Column(String, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False, server_default="false")
    # Server-maintained counters, not writable through the athlete profile endpoint
    matches_played = Column(Integer, default=0, nullable=False, server_default="0")
    reputation_score = Column(Integer, default=0, nullable=False, server_default="0")
    primary_sport = Column(SportEnum, default=Sport.OTHER, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    user = relationship("User", back_populates="profile")

    __table_args__ = (Index("idx_profiles_user", "user_id"),)


class UserRole(Base):
    """Role grants per user."""

    __tablename__ = "user_roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    role = Column(
        Enum(AppRole, name="app_role", values_callable=_enum_values),
        default=AppRole.USER,
        nullable=False,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="roles")

    __table_args__ = (
        UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),
        Index("idx_user_roles_user", "user_id"),
    )


class Turf(Base):
    """Bookable sports venues."""

    __tablename__ = "turfs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    location = Column(String, nullable=False)
    hourly_rate = Column(Numeric(10, 2), nullable=False, default=0, server_default="0")
    sport = Column(SportEnum, default=Sport.FOOTBALL, nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    bookings = relationship("Booking", back_populates="turf", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("hourly_rate >= 0", name="ck_turfs_hourly_rate_non_negative"),
        Index("idx_turfs_name", "name"),
        Index("idx_turfs_sport", "sport"),
    )


class Booking(Base):
    """A reserved time slot on a turf."""

    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    turf_id = Column(Integer, ForeignKey("turfs.id", ondelete="CASCADE"), nullable=False)
    booking_date = Column(Date, nullable=False)
    time_slot = Column(String(20), nullable=False)  # e.g. "6:00 PM"
    status = Column(String(20), default=BookingStatus.CONFIRMED.value, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="bookings")
    turf = relationship("Turf", back_populates="bookings")

    __table_args__ = (
        UniqueConstraint(
            "turf_id", "booking_date", "time_slot", name="uq_bookings_turf_date_slot"
        ),
        Index("idx_bookings_turf_date", "turf_id", "booking_date"),
        Index("idx_bookings_user", "user_id"),
    )


class Tournament(Base):
    """Tournaments athletes can register for."""

    __tablename__ = "tournaments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    sport = Column(SportEnum, nullable=False)
    location = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    entry_fee = Column(Numeric(10, 2), nullable=True, server_default="0")
    prize_pool = Column(Numeric(12, 2), nullable=True, server_default="0")
    image_url = Column(String(500), nullable=True)
    max_participants = Column(Integer, default=32, nullable=False, server_default="32")
    current_participants = Column(Integer, default=0, nullable=False, server_default="0")
    is_verified_only = Column(Boolean, default=False, nullable=False, server_default="false")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    registrations = relationship(
        "TournamentRegistration", back_populates="tournament", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint(
            "current_participants <= max_participants", name="ck_tournaments_capacity"
        ),
        CheckConstraint(
            "current_participants >= 0", name="ck_tournaments_participants_non_negative"
        ),
        Index("idx_tournaments_date", "date"),
    )


class TournamentRegistration(Base):
    """Join table (Tournament ↔ User)."""

    __tablename__ = "tournament_registrations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tournament_id = Column(
        Integer, ForeignKey("tournaments.id", ondelete="CASCADE"), nullable=False
    )
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    registered_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    tournament = relationship("Tournament", back_populates="registrations")

    __table_args__ = (
        UniqueConstraint(
            "tournament_id", "user_id", name="uq_tournament_registrations_tournament_user"
        ),
        Index("idx_tournament_registrations_user", "user_id"),
    )


class TeamRequest(Base):
    """Public post seeking a teammate."""

    __tablename__ = "team_requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    sport = Column(SportEnum, nullable=False)
    position_needed = Column(String, nullable=False)
    location = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False, server_default="true")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="team_requests")

    __table_args__ = (
        Index("idx_team_requests_active_created", "is_active", "created_at"),
        Index("idx_team_requests_user", "user_id"),
    )


class Notification(Base):
    """User notifications for in-app messaging."""

    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    type = Column(String, nullable=False)  # NotificationType enum value
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    data = Column(Text, nullable=True)  # JSON string for flexible metadata
    is_read = Column(Boolean, default=False, nullable=False)
    read_at = Column(DateTime(timezone=True), nullable=True)
    link_url = Column(String(500), nullable=True)  # Navigation target
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User", backref="notifications")

    __table_args__ = (
        Index("idx_notifications_user_unread", "user_id", "is_read", "created_at"),
        Index("idx_notifications_user_created", "user_id", "created_at"),
    )
