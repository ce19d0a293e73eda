"""
Pydantic models for API request/response validation.
"""

from typing import Optional, List, Dict
from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    message: str


# Authentication schemas


class SignupRequest(BaseModel):
    """Request to sign up a new athlete."""

    email: str
    password: str
    name: str
    primary_sport: str


class LoginRequest(BaseModel):
    """Request to login with email and password."""

    email: str
    password: str


class AuthResponse(BaseModel):
    """Authentication response with JWT token."""

    access_token: str
    token_type: str = "bearer"
    user_id: int
    email: str
    is_verified: bool


class ProfileResponse(BaseModel):
    """Athlete profile."""

    id: int
    user_id: int
    name: str
    is_verified: bool
    matches_played: int
    reputation_score: int
    primary_sport: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class UserResponse(BaseModel):
    """User information response."""

    id: int
    email: str
    is_verified: bool
    profile: Optional[ProfileResponse] = None
    roles: List[str] = []
    created_at: Optional[str] = None


class ProfileUpdate(BaseModel):
    """Editable profile fields. Counters and verification are server-maintained."""

    model_config = ConfigDict(extra="ignore")
    name: Optional[str] = None
    primary_sport: Optional[str] = None


class ToastResponse(BaseModel):
    """Outcome notification returned by write endpoints."""

    status: str = "success"
    title: str
    message: Optional[str] = None


# Turf / booking schemas


class TurfBase(BaseModel):
    """Base turf model."""

    name: str
    location: str
    hourly_rate: float = 0
    sport: str = "football"
    description: Optional[str] = None
    image_url: Optional[str] = None


class TurfCreate(TurfBase):
    """Request to create a turf."""

    pass


class TurfResponse(TurfBase):
    """Turf response."""

    id: int
    display_image_url: str
    created_at: Optional[str] = None


class SlotStatus(BaseModel):
    time_slot: str
    is_booked: bool


class AvailabilityResponse(BaseModel):
    """Per-slot availability for a turf on a date."""

    turf_id: int
    booking_date: str
    slots: List[SlotStatus]
    available_count: int


class BookingCreate(BaseModel):
    """Request to book a slot."""

    turf_id: int
    booking_date: str  # ISO format (YYYY-MM-DD)
    time_slot: str


class BookingTurfSummary(BaseModel):
    name: str
    location: str
    hourly_rate: float


class BookingResponse(BaseModel):
    """Booking with the joined turf summary."""

    id: int
    user_id: int
    turf_id: int
    booking_date: str
    time_slot: str
    status: str
    created_at: Optional[str] = None
    turf: Optional[BookingTurfSummary] = None


class BookingCreateResponse(ToastResponse):
    booking: BookingResponse


# Tournament schemas


class RegistrationState(BaseModel):
    """How a tournament card renders for the calling athlete."""

    spots_left: int
    is_full: bool
    is_locked: bool
    can_register: bool
    action_label: str


class TournamentBase(BaseModel):
    """Base tournament model."""

    name: str
    sport: str
    location: str
    date: str  # ISO format (YYYY-MM-DD)
    entry_fee: Optional[float] = 0
    prize_pool: Optional[float] = 0
    image_url: Optional[str] = None
    max_participants: int = 32
    is_verified_only: bool = False


class TournamentCreate(TournamentBase):
    """Request to create a tournament."""

    pass


class TournamentResponse(TournamentBase):
    """Tournament response, with registration state when a caller is known."""

    id: int
    display_date: str
    current_participants: int
    created_at: Optional[str] = None
    registration: Optional[RegistrationState] = None


class TournamentRegistrationResponse(ToastResponse):
    tournament: TournamentResponse


class UserRegistrationResponse(BaseModel):
    id: int
    tournament_id: int
    registered_at: Optional[str] = None
    tournament: TournamentResponse


# Team request schemas


class TeamRequestCreate(BaseModel):
    """Request to post a teammate request."""

    sport: str
    position_needed: str
    location: str
    description: Optional[str] = None


class TeamRequestStatusUpdate(BaseModel):
    is_active: bool


class TeamRequestResponse(BaseModel):
    """Team request, annotated with poster details in the public listing."""

    id: int
    user_id: int
    sport: str
    position_needed: str
    location: str
    description: Optional[str] = None
    is_active: bool
    created_at: Optional[str] = None
    poster_name: Optional[str] = None
    poster_is_verified: Optional[bool] = None


class TeamRequestCreateResponse(ToastResponse):
    request: TeamRequestResponse


# Dashboard schemas


class DashboardStats(BaseModel):
    matches_played: int
    reputation_score: int
    tournaments_won: int


class VerificationBanner(BaseModel):
    is_verified: bool
    title: str
    message: str


class DashboardResponse(BaseModel):
    """Everything the dashboard page renders."""

    welcome_name: str
    stats: DashboardStats
    verification: VerificationBanner
    upcoming_tournaments: List[TournamentResponse]


# Admin schemas


class VerifyProfileRequest(BaseModel):
    is_verified: bool = True


class RoleGrantRequest(BaseModel):
    role: str = Field(description="admin, moderator or user")


# Notification schemas


class NotificationResponse(BaseModel):
    """Notification response."""

    id: int
    user_id: int
    type: str
    title: str
    message: str
    data: Optional[Dict] = None
    is_read: bool
    read_at: Optional[str] = None
    link_url: Optional[str] = None
    created_at: Optional[str] = None


class NotificationListResponse(BaseModel):
    """Paginated notification list."""

    notifications: List[NotificationResponse]
    total_count: int
    has_more: bool


class UnreadCountResponse(BaseModel):
    count: int


# Public marketing schemas


class FeaturedSport(BaseModel):
    name: str
    sport: str
    events: int
    image_url: str
