"""
Tournament service: listings, registration state and registration.

Capacity is enforced in the database. Registration increments
current_participants with a conditional UPDATE in the same transaction as the
registration insert, so two athletes racing for the last spot cannot both get
in, and a failed insert rolls the increment back with the request.
"""

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Union
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from arena.database.models import (
    Tournament,
    TournamentRegistration,
    NotificationType,
    Sport,
)
from arena.services import notification_service, user_service
from arena.utils.constants import DASHBOARD_TOURNAMENT_LIMIT
from arena.utils.datetime_utils import parse_date, format_short_date
from arena.utils.db_errors import is_unique_violation
import logging

logger = logging.getLogger(__name__)

ALREADY_REGISTERED_MESSAGE = "You're already registered for this tournament"
REGISTER_FAILED_MESSAGE = "Failed to register for tournament"

LABEL_VERIFY = "Get Verified to Register"
LABEL_FULL = "Tournament Full"
LABEL_REGISTER = "Register Now"


class TournamentNotFoundError(ValueError):
    """Raised when a tournament id does not match any record."""


class AlreadyRegisteredError(ValueError):
    """Raised when the user already holds a registration for the tournament."""


class TournamentFullError(ValueError):
    """Raised when no spots are left."""


class VerificationRequiredError(ValueError):
    """Raised when an unverified athlete tries to join a verified-only tournament."""


def _money(value) -> Optional[float]:
    return float(value) if value is not None else None


def tournament_to_dict(tournament: Tournament) -> Dict:
    """Serialize a Tournament row."""
    return {
        "id": tournament.id,
        "name": tournament.name,
        "sport": Sport(tournament.sport).value,
        "location": tournament.location,
        "date": tournament.date.isoformat(),
        "display_date": format_short_date(tournament.date),
        "entry_fee": _money(tournament.entry_fee),
        "prize_pool": _money(tournament.prize_pool),
        "image_url": tournament.image_url,
        "max_participants": tournament.max_participants,
        "current_participants": tournament.current_participants,
        "is_verified_only": tournament.is_verified_only,
        "created_at": tournament.created_at.isoformat() if tournament.created_at else None,
    }


def registration_state(tournament: Dict, profile: Optional[Dict]) -> Dict:
    """
    Work out how a tournament card should render for a given athlete.

    Fullness is independent of verification; when a tournament is both locked
    and full the verification label is shown.

    Args:
        tournament: Tournament dict (max_participants, current_participants, is_verified_only)
        profile: The athlete's profile dict, or None

    Returns:
        Dict with spots_left, is_full, is_locked, can_register and action_label
    """
    spots_left = (tournament.get("max_participants") or 0) - (
        tournament.get("current_participants") or 0
    )
    is_full = spots_left <= 0
    is_verified = bool(profile and profile.get("is_verified"))
    is_locked = bool(tournament.get("is_verified_only")) and not is_verified

    if is_locked:
        action_label = LABEL_VERIFY
    elif is_full:
        action_label = LABEL_FULL
    else:
        action_label = LABEL_REGISTER

    return {
        "spots_left": max(spots_left, 0),
        "is_full": is_full,
        "is_locked": is_locked,
        "can_register": not (is_full or is_locked),
        "action_label": action_label,
    }


def with_registration_state(tournament: Dict, profile: Optional[Dict]) -> Dict:
    """Tournament dict with its registration_state attached."""
    return {**tournament, "registration": registration_state(tournament, profile)}


async def list_tournaments(
    session: AsyncSession,
    limit: Optional[int] = DASHBOARD_TOURNAMENT_LIMIT,
    sport: Optional[str] = None,
) -> List[Dict]:
    """
    List tournaments by date ascending.

    Args:
        session: Database session
        limit: Maximum rows (None for all)
        sport: Optional Sport value to filter by
    """
    query = select(Tournament)
    if sport:
        query = query.where(Tournament.sport == Sport(sport))
    query = query.order_by(Tournament.date.asc(), Tournament.id.asc())
    if limit is not None:
        query = query.limit(limit)
    result = await session.execute(query)
    return [tournament_to_dict(t) for t in result.scalars().all()]


async def _get_tournament_row(
    session: AsyncSession, tournament_id: int, refresh: bool = False
) -> Tournament:
    query = select(Tournament).where(Tournament.id == tournament_id)
    if refresh:
        query = query.execution_options(populate_existing=True)
    result = await session.execute(query)
    tournament = result.scalar_one_or_none()
    if not tournament:
        raise TournamentNotFoundError(f"Tournament {tournament_id} not found")
    return tournament


async def get_tournament(session: AsyncSession, tournament_id: int) -> Dict:
    """
    Get a single tournament.

    Raises:
        TournamentNotFoundError: If the tournament does not exist
    """
    return tournament_to_dict(await _get_tournament_row(session, tournament_id))


async def is_registered(session: AsyncSession, user_id: int, tournament_id: int) -> bool:
    result = await session.execute(
        select(TournamentRegistration.id).where(
            TournamentRegistration.tournament_id == tournament_id,
            TournamentRegistration.user_id == user_id,
        )
    )
    return result.scalar_one_or_none() is not None


async def register(session: AsyncSession, user_id: int, tournament_id: int) -> Dict:
    """
    Register a user for a tournament.

    Returns:
        Dict with the refreshed tournament (including registration state) and
        the confirmation message

    Raises:
        TournamentNotFoundError: If the tournament does not exist
        VerificationRequiredError: If the tournament is verified-only and the
            athlete is not verified
        AlreadyRegisteredError: If the user is already registered
        TournamentFullError: If no spots are left
    """
    tournament = await _get_tournament_row(session, tournament_id)
    profile = await user_service.get_profile(session, user_id)

    if tournament.is_verified_only and not (profile and profile["is_verified"]):
        raise VerificationRequiredError("Only verified athletes can register for this tournament")

    if await is_registered(session, user_id, tournament_id):
        raise AlreadyRegisteredError(ALREADY_REGISTERED_MESSAGE)

    # Increment and insert share a savepoint; a lost race undoes both
    try:
        async with session.begin_nested():
            result = await session.execute(
                update(Tournament)
                .where(
                    Tournament.id == tournament_id,
                    Tournament.current_participants < Tournament.max_participants,
                )
                .values(current_participants=Tournament.current_participants + 1)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise TournamentFullError("This tournament is full")

            session.add(TournamentRegistration(tournament_id=tournament_id, user_id=user_id))
            await session.flush()
    except IntegrityError as e:
        if is_unique_violation(e):
            raise AlreadyRegisteredError(ALREADY_REGISTERED_MESSAGE) from e
        raise

    tournament = await _get_tournament_row(session, tournament_id, refresh=True)
    tournament_dict = tournament_to_dict(tournament)
    logger.info(
        f"User {user_id} registered for tournament {tournament_id} "
        f"({tournament.current_participants}/{tournament.max_participants})"
    )

    await notification_service.notify_quietly(
        session,
        user_id=user_id,
        type=NotificationType.TOURNAMENT_REGISTERED.value,
        title="Successfully registered for tournament!",
        message=f"You're registered for {tournament.name} on {format_short_date(tournament.date)}",
        data={"tournament_id": tournament_id},
        link_url="/dashboard",
    )

    return {
        "tournament": with_registration_state(tournament_dict, profile),
        "message": "Successfully registered for tournament!",
    }


async def list_user_registrations(session: AsyncSession, user_id: int) -> List[Dict]:
    """Tournaments the user is registered for, soonest first."""
    result = await session.execute(
        select(TournamentRegistration, Tournament)
        .join(Tournament, TournamentRegistration.tournament_id == Tournament.id)
        .where(TournamentRegistration.user_id == user_id)
        .order_by(Tournament.date.asc(), Tournament.id.asc())
    )
    return [
        {
            "id": registration.id,
            "tournament_id": tournament.id,
            "registered_at": registration.registered_at.isoformat()
            if registration.registered_at
            else None,
            "tournament": tournament_to_dict(tournament),
        }
        for registration, tournament in result.all()
    ]


async def create_tournament(
    session: AsyncSession,
    name: str,
    sport: str,
    location: str,
    date: Union[str, date],
    entry_fee: Union[float, Decimal, None] = 0,
    prize_pool: Union[float, Decimal, None] = 0,
    image_url: Optional[str] = None,
    max_participants: int = 32,
    is_verified_only: bool = False,
) -> Dict:
    """
    Create a tournament (admin).

    Raises:
        ValueError: On blank name/location, bad date, non-positive capacity
            or negative fees
    """
    if not name or not name.strip():
        raise ValueError("Tournament name is required")
    if not location or not location.strip():
        raise ValueError("Tournament location is required")
    if max_participants is None or max_participants < 1:
        raise ValueError("max_participants must be at least 1")
    for label, amount in (("entry_fee", entry_fee), ("prize_pool", prize_pool)):
        if amount is not None and Decimal(str(amount)) < 0:
            raise ValueError(f"{label} cannot be negative")

    tournament = Tournament(
        name=name.strip(),
        sport=Sport(sport),
        location=location.strip(),
        date=parse_date(date),
        entry_fee=Decimal(str(entry_fee)) if entry_fee is not None else None,
        prize_pool=Decimal(str(prize_pool)) if prize_pool is not None else None,
        image_url=image_url,
        max_participants=max_participants,
        current_participants=0,
        is_verified_only=is_verified_only,
    )
    session.add(tournament)
    await session.flush()
    await session.refresh(tournament)
    logger.info(f"Created tournament {tournament.id} ({tournament.name})")
    return tournament_to_dict(tournament)
