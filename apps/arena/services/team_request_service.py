"""
Team request board: athletes post that they need a teammate for a sport,
position and location; everyone else browses the active posts.
"""

from typing import Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from arena.database.models import TeamRequest, Profile, NotificationType, Sport
from arena.services import notification_service
from arena.utils.constants import SPORT_POSITIONS, DEFAULT_POSTER_NAME
import logging

logger = logging.getLogger(__name__)


class TeamRequestNotFoundError(ValueError):
    """Raised when a team request id does not match any record."""


class NotAuthorizedError(ValueError):
    """Raised when a user tries to modify someone else's request."""


def get_positions() -> Dict[str, List[str]]:
    """Positions offered by the posting form, keyed by sport."""
    return {sport: list(positions) for sport, positions in SPORT_POSITIONS.items()}


def _request_to_dict(team_request: TeamRequest) -> Dict:
    return {
        "id": team_request.id,
        "user_id": team_request.user_id,
        "sport": Sport(team_request.sport).value,
        "position_needed": team_request.position_needed,
        "location": team_request.location,
        "description": team_request.description,
        "is_active": team_request.is_active,
        "created_at": team_request.created_at.isoformat() if team_request.created_at else None,
    }


async def _poster_profiles(session: AsyncSession, user_ids: List[int]) -> Dict[int, Profile]:
    """Batch-load profiles for the distinct poster ids."""
    if not user_ids:
        return {}
    result = await session.execute(select(Profile).where(Profile.user_id.in_(user_ids)))
    return {p.user_id: p for p in result.scalars().all()}


async def list_active_requests(session: AsyncSession, sport: Optional[str] = None) -> List[Dict]:
    """
    List active requests, newest first, with poster name and verification.

    Posters without a profile render as "Athlete" and unverified.
    """
    query = select(TeamRequest).where(TeamRequest.is_active == True)  # noqa: E712
    if sport:
        query = query.where(TeamRequest.sport == Sport(sport))
    query = query.order_by(TeamRequest.created_at.desc(), TeamRequest.id.desc())
    result = await session.execute(query)
    requests = result.scalars().all()

    profiles = await _poster_profiles(session, sorted({r.user_id for r in requests}))

    request_dicts = []
    for team_request in requests:
        request_dict = _request_to_dict(team_request)
        profile = profiles.get(team_request.user_id)
        request_dict["poster_name"] = profile.name if profile else DEFAULT_POSTER_NAME
        request_dict["poster_is_verified"] = bool(profile and profile.is_verified)
        request_dicts.append(request_dict)
    return request_dicts


def _require(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise ValueError(f"{field} is required")
    return value.strip()


async def create_request(
    session: AsyncSession,
    user_id: int,
    sport: str,
    position_needed: str,
    location: str,
    description: Optional[str] = None,
) -> Dict:
    """
    Post a new team request.

    Raises:
        ValueError: If sport, position or location is blank, the sport is
            unknown, or the position is not offered for the sport
    """
    sport_value = Sport(_require(sport, "Sport")).value
    position_needed = _require(position_needed, "Position")
    location = _require(location, "Location")

    positions = SPORT_POSITIONS.get(sport_value)
    if positions and position_needed not in positions:
        raise ValueError(f"Invalid position '{position_needed}' for {sport_value}")

    description = description.strip() if description else None

    team_request = TeamRequest(
        user_id=user_id,
        sport=Sport(sport_value),
        position_needed=position_needed,
        location=location,
        description=description or None,
        is_active=True,
    )
    session.add(team_request)
    await session.flush()
    await session.refresh(team_request)
    logger.info(f"User {user_id} posted team request {team_request.id}")

    await notification_service.notify_quietly(
        session,
        user_id=user_id,
        type=NotificationType.TEAM_REQUEST_POSTED.value,
        title="Request Posted!",
        message="Your teammate request is now live",
        data={"team_request_id": team_request.id},
        link_url="/teammates",
    )
    return _request_to_dict(team_request)


async def _get_owned_request(session: AsyncSession, request_id: int, user_id: int) -> TeamRequest:
    result = await session.execute(select(TeamRequest).where(TeamRequest.id == request_id))
    team_request = result.scalar_one_or_none()
    if not team_request:
        raise TeamRequestNotFoundError(f"Team request {request_id} not found")
    if team_request.user_id != user_id:
        raise NotAuthorizedError("Not authorized to modify this request")
    return team_request


async def delete_request(session: AsyncSession, request_id: int, user_id: int) -> None:
    """
    Delete a request owned by the user.

    Raises:
        TeamRequestNotFoundError: If the request does not exist
        NotAuthorizedError: If the request belongs to someone else
    """
    team_request = await _get_owned_request(session, request_id, user_id)
    await session.delete(team_request)
    await session.flush()
    logger.info(f"User {user_id} deleted team request {request_id}")

    await notification_service.notify_quietly(
        session,
        user_id=user_id,
        type=NotificationType.TEAM_REQUEST_DELETED.value,
        title="Deleted",
        message="Your request has been removed",
        data={"team_request_id": request_id},
    )


async def set_request_active(
    session: AsyncSession, request_id: int, user_id: int, is_active: bool
) -> Dict:
    """Close or reopen a request owned by the user."""
    team_request = await _get_owned_request(session, request_id, user_id)
    team_request.is_active = is_active
    await session.flush()
    await session.refresh(team_request)
    return _request_to_dict(team_request)


async def list_user_requests(session: AsyncSession, user_id: int) -> List[Dict]:
    """All of a user's requests (active and closed), newest first."""
    result = await session.execute(
        select(TeamRequest)
        .where(TeamRequest.user_id == user_id)
        .order_by(TeamRequest.created_at.desc(), TeamRequest.id.desc())
    )
    return [_request_to_dict(r) for r in result.scalars().all()]
