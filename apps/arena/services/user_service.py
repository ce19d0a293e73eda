"""
User service layer for user accounts and athlete profiles.
"""

from typing import Optional, Dict
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func
from arena.database.models import User, Profile, UserRole, AppRole, Sport
import logging

logger = logging.getLogger(__name__)


def profile_to_dict(profile: Optional[Profile]) -> Optional[Dict]:
    """Serialize a Profile row."""
    if profile is None:
        return None
    return {
        "id": profile.id,
        "user_id": profile.user_id,
        "name": profile.name,
        "is_verified": profile.is_verified,
        "matches_played": profile.matches_played or 0,
        "reputation_score": profile.reputation_score or 0,
        "primary_sport": Sport(profile.primary_sport).value if profile.primary_sport else None,
        "created_at": profile.created_at.isoformat() if profile.created_at else None,
        "updated_at": profile.updated_at.isoformat() if profile.updated_at else None,
    }


def _user_to_dict(user: User, profile: Optional[Profile]) -> Dict:
    profile_dict = profile_to_dict(profile)
    return {
        "id": user.id,
        "email": user.email,
        "is_verified": bool(profile_dict and profile_dict["is_verified"]),
        "profile": profile_dict,
        "created_at": user.created_at.isoformat() if user.created_at else None,
    }


async def check_email_exists(session: AsyncSession, email: str) -> bool:
    """Return True if a user with this (normalized) email exists."""
    result = await session.execute(select(User.id).where(User.email == email))
    return result.scalar_one_or_none() is not None


async def create_user_with_profile(
    session: AsyncSession,
    email: str,
    password_hash: str,
    name: str,
    primary_sport: str,
) -> int:
    """
    Create a user account, its athlete profile and the default 'user' role.

    All three rows are flushed in the caller's transaction.

    Args:
        session: Database session
        email: Normalized email address
        password_hash: bcrypt hash
        name: Display name
        primary_sport: Sport enum value

    Returns:
        ID of the created user

    Raises:
        ValueError: If the email is already registered or the sport is unknown
    """
    if await check_email_exists(session, email):
        raise ValueError("Email is already registered")

    sport = Sport(primary_sport)

    user = User(email=email, password_hash=password_hash)
    session.add(user)
    await session.flush()

    session.add(Profile(user_id=user.id, name=name.strip(), primary_sport=sport))
    session.add(UserRole(user_id=user.id, role=AppRole.USER))
    await session.flush()

    logger.info(f"Created user {user.id} with {sport.value} profile")
    return user.id


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[Dict]:
    """
    Get user by email, including the password hash (for login only).

    Returns:
        User dictionary or None if not found
    """
    result = await session.execute(select(User).where(User.email == email).limit(1))
    user = result.scalar_one_or_none()
    if not user:
        return None
    return {"id": user.id, "email": user.email, "password_hash": user.password_hash}


async def get_user_by_id(session: AsyncSession, user_id: int) -> Optional[Dict]:
    """
    Get user by ID together with the athlete profile.

    Returns:
        User dictionary (with nested "profile") or None if not found
    """
    result = await session.execute(
        select(User, Profile)
        .outerjoin(Profile, Profile.user_id == User.id)
        .where(User.id == user_id)
    )
    row = result.first()
    if not row:
        return None
    user, profile = row
    return _user_to_dict(user, profile)


async def get_profile(session: AsyncSession, user_id: int) -> Optional[Dict]:
    """Get the athlete profile for a user."""
    result = await session.execute(select(Profile).where(Profile.user_id == user_id))
    return profile_to_dict(result.scalar_one_or_none())


async def update_profile(
    session: AsyncSession,
    user_id: int,
    name: Optional[str] = None,
    primary_sport: Optional[str] = None,
) -> Optional[Dict]:
    """
    Update the editable profile fields.

    Counters (matches_played, reputation_score) and the verified flag are
    server-maintained and cannot be changed here.

    Returns:
        Updated profile dict, or None if the user has no profile

    Raises:
        ValueError: If name is blank or the sport is unknown
    """
    values = {}
    if name is not None:
        if not name.strip():
            raise ValueError("Name cannot be empty")
        values["name"] = name.strip()
    if primary_sport is not None:
        values["primary_sport"] = Sport(primary_sport)

    if values:
        values["updated_at"] = func.now()
        result = await session.execute(
            update(Profile).where(Profile.user_id == user_id).values(**values)
        )
        if result.rowcount == 0:
            return None
        await session.flush()

    result = await session.execute(
        select(Profile)
        .where(Profile.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    return profile_to_dict(result.scalar_one_or_none())


async def set_profile_verified(
    session: AsyncSession, user_id: int, is_verified: bool
) -> Optional[Dict]:
    """
    Set a profile's verified flag (admin action).

    Returns:
        Updated profile dict, or None if the user has no profile
    """
    result = await session.execute(
        update(Profile)
        .where(Profile.user_id == user_id)
        .values(is_verified=is_verified, updated_at=func.now())
    )
    if result.rowcount == 0:
        return None
    await session.flush()
    result = await session.execute(
        select(Profile)
        .where(Profile.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    return profile_to_dict(result.scalar_one_or_none())
