"""
Role membership checks and grants (admin / moderator / user).
"""

from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from arena.database.models import UserRole, AppRole
import logging

logger = logging.getLogger(__name__)


async def has_role(session: AsyncSession, user_id: int, role: str) -> bool:
    """Boolean predicate: does the user hold the given role?"""
    result = await session.execute(
        select(UserRole.id)
        .where(UserRole.user_id == user_id, UserRole.role == AppRole(role))
        .limit(1)
    )
    return result.scalar_one_or_none() is not None


async def get_user_roles(session: AsyncSession, user_id: int) -> List[str]:
    """List role values granted to a user."""
    result = await session.execute(
        select(UserRole.role).where(UserRole.user_id == user_id).order_by(UserRole.role)
    )
    return [AppRole(role).value for role in result.scalars().all()]


async def grant_role(session: AsyncSession, user_id: int, role: str) -> bool:
    """
    Grant a role to a user.

    Returns:
        True if the role was newly granted, False if the user already had it
    """
    app_role = AppRole(role)
    if await has_role(session, user_id, app_role.value):
        return False
    session.add(UserRole(user_id=user_id, role=app_role))
    await session.flush()
    logger.info(f"Granted role {app_role.value} to user {user_id}")
    return True


async def revoke_role(session: AsyncSession, user_id: int, role: str) -> bool:
    """Remove a role from a user. Returns True if a grant was removed."""
    result = await session.execute(
        delete(UserRole).where(UserRole.user_id == user_id, UserRole.role == AppRole(role))
    )
    return result.rowcount > 0
