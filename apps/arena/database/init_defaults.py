#!/usr/bin/env python3
"""
Initialize default database values.
This script is run on startup to grant the admin role to the accounts listed
in ADMIN_EMAILS.
"""

import asyncio
import logging
import os
from typing import Set

from sqlalchemy import select

from arena.database import db
from arena.database.models import User, AppRole
from arena.services import role_service

logger = logging.getLogger(__name__)


def admin_emails() -> Set[str]:
    """Parse the comma-separated ADMIN_EMAILS setting."""
    raw = os.getenv("ADMIN_EMAILS", "")
    return {e.strip().lower() for e in raw.split(",") if e.strip()}


async def grant_admin_roles(session, emails: Set[str]) -> int:
    """Grant the admin role to existing users with these emails. Returns grants made."""
    if not emails:
        return 0
    result = await session.execute(select(User.id, User.email).where(User.email.in_(emails)))
    granted = 0
    for user_id, email in result.all():
        if await role_service.grant_role(session, user_id, AppRole.ADMIN.value):
            logger.info(f"Granted admin role to {email}")
            granted += 1
    return granted


async def init_defaults():
    """Initialize default database values."""
    emails = admin_emails()
    if not emails:
        logger.info("ADMIN_EMAILS not set, no admin roles to grant")
        return

    async with db.AsyncSessionLocal() as session:
        await grant_admin_roles(session, emails)
        await session.commit()


if __name__ == "__main__":
    asyncio.run(init_defaults())
