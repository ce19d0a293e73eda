"""
Seed the demo turf and tournament catalog from CSV files on startup.

Only runs when SEED_DEMO_DATA is true. Idempotent: rows are matched by name
and existing rows are left untouched, so admin edits survive restarts.
"""

import csv
import logging
import os
from datetime import timedelta
from decimal import Decimal
from pathlib import Path

from sqlalchemy import select

from arena.database import db
from arena.database.models import Turf, Tournament, Sport
from arena.utils.datetime_utils import today

logger = logging.getLogger(__name__)

SEED_DIR = Path(__file__).resolve().parent.parent / "seed"


def _bool(val: str) -> bool:
    return (val or "").strip().lower() == "true"


def _read_csv(csv_filename: str):
    csv_path = SEED_DIR / csv_filename
    if not csv_path.exists():
        logger.warning("Seed CSV not found: %s", csv_path)
        return []
    with open(csv_path, "r", encoding="utf-8") as f:
        return list(csv.DictReader(f))


async def _seed_turfs(session) -> int:
    """Seed turfs. Returns count of new rows."""
    created = 0
    for row in _read_csv("turfs.csv"):
        result = await session.execute(select(Turf.id).where(Turf.name == row["name"]))
        if result.scalar_one_or_none():
            continue
        session.add(
            Turf(
                name=row["name"],
                location=row["location"],
                hourly_rate=Decimal(row["hourly_rate"] or "0"),
                sport=Sport(row["sport"]),
                description=row.get("description") or None,
                image_url=row.get("image_url") or None,
            )
        )
        created += 1
    await session.flush()
    return created


async def _seed_tournaments(session) -> int:
    """Seed tournaments dated relative to today. Returns count of new rows."""
    created = 0
    for row in _read_csv("tournaments.csv"):
        result = await session.execute(
            select(Tournament.id).where(Tournament.name == row["name"])
        )
        if result.scalar_one_or_none():
            continue
        session.add(
            Tournament(
                name=row["name"],
                sport=Sport(row["sport"]),
                location=row["location"],
                date=today() + timedelta(days=int(row["days_from_today"])),
                entry_fee=Decimal(row["entry_fee"] or "0"),
                prize_pool=Decimal(row["prize_pool"] or "0"),
                max_participants=int(row["max_participants"]),
                current_participants=0,
                is_verified_only=_bool(row["is_verified_only"]),
                image_url=row.get("image_url") or None,
            )
        )
        created += 1
    await session.flush()
    return created


def seeding_enabled() -> bool:
    return os.getenv("SEED_DEMO_DATA", "false").lower() == "true"


async def seed_catalog():
    """Seed demo turfs and tournaments. Called during app startup."""
    if not seeding_enabled():
        logger.debug("SEED_DEMO_DATA not set, skipping catalog seed")
        return

    async with db.AsyncSessionLocal() as session:
        turfs_created = await _seed_turfs(session)
        if turfs_created:
            logger.info("Seeded %d new turfs", turfs_created)

        tournaments_created = await _seed_tournaments(session)
        if tournaments_created:
            logger.info("Seeded %d new tournaments", tournaments_created)

        await session.commit()
