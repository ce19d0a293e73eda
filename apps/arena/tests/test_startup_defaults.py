"""
Tests for startup helpers: admin role grants and demo catalog seeding.
"""

import pytest
from sqlalchemy import select, func

from arena.database import init_defaults as init_defaults_module
from arena.database import seed_catalog as seed_catalog_module
from arena.database.models import Turf, Tournament
from arena.services import role_service, user_service


def test_admin_emails_parsing(monkeypatch):
    monkeypatch.setenv("ADMIN_EMAILS", " Boss@Example.com, ,ops@example.com")
    assert init_defaults_module.admin_emails() == {"boss@example.com", "ops@example.com"}

    monkeypatch.delenv("ADMIN_EMAILS")
    assert init_defaults_module.admin_emails() == set()


@pytest.mark.asyncio
async def test_grant_admin_roles(db_session):
    boss = await user_service.create_user_with_profile(
        db_session, email="boss@example.com", password_hash="h", name="Boss", primary_sport="other"
    )
    worker = await user_service.create_user_with_profile(
        db_session, email="worker@example.com", password_hash="h", name="Worker", primary_sport="other"
    )

    granted = await init_defaults_module.grant_admin_roles(db_session, {"boss@example.com"})
    assert granted == 1
    assert await role_service.has_role(db_session, boss, "admin") is True
    assert await role_service.has_role(db_session, worker, "admin") is False

    # Idempotent
    assert await init_defaults_module.grant_admin_roles(db_session, {"boss@example.com"}) == 0


@pytest.mark.asyncio
async def test_seed_catalog_disabled_by_default(monkeypatch, test_engine, db_session):
    monkeypatch.delenv("SEED_DEMO_DATA", raising=False)
    await seed_catalog_module.seed_catalog()

    count = (await db_session.execute(select(func.count()).select_from(Turf))).scalar_one()
    assert count == 0


@pytest.mark.asyncio
async def test_seed_catalog_is_idempotent(monkeypatch, test_engine, db_session):
    monkeypatch.setenv("SEED_DEMO_DATA", "true")
    await seed_catalog_module.seed_catalog()
    await seed_catalog_module.seed_catalog()

    turfs = (await db_session.execute(select(Turf))).scalars().all()
    tournaments = (await db_session.execute(select(Tournament))).scalars().all()
    assert len(turfs) == 4
    assert len(tournaments) == 7
    assert len({t.name for t in turfs}) == len(turfs)
    assert all(t.current_participants == 0 for t in tournaments)
