"""
Unit tests for team request service.
"""

import pytest
import pytest_asyncio

from arena.database.models import Sport, TeamRequest, User
from arena.services import team_request_service, user_service


async def _create_athlete(db_session, email, name, verified=False):
    user_id = await user_service.create_user_with_profile(
        db_session, email=email, password_hash="hash", name=name, primary_sport="basketball"
    )
    if verified:
        await user_service.set_profile_verified(db_session, user_id, True)
    return user_id


@pytest_asyncio.fixture
async def athletes(db_session):
    return {
        "alice": await _create_athlete(db_session, "alice@example.com", "Alice", verified=True),
        "bob": await _create_athlete(db_session, "bob@example.com", "Bob"),
    }


@pytest.mark.asyncio
async def test_create_request(db_session, athletes):
    request = await team_request_service.create_request(
        db_session,
        athletes["alice"],
        sport="basketball",
        position_needed="Center",
        location="Riverside Courts",
        description="  Pickup run on Saturdays  ",
    )
    assert request["id"] > 0
    assert request["is_active"] is True
    assert request["description"] == "Pickup run on Saturdays"


@pytest.mark.asyncio
async def test_empty_description_stored_as_null(db_session, athletes):
    request = await team_request_service.create_request(
        db_session, athletes["bob"], "soccer", "Goalkeeper", "North Park", description="   "
    )
    assert request["description"] is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "sport,position,location,match",
    [
        ("basketball", "", "Downtown", "Position is required"),
        ("basketball", "Center", "  ", "Location is required"),
        ("", "Center", "Downtown", "Sport is required"),
        ("basketball", "Goalkeeper", "Downtown", "Invalid position"),
    ],
)
async def test_create_request_validation(db_session, athletes, sport, position, location, match):
    with pytest.raises(ValueError, match=match):
        await team_request_service.create_request(
            db_session, athletes["alice"], sport, position, location
        )


@pytest.mark.asyncio
async def test_other_sport_accepts_free_text_position(db_session, athletes):
    request = await team_request_service.create_request(
        db_session, athletes["alice"], "other", "Ultimate frisbee handler", "Beach"
    )
    assert request["sport"] == "other"
    assert request["position_needed"] == "Ultimate frisbee handler"


@pytest.mark.asyncio
async def test_list_active_requests_annotates_posters(db_session, athletes):
    first = await team_request_service.create_request(
        db_session, athletes["alice"], "basketball", "Center", "Gym A"
    )
    second = await team_request_service.create_request(
        db_session, athletes["bob"], "soccer", "Striker", "Field B"
    )

    requests = await team_request_service.list_active_requests(db_session)
    assert [r["id"] for r in requests] == [second["id"], first["id"]]
    by_id = {r["id"]: r for r in requests}
    assert by_id[first["id"]]["poster_name"] == "Alice"
    assert by_id[first["id"]]["poster_is_verified"] is True
    assert by_id[second["id"]]["poster_name"] == "Bob"
    assert by_id[second["id"]]["poster_is_verified"] is False

    soccer = await team_request_service.list_active_requests(db_session, sport="soccer")
    assert [r["id"] for r in soccer] == [second["id"]]


@pytest.mark.asyncio
async def test_poster_without_profile_renders_as_athlete(db_session):
    user = User(email="ghost@example.com", password_hash="hash")
    db_session.add(user)
    await db_session.flush()
    db_session.add(
        TeamRequest(user_id=user.id, sport=Sport.TENNIS, position_needed="Doubles Partner", location="Club")
    )
    await db_session.flush()

    requests = await team_request_service.list_active_requests(db_session)
    assert requests[0]["poster_name"] == "Athlete"
    assert requests[0]["poster_is_verified"] is False


@pytest.mark.asyncio
async def test_deleted_request_leaves_active_listing(db_session, athletes):
    request = await team_request_service.create_request(
        db_session, athletes["alice"], "tennis", "Singles Partner", "Club"
    )
    await team_request_service.delete_request(db_session, request["id"], athletes["alice"])

    requests = await team_request_service.list_active_requests(db_session)
    assert request["id"] not in [r["id"] for r in requests]


@pytest.mark.asyncio
async def test_only_owner_can_delete(db_session, athletes):
    request = await team_request_service.create_request(
        db_session, athletes["alice"], "tennis", "Singles Partner", "Club"
    )
    with pytest.raises(team_request_service.NotAuthorizedError):
        await team_request_service.delete_request(db_session, request["id"], athletes["bob"])

    with pytest.raises(team_request_service.TeamRequestNotFoundError):
        await team_request_service.delete_request(db_session, 9999, athletes["alice"])


@pytest.mark.asyncio
async def test_closed_requests_only_in_my_posts(db_session, athletes):
    request = await team_request_service.create_request(
        db_session, athletes["bob"], "football", "Quarterback", "Stadium"
    )
    closed = await team_request_service.set_request_active(
        db_session, request["id"], athletes["bob"], False
    )
    assert closed["is_active"] is False

    assert await team_request_service.list_active_requests(db_session) == []
    mine = await team_request_service.list_user_requests(db_session, athletes["bob"])
    assert [r["id"] for r in mine] == [request["id"]]
    assert mine[0]["is_active"] is False


def test_get_positions_returns_copy():
    positions = team_request_service.get_positions()
    assert "Point Guard" in positions["basketball"]
    positions["basketball"].append("Mascot")
    assert "Mascot" not in team_request_service.get_positions()["basketball"]
