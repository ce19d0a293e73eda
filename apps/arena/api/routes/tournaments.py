"""Tournament route handlers."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from arena.api.routes import service_error_to_http
from arena.database.db import get_db_session
from arena.services import tournament_service, notification_service
from arena.services.tournament_service import REGISTER_FAILED_MESSAGE
from arena.api.auth_dependencies import require_user
from arena.models.schemas import (
    TournamentResponse,
    TournamentRegistrationResponse,
    UserRegistrationResponse,
)
from arena.utils.constants import DASHBOARD_TOURNAMENT_LIMIT

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/tournaments", response_model=List[TournamentResponse])
async def list_tournaments(
    limit: Optional[int] = Query(DASHBOARD_TOURNAMENT_LIMIT, ge=1, le=100),
    sport: Optional[str] = None,
    user: dict = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Tournaments by date, each with the caller's registration state."""
    try:
        tournaments = await tournament_service.list_tournaments(session, limit=limit, sport=sport)
        profile = user.get("profile")
        return [tournament_service.with_registration_state(t, profile) for t in tournaments]
    except ValueError as e:
        raise service_error_to_http(e)
    except Exception as e:
        logger.error(f"Error listing tournaments: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error listing tournaments: {str(e)}")


@router.get("/api/tournaments/registrations/mine", response_model=List[UserRegistrationResponse])
async def list_my_registrations(
    user: dict = Depends(require_user), session: AsyncSession = Depends(get_db_session)
):
    """Tournaments the current user is registered for."""
    try:
        return await tournament_service.list_user_registrations(session, user["id"])
    except Exception as e:
        logger.error(f"Error fetching registrations: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error fetching registrations: {str(e)}")


@router.get("/api/tournaments/{tournament_id}", response_model=TournamentResponse)
async def get_tournament(
    tournament_id: int,
    user: dict = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Get a single tournament with the caller's registration state."""
    try:
        tournament = await tournament_service.get_tournament(session, tournament_id)
        return tournament_service.with_registration_state(tournament, user.get("profile"))
    except ValueError as e:
        raise service_error_to_http(e)
    except Exception as e:
        logger.error(f"Error fetching tournament {tournament_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error fetching tournament: {str(e)}")


@router.post(
    "/api/tournaments/{tournament_id}/register", response_model=TournamentRegistrationResponse
)
async def register_for_tournament(
    tournament_id: int,
    user: dict = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Register the current user; returns the refreshed tournament."""
    try:
        result = await tournament_service.register(session, user["id"], tournament_id)
        return notification_service.build_toast(
            result["message"], None, tournament=result["tournament"]
        )
    except ValueError as e:
        raise service_error_to_http(e)
    except Exception as e:
        logger.error(f"Error registering user {user['id']} for tournament {tournament_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=REGISTER_FAILED_MESSAGE)
