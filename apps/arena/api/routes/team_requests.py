"""Team request board route handlers."""

import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from arena.api.routes import service_error_to_http
from arena.database.db import get_db_session
from arena.services import team_request_service, notification_service
from arena.api.auth_dependencies import require_user
from arena.models.schemas import (
    TeamRequestCreate,
    TeamRequestCreateResponse,
    TeamRequestResponse,
    TeamRequestStatusUpdate,
    ToastResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/team-requests", response_model=List[TeamRequestResponse])
async def list_active_requests(
    sport: Optional[str] = None,
    user: dict = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Active teammate requests, newest first."""
    try:
        return await team_request_service.list_active_requests(session, sport=sport)
    except ValueError as e:
        raise service_error_to_http(e)
    except Exception as e:
        logger.error(f"Error listing team requests: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error listing team requests: {str(e)}")


@router.get("/api/team-requests/mine", response_model=List[TeamRequestResponse])
async def list_my_requests(
    user: dict = Depends(require_user), session: AsyncSession = Depends(get_db_session)
):
    """The current user's posts, including closed ones."""
    try:
        return await team_request_service.list_user_requests(session, user["id"])
    except Exception as e:
        logger.error(f"Error fetching team requests: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error fetching team requests: {str(e)}")


@router.get("/api/team-requests/positions", response_model=Dict[str, List[str]])
async def get_positions(user: dict = Depends(require_user)):
    """Positions offered by the posting form, keyed by sport."""
    return team_request_service.get_positions()


@router.post("/api/team-requests", response_model=TeamRequestCreateResponse)
async def create_request(
    payload: TeamRequestCreate,
    user: dict = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Post a teammate request."""
    try:
        team_request = await team_request_service.create_request(
            session,
            user_id=user["id"],
            sport=payload.sport,
            position_needed=payload.position_needed,
            location=payload.location,
            description=payload.description,
        )
        return notification_service.build_toast(
            "Request Posted!", "Your teammate request is now live", request=team_request
        )
    except ValueError as e:
        raise service_error_to_http(e)
    except Exception as e:
        logger.error(f"Error creating team request: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.patch("/api/team-requests/{request_id}", response_model=TeamRequestResponse)
async def set_request_status(
    request_id: int,
    payload: TeamRequestStatusUpdate,
    user: dict = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Close or reopen one of the current user's requests."""
    try:
        return await team_request_service.set_request_active(
            session, request_id, user["id"], payload.is_active
        )
    except ValueError as e:
        raise service_error_to_http(e)
    except Exception as e:
        logger.error(f"Error updating team request {request_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/api/team-requests/{request_id}", response_model=ToastResponse)
async def delete_request(
    request_id: int,
    user: dict = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Delete one of the current user's requests."""
    try:
        await team_request_service.delete_request(session, request_id, user["id"])
        return notification_service.build_toast("Deleted", "Your request has been removed")
    except ValueError as e:
        raise service_error_to_http(e)
    except Exception as e:
        logger.error(f"Error deleting team request {request_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
