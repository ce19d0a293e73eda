"""Turf catalog and availability route handlers."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from arena.api.routes import service_error_to_http
from arena.database.db import get_db_session
from arena.services import turf_service
from arena.api.auth_dependencies import require_user
from arena.models.schemas import TurfResponse, AvailabilityResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/turfs", response_model=List[TurfResponse])
async def list_turfs(
    sport: Optional[str] = None,
    user: dict = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
):
    """List all turfs, optionally filtered by sport."""
    try:
        return await turf_service.list_turfs(session, sport=sport)
    except ValueError as e:
        raise service_error_to_http(e)
    except Exception as e:
        logger.error(f"Error listing turfs: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error listing turfs: {str(e)}")


@router.get("/api/turfs/{turf_id}", response_model=TurfResponse)
async def get_turf(
    turf_id: int,
    user: dict = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Get a single turf."""
    try:
        return await turf_service.get_turf(session, turf_id)
    except ValueError as e:
        raise service_error_to_http(e)
    except Exception as e:
        logger.error(f"Error fetching turf {turf_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error fetching turf: {str(e)}")


@router.get("/api/turfs/{turf_id}/availability", response_model=AvailabilityResponse)
async def get_availability(
    turf_id: int,
    date: str = Query(..., description="ISO date (YYYY-MM-DD)"),
    user: dict = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Every time slot for the turf on a date, marked booked or open."""
    try:
        return await turf_service.get_availability(session, turf_id, date)
    except ValueError as e:
        raise service_error_to_http(e)
    except Exception as e:
        logger.error(f"Error fetching availability for turf {turf_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error fetching availability: {str(e)}")
