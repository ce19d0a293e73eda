"""Profile and dashboard route handlers."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from arena.database.db import get_db_session
from arena.services import user_service, dashboard_service
from arena.api.auth_dependencies import require_user
from arena.models.schemas import ProfileResponse, ProfileUpdate, DashboardResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/profile", response_model=ProfileResponse)
async def get_my_profile(
    user: dict = Depends(require_user), session: AsyncSession = Depends(get_db_session)
):
    """Get the current athlete's profile."""
    try:
        profile = await user_service.get_profile(session, user["id"])
        if not profile:
            raise HTTPException(status_code=404, detail="Profile not found")
        return profile
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching profile: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error fetching profile: {str(e)}")


@router.put("/api/profile", response_model=ProfileResponse)
async def update_my_profile(
    payload: ProfileUpdate,
    user: dict = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Update name and/or primary sport."""
    try:
        profile = await user_service.update_profile(
            session, user["id"], name=payload.name, primary_sport=payload.primary_sport
        )
        if not profile:
            raise HTTPException(status_code=404, detail="Profile not found")
        return profile
    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error updating profile: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error updating profile: {str(e)}")


@router.get("/api/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    user: dict = Depends(require_user), session: AsyncSession = Depends(get_db_session)
):
    """Welcome line, stats, verification banner and upcoming tournaments."""
    try:
        return await dashboard_service.build_dashboard(session, user)
    except Exception as e:
        logger.error(f"Error building dashboard: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error building dashboard: {str(e)}")
