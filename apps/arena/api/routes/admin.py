"""Admin route handlers: verification, roles and catalog management."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from arena.api.routes import service_error_to_http
from arena.database.db import get_db_session
from arena.database.models import NotificationType
from arena.services import (
    user_service,
    role_service,
    turf_service,
    tournament_service,
    notification_service,
)
from arena.api.auth_dependencies import require_admin
from arena.models.schemas import (
    ProfileResponse,
    RoleGrantRequest,
    TournamentCreate,
    TournamentResponse,
    TurfCreate,
    TurfResponse,
    VerifyProfileRequest,
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.put("/api/admin/users/{user_id}/verification", response_model=ProfileResponse)
async def set_verification(
    user_id: int,
    payload: VerifyProfileRequest,
    admin: dict = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    """Set or clear an athlete's verified flag."""
    try:
        profile = await user_service.set_profile_verified(session, user_id, payload.is_verified)
        if not profile:
            raise HTTPException(status_code=404, detail="Profile not found")
        if payload.is_verified:
            await notification_service.notify_quietly(
                session,
                user_id=user_id,
                type=NotificationType.PROFILE_VERIFIED.value,
                title="You're Verified!",
                message="You can now register for verified-only tournaments",
                link_url="/dashboard",
            )
        logger.info(f"Admin {admin['id']} set verified={payload.is_verified} for user {user_id}")
        return profile
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating verification for user {user_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error updating verification: {str(e)}")


@router.post("/api/admin/users/{user_id}/roles")
async def grant_role(
    user_id: int,
    payload: RoleGrantRequest,
    admin: dict = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    """Grant a role to a user."""
    try:
        if not await user_service.get_user_by_id(session, user_id):
            raise HTTPException(status_code=404, detail="User not found")
        granted = await role_service.grant_role(session, user_id, payload.role)
        roles = await role_service.get_user_roles(session, user_id)
        return {"success": True, "granted": granted, "roles": roles}
    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error granting role to user {user_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error granting role: {str(e)}")


@router.delete("/api/admin/users/{user_id}/roles/{role}")
async def revoke_role(
    user_id: int,
    role: str,
    admin: dict = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    """Remove a role from a user."""
    try:
        removed = await role_service.revoke_role(session, user_id, role)
        if not removed:
            raise HTTPException(status_code=404, detail="Role grant not found")
        return {"success": True}
    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error revoking role from user {user_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error revoking role: {str(e)}")


@router.post("/api/admin/turfs", response_model=TurfResponse)
async def create_turf(
    payload: TurfCreate,
    admin: dict = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    """Add a bookable turf."""
    try:
        return await turf_service.create_turf(session, **payload.model_dump())
    except ValueError as e:
        raise service_error_to_http(e)
    except Exception as e:
        logger.error(f"Error creating turf: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error creating turf: {str(e)}")


@router.post("/api/admin/tournaments", response_model=TournamentResponse)
async def create_tournament(
    payload: TournamentCreate,
    admin: dict = Depends(require_admin),
    session: AsyncSession = Depends(get_db_session),
):
    """Add a tournament."""
    try:
        return await tournament_service.create_tournament(session, **payload.model_dump())
    except ValueError as e:
        raise service_error_to_http(e)
    except Exception as e:
        logger.error(f"Error creating tournament: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error creating tournament: {str(e)}")
