"""Authentication route handlers."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError

from arena.api.routes import limiter, INVALID_CREDENTIALS_RESPONSE
from arena.database.db import get_db_session
from arena.database.models import Sport
from arena.services import auth_service, user_service, role_service
from arena.api.auth_dependencies import get_current_user
from arena.models.schemas import SignupRequest, LoginRequest, AuthResponse, UserResponse
from arena.utils.constants import MIN_PASSWORD_LENGTH
from arena.utils.db_errors import is_unique_violation

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "message": "API is running"}


@router.post("/api/auth/signup", response_model=AuthResponse)
@limiter.limit("10/minute")
async def signup(
    request: Request, payload: SignupRequest, session: AsyncSession = Depends(get_db_session)
):
    """
    Create an account with its athlete profile and return an access token.
    """
    try:
        email = auth_service.normalize_email(payload.email)
        if len(payload.password or "") < MIN_PASSWORD_LENGTH:
            raise HTTPException(
                status_code=400,
                detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
            )
        if not payload.name or not payload.name.strip():
            raise HTTPException(status_code=400, detail="Name is required")
        if not payload.primary_sport:
            raise HTTPException(status_code=400, detail="Primary sport is required")
        try:
            Sport(payload.primary_sport)
        except ValueError:
            raise HTTPException(
                status_code=400, detail=f"Unknown sport: {payload.primary_sport}"
            )

        password_hash = auth_service.hash_password(payload.password)
        try:
            user_id = await user_service.create_user_with_profile(
                session,
                email=email,
                password_hash=password_hash,
                name=payload.name,
                primary_sport=payload.primary_sport,
            )
        except IntegrityError as e:
            if is_unique_violation(e):
                raise HTTPException(status_code=400, detail="Email is already registered")
            raise

        access_token = auth_service.create_access_token(data={"user_id": user_id})
        return AuthResponse(
            access_token=access_token,
            token_type="bearer",
            user_id=user_id,
            email=email,
            is_verified=False,
        )
    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error during signup: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error during signup: {str(e)}")


@router.post("/api/auth/login", response_model=AuthResponse)
@limiter.limit("20/minute")
async def login(
    request: Request, payload: LoginRequest, session: AsyncSession = Depends(get_db_session)
):
    """Login with email and password."""
    try:
        try:
            email = auth_service.normalize_email(payload.email)
        except ValueError:
            raise INVALID_CREDENTIALS_RESPONSE

        user = await user_service.get_user_by_email(session, email)
        if not user or not auth_service.verify_password(payload.password, user["password_hash"]):
            raise INVALID_CREDENTIALS_RESPONSE

        profile = await user_service.get_profile(session, user["id"])
        access_token = auth_service.create_access_token(data={"user_id": user["id"]})
        return AuthResponse(
            access_token=access_token,
            token_type="bearer",
            user_id=user["id"],
            email=user["email"],
            is_verified=bool(profile and profile["is_verified"]),
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error during login: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error during login: {str(e)}")


@router.get("/api/auth/me", response_model=UserResponse)
async def get_me(
    user: dict = Depends(get_current_user), session: AsyncSession = Depends(get_db_session)
):
    """Current user with profile and roles."""
    try:
        roles = await role_service.get_user_roles(session, user["id"])
        return {**user, "roles": roles}
    except Exception as e:
        logger.error(f"Error fetching current user: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error fetching current user: {str(e)}")
