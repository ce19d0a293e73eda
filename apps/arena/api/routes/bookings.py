"""Booking route handlers."""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from arena.api.routes import service_error_to_http
from arena.database.db import get_db_session
from arena.services import turf_service, notification_service
from arena.api.auth_dependencies import require_user
from arena.models.schemas import (
    BookingCreate,
    BookingCreateResponse,
    BookingResponse,
    ToastResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/api/bookings", response_model=BookingCreateResponse)
async def create_booking(
    payload: BookingCreate,
    user: dict = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Book an open time slot on a turf."""
    try:
        result = await turf_service.create_booking(
            session,
            user_id=user["id"],
            turf_id=payload.turf_id,
            booking_date=payload.booking_date,
            time_slot=payload.time_slot,
        )
        return notification_service.build_toast(
            "Booking Confirmed!", result["message"], booking=result["booking"]
        )
    except ValueError as e:
        raise service_error_to_http(e)
    except Exception as e:
        logger.error(f"Error creating booking: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/api/bookings", response_model=List[BookingResponse])
async def list_my_bookings(
    user: dict = Depends(require_user), session: AsyncSession = Depends(get_db_session)
):
    """Current user's bookings, newest date first."""
    try:
        return await turf_service.list_user_bookings(session, user["id"])
    except Exception as e:
        logger.error(f"Error fetching bookings: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error fetching bookings: {str(e)}")


@router.delete("/api/bookings/{booking_id}", response_model=ToastResponse)
async def cancel_booking(
    booking_id: int,
    user: dict = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
):
    """Cancel one of the current user's bookings."""
    try:
        await turf_service.cancel_booking(session, booking_id, user["id"])
        return notification_service.build_toast("Booking Cancelled")
    except ValueError as e:
        raise service_error_to_http(e)
    except Exception as e:
        logger.error(f"Error cancelling booking {booking_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
