"""
Public API routes, no authentication required.

Read-only marketing content for the landing page. All routes are prefixed
with /api/public.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from arena.database.models import Sport
from arena.models.schemas import FeaturedSport
from arena.utils.constants import (
    FEATURED_SPORTS,
    SPORT_IMAGES,
    SPORT_POSITIONS,
    DEFAULT_SPORT_IMAGE,
)

logger = logging.getLogger(__name__)


async def _cache_public(response: Response):
    """Set Cache-Control headers on all public API responses (5min TTL)."""
    response.headers["Cache-Control"] = "public, max-age=300, s-maxage=300"


public_router = APIRouter(
    prefix="/api/public", tags=["public"], dependencies=[Depends(_cache_public)]
)


@public_router.get("/sports", response_model=List[FeaturedSport])
async def featured_sports():
    """Featured sports grid: name, event count and image."""
    return [
        {**sport, "image_url": SPORT_IMAGES.get(sport["sport"], DEFAULT_SPORT_IMAGE)}
        for sport in FEATURED_SPORTS
    ]


@public_router.get("/sports/{sport}/positions", response_model=List[str])
async def sport_positions(sport: str):
    """
    Positions for a sport. Known sports without a fixed list return an empty
    list (any position is accepted).
    """
    try:
        sport_value = Sport(sport.lower()).value
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown sport: {sport}")
    return SPORT_POSITIONS.get(sport_value, [])
