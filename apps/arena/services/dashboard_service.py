"""
Assembles the athlete dashboard: welcome line, stats, verification banner and
the upcoming tournaments with their per-athlete registration state.
"""

from typing import Dict, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from arena.services import tournament_service
from arena.utils.constants import DASHBOARD_TOURNAMENT_LIMIT, DEFAULT_WELCOME_NAME


def verification_banner(profile: Optional[Dict]) -> Dict:
    is_verified = bool(profile and profile.get("is_verified"))
    if is_verified:
        return {
            "is_verified": True,
            "title": "You're Verified!",
            "message": "You have access to all tournaments, including paid and verified-only events.",
        }
    return {
        "is_verified": False,
        "title": "Get Verified to Unlock Paid Tournaments",
        "message": "Verified athletes can register for premium tournaments with bigger prize pools.",
    }


async def build_dashboard(session: AsyncSession, user: Dict) -> Dict:
    """Dashboard payload for the current user context."""
    profile = user.get("profile")
    tournaments = await tournament_service.list_tournaments(
        session, limit=DASHBOARD_TOURNAMENT_LIMIT
    )
    return {
        "welcome_name": (profile or {}).get("name") or DEFAULT_WELCOME_NAME,
        "stats": {
            "matches_played": (profile or {}).get("matches_played", 0),
            "reputation_score": (profile or {}).get("reputation_score", 0),
            # Not tracked yet
            "tournaments_won": 0,
        },
        "verification": verification_banner(profile),
        "upcoming_tournaments": [
            tournament_service.with_registration_state(t, profile) for t in tournaments
        ],
    }
