"""
API routes - combined router from all domain modules.

Shared infrastructure (limiter, constants, error mapping) lives here; every
sub-router imports what it needs from this package.
"""

import logging
import os

from fastapi import APIRouter, HTTPException
from slowapi import Limiter
from slowapi.util import get_remote_address

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Shared rate limiter
# ---------------------------------------------------------------------------
IS_TEST_ENV = os.getenv("ENV", "").lower() == "test"
if IS_TEST_ENV:
    limiter = Limiter(key_func=get_remote_address)

    def no_op_limit(*args, **kwargs):
        """No-op decorator for test mode - doesn't apply any rate limiting."""
        def decorator(func):
            return func
        return decorator

    limiter.limit = lambda *args, **kwargs: no_op_limit()
else:
    limiter = Limiter(key_func=get_remote_address)

# ---------------------------------------------------------------------------
# Shared constants
# ---------------------------------------------------------------------------
INVALID_CREDENTIALS_RESPONSE = HTTPException(
    status_code=401, detail="Invalid email or password"
)


def service_error_to_http(exc: ValueError) -> HTTPException:
    """
    Map a service-layer ValueError to an HTTPException.

    Service modules signal outcomes with ValueError subclasses; the class name
    decides the status so routes need not import every module's exceptions.
    """
    name = type(exc).__name__
    if name.endswith("NotFoundError"):
        return HTTPException(status_code=404, detail=str(exc))
    if name in ("NotAuthorizedError", "VerificationRequiredError"):
        return HTTPException(status_code=403, detail=str(exc))
    if name in ("SlotUnavailableError", "AlreadyRegisteredError", "TournamentFullError"):
        return HTTPException(status_code=409, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))


# ---------------------------------------------------------------------------
# Import sub-routers and combine
# ---------------------------------------------------------------------------
from arena.api.routes.auth import router as auth_router  # noqa: E402
from arena.api.routes.profiles import router as profiles_router  # noqa: E402
from arena.api.routes.turfs import router as turfs_router  # noqa: E402
from arena.api.routes.bookings import router as bookings_router  # noqa: E402
from arena.api.routes.tournaments import router as tournaments_router  # noqa: E402
from arena.api.routes.team_requests import router as team_requests_router  # noqa: E402
from arena.api.routes.notifications import router as notifications_router  # noqa: E402
from arena.api.routes.admin import router as admin_router  # noqa: E402

router = APIRouter()
router.include_router(auth_router)
router.include_router(profiles_router)
router.include_router(turfs_router)
router.include_router(bookings_router)
router.include_router(tournaments_router)
router.include_router(team_requests_router)
router.include_router(notifications_router)
router.include_router(admin_router)
