"""Main v1 API router that aggregates all sub-routers."""

from fastapi import APIRouter

from toyrotator.schemas.responses import ErrorResponse

from .ai import router as ai_router
from .auth import router as auth_router
from .children import router as children_router
from .feedback import router as feedback_router
from .households import router as households_router
from .profile import router as profile_router
from .rotations import router as rotations_router
from .toys import router as toys_router

# Every non-2xx response carries the callable error envelope
ERROR_RESPONSES = {
    status_code: {"model": ErrorResponse}
    for status_code in (400, 401, 403, 404, 409, 412, 429, 500)
}

router = APIRouter(prefix="/api/v1", responses=ERROR_RESPONSES)

router.include_router(auth_router, prefix="/auth", tags=["Auth"])

# Callable functions: POST /api/v1/functions/<functionName>
router.include_router(profile_router, prefix="/functions", tags=["Profile"])
router.include_router(children_router, prefix="/functions", tags=["Children"])
router.include_router(toys_router, prefix="/functions", tags=["Toys"])
router.include_router(rotations_router, prefix="/functions", tags=["Rotations"])
router.include_router(feedback_router, prefix="/functions", tags=["Feedback"])
router.include_router(households_router, prefix="/functions", tags=["Household"])
router.include_router(ai_router, prefix="/functions", tags=["AI"])

__all__ = ["router"]
