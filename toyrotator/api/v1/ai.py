"""AI callables: rotation suggestions, toy recognition and space analysis.

Each call is gated by the caller's subscription tier and usage counters.
Model failures after gating never surface as errors; the response carries
fallback content and ``"fallback": true`` instead.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends

from toyrotator.config import Settings, get_settings
from toyrotator.crud.base import utcnow
from toyrotator.crud.child import ChildCRUD
from toyrotator.crud.feedback import FeedbackCRUD
from toyrotator.crud.toy import ToyCRUD
from toyrotator.dependencies import (
    get_current_user,
    get_db_client,
    get_household_id,
    get_quota_service,
    get_toy_advisor,
)
from toyrotator.models.subscription import AiFeature, SubscriptionTier
from toyrotator.models.toy import Toy, ToyStatus
from toyrotator.schemas.ai_schema import AiRotationSuggestionRequest, ImageRequest
from toyrotator.schemas.responses import ApiResponse
from toyrotator.services.ai.parsing import AiResult
from toyrotator.services.ai.toy_advisor import ToyAdvisor, basic_space_analysis, decode_image
from toyrotator.services.quota import QuotaService
from toyrotator.utils.exceptions import InternalError, InvalidArgumentError, NotFoundError
from toyrotator.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()

RECENT_FEEDBACK_LIMIT = 20


def _require_advisor(advisor: Optional[ToyAdvisor]) -> ToyAdvisor:
    if advisor is None:
        raise InternalError("AI service is not configured")
    return advisor


def _result_data(result: AiResult) -> dict:
    return {**result.value, "fallback": result.fallback}


def _candidate_toys(toy_crud: ToyCRUD, toy_ids: Optional[List[str]]) -> List[Toy]:
    if not toy_ids:
        return toy_crud.list_available()
    toys = [toy_crud.get(toy_id) for toy_id in dict.fromkeys(toy_ids)]
    return [toy for toy in toys if toy is not None and toy.status != ToyStatus.RETIRED.value]


@router.post("/getAiRotationSuggestion", response_model=ApiResponse[dict])
async def get_ai_rotation_suggestion(
    request: AiRotationSuggestionRequest,
    current_user: dict = Depends(get_current_user),
    household_id: str = Depends(get_household_id),
    db_client=Depends(get_db_client),
    advisor: Optional[ToyAdvisor] = Depends(get_toy_advisor),
    quota: QuotaService = Depends(get_quota_service),
) -> ApiResponse[dict]:
    """
    Suggest toys for a child's next rotation.

    Free-tier callers are rejected before anything else is checked.
    Candidates are the given toys or every toy that is not retired. The
    suggestion holds at most the child's displayCount toys.
    """
    quota.require_access(current_user["uid"], AiFeature.ROTATION_SUGGESTION)
    advisor = _require_advisor(advisor)

    child = ChildCRUD(db_client, household_id).get(request.child_id)
    if child is None:
        raise NotFoundError("Child not found", {"childId": request.child_id})

    toys = _candidate_toys(ToyCRUD(db_client, household_id), request.toy_ids)
    if not toys:
        raise InvalidArgumentError("No toys available for a rotation")

    remaining = quota.consume(current_user["uid"], AiFeature.ROTATION_SUGGESTION)

    feedback = FeedbackCRUD(db_client, household_id).list_feedback(
        child_id=child.id, limit=RECENT_FEEDBACK_LIMIT,
    )
    result = advisor.suggest_rotation(child, toys, feedback, utcnow().date())

    logger.info(
        "AI rotation suggestion served",
        extra={"extra_data": {
            "uid": current_user["uid"],
            "child_id": child.id,
            "candidates": len(toys),
            "fallback": result.fallback,
            "remaining": remaining,
        }},
    )
    return ApiResponse.success_response(_result_data(result), "Rotation suggestion generated")


@router.post("/recognizeToyFromPhoto", response_model=ApiResponse[dict])
async def recognize_toy_from_photo(
    request: ImageRequest,
    current_user: dict = Depends(get_current_user),
    advisor: Optional[ToyAdvisor] = Depends(get_toy_advisor),
    quota: QuotaService = Depends(get_quota_service),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[dict]:
    quota.require_access(current_user["uid"], AiFeature.TOY_RECOGNITION)
    advisor = _require_advisor(advisor)
    image = decode_image(request.image_base64, settings.max_image_bytes)

    remaining = quota.consume(current_user["uid"], AiFeature.TOY_RECOGNITION)
    result = advisor.recognize_toy(image)

    logger.info(
        "Toy recognition served",
        extra={"extra_data": {
            "uid": current_user["uid"],
            "fallback": result.fallback,
            "remaining": remaining,
        }},
    )
    return ApiResponse.success_response(_result_data(result), "Toy recognized")


@router.post("/analyzeSpace", response_model=ApiResponse[dict])
async def analyze_space(
    request: ImageRequest,
    current_user: dict = Depends(get_current_user),
    advisor: Optional[ToyAdvisor] = Depends(get_toy_advisor),
    quota: QuotaService = Depends(get_quota_service),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[dict]:
    """
    Analyze a play-space photo.

    The free tier gets static rule-based observations without using a
    counter; trial and paid users get an AI analysis.
    """
    image = decode_image(request.image_base64, settings.max_image_bytes)

    if quota.effective_tier(current_user["uid"]) == SubscriptionTier.FREE:
        data = {**basic_space_analysis(settings.default_display_count), "fallback": False}
        logger.info(f"Basic space analysis served for user {current_user['uid']}")
        return ApiResponse.success_response(data, "Basic space analysis")

    advisor = _require_advisor(advisor)
    remaining = quota.consume(current_user["uid"], AiFeature.SPACE_ANALYSIS)
    result = advisor.analyze_space(image)

    logger.info(
        "Space analysis served",
        extra={"extra_data": {
            "uid": current_user["uid"],
            "fallback": result.fallback,
            "remaining": remaining,
        }},
    )
    return ApiResponse.success_response(_result_data(result), "Space analyzed")
