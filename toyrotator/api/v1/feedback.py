"""Engagement feedback callables."""

from typing import List, Optional

from fastapi import APIRouter, Depends

from toyrotator.crud.feedback import FeedbackCRUD
from toyrotator.dependencies import get_db_client, get_household_id
from toyrotator.schemas.responses import ApiResponse
from toyrotator.schemas.rotation_schema import GetFeedbackRequest, LogFeedbackRequest
from toyrotator.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.post("/logFeedback", response_model=ApiResponse[dict])
async def log_feedback(
    request: LogFeedbackRequest,
    household_id: str = Depends(get_household_id),
    db_client=Depends(get_db_client),
) -> ApiResponse[dict]:
    feedback = FeedbackCRUD(db_client, household_id).log(request.provided())
    logger.info(
        "Feedback logged",
        extra={"extra_data": {
            "household_id": household_id,
            "toy_id": feedback.toy_id,
            "engagement": feedback.engagement,
        }},
    )
    return ApiResponse.success_response(feedback.to_api(), "Feedback logged successfully")


@router.post("/getFeedback", response_model=ApiResponse[List[dict]])
async def get_feedback(
    request: Optional[GetFeedbackRequest] = None,
    household_id: str = Depends(get_household_id),
    db_client=Depends(get_db_client),
) -> ApiResponse[List[dict]]:
    request = request or GetFeedbackRequest()
    entries = FeedbackCRUD(db_client, household_id).list_feedback(
        rotation_id=request.rotation_id,
        toy_id=request.toy_id,
        child_id=request.child_id,
        limit=request.limit,
    )
    return ApiResponse.success_response(
        [entry.to_api() for entry in entries],
        f"Retrieved {len(entries)} feedback entries",
    )
