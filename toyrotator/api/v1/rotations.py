"""Rotation callables."""

from typing import List, Optional

from fastapi import APIRouter, Depends

from toyrotator.config import Settings, get_settings
from toyrotator.crud.rotation import RotationCRUD
from toyrotator.dependencies import get_db_client, get_household_id
from toyrotator.schemas.child_schema import ChildIdRequest
from toyrotator.schemas.responses import ApiResponse
from toyrotator.schemas.rotation_schema import CreateRotationRequest, GetRotationsRequest
from toyrotator.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.post("/createRotation", response_model=ApiResponse[dict])
async def create_rotation(
    request: CreateRotationRequest,
    household_id: str = Depends(get_household_id),
    db_client=Depends(get_db_client),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[dict]:
    """
    Start a new rotation for a child.

    Replaces the child's active rotation and updates toy statuses in one
    transaction.
    """
    rotation = RotationCRUD(db_client, household_id).create_rotation(
        child_id=request.child_id,
        toy_ids=request.toy_ids,
        start_date=request.start_date,
        duration_days=request.duration_days,
        source=request.source,
        insight_summary=request.insight_summary,
        default_duration_days=settings.default_rotation_days,
    )
    return ApiResponse.success_response(rotation.to_api(), "Rotation created successfully")


@router.post("/getCurrentRotation", response_model=ApiResponse[Optional[dict]])
async def get_current_rotation(
    request: ChildIdRequest,
    household_id: str = Depends(get_household_id),
    db_client=Depends(get_db_client),
) -> ApiResponse[Optional[dict]]:
    rotation = RotationCRUD(db_client, household_id).get_current(request.child_id)
    if rotation is None:
        return ApiResponse.success_response(None, "No active rotation")
    return ApiResponse.success_response(rotation.to_api(), "Active rotation retrieved")


@router.post("/getRotations", response_model=ApiResponse[List[dict]])
async def get_rotations(
    request: Optional[GetRotationsRequest] = None,
    household_id: str = Depends(get_household_id),
    db_client=Depends(get_db_client),
) -> ApiResponse[List[dict]]:
    """Rotations newest first, optionally for one child."""
    request = request or GetRotationsRequest()
    rotations = RotationCRUD(db_client, household_id).list_rotations(request.child_id, request.limit)
    return ApiResponse.success_response(
        [rotation.to_api() for rotation in rotations],
        f"Retrieved {len(rotations)} rotations",
    )
