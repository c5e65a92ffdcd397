"""Child profile callables."""

from typing import List

from fastapi import APIRouter, Depends

from toyrotator.crud.child import ChildCRUD
from toyrotator.dependencies import get_db_client, get_household_id
from toyrotator.schemas.child_schema import (
    ChildIdRequest,
    CreateChildProfileRequest,
    UpdateChildProfileRequest,
)
from toyrotator.schemas.responses import ApiResponse
from toyrotator.utils.exceptions import NotFoundError
from toyrotator.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.post("/getChildProfiles", response_model=ApiResponse[List[dict]])
async def get_child_profiles(
    household_id: str = Depends(get_household_id),
    db_client=Depends(get_db_client),
) -> ApiResponse[List[dict]]:
    children = ChildCRUD(db_client, household_id).list_children()
    return ApiResponse.success_response(
        [child.to_api() for child in children],
        f"Retrieved {len(children)} child profiles",
    )


@router.post("/addChildProfile", response_model=ApiResponse[dict])
async def add_child_profile(
    request: CreateChildProfileRequest,
    household_id: str = Depends(get_household_id),
    db_client=Depends(get_db_client),
) -> ApiResponse[dict]:
    child = ChildCRUD(db_client, household_id).add_child(request.provided())
    logger.info(
        "Child profile added",
        extra={"extra_data": {"household_id": household_id, "child_id": child.id}},
    )
    return ApiResponse.success_response(child.to_api(), "Child profile created successfully")


@router.post("/updateChildProfile", response_model=ApiResponse[dict])
async def update_child_profile(
    request: UpdateChildProfileRequest,
    household_id: str = Depends(get_household_id),
    db_client=Depends(get_db_client),
) -> ApiResponse[dict]:
    """Partially update a child; rotationSettings are merged key by key."""
    child = ChildCRUD(db_client, household_id).update_child(
        request.child_id, request.provided("child_id"),
    )
    if child is None:
        raise NotFoundError("Child not found", {"childId": request.child_id})
    logger.info(
        "Child profile updated",
        extra={"extra_data": {"household_id": household_id, "child_id": child.id}},
    )
    return ApiResponse.success_response(child.to_api(), "Child profile updated successfully")


@router.post("/deleteChildProfile", response_model=ApiResponse[dict])
async def delete_child_profile(
    request: ChildIdRequest,
    household_id: str = Depends(get_household_id),
    db_client=Depends(get_db_client),
) -> ApiResponse[dict]:
    if not ChildCRUD(db_client, household_id).delete(request.child_id):
        raise NotFoundError("Child not found", {"childId": request.child_id})
    logger.info(
        "Child profile deleted",
        extra={"extra_data": {"household_id": household_id, "child_id": request.child_id}},
    )
    return ApiResponse.success_response({"childId": request.child_id}, "Child profile deleted successfully")
