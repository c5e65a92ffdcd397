"""Toy inventory callables."""

from typing import List, Optional

from fastapi import APIRouter, Depends

from toyrotator.crud.toy import ToyCRUD
from toyrotator.dependencies import get_db_client, get_household_id
from toyrotator.schemas.responses import ApiResponse
from toyrotator.schemas.toy_schema import (
    CreateToyRequest,
    GetToysRequest,
    ToyIdRequest,
    UpdateToyRequest,
)
from toyrotator.utils.exceptions import NotFoundError
from toyrotator.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.post("/getToys", response_model=ApiResponse[List[dict]])
async def get_toys(
    request: Optional[GetToysRequest] = None,
    household_id: str = Depends(get_household_id),
    db_client=Depends(get_db_client),
) -> ApiResponse[List[dict]]:
    """List the household's toys, optionally filtered by status."""
    request = request or GetToysRequest()
    toys = ToyCRUD(db_client, household_id).list_toys(request.status)
    return ApiResponse.success_response(
        [toy.to_api() for toy in toys],
        f"Retrieved {len(toys)} toys",
    )


@router.post("/addToy", response_model=ApiResponse[dict])
async def add_toy(
    request: CreateToyRequest,
    household_id: str = Depends(get_household_id),
    db_client=Depends(get_db_client),
) -> ApiResponse[dict]:
    toy = ToyCRUD(db_client, household_id).add_toy(request.model_dump(by_alias=True))
    logger.info(
        "Toy added",
        extra={"extra_data": {"household_id": household_id, "toy_id": toy.id, "source": toy.source}},
    )
    return ApiResponse.success_response(toy.to_api(), "Toy added successfully")


@router.post("/updateToy", response_model=ApiResponse[dict])
async def update_toy(
    request: UpdateToyRequest,
    household_id: str = Depends(get_household_id),
    db_client=Depends(get_db_client),
) -> ApiResponse[dict]:
    toy = ToyCRUD(db_client, household_id).update_toy(request.toy_id, request.provided("toy_id"))
    if toy is None:
        raise NotFoundError("Toy not found", {"toyId": request.toy_id})
    logger.info(
        "Toy updated",
        extra={"extra_data": {"household_id": household_id, "toy_id": toy.id}},
    )
    return ApiResponse.success_response(toy.to_api(), "Toy updated successfully")


@router.post("/deleteToy", response_model=ApiResponse[dict])
async def delete_toy(
    request: ToyIdRequest,
    household_id: str = Depends(get_household_id),
    db_client=Depends(get_db_client),
) -> ApiResponse[dict]:
    """Retire a toy. The document is kept with ``status="retired"``."""
    toy = ToyCRUD(db_client, household_id).retire(request.toy_id)
    if toy is None:
        raise NotFoundError("Toy not found", {"toyId": request.toy_id})
    logger.info(
        "Toy retired",
        extra={"extra_data": {"household_id": household_id, "toy_id": toy.id}},
    )
    return ApiResponse.success_response(toy.to_api(), "Toy retired successfully")
