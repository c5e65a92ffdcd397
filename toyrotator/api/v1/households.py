"""Household sharing callables: members and caregiver invitations."""

from typing import List, Optional

from fastapi import APIRouter, Depends

from toyrotator.crud.household import HouseholdCRUD
from toyrotator.dependencies import get_current_user, get_db_client, get_household_id
from toyrotator.schemas.household_schema import InvitationIdRequest, InviteCaregiverRequest
from toyrotator.schemas.responses import ApiResponse
from toyrotator.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.post("/getHousehold", response_model=ApiResponse[Optional[dict]])
async def get_household(
    household_id: str = Depends(get_household_id),
    db_client=Depends(get_db_client),
) -> ApiResponse[Optional[dict]]:
    household = HouseholdCRUD(db_client).get(household_id)
    if household is None:
        return ApiResponse.success_response(None, "No household yet")
    return ApiResponse.success_response(household.to_api(), "Household retrieved")


@router.post("/inviteCaregiver", response_model=ApiResponse[dict])
async def invite_caregiver(
    request: InviteCaregiverRequest,
    current_user: dict = Depends(get_current_user),
    household_id: str = Depends(get_household_id),
    db_client=Depends(get_db_client),
) -> ApiResponse[dict]:
    """Invite a caregiver by email. Only the household owner may invite."""
    invitation = HouseholdCRUD(db_client).invite_caregiver(
        household_id, current_user["uid"], current_user.get("email"), request.email,
    )
    logger.info(
        "Caregiver invited",
        extra={"extra_data": {"household_id": household_id, "invitation_id": invitation.id}},
    )
    return ApiResponse.success_response(invitation.to_api(), f"Invitation sent to {request.email}")


@router.post("/getPendingInvitations", response_model=ApiResponse[List[dict]])
async def get_pending_invitations(
    current_user: dict = Depends(get_current_user),
    db_client=Depends(get_db_client),
) -> ApiResponse[List[dict]]:
    email = current_user.get("email")
    invitations = HouseholdCRUD(db_client).pending_invitations(email) if email else []
    return ApiResponse.success_response(
        [invitation.to_api() for invitation in invitations],
        f"Retrieved {len(invitations)} pending invitations",
    )


async def _respond(request: InvitationIdRequest, current_user: dict, db_client, accept: bool) -> ApiResponse[dict]:
    invitation = HouseholdCRUD(db_client).respond_to_invitation(
        request.invitation_id,
        current_user["uid"],
        current_user.get("email"),
        current_user.get("name"),
        accept,
    )
    logger.info(
        f"Invitation {invitation.status}",
        extra={"extra_data": {
            "invitation_id": invitation.id,
            "household_id": invitation.household_id,
            "uid": current_user["uid"],
        }},
    )
    return ApiResponse.success_response(invitation.to_api(), f"Invitation {invitation.status}")


@router.post("/acceptInvitation", response_model=ApiResponse[dict])
async def accept_invitation(
    request: InvitationIdRequest,
    current_user: dict = Depends(get_current_user),
    db_client=Depends(get_db_client),
) -> ApiResponse[dict]:
    """Join the inviting household."""
    return await _respond(request, current_user, db_client, accept=True)


@router.post("/declineInvitation", response_model=ApiResponse[dict])
async def decline_invitation(
    request: InvitationIdRequest,
    current_user: dict = Depends(get_current_user),
    db_client=Depends(get_db_client),
) -> ApiResponse[dict]:
    return await _respond(request, current_user, db_client, accept=False)
