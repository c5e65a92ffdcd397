"""User profile, account deletion and push token callables."""

from fastapi import APIRouter, Depends

from toyrotator.config import Settings, get_settings
from toyrotator.crud.user import UserCRUD
from toyrotator.dependencies import get_current_user, get_db_client
from toyrotator.models.user import AccountStatus
from toyrotator.schemas.responses import ApiResponse
from toyrotator.schemas.user_schema import RegisterPushTokenRequest, UpdateProfileRequest
from toyrotator.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.post("/getUserInfo", response_model=ApiResponse[dict])
async def get_user_info(
    current_user: dict = Depends(get_current_user),
    db_client=Depends(get_db_client),
) -> ApiResponse[dict]:
    """
    Get the caller's profile.

    Returns:
        The stored profile with uid/email from the token, or a default
        inactive profile when none has been written yet
    """
    uid = current_user["uid"]
    profile = UserCRUD(db_client).get(uid)

    if profile is None:
        data = {
            "uid": uid,
            "email": current_user.get("email"),
            "displayName": current_user.get("name"),
            "status": AccountStatus.INACTIVE.value,
        }
        logger.info(f"No profile yet for user: {uid}")
        return ApiResponse.success_response(data, "Default profile returned")

    data = profile.to_api()
    data["uid"] = uid
    if current_user.get("email"):
        data["email"] = current_user["email"]
    logger.info(f"Profile retrieved for user: {uid}")
    return ApiResponse.success_response(data, "User profile retrieved successfully")


@router.post("/updateUserProfile", response_model=ApiResponse[dict])
async def update_user_profile(
    request: UpdateProfileRequest,
    current_user: dict = Depends(get_current_user),
    db_client=Depends(get_db_client),
) -> ApiResponse[dict]:
    """
    Merge-upsert the caller's profile.

    The first call also bootstraps the household. AI usage counters are
    never taken from the request.
    """
    uid = current_user["uid"]
    profile, created = UserCRUD(db_client).upsert_profile(
        uid,
        current_user.get("email"),
        current_user.get("name"),
        request.provided(),
    )
    logger.info(
        "Profile updated",
        extra={"extra_data": {"uid": uid, "created": created, "fields": sorted(request.model_fields_set)}},
    )
    message = "User profile created successfully" if created else "User profile updated successfully"
    return ApiResponse.success_response(profile.to_api(), message)


@router.post("/scheduleAccountDeletion", response_model=ApiResponse[dict])
async def schedule_account_deletion(
    current_user: dict = Depends(get_current_user),
    db_client=Depends(get_db_client),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[dict]:
    uid = current_user["uid"]
    deletion_date = UserCRUD(db_client).schedule_deletion(uid, settings.account_deletion_grace_days)
    logger.info(f"Account deletion scheduled for user {uid} on {deletion_date}")
    return ApiResponse.success_response(
        {"deletionDate": deletion_date},
        f"Account scheduled for deletion on {deletion_date}",
    )


@router.post("/cancelAccountDeletion", response_model=ApiResponse[dict])
async def cancel_account_deletion(
    current_user: dict = Depends(get_current_user),
    db_client=Depends(get_db_client),
) -> ApiResponse[dict]:
    uid = current_user["uid"]
    UserCRUD(db_client).cancel_deletion(uid)
    logger.info(f"Account deletion cancelled for user {uid}")
    return ApiResponse.success_response({}, "Account deletion cancelled")


@router.post("/registerPushToken", response_model=ApiResponse[dict])
async def register_push_token(
    request: RegisterPushTokenRequest,
    current_user: dict = Depends(get_current_user),
    db_client=Depends(get_db_client),
) -> ApiResponse[dict]:
    uid = current_user["uid"]
    UserCRUD(db_client).register_push_token(uid, request.token, request.platform)
    logger.info(f"Push token registered for user {uid} ({request.platform})")
    return ApiResponse.success_response({}, "Push token registered")
