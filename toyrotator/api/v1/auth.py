"""Local dev mode sign-in.

Production clients authenticate with Firebase and send the ID token; this
endpoint only exists when no Firebase credentials are configured.
"""

from fastapi import APIRouter

from toyrotator.dependencies import _check_local_mode, local_issue_token
from toyrotator.schemas.responses import ApiResponse
from toyrotator.schemas.user_schema import DevTokenRequest
from toyrotator.utils.exceptions import NotFoundError
from toyrotator.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.post("/dev-token", response_model=ApiResponse[dict])
async def dev_token(request: DevTokenRequest) -> ApiResponse[dict]:
    """
    Issue a bearer token for local development.

    Returns:
        ``{uid, token}``; the uid is stable for an email

    Raises:
        NotFoundError: If the service runs against Firebase
    """
    if not _check_local_mode():
        raise NotFoundError("Dev tokens are only available in local mode")

    issued = local_issue_token(request.email, request.display_name)
    logger.info(f"Dev token issued for {request.email}")
    return ApiResponse.success_response(issued, "Dev token issued")
