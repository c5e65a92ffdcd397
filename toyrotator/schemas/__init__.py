"""
ToyRotator Schemas
Pydantic request/response schemas for the callable functions.
"""

from toyrotator.schemas.ai_schema import AiRotationSuggestionRequest, ImageRequest
from toyrotator.schemas.child_schema import (
    ChildIdRequest,
    CreateChildProfileRequest,
    RotationSettingsInput,
    UpdateChildProfileRequest,
)
from toyrotator.schemas.household_schema import InvitationIdRequest, InviteCaregiverRequest
from toyrotator.schemas.responses import ApiResponse, ErrorBody, ErrorResponse
from toyrotator.schemas.rotation_schema import (
    CreateRotationRequest,
    GetFeedbackRequest,
    GetRotationsRequest,
    LogFeedbackRequest,
)
from toyrotator.schemas.toy_schema import (
    CreateToyRequest,
    GetToysRequest,
    ToyIdRequest,
    UpdateToyRequest,
)
from toyrotator.schemas.user_schema import (
    DevTokenRequest,
    RegisterPushTokenRequest,
    SubscriptionUpdate,
    UpdateProfileRequest,
)

__all__ = [
    "AiRotationSuggestionRequest",
    "ImageRequest",
    "ChildIdRequest",
    "CreateChildProfileRequest",
    "RotationSettingsInput",
    "UpdateChildProfileRequest",
    "InvitationIdRequest",
    "InviteCaregiverRequest",
    "ApiResponse",
    "ErrorBody",
    "ErrorResponse",
    "CreateRotationRequest",
    "GetFeedbackRequest",
    "GetRotationsRequest",
    "LogFeedbackRequest",
    "CreateToyRequest",
    "GetToysRequest",
    "ToyIdRequest",
    "UpdateToyRequest",
    "DevTokenRequest",
    "RegisterPushTokenRequest",
    "SubscriptionUpdate",
    "UpdateProfileRequest",
]
