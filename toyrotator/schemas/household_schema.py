"""
Household Request Schemas
"""

from pydantic import Field, field_validator

from toyrotator.schemas.base import CallableRequest
from toyrotator.schemas.user_schema import _validate_email


class InviteCaregiverRequest(CallableRequest):
    email: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _validate_email(v)


class InvitationIdRequest(CallableRequest):
    invitation_id: str = Field(min_length=1)
