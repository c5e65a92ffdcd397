"""
Household Models
The sharing boundary: one owner plus invited caregivers.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from toyrotator.models.base import FirestoreModel


class CaregiverRole(str, Enum):
    OWNER = "owner"
    CAREGIVER = "caregiver"


class InviteStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class Caregiver(FirestoreModel):
    """Household member entry."""

    uid: str = ""
    email: str
    display_name: Optional[str] = None
    role: CaregiverRole = CaregiverRole.CAREGIVER
    invite_status: InviteStatus = InviteStatus.PENDING
    invited_at: Optional[datetime] = None
    joined_at: Optional[datetime] = None


class Household(FirestoreModel):
    """Household document (``households/{ownerUid}``)."""

    id: Optional[str] = None
    owner_uid: str
    members: List[Caregiver] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def find_member(self, email: str) -> Optional[Caregiver]:
        email = email.lower()
        return next((m for m in self.members if m.email.lower() == email), None)

    def is_member(self, uid: str) -> bool:
        return any(
            m.uid == uid and m.invite_status == InviteStatus.ACCEPTED
            for m in self.members
        )


class Invitation(FirestoreModel):
    """Caregiver invitation (``invitations/{id}``), matched by invitee email."""

    id: Optional[str] = None
    household_id: str
    inviter_uid: str
    inviter_email: Optional[str] = None
    invitee_email: str
    status: InviteStatus = InviteStatus.PENDING
    created_at: Optional[datetime] = None
    responded_at: Optional[datetime] = None
