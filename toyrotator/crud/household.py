"""
Household CRUD Operations
Households, their member list and caregiver invitations.
"""

from datetime import datetime
from typing import Any, List, Optional

from toyrotator.crud.base import BaseCRUD, run_transaction, utcnow
from toyrotator.models.household import (
    Caregiver,
    CaregiverRole,
    Household,
    Invitation,
    InviteStatus,
)
from toyrotator.utils.exceptions import (
    AlreadyExistsError,
    FailedPreconditionError,
    InvalidArgumentError,
    NotFoundError,
    PermissionDeniedError,
)


def new_household(owner_uid: str, email: str, display_name: Optional[str], now: datetime) -> Household:
    """Household with the owner as its only accepted member."""
    owner = Caregiver(
        uid=owner_uid,
        email=email,
        display_name=display_name,
        role=CaregiverRole.OWNER,
        invite_status=InviteStatus.ACCEPTED,
        joined_at=now,
    )
    return Household(owner_uid=owner_uid, members=[owner], created_at=now, updated_at=now)


class HouseholdCRUD(BaseCRUD[Household]):
    """CRUD operations for household and invitation documents."""

    model = Household

    @property
    def collection_name(self) -> str:
        return "households"

    def invitations(self) -> Any:
        return self.db.collection("invitations")

    def invite_caregiver(self, household_id: str, inviter_uid: str, inviter_email: Optional[str], email: str) -> Invitation:
        """
        Invite a caregiver by email.

        Creates the invitation and appends a pending member in one transaction.

        Raises:
            NotFoundError: If the household does not exist
            PermissionDeniedError: If the inviter is not the owner
            InvalidArgumentError: If the owner invites themselves
            AlreadyExistsError: If the email is already a member or invited
        """
        email = email.lower()
        household_ref = self.document(household_id)
        invitation_ref = self.invitations().document()

        def _invite(transaction):
            household = self.from_snapshot(household_ref.get(transaction=transaction))
            if household is None:
                raise NotFoundError("Household not found")
            if household.owner_uid != inviter_uid:
                raise PermissionDeniedError("Only the household owner can invite caregivers")
            if inviter_email and inviter_email.lower() == email:
                raise InvalidArgumentError("You cannot invite yourself")

            member = household.find_member(email)
            if member and member.invite_status != InviteStatus.DECLINED:
                raise AlreadyExistsError(f"{email} is already a member or has a pending invitation")

            now = utcnow()
            members = [m for m in household.members if m.email.lower() != email]
            members.append(Caregiver(email=email, invited_at=now))
            invitation = Invitation(
                household_id=household_id,
                inviter_uid=inviter_uid,
                inviter_email=inviter_email,
                invitee_email=email,
                created_at=now,
            )
            transaction.set(invitation_ref, invitation.to_dict())
            transaction.update(household_ref, {
                "members": [m.to_dict() for m in members],
                "updatedAt": now,
            })
            return invitation.model_copy(update={"id": invitation_ref.id})

        return run_transaction(self.db, _invite)

    def pending_invitations(self, email: str) -> List[Invitation]:
        docs = (
            self.invitations()
            .where("inviteeEmail", "==", email.lower())
            .where("status", "==", InviteStatus.PENDING.value)
            .get()
        )
        return [Invitation.from_dict(doc.to_dict(), doc.id) for doc in docs]

    def respond_to_invitation(
        self,
        invitation_id: str,
        uid: str,
        email: Optional[str],
        display_name: Optional[str],
        accept: bool,
    ) -> Invitation:
        """
        Accept or decline an invitation addressed to the caller.

        Accepting fills in the member's uid and points the caller's profile
        at the household, all in one transaction.

        Raises:
            NotFoundError: If the invitation does not exist
            PermissionDeniedError: If it is addressed to another email
            FailedPreconditionError: If it is no longer pending
        """
        invitation_ref = self.invitations().document(invitation_id)
        user_ref = self.db.collection("users").document(uid)

        def _respond(transaction):
            snapshot = invitation_ref.get(transaction=transaction)
            if not snapshot.exists:
                raise NotFoundError("Invitation not found")
            invitation = Invitation.from_dict(snapshot.to_dict(), snapshot.id)
            if not email or invitation.invitee_email != email.lower():
                raise PermissionDeniedError("This invitation was sent to a different email")
            if invitation.status != InviteStatus.PENDING:
                raise FailedPreconditionError(f"Invitation is already {invitation.status}")

            household_ref = self.document(invitation.household_id)
            household = self.from_snapshot(household_ref.get(transaction=transaction))
            if household is None:
                raise NotFoundError("Household not found")

            now = utcnow()
            status = InviteStatus.ACCEPTED if accept else InviteStatus.DECLINED
            members = []
            for member in household.members:
                if member.email.lower() == invitation.invitee_email:
                    changes = {"invite_status": status.value}
                    if accept:
                        changes.update(uid=uid, joined_at=now, display_name=display_name)
                    member = member.model_copy(update=changes)
                members.append(member)

            transaction.update(invitation_ref, {"status": status.value, "respondedAt": now})
            transaction.update(household_ref, {
                "members": [m.to_dict() for m in members],
                "updatedAt": now,
            })
            if accept:
                transaction.set(
                    user_ref,
                    {"uid": uid, "householdId": invitation.household_id, "updatedAt": now},
                    merge=True,
                )
            return invitation.model_copy(update={"status": status.value, "responded_at": now})

        return run_transaction(self.db, _respond)
