"""
User CRUD Operations
Database operations for user profiles, account deletion and push tokens.
"""

from datetime import timedelta
from typing import Any, Dict, Optional, Tuple

from google.cloud.firestore import DELETE_FIELD

from toyrotator.crud.base import BaseCRUD, run_transaction, utcnow
from toyrotator.crud.household import new_household
from toyrotator.models.subscription import SubscriptionStatus
from toyrotator.models.user import AccountStatus, DeletionStatus, UserProfile
from toyrotator.utils.exceptions import FailedPreconditionError, NotFoundError


class UserCRUD(BaseCRUD[UserProfile]):
    """CRUD operations for user documents."""

    model = UserProfile

    @property
    def collection_name(self) -> str:
        """Get collection name."""
        return "users"

    def from_snapshot(self, snapshot: Any) -> Optional[UserProfile]:
        if not snapshot.exists:
            return None
        return UserProfile.from_dict({"uid": snapshot.id, **snapshot.to_dict()})

    def resolve_household_id(self, uid: str) -> str:
        """
        Household the user works in.

        Args:
            uid: User ID

        Returns:
            The profile's householdId, or the uid itself for owners and
            users without a profile yet
        """
        profile = self.get(uid)
        if profile and profile.household_id:
            return profile.household_id
        return uid

    def upsert_profile(
        self,
        uid: str,
        email: Optional[str],
        display_name: Optional[str],
        updates: Dict[str, Any],
    ) -> Tuple[UserProfile, bool]:
        """
        Merge profile fields; the first write also bootstraps the household.

        Args:
            uid: User ID
            email: Email from the auth token
            display_name: Name from the auth token
            updates: camelCase fields sent by the client

        Returns:
            (stored profile, created flag)
        """
        user_ref = self.document(uid)
        household_ref = self.db.collection("households").document(uid)

        def _upsert(transaction):
            snapshot = user_ref.get(transaction=transaction)
            household_snapshot = household_ref.get(transaction=transaction)
            existing = snapshot.to_dict() if snapshot.exists else {}
            now = utcnow()
            data = {**updates, "updatedAt": now}

            # Docs written by registerPushToken or acceptInvitation lack createdAt
            if existing.get("createdAt"):
                transaction.set(user_ref, data, merge=True)
                return False

            subscription = SubscriptionStatus().to_dict()
            subscription.update(data.pop("subscriptionStatus", {}))
            household_id = existing.get("householdId") or uid
            data = {
                "uid": uid,
                "email": email,
                "displayName": display_name,
                "status": AccountStatus.ACTIVE.value,
                "deletionStatus": DeletionStatus.ACTIVE.value,
                "householdId": household_id,
                "createdAt": now,
                **data,
                "subscriptionStatus": subscription,
            }
            transaction.set(user_ref, {k: v for k, v in data.items() if v is not None}, merge=True)
            if household_id == uid and not household_snapshot.exists:
                household = new_household(uid, email or "", data.get("displayName"), now)
                transaction.set(household_ref, household.to_dict())
            return True

        created = run_transaction(self.db, _upsert)
        return self.get(uid), created

    def schedule_deletion(self, uid: str, grace_days: int) -> str:
        """
        Mark the account for deletion after a grace period.

        Args:
            uid: User ID
            grace_days: Days until the deletion executes

        Returns:
            Execution date as YYYY-MM-DD
        """
        now = utcnow()
        execution_date = (now + timedelta(days=grace_days)).date().isoformat()
        self.document(uid).set({
            "deletionStatus": DeletionStatus.SCHEDULED_FOR_DELETION.value,
            "deletionScheduledAt": now,
            "deletionExecutionDate": execution_date,
            "updatedAt": now,
        }, merge=True)
        return execution_date

    def cancel_deletion(self, uid: str) -> None:
        """
        Reactivate an account scheduled for deletion.

        Raises:
            NotFoundError: If the profile does not exist
            FailedPreconditionError: If no deletion is scheduled
        """
        user_ref = self.document(uid)

        def _cancel(transaction):
            snapshot = user_ref.get(transaction=transaction)
            if not snapshot.exists:
                raise NotFoundError("User not found")
            if snapshot.to_dict().get("deletionStatus") != DeletionStatus.SCHEDULED_FOR_DELETION.value:
                raise FailedPreconditionError("Account is not scheduled for deletion")
            transaction.update(user_ref, {
                "deletionStatus": DeletionStatus.ACTIVE.value,
                "deletionScheduledAt": DELETE_FIELD,
                "deletionExecutionDate": DELETE_FIELD,
                "updatedAt": utcnow(),
            })

        run_transaction(self.db, _cancel)

    def register_push_token(self, uid: str, token: str, platform: str) -> None:
        now = utcnow()
        self.document(uid).set({
            "pushToken": {"token": token, "platform": platform, "updatedAt": now},
            "updatedAt": now,
        }, merge=True)
