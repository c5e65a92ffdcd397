"""
Rotation CRUD Operations
Creating a rotation swaps the child's active toy set in one transaction.
"""

from datetime import date, timedelta
from typing import Any, List, Optional

from toyrotator.crud.base import HouseholdScopedCRUD, run_transaction, utcnow
from toyrotator.models.child import DEFAULT_DURATION_DAYS
from toyrotator.models.rotation import Rotation
from toyrotator.models.toy import ToyStatus
from toyrotator.utils.exceptions import InvalidArgumentError, NotFoundError
from toyrotator.utils.logger import get_logger

logger = get_logger(__name__)


def _dedupe(ids: List[str]) -> List[str]:
    return list(dict.fromkeys(ids))


class RotationCRUD(HouseholdScopedCRUD[Rotation]):
    """CRUD operations for ``households/{hid}/rotations``."""

    model = Rotation

    @property
    def collection_name(self) -> str:
        return "rotations"

    def _household_collection(self, name: str) -> Any:
        return self.db.collection("households").document(self.household_id).collection(name)

    def create_rotation(
        self,
        child_id: str,
        toy_ids: List[str],
        start_date: Optional[date] = None,
        duration_days: Optional[int] = None,
        source: str = "manual",
        insight_summary: str = "",
        default_duration_days: int = DEFAULT_DURATION_DAYS,
    ) -> Rotation:
        """
        Start a new rotation for a child.

        Deactivates the child's previous rotations, marks the selected toys
        active and rests toys from the previous set that were not picked
        again. At most one rotation per child is active afterwards.

        Args:
            child_id: Child document ID
            toy_ids: Selected toys, duplicates are dropped
            start_date: First day, defaults to today (UTC)
            duration_days: Overrides the child's rotation settings
            source: manual or ai
            insight_summary: Text shown with the rotation
            default_duration_days: Used when neither the request nor the child sets one

        Returns:
            The new active rotation

        Raises:
            InvalidArgumentError: If no toys are given or a toy is unknown
            NotFoundError: If the child does not exist
        """
        toy_ids = _dedupe(toy_ids)
        if not toy_ids:
            raise InvalidArgumentError("toyIds must not be empty")

        children = self._household_collection("children")
        toys = self._household_collection("toys")
        child_ref = children.document(child_id)
        rotation_ref = self.document()

        def _create(transaction):
            child_snapshot = child_ref.get(transaction=transaction)
            if not child_snapshot.exists:
                raise NotFoundError("Child not found", {"childId": child_id})

            active = list(
                self.get_collection()
                .where("childId", "==", child_id)
                .where("isActive", "==", True)
                .get(transaction=transaction)
            )

            selected = [toys.document(toy_id) for toy_id in toy_ids]
            missing = [ref.id for ref in selected if not ref.get(transaction=transaction).exists]
            if missing:
                raise InvalidArgumentError("Unknown toys in rotation", {"toyIds": missing})

            previous_toy_ids = set()
            for snapshot in active:
                previous_toy_ids.update(snapshot.to_dict().get("toyIds", []))
            resting = [toy_id for toy_id in previous_toy_ids if toy_id not in toy_ids]
            resting_refs = [toys.document(toy_id) for toy_id in sorted(resting)]
            resting_refs = [ref for ref in resting_refs if ref.get(transaction=transaction).exists]

            settings = child_snapshot.to_dict().get("rotationSettings") or {}
            days = duration_days or settings.get("durationDays") or default_duration_days
            start = start_date or utcnow().date()
            now = utcnow()

            for snapshot in active:
                transaction.update(snapshot.reference, {"isActive": False, "updatedAt": now})
            for ref in selected:
                transaction.update(ref, {"status": ToyStatus.ACTIVE.value, "updatedAt": now})
            for ref in resting_refs:
                transaction.update(ref, {"status": ToyStatus.RESTING.value, "updatedAt": now})

            rotation = Rotation(
                child_id=child_id,
                start_date=start.isoformat(),
                end_date=(start + timedelta(days=days)).isoformat(),
                toy_ids=toy_ids,
                source=source,
                insight_summary=insight_summary,
                is_active=True,
                created_at=now,
                updated_at=now,
            )
            transaction.set(rotation_ref, rotation.to_dict())
            transaction.update(child_ref, {"activeRotationId": rotation_ref.id, "updatedAt": now})
            return rotation.model_copy(update={"id": rotation_ref.id}), len(active)

        rotation, replaced = run_transaction(self.db, _create)
        logger.info(
            "Rotation created",
            extra={"extra_data": {
                "household_id": self.household_id,
                "child_id": child_id,
                "rotation_id": rotation.id,
                "toy_count": len(toy_ids),
                "replaced": replaced,
            }},
        )
        return rotation

    def get_current(self, child_id: str) -> Optional[Rotation]:
        """Active rotation of a child, or None."""
        rotations = self.list(
            filters=[("childId", "==", child_id), ("isActive", "==", True)],
            limit=1,
        )
        return rotations[0] if rotations else None

    def list_rotations(self, child_id: Optional[str] = None, limit: int = 20) -> List[Rotation]:
        """
        Rotations newest first.

        Args:
            child_id: Restrict to one child
            limit: Maximum number of rotations

        Returns:
            Rotations ordered by createdAt descending
        """
        filters = [("childId", "==", child_id)] if child_id else None
        return self.list(filters=filters, order_by="createdAt", direction="DESCENDING", limit=limit)
