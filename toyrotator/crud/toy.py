"""
Toy CRUD Operations
Toys scoped to a household. Deleting a toy retires it.
"""

from typing import Any, Dict, List, Optional

from toyrotator.crud.base import HouseholdScopedCRUD
from toyrotator.models.toy import Toy, ToyStatus


class ToyCRUD(HouseholdScopedCRUD[Toy]):
    """CRUD operations for ``households/{hid}/toys``."""

    model = Toy

    @property
    def collection_name(self) -> str:
        return "toys"

    def list_toys(self, status: Optional[str] = None) -> List[Toy]:
        """
        List toys, optionally filtered by status.

        Args:
            status: active, resting or retired

        Returns:
            Toys ordered by creation time
        """
        filters = [("status", "==", status)] if status else None
        toys = self.list(filters=filters)
        return sorted(toys, key=lambda t: (t.created_at is None, t.created_at))

    def list_available(self) -> List[Toy]:
        """Every toy that is not retired."""
        return [t for t in self.list_toys() if t.status != ToyStatus.RETIRED.value]

    def add_toy(self, fields: Dict[str, Any]) -> Toy:
        return self.create(Toy.model_validate(fields))

    def update_toy(self, toy_id: str, fields: Dict[str, Any]) -> Optional[Toy]:
        """
        Update toy fields.

        Args:
            toy_id: Toy document ID
            fields: camelCase fields from the request

        Returns:
            Updated toy, or None if not found
        """
        data = {k: v for k, v in fields.items() if v is not None}
        if not self.update(toy_id, data):
            return None
        return self.get(toy_id)

    def retire(self, toy_id: str) -> Optional[Toy]:
        """Soft delete: the document stays with ``status="retired"``."""
        return self.update_toy(toy_id, {"status": ToyStatus.RETIRED.value})
