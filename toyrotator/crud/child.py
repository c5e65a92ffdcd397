"""
Child CRUD Operations
Child profiles scoped to a household.
"""

from typing import Any, Dict, List, Optional

from toyrotator.crud.base import HouseholdScopedCRUD
from toyrotator.models.child import ChildProfile, RotationSettings


def _to_document_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Dates are stored as ISO strings."""
    date_of_birth = fields.get("dateOfBirth")
    if date_of_birth is not None and not isinstance(date_of_birth, str):
        fields["dateOfBirth"] = date_of_birth.isoformat()
    return fields


class ChildCRUD(HouseholdScopedCRUD[ChildProfile]):
    """CRUD operations for ``households/{hid}/children``."""

    model = ChildProfile

    @property
    def collection_name(self) -> str:
        return "children"

    def list_children(self) -> List[ChildProfile]:
        return self.list(order_by="createdAt")

    def add_child(self, fields: Dict[str, Any]) -> ChildProfile:
        """
        Create a child profile.

        Args:
            fields: camelCase fields from the request

        Returns:
            Stored child profile
        """
        fields = _to_document_fields(dict(fields))
        settings = RotationSettings.model_validate(fields.pop("rotationSettings", None) or {})
        child = ChildProfile.model_validate({**fields, "rotationSettings": settings})
        return self.create(child)

    def update_child(self, child_id: str, fields: Dict[str, Any]) -> Optional[ChildProfile]:
        """
        Update a child profile.

        ``rotationSettings`` is merged key by key so a partial update keeps
        the remaining settings.

        Args:
            child_id: Child document ID
            fields: camelCase fields from the request

        Returns:
            Updated profile, or None if the child does not exist
        """
        fields = _to_document_fields(dict(fields))
        settings = fields.pop("rotationSettings", None) or {}
        data = {k: v for k, v in fields.items() if v is not None}
        for key, value in settings.items():
            if value is not None:
                data[f"rotationSettings.{key}"] = value

        if not self.update(child_id, data):
            return None
        return self.get(child_id)
