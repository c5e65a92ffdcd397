"""
Base Firestore Model
Shared configuration for documents persisted with camelCase field names.
"""

from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

M = TypeVar("M", bound="FirestoreModel")


class FirestoreModel(BaseModel):
    """Pydantic model stored in Firestore under camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,
        extra="ignore",
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a Firestore document (document id is not stored)."""
        return self.model_dump(by_alias=True, exclude_none=True, exclude={"id"})

    def to_api(self) -> Dict[str, Any]:
        """Convert to the JSON shape returned to clients."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")

    @classmethod
    def from_dict(cls: Type[M], data: Dict[str, Any], doc_id: Optional[str] = None) -> M:
        """Create model from Firestore dictionary."""
        if doc_id is not None:
            data = {**data, "id": doc_id}
        return cls.model_validate(data)
