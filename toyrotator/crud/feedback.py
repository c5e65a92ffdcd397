"""
Feedback CRUD Operations
Append-only engagement log.
"""

from typing import Any, Dict, List, Optional

from toyrotator.crud.base import HouseholdScopedCRUD, utcnow
from toyrotator.models.feedback import Feedback


class FeedbackCRUD(HouseholdScopedCRUD[Feedback]):
    """CRUD operations for ``households/{hid}/feedback``."""

    model = Feedback

    @property
    def collection_name(self) -> str:
        return "feedback"

    def log(self, fields: Dict[str, Any]) -> Feedback:
        feedback = Feedback.model_validate({**fields, "createdAt": utcnow()})
        doc_ref = self.document()
        doc_ref.set(feedback.to_dict())
        return feedback.model_copy(update={"id": doc_ref.id})

    def list_feedback(
        self,
        rotation_id: Optional[str] = None,
        toy_id: Optional[str] = None,
        child_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Feedback]:
        """
        Feedback newest first.

        Args:
            rotation_id: Restrict to one rotation
            toy_id: Restrict to one toy
            child_id: Restrict to one child
            limit: Maximum number of entries

        Returns:
            Matching feedback entries
        """
        filters = [
            (field, "==", value)
            for field, value in (("rotationId", rotation_id), ("toyId", toy_id), ("childId", child_id))
            if value
        ]
        return self.list(filters=filters, order_by="createdAt", direction="DESCENDING", limit=limit)
