"""
Base CRUD Class
Base class for Firestore CRUD operations.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Generic, List, Optional, Tuple, Type, TypeVar

from google.api_core.exceptions import NotFound
from google.cloud import firestore

from toyrotator.models.base import FirestoreModel
from toyrotator.services.local_store import LocalStore

M = TypeVar("M", bound=FirestoreModel)


def utcnow() -> datetime:
    """Timezone-aware UTC timestamp stored on documents."""
    return datetime.now(timezone.utc)


def run_transaction(db: Any, func: Callable, *args, **kwargs):
    """
    Run ``func(transaction, *args, **kwargs)`` inside a transaction.

    Firestore retries the function on contention, so ``func`` must do all
    reads before its first write and must not have side effects outside
    the transaction.

    Args:
        db: Firestore client or LocalStore
        func: Transaction body

    Returns:
        Whatever ``func`` returns
    """
    if isinstance(db, LocalStore):
        return db.run_transaction(func, *args, **kwargs)
    return firestore.transactional(func)(db.transaction(), *args, **kwargs)


class BaseCRUD(ABC, Generic[M]):
    """
    Base CRUD class for Firestore operations.

    Generic base class for typed document access with filtering.
    """

    model: Type[M]

    def __init__(self, db: Any):
        """
        Initialize CRUD with Firestore client.

        Args:
            db: Firestore client instance (or LocalStore in dev mode)
        """
        self.db = db

    @property
    @abstractmethod
    def collection_name(self) -> str:
        """Get collection name. Must be implemented by subclass."""
        pass

    def get_collection(self) -> Any:
        """
        Get Firestore collection reference.

        Returns:
            Firestore collection reference
        """
        return self.db.collection(self.collection_name)

    def document(self, doc_id: Optional[str] = None) -> Any:
        collection = self.get_collection()
        return collection.document(doc_id) if doc_id else collection.document()

    def from_snapshot(self, snapshot: Any) -> Optional[M]:
        if not snapshot.exists:
            return None
        return self.model.from_dict(snapshot.to_dict(), snapshot.id)

    def create(self, item: M) -> M:
        """
        Create a new document with a generated ID.

        Args:
            item: Model to store

        Returns:
            Stored model including id and timestamps
        """
        now = utcnow()
        item = item.model_copy(update={"created_at": now, "updated_at": now})
        doc_ref = self.document()
        doc_ref.set(item.to_dict())
        return item.model_copy(update={"id": doc_ref.id})

    def get(self, doc_id: str) -> Optional[M]:
        """
        Get document by ID.

        Args:
            doc_id: Document ID

        Returns:
            Model or None if not found
        """
        return self.from_snapshot(self.document(doc_id).get())

    def update(self, doc_id: str, data: Dict[str, Any]) -> bool:
        """
        Update fields of a document.

        Args:
            doc_id: Document ID
            data: Fields to update (camelCase, dotted paths allowed)

        Returns:
            True if successful, False if document not found
        """
        data = {**data, "updatedAt": utcnow()}
        try:
            self.document(doc_id).update(data)
        except NotFound:
            return False
        return True

    def delete(self, doc_id: str) -> bool:
        """
        Delete a document.

        Args:
            doc_id: Document ID

        Returns:
            True if deleted, False if not found
        """
        doc_ref = self.document(doc_id)
        if not doc_ref.get().exists:
            return False
        doc_ref.delete()
        return True

    def list(
        self,
        filters: Optional[List[Tuple[str, str, Any]]] = None,
        order_by: Optional[str] = None,
        direction: str = "ASCENDING",
        limit: Optional[int] = None,
    ) -> List[M]:
        """
        List documents with filtering.

        Args:
            filters: List of (field, operator, value) tuples for filtering
            order_by: Field to order results by
            direction: Sort direction (ASCENDING or DESCENDING)
            limit: Maximum number of documents

        Returns:
            Matching models
        """
        query = self.get_collection()

        if filters:
            for field, operator, value in filters:
                query = query.where(field, operator, value)

        if order_by:
            query = query.order_by(order_by, direction=direction)

        if limit:
            query = query.limit(limit)

        return [self.from_snapshot(doc) for doc in query.get()]


class HouseholdScopedCRUD(BaseCRUD[M]):
    """CRUD for sub-collections under ``households/{householdId}``."""

    def __init__(self, db: Any, household_id: str):
        super().__init__(db)
        self.household_id = household_id

    def get_collection(self) -> Any:
        return (
            self.db.collection("households")
            .document(self.household_id)
            .collection(self.collection_name)
        )
