"""Base repository with common document operations for one-shot collections."""

from typing import Any, Dict, List

from jobboard.database.document_store import DocumentSnapshot, DocumentStore
from jobboard.transformers.document_to_entity import strip_unset_fields, utc_now


class BaseRepository:
    """Base repository providing common CRUD operations.

    Used for collections that are read on demand rather than mirrored by
    a live store. Remote failures propagate as RemoteOperationError.

    Attributes:
        document_store: Remote document store client.
        collection_name: Name of the collection this repository manages.
    """

    def __init__(self, document_store: DocumentStore, collection_name: str):
        """Initialize the base repository.

        Args:
            document_store: Remote document store client.
            collection_name: Name of the collection (e.g., "candidates", "suppliers").
        """
        self.document_store = document_store
        self.collection_name = collection_name

    def find_by(self, **filters: Any) -> List[DocumentSnapshot]:
        """Retrieve documents whose fields equal every given value."""
        return self.document_store.query(self.collection_name, filters)

    def create(self, data: Dict[str, Any]) -> str:
        """Insert a new document stamped with `createdAt`.

        Args:
            data: Document fields; None values are dropped.

        Returns:
            Id of the inserted document.
        """
        document = strip_unset_fields(data)
        document.setdefault("createdAt", utc_now())
        return self.document_store.add_document(self.collection_name, document)

    def update(self, record_id: str, updates: Dict[str, Any]) -> None:
        """Merge fields into a document and stamp `updatedAt`."""
        document = strip_unset_fields(updates)
        document["updatedAt"] = utc_now()
        self.document_store.update_document(self.collection_name, record_id, document)
