"""Base reactive store that mirrors one live collection in memory."""

import logging
import threading
from typing import Callable, Generic, List, Optional, TypeVar

from jobboard.database.document_store import DocumentSnapshot, DocumentStore, Subscription
from jobboard.errors import MappingError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Listener = Callable[[List[T]], None]


class LiveCollectionStore(Generic[T]):
    """In-memory view of a collection kept in sync by a live subscription.

    Every snapshot received replaces the whole working list: documents
    are converted with `to_entity`, documents that cannot be converted are
    logged and skipped, and the result is sorted newest first by
    `sort_key`. Listeners are called with the new list after each
    replacement.

    Use as a context manager (or call `start`/`stop`) so the subscription
    is always released.

    Attributes:
        document_store: Remote document store client.
        collection_name: Name of the mirrored collection.
    """

    def __init__(
        self,
        document_store: DocumentStore,
        collection_name: str,
        to_entity: Callable[[DocumentSnapshot], T],
        sort_key: Callable[[T], object]
    ):
        """Initialize the store.

        Args:
            document_store: Remote document store client.
            collection_name: Name of the collection to mirror.
            to_entity: Converts a document to an entity; raises MappingError
                for documents that cannot be converted.
            sort_key: Key sorted in descending order; ties keep snapshot order.
        """
        self.document_store = document_store
        self.collection_name = collection_name
        self._to_entity = to_entity
        self._sort_key = sort_key
        self._items: List[T] = []
        self._is_loading = True
        self._lock = threading.Lock()
        self._listeners: List[Listener] = []
        self._subscription: Optional[Subscription] = None

    @property
    def items(self) -> List[T]:
        """Last known list, newest first."""
        with self._lock:
            return list(self._items)

    @property
    def is_loading(self) -> bool:
        """True until the first snapshot (or a subscription error) arrives."""
        return self._is_loading

    @property
    def is_subscribed(self) -> bool:
        return self._subscription is not None

    def start(self) -> None:
        """Open the live subscription. Calling it twice keeps a single subscription."""
        if self._subscription is not None:
            return

        self._is_loading = True
        self._subscription = self.document_store.subscribe(
            self.collection_name,
            self.apply_snapshot,
            self._handle_subscription_error
        )

    def stop(self) -> None:
        """Release the live subscription."""
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            subscription.unsubscribe()

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.stop()

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Register a callback for list changes.

        Returns:
            Function that removes the listener.
        """
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def apply_snapshot(self, snapshot: List[DocumentSnapshot]) -> None:
        """Replace the working list with the content of a snapshot."""
        entities = []
        for document in snapshot:
            try:
                entities.append(self._to_entity(document))
            except MappingError as error:
                logger.error(f"Skipping document in {self.collection_name}: {error}")

        entities.sort(key=self._sort_key, reverse=True)
        logger.info(
            f"Received {len(snapshot)} documents from {self.collection_name}, "
            f"{len(entities)} loaded"
        )

        with self._lock:
            self._items = entities
            self._is_loading = False

        self._notify()

    def _insert_local(self, entity: T) -> None:
        """Add a just-created entity until the next snapshot confirms it."""
        with self._lock:
            items = [item for item in self._items if getattr(item, "id", None) != getattr(entity, "id", None)]
            items.append(entity)
            items.sort(key=self._sort_key, reverse=True)
            self._items = items

        self._notify()

    def _find(self, entity_id: str) -> Optional[T]:
        with self._lock:
            for item in self._items:
                if getattr(item, "id", None) == entity_id:
                    return item
        return None

    def _handle_subscription_error(self, error: Exception) -> None:
        logger.error(f"Live subscription to {self.collection_name} failed: {error}")
        self._is_loading = False
        self._subscription = None

    def _notify(self) -> None:
        items = self.items
        for listener in list(self._listeners):
            try:
                listener(items)
            except Exception as error:
                logger.error(f"Listener on {self.collection_name} failed: {error}")
