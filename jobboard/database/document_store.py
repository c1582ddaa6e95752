"""Document-collection access on top of Supabase tables.

Every collection is a table with two columns::

    create table <collection> (
        id uuid primary key default gen_random_uuid(),
        data jsonb not null default '{}'::jsonb
    );

A document is the row id plus the keys of its `data` object. Field
filters are applied to `data->>field`, so equality is compared on the
text form of the value.

Partial updates are merged inside the database by one function shared
by every collection::

    create or replace function merge_document(
        collection text, document_id uuid, patch jsonb, removed_keys text[]
    ) returns boolean language plpgsql as $$
    declare
        updated integer;
    begin
        execute format(
            'update %I set data = (data || $1) - $2 where id = $3', collection
        ) using patch, removed_keys, document_id;
        get diagnostics updated = row_count;
        return updated > 0;
    end;
    $$;
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol

from supabase import Client

from jobboard.errors import RemoteOperationError

logger = logging.getLogger(__name__)

# Value for update_document that removes the key from the document
DELETE_FIELD = object()


@dataclass
class DocumentSnapshot:
    """One document as read from a collection."""
    id: str
    data: Optional[Dict[str, Any]] = field(default_factory=dict)


SnapshotCallback = Callable[[List[DocumentSnapshot]], None]
ErrorCallback = Callable[[Exception], None]


class Subscription(Protocol):
    """Handle returned by DocumentStore.subscribe."""

    def unsubscribe(self) -> None:
        ...


class DocumentStore(Protocol):
    """Subscribe/query/mutate interface of the remote document store."""

    def subscribe(
        self,
        collection: str,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
        filters: Optional[Dict[str, Any]] = None
    ) -> Subscription:
        ...

    def query(self, collection: str, filters: Dict[str, Any]) -> List[DocumentSnapshot]:
        ...

    def get_document(self, collection: str, document_id: str) -> Optional[DocumentSnapshot]:
        ...

    def add_document(self, collection: str, data: Dict[str, Any]) -> str:
        ...

    def update_document(self, collection: str, document_id: str, fields: Dict[str, Any]) -> None:
        ...

    def delete_document(self, collection: str, document_id: str) -> None:
        ...


def _filter_value(value: Any) -> str:
    """Text form of a value as produced by Postgres `->>` on jsonb."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _error_code(error: Exception) -> Optional[str]:
    code = getattr(error, "code", None)
    return str(code) if code is not None else None


class _PollingSubscription:
    """Delivers collection snapshots from a background thread.

    The first snapshot is fetched and delivered right away. After that the
    collection is re-read every `interval` seconds and a snapshot is only
    delivered when its content changed. A failing `on_snapshot` is logged
    and polling goes on. A failed fetch reports to `on_error` and ends
    this subscription.
    """

    def __init__(
        self,
        fetch: Callable[[], List[DocumentSnapshot]],
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
        interval: float,
        name: str
    ):
        self._fetch = fetch
        self._on_snapshot = on_snapshot
        self._on_error = on_error
        self._interval = interval
        self._stopped = threading.Event()
        self._last_snapshot: Optional[List[DocumentSnapshot]] = None
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    def start(self) -> "_PollingSubscription":
        self._thread.start()
        return self

    def unsubscribe(self) -> None:
        self._stopped.set()
        if self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join(timeout=self._interval + 1)

    def _run(self) -> None:
        while not self._stopped.is_set():
            try:
                snapshot = self._fetch()
            except Exception as error:
                logger.error(f"Subscription {self._thread.name} stopped: {error}")
                self._stopped.set()
                self._on_error(error)
                return

            if snapshot != self._last_snapshot and not self._stopped.is_set():
                self._last_snapshot = snapshot
                try:
                    self._on_snapshot(snapshot)
                except Exception as error:
                    logger.error(f"Snapshot handler of {self._thread.name} failed: {error}")

            self._stopped.wait(self._interval)


class SupabaseDocumentStore:
    """DocumentStore backed by Supabase (PostgREST) tables.

    Attributes:
        db_client: Supabase client instance for database operations.
        poll_interval: Seconds between snapshot fetches of a subscription.
    """

    def __init__(self, db_client: Client, poll_interval: float = 5.0):
        """Initialize the store with a database client.

        Args:
            db_client: Supabase client instance.
            poll_interval: Seconds between snapshot fetches.
        """
        self.db_client = db_client
        self.poll_interval = poll_interval

    def subscribe(
        self,
        collection: str,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
        filters: Optional[Dict[str, Any]] = None
    ) -> _PollingSubscription:
        """Start delivering snapshots of a collection.

        Args:
            collection: Collection (table) name.
            on_snapshot: Called with the full list of documents.
            on_error: Called once if the subscription fails; no more
                snapshots are delivered afterwards.
            filters: Optional field-equality filters.

        Returns:
            Subscription handle; call `unsubscribe()` to stop it.
        """
        def fetch() -> List[DocumentSnapshot]:
            return self._select(collection, filters or {}, "subscribe")

        return _PollingSubscription(
            fetch,
            on_snapshot,
            on_error,
            self.poll_interval,
            name=f"snapshot-{collection}"
        ).start()

    def query(self, collection: str, filters: Dict[str, Any]) -> List[DocumentSnapshot]:
        """One-shot read of the documents matching every filter.

        Args:
            collection: Collection (table) name.
            filters: Field-equality filters combined with AND.

        Returns:
            Matching documents.

        Raises:
            RemoteOperationError: If the query fails.
        """
        return self._select(collection, filters, "query")

    def get_document(self, collection: str, document_id: str) -> Optional[DocumentSnapshot]:
        """Read a single document by id.

        Returns:
            The document if found, None otherwise.

        Raises:
            RemoteOperationError: If the query fails.
        """
        try:
            response = (
                self.db_client.table(collection)
                .select("id, data")
                .eq("id", document_id)
                .limit(1)
                .execute()
            )
        except Exception as error:
            raise RemoteOperationError(
                "get_document", collection, str(error), _error_code(error)
            ) from error

        if not response.data:
            return None

        row = response.data[0]
        return DocumentSnapshot(id=str(row["id"]), data=row.get("data"))

    def add_document(self, collection: str, data: Dict[str, Any]) -> str:
        """Insert a new document.

        Args:
            collection: Collection (table) name.
            data: Document fields; must be JSON serializable.

        Returns:
            Id assigned to the new document.

        Raises:
            RemoteOperationError: If insertion fails.
        """
        try:
            response = self.db_client.table(collection).insert({"data": data}).execute()
        except Exception as error:
            raise RemoteOperationError(
                "add_document", collection, str(error), _error_code(error)
            ) from error

        if not response.data:
            raise RemoteOperationError("add_document", collection, "no row returned")

        return str(response.data[0]["id"])

    def update_document(self, collection: str, document_id: str, fields: Dict[str, Any]) -> None:
        """Merge fields into an existing document.

        The merge runs in the database (`merge_document`), so keys written
        concurrently by another client are kept.

        Args:
            collection: Collection (table) name.
            document_id: Id of the document to change.
            fields: Keys to set; a `DELETE_FIELD` value removes the key.

        Raises:
            RemoteOperationError: If the document does not exist or the
                write fails.
        """
        patch = {key: value for key, value in fields.items() if value is not DELETE_FIELD}
        removed_keys = [key for key, value in fields.items() if value is DELETE_FIELD]

        try:
            response = self.db_client.rpc(
                "merge_document",
                {
                    "collection": collection,
                    "document_id": document_id,
                    "patch": patch,
                    "removed_keys": removed_keys,
                }
            ).execute()
        except Exception as error:
            raise RemoteOperationError(
                "update_document", collection, str(error), _error_code(error)
            ) from error

        if not response.data:
            raise RemoteOperationError(
                "update_document", collection, f"document {document_id} not found", "not-found"
            )

    def delete_document(self, collection: str, document_id: str) -> None:
        """Delete a document. Deleting a missing document is not an error.

        Raises:
            RemoteOperationError: If deletion fails.
        """
        try:
            (
                self.db_client.table(collection)
                .delete()
                .eq("id", document_id)
                .execute()
            )
        except Exception as error:
            raise RemoteOperationError(
                "delete_document", collection, str(error), _error_code(error)
            ) from error

    def _select(
        self,
        collection: str,
        filters: Dict[str, Any],
        operation: str
    ) -> List[DocumentSnapshot]:
        try:
            query = self.db_client.table(collection).select("id, data")
            for field_name, value in filters.items():
                query = query.eq(f"data->>{field_name}", _filter_value(value))
            response = query.order("id").execute()
        except Exception as error:
            raise RemoteOperationError(
                operation, collection, str(error), _error_code(error)
            ) from error

        return [
            DocumentSnapshot(id=str(row["id"]), data=row.get("data"))
            for row in response.data
        ]
