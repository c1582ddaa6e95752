"""Live store of job applications."""

import logging
from typing import Any, Dict, List, Optional

from jobboard.constants import APPLICATIONS_COLLECTION
from jobboard.database.document_store import DocumentStore
from jobboard.errors import MappingError, NotFoundError
from jobboard.models import Candidate, CandidateStatus
from jobboard.stores.live_store import LiveCollectionStore
from jobboard.transformers.document_to_entity import (
    candidate_to_document,
    document_to_candidate,
    strip_unset_fields,
    today,
    utc_now
)

logger = logging.getLogger(__name__)


def _sort_by_applied_at(candidate: Candidate):
    return candidate.applied_at


class CandidatesStore(LiveCollectionStore[Candidate]):
    """Applications collection mirrored in memory, newest `applied_at` first.

    The live subscription covers every application of every job; there
    is no pagination. Per-job views use `get_by_job_id`, a separate
    one-shot query.
    """

    def __init__(self, document_store: DocumentStore):
        super().__init__(
            document_store,
            APPLICATIONS_COLLECTION,
            document_to_candidate,
            sort_key=_sort_by_applied_at
        )

    @property
    def candidates(self) -> List[Candidate]:
        return self.items

    def create(self, fields: Dict[str, Any]) -> Candidate:
        """Persist a new application.

        Args:
            fields: Candidate attributes (without id and applied_at);
                `custom_fields_data` is stored as `customField_<id>` keys.

        Returns:
            The created application with its store-assigned id, also added
            to the in-memory list right away.

        Raises:
            RemoteOperationError: If the write fails.
        """
        fields = strip_unset_fields(fields)
        fields.pop("id", None)
        fields.setdefault("status", CandidateStatus.NEW.value)
        applied_at = today()

        document = candidate_to_document(fields)
        now = utc_now()
        document["appliedAt"] = now
        document["createdAt"] = now
        document["updatedAt"] = now

        try:
            candidate_id = self.document_store.add_document(self.collection_name, document)
        except Exception as error:
            logger.error(f"Failed to create application: {error}")
            raise

        candidate = Candidate(id=candidate_id, applied_at=applied_at, **fields)
        self._insert_local(candidate)
        return candidate

    def update(self, candidate_id: str, fields: Dict[str, Any]) -> None:
        """Merge partial fields into an application and stamp `updatedAt`.

        Raises:
            RemoteOperationError: If the write fails.
        """
        document = candidate_to_document(fields)
        document["updatedAt"] = utc_now()

        try:
            self.document_store.update_document(self.collection_name, candidate_id, document)
        except Exception as error:
            logger.error(f"Failed to update application {candidate_id}: {error}")
            raise

    def update_status(self, candidate_id: str, status: CandidateStatus) -> bool:
        """Move an application to any pipeline stage.

        Returns:
            False when the application already had that status (nothing is
            written), True otherwise.

        Raises:
            NotFoundError: If the application is not in the current snapshot.
        """
        candidate = self.require(candidate_id)
        status_value = CandidateStatus(status).value
        if candidate.status == status_value:
            return False

        self.update(candidate_id, {"status": status_value})
        return True

    def delete(self, candidate_id: str) -> None:
        """Delete an application.

        Raises:
            RemoteOperationError: If the delete fails.
        """
        try:
            self.document_store.delete_document(self.collection_name, candidate_id)
        except Exception as error:
            logger.error(f"Failed to delete application {candidate_id}: {error}")
            raise

    def get_by_id(self, candidate_id: str) -> Optional[Candidate]:
        """Look an application up in the last received snapshot (no remote call)."""
        return self._find(candidate_id)

    def require(self, candidate_id: str) -> Candidate:
        """Like get_by_id, raising NotFoundError when absent."""
        candidate = self.get_by_id(candidate_id)
        if candidate is None:
            raise NotFoundError(f"Candidate with ID {candidate_id} not found")
        return candidate

    def get_by_job_id(self, job_id: str) -> List[Candidate]:
        """Fetch the applications of one job straight from the store.

        Args:
            job_id: Job id.

        Returns:
            Applications for the job, newest first.

        Raises:
            RemoteOperationError: If the query fails.
        """
        return self._query({"jobId": job_id})

    def find_application(self, user_id: str, job_id: str) -> List[Candidate]:
        """Fetch the applications a user already made to a job.

        Raises:
            RemoteOperationError: If the query fails.
        """
        return self._query({"candidateUserId": user_id, "jobId": job_id})

    def _query(self, filters: Dict[str, Any]) -> List[Candidate]:
        documents = self.document_store.query(self.collection_name, filters)

        candidates = []
        for document in documents:
            try:
                candidates.append(document_to_candidate(document))
            except MappingError as error:
                logger.error(f"Skipping document in {self.collection_name}: {error}")

        candidates.sort(key=_sort_by_applied_at, reverse=True)
        return candidates
