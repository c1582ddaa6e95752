"""Live store of job postings."""

import logging
from typing import Any, Dict, List, Optional

from jobboard.constants import JOBS_COLLECTION
from jobboard.database.document_store import DocumentStore
from jobboard.errors import NotFoundError
from jobboard.models import Job, JobInput
from jobboard.stores.live_store import LiveCollectionStore
from jobboard.transformers.document_to_entity import (
    document_to_job,
    job_to_document,
    strip_unset_fields,
    today,
    utc_now
)

logger = logging.getLogger(__name__)


class JobsStore(LiveCollectionStore[Job]):
    """Jobs collection mirrored in memory, newest `posted_at` first."""

    def __init__(self, document_store: DocumentStore):
        super().__init__(
            document_store,
            JOBS_COLLECTION,
            document_to_job,
            sort_key=lambda job: job.posted_at
        )

    @property
    def jobs(self) -> List[Job]:
        return self.items

    def create(self, job_input: JobInput) -> Job:
        """Persist a new job.

        The counter starts at zero and the posting date is today. The
        returned job is also added to the in-memory list right away.

        Args:
            job_input: Admin-provided job fields.

        Returns:
            The created job with its store-assigned id.

        Raises:
            RemoteOperationError: If the write fails.
        """
        fields = job_input.model_dump()
        fields["applications"] = 0
        fields["posted_at"] = today()

        document = job_to_document(fields, for_create=True)
        now = utc_now()
        document["createdAt"] = now
        document["updatedAt"] = now

        try:
            job_id = self.document_store.add_document(self.collection_name, document)
        except Exception as error:
            logger.error(f"Failed to create job: {error}")
            raise

        job = Job(id=job_id, **strip_unset_fields(fields))
        self._insert_local(job)
        return job

    def update(self, job_id: str, fields: Dict[str, Any]) -> None:
        """Merge partial fields into a job and stamp `updatedAt`.

        Args:
            job_id: Job id.
            fields: Attributes to change; None values are ignored.

        Raises:
            RemoteOperationError: If the write fails.
        """
        document = job_to_document(fields)
        document["updatedAt"] = utc_now()

        try:
            self.document_store.update_document(self.collection_name, job_id, document)
        except Exception as error:
            logger.error(f"Failed to update job {job_id}: {error}")
            raise

    def delete(self, job_id: str) -> None:
        """Delete a job. Its applications are kept.

        Raises:
            RemoteOperationError: If the delete fails.
        """
        try:
            self.document_store.delete_document(self.collection_name, job_id)
        except Exception as error:
            logger.error(f"Failed to delete job {job_id}: {error}")
            raise

    def get_by_id(self, job_id: str) -> Optional[Job]:
        """Look a job up in the last received snapshot (no remote call)."""
        return self._find(job_id)

    def require(self, job_id: str) -> Job:
        """Like get_by_id, raising NotFoundError when absent."""
        job = self.get_by_id(job_id)
        if job is None:
            raise NotFoundError(f"Job with ID {job_id} not found")
        return job

    def increment_applications(self, job_id: str) -> int:
        """Add one to a job's applications counter.

        The current value is read from the store and written back plus
        one. This is not atomic: two concurrent increments can both read
        the same value and one of them is lost.

        Returns:
            The new counter value.

        Raises:
            NotFoundError: If the job document no longer exists.
            RemoteOperationError: If the read or write fails.
        """
        document = self.document_store.get_document(self.collection_name, job_id)
        if document is None or not document.data:
            raise NotFoundError(f"Job with ID {job_id} not found")

        applications = int(document.data.get("applications") or 0) + 1
        self.update(job_id, {"applications": applications})
        return applications
