"""Repository for supplier records created when an applicant is sent for analysis."""

from typing import Optional

from jobboard.constants import SUPPLIER_DEFAULTS, SUPPLIERS_COLLECTION
from jobboard.database.document_store import DocumentStore
from jobboard.models import Candidate, Job
from jobboard.repositories.base_repository import BaseRepository
from jobboard.transformers.document_to_entity import utc_now


class SupplierRepository(BaseRepository):
    """Supplier records read by the downstream analysis process.

    Attributes:
        document_store: Remote document store client.
        collection_name: Set to "suppliers" for this repository.
    """

    def __init__(self, document_store: DocumentStore):
        super().__init__(document_store, SUPPLIERS_COLLECTION)

    def exists_for_email(self, email: str) -> bool:
        return bool(self.find_by(email=email))

    def create_from_candidate(self, candidate: Candidate, job: Optional[Job] = None) -> str:
        """Create the supplier record of an applicant.

        Args:
            candidate: Application being exported.
            job: Job of the application, used when the application lacks
                the denormalized job fields.

        Returns:
            Id of the new supplier record.
        """
        now = utc_now()
        return self.create({
            "nome": candidate.name,
            "email": candidate.email,
            **SUPPLIER_DEFAULTS,
            "createdAt": now,
            "candidateId": candidate.id,
            "jobId": candidate.job_id or (job.id if job else ""),
            "jobTitle": candidate.job_title or (job.title if job else ""),
            "phone": candidate.phone or "",
            "sentForAnalysisAt": now,
        })
