"""Service for exporting applicants to the supplier list for analysis."""

import logging
from typing import Any, Dict

from jobboard.repositories.supplier_repository import SupplierRepository
from jobboard.stores.candidates_store import CandidatesStore
from jobboard.stores.jobs_store import JobsStore

logger = logging.getLogger(__name__)


class AnalysisService:
    """Sends applicants for analysis.

    Attributes:
        candidates_store: Live store of applications.
        jobs_store: Live store of jobs.
        supplier_repository: Supplier records read downstream.
    """

    def __init__(
        self,
        candidates_store: CandidatesStore,
        jobs_store: JobsStore,
        supplier_repository: SupplierRepository
    ):
        self.candidates_store = candidates_store
        self.jobs_store = jobs_store
        self.supplier_repository = supplier_repository

    def send_for_analysis(self, candidate_id: str) -> Dict[str, Any]:
        """Export an applicant as a supplier and flag the application.

        No supplier record is created when one with the same email already
        exists. The application is flagged `sent_for_analysis` either way;
        the flag is never cleared.

        Args:
            candidate_id: Application id.

        Returns:
            Dictionary with the candidate id and whether a supplier was created.

        Raises:
            NotFoundError: If the application is not in the current snapshot.
            RemoteOperationError: If a read or write fails.
        """
        candidate = self.candidates_store.require(candidate_id)

        supplier_created = False
        if self.supplier_repository.exists_for_email(candidate.email):
            logger.info(f"Supplier for {candidate.email} already exists")
        else:
            job = self.jobs_store.get_by_id(candidate.job_id) if candidate.job_id else None
            supplier_id = self.supplier_repository.create_from_candidate(candidate, job)
            supplier_created = True
            logger.info(f"Created supplier {supplier_id} from application {candidate_id}")

        self.candidates_store.update(candidate_id, {"sent_for_analysis": True})

        return {
            "id": candidate_id,
            "supplier_created": supplier_created,
            "sent_for_analysis": True
        }
