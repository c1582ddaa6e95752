"""Service that turns an application form into a stored application."""

import logging
import time
from typing import Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from jobboard.constants import (
    CUSTOM_FIELD_FILE_MAX_BYTES,
    CUSTOM_FIELD_UPLOAD_PREFIX,
    RESUME_CONTENT_TYPE,
    RESUME_MAX_BYTES,
    RESUME_UPLOAD_PREFIX
)
from jobboard.database.blob_storage import BlobStorage
from jobboard.errors import DuplicateApplicationError, NotFoundError, ValidationError
from jobboard.models import (
    ApplicationSubmission,
    AuthenticatedUser,
    Candidate,
    CandidateStatus,
    ContactDetails,
    FileField,
    Job,
    SubmissionResult,
    SubmissionState,
    UploadedFile
)
from jobboard.repositories.candidate_profile_repository import CandidateProfileRepository
from jobboard.stores.candidates_store import CandidatesStore
from jobboard.stores.jobs_store import JobsStore
from jobboard.utils.custom_fields import validate_custom_fields

logger = logging.getLogger(__name__)


def _epoch_millis() -> int:
    return int(time.time() * 1000)


def resume_path(user_id: str, job_id: str, filename: str) -> str:
    return f"{RESUME_UPLOAD_PREFIX}/{user_id}/{job_id}_{_epoch_millis()}_{filename}"


def custom_field_path(user_id: str, job_id: str, field_id: str, filename: str) -> str:
    return f"{CUSTOM_FIELD_UPLOAD_PREFIX}/{user_id}/{job_id}/{field_id}_{_epoch_millis()}_{filename}"


class ApplicationService:
    """Runs one application submission at a time for the signed-in user.

    A submission goes Idle -> Validating -> Submitting -> Success. Input
    problems stop it in Validating before anything is written (Invalid).
    In Submitting the steps run in order and the first failure stops the
    attempt (Failed); earlier effects such as an updated identity record
    or uploaded files are left in place:

    1. find or create the user's identity record, refreshing its details
    2. upload the resume
    3. upload dynamic-field files
    4. reject if the user already applied to the job
    5. create the application
    6. add one to the job's applications counter

    Attributes:
        jobs_store: Live store of jobs.
        candidates_store: Live store of applications.
        profile_repository: Identity records of applicants.
        blob_storage: File storage for uploads.
        state: State of the latest submission attempt.
        error_message: User-facing error of the latest attempt, if any.
    """

    def __init__(
        self,
        jobs_store: JobsStore,
        candidates_store: CandidatesStore,
        profile_repository: CandidateProfileRepository,
        blob_storage: BlobStorage
    ):
        self.jobs_store = jobs_store
        self.candidates_store = candidates_store
        self.profile_repository = profile_repository
        self.blob_storage = blob_storage
        self.state = SubmissionState.IDLE
        self.error_message: Optional[str] = None

    def submit(
        self,
        user: AuthenticatedUser,
        job_id: str,
        submission: ApplicationSubmission
    ) -> SubmissionResult:
        """Validate and store an application.

        Args:
            user: Signed-in applicant.
            job_id: Job applied to.
            submission: Form content.

        Returns:
            SubmissionResult in state SUCCESS with the created application,
            INVALID with a ValidationError/NotFoundError, or FAILED with the
            remote error that stopped the attempt.
        """
        self.error_message = None
        self.state = SubmissionState.VALIDATING

        try:
            job = self.jobs_store.require(job_id)
            self.validate(job, submission)
        except (ValidationError, NotFoundError) as error:
            return self._finish(SubmissionState.INVALID, error=error)

        self.state = SubmissionState.SUBMITTING

        try:
            application = self._store_application(user, job, submission)
        except ValidationError as error:
            return self._finish(SubmissionState.INVALID, error=error)
        except Exception as error:
            logger.error(f"Application of user {user.id} to job {job.id} failed: {error}")
            return self._finish(SubmissionState.FAILED, error=error)

        logger.info(f"Application {application.id} created for job {job.id}")
        return self._finish(SubmissionState.SUCCESS, application=application)

    def validate(self, job: Job, submission: ApplicationSubmission) -> None:
        """Check the form before anything is written.

        Raises:
            ValidationError: Describing the first problem found.
        """
        if not submission.name or not submission.email:
            raise ValidationError("Name and email are required.")

        try:
            ContactDetails(name=submission.name, email=submission.email, phone=submission.phone)
        except PydanticValidationError:
            raise ValidationError("Please enter a valid email address.")

        errors = validate_custom_fields(
            job, submission.custom_field_values, submission.custom_field_files
        )
        if errors:
            raise ValidationError(errors[0])

        if submission.resume is not None:
            self._check_resume(submission.resume)

        for definition in job.custom_fields:
            upload = submission.custom_field_files.get(definition.id)
            if isinstance(definition, FileField) and upload is not None:
                if upload.size > CUSTOM_FIELD_FILE_MAX_BYTES:
                    raise ValidationError(
                        f'The file for "{definition.label}" is too large. The maximum size is 50MB.'
                    )

    def _check_resume(self, resume: UploadedFile) -> None:
        if resume.size > RESUME_MAX_BYTES:
            raise ValidationError("The resume file is too large. The maximum size is 5MB.")
        if resume.content_type != RESUME_CONTENT_TYPE:
            raise ValidationError("Only PDF files are accepted for the resume.")

    def _store_application(
        self,
        user: AuthenticatedUser,
        job: Job,
        submission: ApplicationSubmission
    ) -> Candidate:
        profile = self.profile_repository.resolve(
            user.id, submission.name, submission.email, submission.phone
        )

        resume_url = ""
        if submission.resume is not None:
            resume_url = self._upload(
                resume_path(user.id, job.id, submission.resume.filename),
                submission.resume
            )

        custom_fields_data = self._collect_custom_field_values(user, job, submission)

        if self.candidates_store.find_application(user.id, job.id):
            raise DuplicateApplicationError(job.id)

        application = self.candidates_store.create({
            "candidate_id": profile.id,
            "candidate_user_id": user.id,
            "name": submission.name,
            "email": submission.email,
            "phone": submission.phone,
            "job_id": job.id,
            "job_title": job.title,
            "experience": submission.experience or "",
            "education": submission.education or "",
            "notes": submission.notes or "",
            "status": CandidateStatus.NEW.value,
            "resume": resume_url,
            "custom_fields_data": custom_fields_data or None,
        })

        self.jobs_store.increment_applications(job.id)
        return application

    def _collect_custom_field_values(
        self,
        user: AuthenticatedUser,
        job: Job,
        submission: ApplicationSubmission
    ) -> Dict[str, object]:
        """Upload dynamic-field files and gather every answered value by field id."""
        values: Dict[str, object] = {}
        for definition in job.custom_fields:
            if isinstance(definition, FileField):
                upload = submission.custom_field_files.get(definition.id)
                if upload is not None:
                    values[definition.id] = self._upload(
                        custom_field_path(user.id, job.id, definition.id, upload.filename),
                        upload
                    )
            else:
                value = submission.custom_field_values.get(definition.id)
                if value is not None:
                    values[definition.id] = value
        return values

    def _upload(self, path: str, upload: UploadedFile) -> str:
        handle = self.blob_storage.upload(path, upload.content, upload.content_type)
        return self.blob_storage.get_download_url(handle)

    def _finish(
        self,
        state: SubmissionState,
        application: Optional[Candidate] = None,
        error: Optional[Exception] = None
    ) -> SubmissionResult:
        self.state = state
        self.error_message = str(error) if error else None
        return SubmissionResult(
            state=state,
            application=application,
            error_message=self.error_message,
            error=error
        )
