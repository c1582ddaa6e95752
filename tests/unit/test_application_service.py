import pytest

from factories import job_document, pdf
from jobboard.constants import (
    APPLICATIONS_COLLECTION,
    CANDIDATE_PROFILES_COLLECTION,
    JOBS_COLLECTION
)
from jobboard.errors import DuplicateApplicationError, NotFoundError, RemoteOperationError, ValidationError
from jobboard.models import ApplicationSubmission, SubmissionState, UploadedFile


@pytest.fixture()
def job_with_fields(document_store, jobs_store):
    document_store.seed(JOBS_COLLECTION, "job-2", job_document(
        title="Data Engineer",
        applications=2,
        customFields=[
            {"id": "relocate", "label": "Can relocate?", "type": "boolean", "required": True},
            {"id": "why", "label": "Why us?", "type": "text"},
            {"id": "portfolio", "label": "Portfolio", "type": "file"},
        ]
    ))
    return jobs_store.require("job-2")


def submission(**overrides):
    fields = {"name": "Ana Souza", "email": "ana@example.com", "phone": "11999990000"}
    fields.update(overrides)
    return ApplicationSubmission(**fields)


def test_successful_submission(document_store, blob_storage, application_service, user, seeded_job):
    result = application_service.submit(user, seeded_job.id, submission(resume=pdf()))

    assert result.succeeded
    assert application_service.state == SubmissionState.SUCCESS
    application = result.application
    assert application.job_id == seeded_job.id
    assert application.job_title == "Backend Developer"
    assert application.candidate_user_id == user.id
    assert application.status == "new"
    assert application.resume.startswith("https://files.example.com/resumes/user-1/job-1_")
    assert application.resume.endswith("_resume.pdf")

    assert len(blob_storage.files) == 1
    assert document_store.collections[JOBS_COLLECTION][seeded_job.id]["applications"] == 1


def test_submission_creates_identity_record(document_store, application_service, user, seeded_job):
    result = application_service.submit(user, seeded_job.id, submission())

    profiles = document_store.collections[CANDIDATE_PROFILES_COLLECTION]
    assert len(profiles) == 1
    profile_id, profile = next(iter(profiles.items()))
    assert profile["userId"] == user.id
    assert result.application.candidate_id == profile_id


def test_identity_record_updated_only_when_details_change(document_store, application_service, user, seeded_job):
    document_store.seed(CANDIDATE_PROFILES_COLLECTION, "profile-1", {
        "userId": user.id,
        "name": "Ana Souza",
        "email": "ana@example.com",
        "phone": "11999990000",
    })

    application_service.submit(user, seeded_job.id, submission())

    assert document_store.writes(CANDIDATE_PROFILES_COLLECTION) == []


def test_identity_record_refreshed_with_new_phone(document_store, application_service, user, seeded_job):
    document_store.seed(CANDIDATE_PROFILES_COLLECTION, "profile-1", {
        "userId": user.id,
        "name": "Ana Souza",
        "email": "ana@example.com",
        "phone": "000",
    })

    application_service.submit(user, seeded_job.id, submission())

    assert document_store.collections[CANDIDATE_PROFILES_COLLECTION]["profile-1"]["phone"] == "11999990000"


def test_second_application_to_same_job_is_rejected(document_store, application_service, user, seeded_job):
    assert application_service.submit(user, seeded_job.id, submission()).succeeded

    result = application_service.submit(user, seeded_job.id, submission())

    assert result.state == SubmissionState.INVALID
    assert isinstance(result.error, DuplicateApplicationError)
    assert result.error_message == "You have already applied to this job"
    assert len(document_store.collections[APPLICATIONS_COLLECTION]) == 1
    assert document_store.collections[JOBS_COLLECTION][seeded_job.id]["applications"] == 1


@pytest.mark.parametrize("overrides, message", [
    ({"name": ""}, "Name and email are required."),
    ({"email": ""}, "Name and email are required."),
    ({"email": "not-an-email"}, "Please enter a valid email address."),
    (
        {"resume": pdf(size=5 * 1024 * 1024 + 1)},
        "The resume file is too large. The maximum size is 5MB."
    ),
    (
        {"resume": UploadedFile(filename="cv.docx", content_type="application/msword", content=b"x")},
        "Only PDF files are accepted for the resume."
    ),
])
def test_invalid_input_writes_nothing(
    document_store, blob_storage, application_service, user, seeded_job, overrides, message
):
    writes_before = len(document_store.writes())

    result = application_service.submit(user, seeded_job.id, submission(**overrides))

    assert result.state == SubmissionState.INVALID
    assert result.error_message == message
    assert isinstance(result.error, ValidationError)
    assert len(document_store.writes()) == writes_before
    assert blob_storage.files == {}


def test_required_boolean_field_must_be_answered(document_store, application_service, user, job_with_fields):
    result = application_service.submit(user, job_with_fields.id, submission())

    assert result.state == SubmissionState.INVALID
    assert result.error_message == 'The field "Can relocate?" is required.'
    assert document_store.writes(APPLICATIONS_COLLECTION) == []


def test_false_answers_a_required_boolean_field(document_store, blob_storage, application_service, user, job_with_fields):
    result = application_service.submit(user, job_with_fields.id, submission(
        custom_field_values={"relocate": False, "why": "Great team"},
        custom_field_files={"portfolio": pdf("portfolio.pdf")}
    ))

    assert result.succeeded
    stored = document_store.collections[APPLICATIONS_COLLECTION][result.application.id]
    assert stored["customField_relocate"] is False
    assert stored["customField_why"] == "Great team"
    assert stored["customField_portfolio"].startswith(
        "https://files.example.com/custom-fields/user-1/job-2/portfolio_"
    )
    assert document_store.collections[JOBS_COLLECTION]["job-2"]["applications"] == 3


def test_oversized_custom_field_file_is_rejected(application_service, user, job_with_fields):
    big_file = UploadedFile(filename="big.zip", content=b"0" * (50 * 1024 * 1024 + 1))

    result = application_service.submit(user, job_with_fields.id, submission(
        custom_field_values={"relocate": True},
        custom_field_files={"portfolio": big_file}
    ))

    assert result.state == SubmissionState.INVALID
    assert "Portfolio" in result.error_message


def test_unknown_job_is_invalid(application_service, user):
    result = application_service.submit(user, "missing", submission())

    assert result.state == SubmissionState.INVALID
    assert isinstance(result.error, NotFoundError)


def test_upload_failure_stops_before_creating_application(
    document_store, blob_storage, application_service, user, seeded_job
):
    blob_storage.error = RemoteOperationError("upload", "job-board", "quota exceeded", "storage/quota")

    result = application_service.submit(user, seeded_job.id, submission(resume=pdf()))

    assert result.state == SubmissionState.FAILED
    assert isinstance(result.error, RemoteOperationError)
    assert document_store.writes(APPLICATIONS_COLLECTION) == []
    assert document_store.collections[JOBS_COLLECTION][seeded_job.id]["applications"] == 0
    # identity record written before the upload is left in place
    assert len(document_store.collections[CANDIDATE_PROFILES_COLLECTION]) == 1


def test_counter_failure_keeps_created_application(document_store, application_service, user, seeded_job):
    original_update = document_store.update_document

    def failing_update(collection, document_id, fields):
        if collection == JOBS_COLLECTION:
            raise RemoteOperationError("update_document", collection, "unavailable", "unavailable")
        return original_update(collection, document_id, fields)

    document_store.update_document = failing_update

    result = application_service.submit(user, seeded_job.id, submission())

    assert result.state == SubmissionState.FAILED
    assert len(document_store.collections[APPLICATIONS_COLLECTION]) == 1


def test_concurrent_increments_can_lose_an_update(document_store, jobs_store, seeded_job):
    first_read = document_store.get_document(JOBS_COLLECTION, seeded_job.id)
    jobs_store.increment_applications(seeded_job.id)

    # A second writer that read before the first increment writes the same value back
    jobs_store.update(seeded_job.id, {"applications": int(first_read.data["applications"]) + 1})

    assert document_store.collections[JOBS_COLLECTION][seeded_job.id]["applications"] == 1


def test_error_message_cleared_on_next_attempt(application_service, user, seeded_job):
    application_service.submit(user, seeded_job.id, submission(name=""))
    assert application_service.error_message == "Name and email are required."

    application_service.submit(user, seeded_job.id, submission())

    assert application_service.error_message is None
