"""FastAPI application for the job board: public listing/apply flow and admin dashboard."""

from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, Query, Request, Security
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from jobboard import settings
from jobboard.api.schemas.auth_schemas import (
    AdminSessionResponse,
    CredentialsRequest,
    MessageResponse
)
from jobboard.api.schemas.candidate_schemas import SendForAnalysisResponse, UpdateCandidateRequest
from jobboard.api.schemas.job_schemas import (
    CreateJobRequest,
    DeletedResponse,
    JobStatsResponse,
    LocationsResponse,
    UpdateJobRequest,
    job_update_fields
)
from jobboard.constants import CUSTOM_FIELD_PREFIX
from jobboard.database.blob_storage import BlobStorage, SupabaseBlobStorage
from jobboard.database.client import get_auth_client, get_supabase_client
from jobboard.database.document_store import DocumentStore, SupabaseDocumentStore
from jobboard.database.identity import IdentityProvider, SupabaseIdentityProvider
from jobboard.errors import (
    AuthenticationError,
    DuplicateApplicationError,
    NotFoundError,
    RemoteOperationError,
    ValidationError
)
from jobboard.models import (
    AdminSession,
    ApplicationSubmission,
    AuthenticatedUser,
    AuthSession,
    BooleanField,
    Candidate,
    Job,
    UploadedFile
)
from jobboard.repositories.candidate_profile_repository import CandidateProfileRepository
from jobboard.repositories.supplier_repository import SupplierRepository
from jobboard.services.admin_auth_service import AdminAuthPolicy, static_credential_check
from jobboard.services.analysis_service import AnalysisService
from jobboard.services.application_service import ApplicationService
from jobboard.services.job_filter import (
    ALL_STATUSES,
    applications_for_user,
    available_locations,
    filter_admin_candidates,
    filter_admin_jobs,
    filter_jobs,
    job_stats
)
from jobboard.stores.candidates_store import CandidatesStore
from jobboard.stores.jobs_store import JobsStore
from jobboard.transformers.document_to_entity import strip_unset_fields
from jobboard.utils.log_config import configure_logging
from jobboard.utils.session_storage import FileSessionStorage


@dataclass
class AppServices:
    """Everything the endpoints need, wired once per application."""
    jobs_store: JobsStore
    candidates_store: CandidatesStore
    application_service: ApplicationService
    analysis_service: AnalysisService
    identity_provider: IdentityProvider
    admin_policy: AdminAuthPolicy


def build_services(
    document_store: DocumentStore,
    blob_storage: BlobStorage,
    identity_provider: IdentityProvider,
    admin_policy: AdminAuthPolicy
) -> AppServices:
    """Wire stores, repositories and services around the remote collaborators."""
    jobs_store = JobsStore(document_store)
    candidates_store = CandidatesStore(document_store)

    return AppServices(
        jobs_store=jobs_store,
        candidates_store=candidates_store,
        application_service=ApplicationService(
            jobs_store,
            candidates_store,
            CandidateProfileRepository(document_store),
            blob_storage
        ),
        analysis_service=AnalysisService(
            candidates_store,
            jobs_store,
            SupplierRepository(document_store)
        ),
        identity_provider=identity_provider,
        admin_policy=admin_policy
    )


def build_default_services() -> AppServices:
    """Services backed by Supabase, configured from the environment."""
    client = get_supabase_client()

    admin_policy = AdminAuthPolicy(
        credential_check=static_credential_check(settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD),
        storage=FileSessionStorage(settings.ADMIN_SESSION_FILE),
        admin_email=settings.ADMIN_EMAIL,
        session_ttl=timedelta(hours=settings.ADMIN_SESSION_HOURS)
    )

    return build_services(
        SupabaseDocumentStore(client, poll_interval=settings.SNAPSHOT_POLL_INTERVAL),
        SupabaseBlobStorage(client, settings.SUPABASE_STORAGE_BUCKET),
        SupabaseIdentityProvider(get_auth_client()),
        admin_policy
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Keep both live subscriptions open for the lifetime of the app."""
    services: AppServices = app.state.services
    services.jobs_store.start()
    services.candidates_store.start()
    try:
        yield
    finally:
        services.jobs_store.stop()
        services.candidates_store.stop()


router = APIRouter()
bearer_scheme = HTTPBearer(auto_error=False)


# Global exception handlers
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


async def duplicate_application_handler(request: Request, exc: DuplicateApplicationError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


async def value_error_handler(request: Request, exc: ValueError):
    """Convert any other ValueError to 400 Bad Request."""
    return JSONResponse(status_code=400, content={"detail": str(exc)})


async def authentication_error_handler(request: Request, exc: AuthenticationError):
    return JSONResponse(status_code=401, content={"detail": str(exc)})


async def remote_operation_error_handler(request: Request, exc: RemoteOperationError):
    """Report backend failures with the provider error code so clients can explain them."""
    return JSONResponse(
        status_code=502,
        content={"detail": str(exc), "code": exc.code, "operation": exc.operation}
    )


async def generic_exception_handler(request: Request, exc: Exception):
    """Convert unhandled exceptions to 500 Internal Server Error.

    Prevents stack traces from being exposed to clients.
    """
    return JSONResponse(
        status_code=500,
        content={"detail": f"Internal server error: {str(exc)}"}
    )


def create_app(services: Optional[AppServices] = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        services: Pre-wired services; defaults to the Supabase-backed ones.

    Returns:
        Configured FastAPI app. Run with
        `uvicorn jobboard.main:create_app --factory`.
    """
    configure_logging(settings.LOG_LEVEL, settings.LOG_DIR)

    app = FastAPI(title="Job Board", lifespan=lifespan)
    app.state.services = services or build_default_services()

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(DuplicateApplicationError, duplicate_application_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(ValueError, value_error_handler)
    app.add_exception_handler(AuthenticationError, authentication_error_handler)
    app.add_exception_handler(RemoteOperationError, remote_operation_error_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(router)
    return app


def get_services(request: Request) -> AppServices:
    return request.app.state.services


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    services: AppServices = Depends(get_services)
) -> AuthenticatedUser:
    """Resolve the signed-in candidate from an `Authorization: Bearer` header."""
    if credentials is None:
        raise AuthenticationError("Sign in to continue")

    user = services.identity_provider.get_user(credentials.credentials)
    if user is None:
        raise AuthenticationError("Sign in to continue")
    return user


def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    services: AppServices = Depends(get_services)
) -> AdminSession:
    """Resolve the admin session from the bearer token returned by `/admin/login`."""
    token = credentials.credentials if credentials is not None else None
    return services.admin_policy.require_session(token)


@router.get("/")
def root():
    """Health check endpoint.

    Returns:
        Dictionary with status indicator.
    """
    return {"status": "ok"}


# Public listing
@router.get("/jobs", response_model=List[Job])
def list_jobs(
    search: str = "",
    location: List[str] = Query(default=[]),
    location_query: str = "",
    requirements: str = "",
    services: AppServices = Depends(get_services)
):
    """List active jobs matching the listing filters.

    Args:
        search: Text searched in title, description and requirements.
        location: Exact locations to keep (repeatable).
        location_query: Text searched in the location when no exact
            location is selected.
        requirements: Comma-separated keywords; any one must appear in
            the requirements.

    Example:
        GET /jobs?search=backend&location=Remoto&requirements=node,sql
    """
    return filter_jobs(
        services.jobs_store.jobs,
        search_term=search,
        location_selections=location,
        location_query=location_query,
        requirements_query=requirements
    )


@router.get("/jobs/locations", response_model=LocationsResponse)
def list_locations(services: AppServices = Depends(get_services)):
    """Locations of active jobs, for the location filter."""
    return LocationsResponse(locations=available_locations(services.jobs_store.jobs))


@router.get("/jobs/{job_id}", response_model=Job)
def get_job(job_id: str, services: AppServices = Depends(get_services)):
    return services.jobs_store.require(job_id)


async def _read_upload(upload: UploadFile) -> UploadedFile:
    return UploadedFile(
        filename=upload.filename or "upload",
        content_type=upload.content_type or "application/octet-stream",
        content=await upload.read()
    )


def _form_text(form, key: str) -> str:
    value = form.get(key)
    return value if isinstance(value, str) else ""


@router.post("/jobs/{job_id}/apply", response_model=Candidate, status_code=201)
async def apply_to_job(
    job_id: str,
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
    services: AppServices = Depends(get_services)
):
    """Submit an application (multipart form).

    Form fields: name, email, phone, experience, education, notes, an
    optional `resume` PDF, and one `customField_<fieldId>` entry per
    dynamic field (text, "true"/"false" for yes/no fields, or a file).
    """
    job = services.jobs_store.require(job_id)
    form = await request.form()

    resume = form.get("resume")
    submission = ApplicationSubmission(
        name=_form_text(form, "name"),
        email=_form_text(form, "email"),
        phone=_form_text(form, "phone"),
        experience=_form_text(form, "experience"),
        education=_form_text(form, "education"),
        notes=_form_text(form, "notes"),
        resume=await _read_upload(resume) if isinstance(resume, UploadFile) and resume.filename else None
    )

    for definition in job.custom_fields:
        value = form.get(f"{CUSTOM_FIELD_PREFIX}{definition.id}")
        if isinstance(value, UploadFile):
            if value.filename:
                submission.custom_field_files[definition.id] = await _read_upload(value)
        elif isinstance(definition, BooleanField):
            if value in ("true", "false"):
                submission.custom_field_values[definition.id] = value == "true"
        elif value is not None:
            submission.custom_field_values[definition.id] = value

    result = await run_in_threadpool(
        services.application_service.submit, user, job_id, submission
    )
    if not result.succeeded:
        raise result.error

    return result.application


@router.get("/me/applications", response_model=List[Candidate])
def my_applications(
    user: AuthenticatedUser = Depends(get_current_user),
    services: AppServices = Depends(get_services)
):
    """Applications made by the signed-in candidate."""
    return applications_for_user(services.candidates_store.candidates, user)


# Candidate authentication
@router.post("/auth/sign-in", response_model=AuthSession)
def sign_in(credentials: CredentialsRequest, services: AppServices = Depends(get_services)):
    return services.identity_provider.sign_in(credentials.email, credentials.password)


@router.post("/auth/sign-up", response_model=AuthSession, status_code=201)
def sign_up(credentials: CredentialsRequest, services: AppServices = Depends(get_services)):
    return services.identity_provider.sign_up(credentials.email, credentials.password)


@router.post("/auth/sign-out", response_model=MessageResponse)
def sign_out(
    user: AuthenticatedUser = Depends(get_current_user),
    credentials: HTTPAuthorizationCredentials = Security(bearer_scheme),
    services: AppServices = Depends(get_services)
):
    """Revoke the caller's own access token."""
    services.identity_provider.sign_out(credentials.credentials)
    return MessageResponse(message="Signed out")


# Admin session
@router.post("/admin/login", response_model=AdminSessionResponse)
def admin_login(credentials: CredentialsRequest, services: AppServices = Depends(get_services)):
    """Start an admin session.

    Returns:
        The bearer token to send on every admin request, with its expiry.
    """
    session = services.admin_policy.login(credentials.email, credentials.password)
    return AdminSessionResponse(
        access_token=session.token,
        email=session.email,
        expires_at=session.expires_at
    )


@router.post("/admin/logout", response_model=MessageResponse)
def admin_logout(
    session: AdminSession = Depends(require_admin),
    services: AppServices = Depends(get_services)
):
    services.admin_policy.logout(session.token)
    return MessageResponse(message="Logged out")


# Admin dashboard
@router.get("/admin/stats", response_model=JobStatsResponse)
def admin_stats(
    session: AdminSession = Depends(require_admin),
    services: AppServices = Depends(get_services)
):
    return JobStatsResponse(**job_stats(services.jobs_store.jobs))


@router.get("/admin/jobs", response_model=List[Job])
def admin_list_jobs(
    search: str = "",
    status: str = ALL_STATUSES,
    session: AdminSession = Depends(require_admin),
    services: AppServices = Depends(get_services)
):
    """All jobs, filtered by title and status ("all" for every status)."""
    return filter_admin_jobs(services.jobs_store.jobs, search, status)


@router.post("/admin/jobs", response_model=Job, status_code=201)
def admin_create_job(
    request: CreateJobRequest,
    session: AdminSession = Depends(require_admin),
    services: AppServices = Depends(get_services)
):
    return services.jobs_store.create(request.to_job_input())


@router.patch("/admin/jobs/{job_id}", response_model=Job)
def admin_update_job(
    job_id: str,
    request: UpdateJobRequest,
    session: AdminSession = Depends(require_admin),
    services: AppServices = Depends(get_services)
):
    """Update a job and return it with the changes applied.

    The live list picks the change up with the next snapshot.
    """
    job = services.jobs_store.require(job_id)
    fields = job_update_fields(request)
    services.jobs_store.update(job_id, fields)
    return Job.model_validate({**job.model_dump(), **strip_unset_fields(fields)})


@router.delete("/admin/jobs/{job_id}", response_model=DeletedResponse)
def admin_delete_job(
    job_id: str,
    session: AdminSession = Depends(require_admin),
    services: AppServices = Depends(get_services)
):
    services.jobs_store.require(job_id)
    services.jobs_store.delete(job_id)
    return DeletedResponse(message="Job deleted successfully", id=job_id)


@router.get("/admin/jobs/{job_id}/candidates", response_model=List[Candidate])
def admin_job_candidates(
    job_id: str,
    session: AdminSession = Depends(require_admin),
    services: AppServices = Depends(get_services)
):
    """Applications of one job, fetched directly from the store."""
    return services.candidates_store.get_by_job_id(job_id)


@router.get("/admin/candidates", response_model=List[Candidate])
def admin_list_candidates(
    search: str = "",
    status: str = ALL_STATUSES,
    session: AdminSession = Depends(require_admin),
    services: AppServices = Depends(get_services)
):
    """All applications, filtered by name/email/job/company text and status."""
    return filter_admin_candidates(services.candidates_store.candidates, search, status)


@router.get("/admin/candidates/{candidate_id}", response_model=Candidate)
def admin_get_candidate(
    candidate_id: str,
    session: AdminSession = Depends(require_admin),
    services: AppServices = Depends(get_services)
):
    return services.candidates_store.require(candidate_id)


@router.patch("/admin/candidates/{candidate_id}", response_model=MessageResponse)
def admin_update_candidate(
    candidate_id: str,
    request: UpdateCandidateRequest,
    session: AdminSession = Depends(require_admin),
    services: AppServices = Depends(get_services)
):
    """Update an application. Any status may be set; setting the current one changes nothing."""
    services.candidates_store.require(candidate_id)
    fields = request.model_dump(exclude_unset=True)
    status = fields.pop("status", None)

    changed = False
    if status is not None:
        changed = services.candidates_store.update_status(candidate_id, status)
    if fields:
        services.candidates_store.update(candidate_id, fields)
        changed = True

    return MessageResponse(message="Candidate updated" if changed else "No changes")


@router.delete("/admin/candidates/{candidate_id}", response_model=DeletedResponse)
def admin_delete_candidate(
    candidate_id: str,
    session: AdminSession = Depends(require_admin),
    services: AppServices = Depends(get_services)
):
    services.candidates_store.require(candidate_id)
    services.candidates_store.delete(candidate_id)
    return DeletedResponse(message="Candidate deleted successfully", id=candidate_id)


@router.post(
    "/admin/candidates/{candidate_id}/send-for-analysis",
    response_model=SendForAnalysisResponse
)
def admin_send_for_analysis(
    candidate_id: str,
    session: AdminSession = Depends(require_admin),
    services: AppServices = Depends(get_services)
):
    return services.analysis_service.send_for_analysis(candidate_id)
