from datetime import timedelta

import pytest

from factories import ADMIN_EMAIL, ADMIN_PASSWORD, FrozenClock, application_document, job_document
from fakes import FakeBlobStorage, FakeIdentityProvider, InMemoryDocumentStore
from jobboard.constants import APPLICATIONS_COLLECTION, JOBS_COLLECTION
from jobboard.models import AuthenticatedUser
from jobboard.repositories.candidate_profile_repository import CandidateProfileRepository
from jobboard.services.admin_auth_service import AdminAuthPolicy, static_credential_check
from jobboard.services.application_service import ApplicationService
from jobboard.stores.candidates_store import CandidatesStore
from jobboard.stores.jobs_store import JobsStore
from jobboard.utils.session_storage import InMemorySessionStorage


@pytest.fixture()
def document_store():
    return InMemoryDocumentStore()


@pytest.fixture()
def blob_storage():
    return FakeBlobStorage()


@pytest.fixture()
def identity_provider():
    return FakeIdentityProvider()


@pytest.fixture()
def jobs_store(document_store):
    store = JobsStore(document_store)
    store.start()
    yield store
    store.stop()


@pytest.fixture()
def candidates_store(document_store):
    store = CandidatesStore(document_store)
    store.start()
    yield store
    store.stop()


@pytest.fixture()
def seeded_job(document_store, jobs_store):
    document_store.seed(JOBS_COLLECTION, "job-1", job_document())
    return jobs_store.require("job-1")


@pytest.fixture()
def user():
    return AuthenticatedUser(id="user-1", email="ana@example.com")


@pytest.fixture()
def application_service(document_store, blob_storage, jobs_store, candidates_store):
    return ApplicationService(
        jobs_store,
        candidates_store,
        CandidateProfileRepository(document_store),
        blob_storage
    )


@pytest.fixture()
def clock():
    return FrozenClock()


@pytest.fixture()
def admin_policy(clock):
    return AdminAuthPolicy(
        credential_check=static_credential_check(ADMIN_EMAIL, ADMIN_PASSWORD),
        storage=InMemorySessionStorage(),
        admin_email=ADMIN_EMAIL,
        session_ttl=timedelta(hours=24),
        clock=clock
    )


@pytest.fixture()
def seed_application(document_store):
    def seed(document_id="application-1", **overrides):
        document_store.seed(APPLICATIONS_COLLECTION, document_id, application_document(**overrides))
        return document_id
    return seed
