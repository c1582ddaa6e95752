import pytest

from jobboard.constants import APPLICATIONS_COLLECTION, SUPPLIERS_COLLECTION
from jobboard.errors import NotFoundError
from jobboard.repositories.supplier_repository import SupplierRepository
from jobboard.services.analysis_service import AnalysisService


@pytest.fixture()
def analysis_service(document_store, candidates_store, jobs_store):
    return AnalysisService(candidates_store, jobs_store, SupplierRepository(document_store))


def test_send_for_analysis_creates_supplier(document_store, analysis_service, seed_application):
    seed_application("a-1")

    result = analysis_service.send_for_analysis("a-1")

    assert result == {"id": "a-1", "supplier_created": True, "sent_for_analysis": True}
    suppliers = list(document_store.collections[SUPPLIERS_COLLECTION].values())
    assert len(suppliers) == 1
    supplier = suppliers[0]
    assert supplier["nome"] == "Ana Souza"
    assert supplier["email"] == "ana@example.com"
    assert supplier["tipo"] == "PF"
    assert supplier["categoria"] == "Recursos Humanos"
    assert supplier["centroDeCusto"] == "RH"
    assert supplier["candidateId"] == "a-1"
    assert supplier["jobId"] == "job-1"
    assert document_store.collections[APPLICATIONS_COLLECTION]["a-1"]["sentForAnalysis"] is True


def test_existing_supplier_is_not_duplicated(document_store, analysis_service, seed_application):
    document_store.seed(SUPPLIERS_COLLECTION, "s-1", {"nome": "Ana", "email": "ana@example.com"})
    seed_application("a-1")

    result = analysis_service.send_for_analysis("a-1")

    assert result["supplier_created"] is False
    assert len(document_store.collections[SUPPLIERS_COLLECTION]) == 1
    assert document_store.collections[APPLICATIONS_COLLECTION]["a-1"]["sentForAnalysis"] is True


def test_unknown_application(analysis_service):
    with pytest.raises(NotFoundError):
        analysis_service.send_for_analysis("missing")
