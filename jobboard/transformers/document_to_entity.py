"""Transform stored documents into Pydantic entities and back.

Read path: `document_to_job` and `document_to_candidate` accept any
document shape found in the collections (missing fields, legacy field
names, timestamps as datetimes, ISO strings or epoch milliseconds) and
always return a fully populated entity.

Write path: `job_to_document` and `candidate_to_document` turn entity
field values into document keys. `None` means "no value" and is dropped
rather than written.
"""

import logging
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, TypeAdapter, ValidationError

from jobboard.constants import CUSTOM_FIELD_PREFIX
from jobboard.database.document_store import DELETE_FIELD, DocumentSnapshot
from jobboard.errors import MappingError
from jobboard.models import (
    Candidate,
    CandidateStatus,
    DynamicField,
    Job,
    JobStatus
)

logger = logging.getLogger(__name__)

_dynamic_field_adapter = TypeAdapter(DynamicField)
_datetime_adapter = TypeAdapter(datetime)
_date_adapter = TypeAdapter(date)

# Entity attribute -> document key
JOB_DOCUMENT_KEYS = {
    "title": "title",
    "location": "location",
    "status": "status",
    "applications": "applications",
    "posted_at": "postedAt",
    "description": "description",
    "requirements": "requirements",
    "contact_email": "contactEmail",
    "website": "website",
    "custom_fields": "customFields",
}

CANDIDATE_DOCUMENT_KEYS = {
    "name": "candidateName",
    "email": "candidateEmail",
    "phone": "candidatePhone",
    "job_id": "jobId",
    "job_title": "jobTitle",
    "company": "company",
    "status": "status",
    "applied_at": "appliedAt",
    "resume": "resumeUrl",
    "experience": "experience",
    "education": "education",
    "notes": "notes",
    "candidate_id": "candidateId",
    "candidate_user_id": "candidateUserId",
    "sent_for_analysis": "sentForAnalysis",
}

JOB_OPTIONAL_TEXT_KEYS = ("requirements", "contactEmail", "website")


def today() -> date:
    """Current calendar date (UTC)."""
    return datetime.now(timezone.utc).date()


def utc_now() -> str:
    """Current instant as an ISO-8601 string, used for createdAt/updatedAt stamps."""
    return datetime.now(timezone.utc).isoformat()


def normalize_date(value: Any) -> date:
    """Convert any stored timestamp representation to a calendar date.

    Args:
        value: datetime, date, ISO string, epoch milliseconds, or None.

    Returns:
        The calendar date, or today's date when the value is absent or
        cannot be read.
    """
    if value is None or value == "":
        return today()

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()

    if isinstance(value, date):
        return value

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc).date()

    if isinstance(value, str):
        text = value.strip()
        try:
            if "T" in text or " " in text:
                return normalize_date(_datetime_adapter.validate_python(text))
            return _date_adapter.validate_python(text)
        except ValidationError:
            logger.warning(f"Unreadable date {value!r}, using today")
            return today()

    logger.warning(f"Unsupported date value {value!r}, using today")
    return today()


def extract_custom_fields_data(data: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    """Collect `customField_<id>` keys into a mapping keyed by `<id>`.

    Returns:
        The mapping, or None when the document has no such keys.
    """
    custom_fields_data = {
        key[len(CUSTOM_FIELD_PREFIX):]: value
        for key, value in data.items()
        if key.startswith(CUSTOM_FIELD_PREFIX)
    }
    return custom_fields_data or None


def _first_present(data: Mapping[str, Any], *keys: str, default: Any = "") -> Any:
    """Return the first truthy value among `keys`."""
    for key in keys:
        value = data.get(key)
        if value:
            return value
    return default


def _enum_value(enum_type, value: Any, default: Enum) -> str:
    try:
        return enum_type(value).value
    except ValueError:
        if value:
            logger.warning(f"Unknown {enum_type.__name__} {value!r}, using {default.value}")
        return default.value


def _parse_custom_fields(raw_fields: Any, document_id: str) -> List[Any]:
    if not isinstance(raw_fields, list):
        return []

    parsed = []
    for raw_field in raw_fields:
        try:
            parsed.append(_dynamic_field_adapter.validate_python(raw_field))
        except ValidationError as error:
            logger.warning(f"Skipping invalid custom field on job {document_id}: {error}")
    return parsed


def document_to_job(snapshot: DocumentSnapshot) -> Job:
    """Convert a jobs-collection document to a Job.

    Args:
        snapshot: Stored document.

    Returns:
        Job with every missing field defaulted.

    Raises:
        MappingError: If the document has no data or a field has the wrong type.
    """
    data = snapshot.data
    if not data:
        raise MappingError(snapshot.id, "document has no data")

    posted_at = data.get("postedAt") or data.get("createdAt")

    try:
        applications = max(int(data.get("applications") or 0), 0)
    except (TypeError, ValueError):
        applications = 0

    try:
        return Job(
            id=snapshot.id,
            title=data.get("title") or "",
            location=data.get("location") or "",
            status=_enum_value(JobStatus, data.get("status"), JobStatus.DRAFT),
            applications=applications,
            posted_at=normalize_date(posted_at),
            description=data.get("description") or "",
            requirements=data.get("requirements") or "",
            contact_email=data.get("contactEmail") or "",
            website=data.get("website") or "",
            custom_fields=_parse_custom_fields(data.get("customFields"), snapshot.id),
        )
    except ValidationError as error:
        raise MappingError(snapshot.id, str(error)) from error


def document_to_candidate(snapshot: DocumentSnapshot) -> Candidate:
    """Convert an applications-collection document to a Candidate.

    Identity fields are read from `candidateName`/`candidateEmail`/
    `candidatePhone` with `name`/`email`/`phone` as fallback, and the
    resume from `resumeUrl` with `resume` as fallback.

    Args:
        snapshot: Stored document.

    Returns:
        Candidate with every missing field defaulted.

    Raises:
        MappingError: If the document has no data or a field has the wrong type.
    """
    data = snapshot.data
    if not data:
        raise MappingError(snapshot.id, "document has no data")

    try:
        candidate = Candidate(
            id=snapshot.id,
            name=_first_present(data, "candidateName", "name"),
            email=_first_present(data, "candidateEmail", "email"),
            phone=_first_present(data, "candidatePhone", "phone"),
            job_id=data.get("jobId") or "",
            job_title=data.get("jobTitle") or "",
            company=data.get("company") or "",
            status=_enum_value(CandidateStatus, data.get("status"), CandidateStatus.NEW),
            applied_at=normalize_date(data.get("appliedAt")),
            resume=_first_present(data, "resumeUrl", "resume"),
            experience=data.get("experience") or "",
            education=data.get("education") or "",
            notes=data.get("notes") or "",
            candidate_id=data.get("candidateId") or "",
            candidate_user_id=data.get("candidateUserId") or "",
            sent_for_analysis=bool(data.get("sentForAnalysis")),
            custom_fields_data=extract_custom_fields_data(data),
        )
    except ValidationError as error:
        raise MappingError(snapshot.id, str(error)) from error

    if not candidate.name or not candidate.email:
        logger.warning(f"Application {snapshot.id} is missing name or email")

    return candidate


def strip_unset_fields(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """Drop keys whose value is None."""
    return {key: value for key, value in fields.items() if value is not None}


def _to_document_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [_to_document_value(item) for item in value]
    return value


def _rename_keys(fields: Mapping[str, Any], key_map: Mapping[str, str]) -> Dict[str, Any]:
    return {key_map.get(key, key): _to_document_value(value) for key, value in fields.items()}


def job_to_document(fields: Mapping[str, Any], for_create: bool = False) -> Dict[str, Any]:
    """Prepare job fields for writing.

    Args:
        fields: Job attributes (entity names such as `contact_email`, or
            document keys such as `contactEmail`). None values are dropped.
        for_create: Fill `requirements`, `contactEmail` and `website` with
            an empty string when not given.

    Returns:
        Document fields. An empty `customFields` list is never written: it
        is left out on create and removed from the document on update.
    """
    document = _rename_keys(strip_unset_fields(fields), JOB_DOCUMENT_KEYS)
    document.pop("id", None)

    if for_create:
        for key in JOB_OPTIONAL_TEXT_KEYS:
            document.setdefault(key, "")

    if "customFields" in document and not document["customFields"]:
        if for_create:
            del document["customFields"]
        else:
            document["customFields"] = DELETE_FIELD

    return document


def candidate_to_document(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """Prepare application fields for writing.

    Args:
        fields: Candidate attributes (entity names or document keys).
            `custom_fields_data` is flattened into `customField_<id>` keys.
            None values are dropped.

    Returns:
        Document fields.
    """
    cleaned = strip_unset_fields(fields)
    custom_fields_data = cleaned.pop("custom_fields_data", None)
    legacy_custom_fields_data = cleaned.pop("customFieldsData", None)
    custom_fields_data = custom_fields_data or legacy_custom_fields_data or {}

    document = _rename_keys(cleaned, CANDIDATE_DOCUMENT_KEYS)
    document.pop("id", None)

    for field_id, value in custom_fields_data.items():
        if value is not None:
            document[f"{CUSTOM_FIELD_PREFIX}{field_id}"] = value

    return document
