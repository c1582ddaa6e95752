from datetime import date

from factories import pdf
from jobboard.models import BooleanField, FileField, Job, TextField
from jobboard.utils.custom_fields import validate_custom_field, validate_custom_fields


def test_required_boolean_accepts_false():
    field = BooleanField(id="relocate", label="Can relocate?", required=True)

    assert validate_custom_field(field, False) is None
    assert validate_custom_field(field, True) is None


def test_required_boolean_rejects_missing_answer():
    field = BooleanField(id="relocate", label="Can relocate?", required=True)

    assert validate_custom_field(field, None) == 'The field "Can relocate?" is required.'


def test_required_text_rejects_empty_string():
    field = TextField(id="why", label="Why us?", required=True)

    assert validate_custom_field(field, "") is not None
    assert validate_custom_field(field, "Because") is None


def test_optional_fields_accept_anything():
    assert validate_custom_field(TextField(id="why", label="Why us?"), None) is None
    assert validate_custom_field(FileField(id="cv", label="Portfolio"), None) is None


def test_validate_custom_fields_reports_in_field_order():
    job = Job(
        id="job-1",
        posted_at=date(2024, 1, 1),
        custom_fields=[
            FileField(id="portfolio", label="Portfolio", required=True),
            TextField(id="why", label="Why us?", required=True),
            BooleanField(id="relocate", label="Can relocate?", required=True),
        ]
    )

    errors = validate_custom_fields(job, {"relocate": False}, {})

    assert errors == [
        'The field "Portfolio" is required.',
        'The field "Why us?" is required.',
    ]
    assert validate_custom_fields(
        job, {"why": "Because", "relocate": True}, {"portfolio": pdf()}
    ) == []
