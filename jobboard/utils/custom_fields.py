"""Validation of answers to a job's dynamic application-form fields."""

from typing import Any, Dict, List, Optional

from jobboard.models import FileField, Job, UploadedFile


def validate_custom_field(definition, value: Any) -> Optional[str]:
    """Check one submitted value against its field definition.

    Args:
        definition: TextField, BooleanField or FileField.
        value: Submitted value (str, bool, UploadedFile) or None if unanswered.

    Returns:
        Error message if the field is required and not satisfied, None otherwise.
    """
    if definition.required and not definition.is_satisfied(value):
        return f'The field "{definition.label}" is required.'
    return None


def submitted_value(definition, values: Dict[str, Any], files: Dict[str, UploadedFile]) -> Any:
    """Pick the submitted value for a field from the form's values or files."""
    if isinstance(definition, FileField):
        return files.get(definition.id)
    return values.get(definition.id)


def validate_custom_fields(
    job: Job,
    values: Dict[str, Any],
    files: Dict[str, UploadedFile]
) -> List[str]:
    """Validate every dynamic field of a job.

    Returns:
        Error messages, in field order; empty when all required fields are answered.
    """
    errors = []
    for definition in job.custom_fields:
        error = validate_custom_field(definition, submitted_value(definition, values, files))
        if error:
            errors.append(error)
    return errors
