"""Exception types shared by the stores, services and HTTP layer."""

from typing import Optional


class MappingError(ValueError):
    """A stored document could not be converted into an entity."""

    def __init__(self, document_id: str, reason: str):
        self.document_id = document_id
        super().__init__(f"Document {document_id} could not be mapped: {reason}")


class ValidationError(ValueError):
    """User input rejected before anything is written."""


class DuplicateApplicationError(ValidationError):
    """The user already applied to this job."""

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__("You have already applied to this job")


class NotFoundError(ValueError):
    """An entity id is not present in the current snapshot."""


class AuthenticationError(Exception):
    """Missing, invalid or expired credentials."""


class RemoteOperationError(Exception):
    """A call to the hosted backend failed.

    Attributes:
        operation: Name of the failed operation (e.g. "update_document").
        target: Collection, bucket or auth endpoint involved.
        code: Provider error code when the provider reports one.
    """

    def __init__(
        self,
        operation: str,
        target: str,
        message: str,
        code: Optional[str] = None
    ):
        self.operation = operation
        self.target = target
        self.code = code
        super().__init__(f"{operation} on {target} failed: {message}")
