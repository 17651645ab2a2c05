"""Schemas describing the outcome of a batch status transition."""

from pydantic import Field

from console_sync.enums.resource import ResourceKind
from console_sync.enums.review import ReviewView
from console_sync.enums.transition import Transition
from console_sync.exceptions import ApiError
from console_sync.schemas.base_schema_model import BaseSchemaModel

SUCCEEDED = "succeeded"
FAILED = "failed"
NOT_ATTEMPTED = "not_attempted"


class BatchItemFailure(BaseSchemaModel):
    """Why one identifier of a batch failed."""

    id: str = Field(..., description="Identifier of the failed entity")
    error_type: str = Field(..., description="Exception class name")
    message: str = Field(..., description="Error message")
    status_code: int | None = Field(None, description="HTTP status, if any")
    retryable: bool = Field(False, description="Whether a retry may succeed")

    @classmethod
    def from_exception(cls, item_id: str, error: Exception) -> "BatchItemFailure":
        """Build a failure record from the exception raised for ``item_id``."""
        return cls(
            id=item_id,
            error_type=type(error).__name__,
            message=str(error),
            status_code=getattr(error, "status_code", None),
            retryable=isinstance(error, ApiError) and error.retryable,
        )


class BatchResult(BaseSchemaModel):
    """Per-identifier report of a sequential, non-transactional batch.

    Items in ``succeeded`` have taken effect server-side and are never
    rolled back, whatever happened to later items. ``unchanged`` is the
    subset of ``succeeded`` that was already in the target state and needed
    no remote call.
    """

    kind: ResourceKind
    transition: Transition
    view: ReviewView | None = None
    succeeded: list[str] = Field(default_factory=list)
    unchanged: list[str] = Field(default_factory=list)
    failed: list[BatchItemFailure] = Field(default_factory=list)
    not_attempted: list[str] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed) + len(self.not_attempted)

    @property
    def failed_ids(self) -> list[str]:
        return [failure.id for failure in self.failed]

    @property
    def all_succeeded(self) -> bool:
        return not self.failed and not self.not_attempted

    @property
    def outcomes(self) -> dict[str, str]:
        """Map every identifier of the batch to its outcome."""
        outcomes = {item_id: SUCCEEDED for item_id in self.succeeded}
        outcomes.update({item_id: FAILED for item_id in self.failed_ids})
        outcomes.update({item_id: NOT_ATTEMPTED for item_id in self.not_attempted})
        return outcomes

    def retry_ids(self) -> list[str]:
        """Identifiers worth resubmitting: failed items plus those never tried."""
        return self.failed_ids + list(self.not_attempted)

    def summary(self) -> str:
        """Render the user-facing result line, e.g. "2 of 3 succeeded"."""
        return f"{len(self.succeeded)} of {self.total} succeeded"
