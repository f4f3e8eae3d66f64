"""Error kinds reported by the collection request validator."""

from __future__ import annotations


class CollectionRequestError(ValueError):
    """Base class for request validation failures."""

    kind = "collection_request_error"

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class EmptyInputError(CollectionRequestError):
    """Raised when a message carries neither text nor a source."""

    kind = "empty_input"


class CollectionValidationError(CollectionRequestError):
    """Raised when extracted parameters violate the collection schema."""

    kind = "validation_error"


class MetadataCheckFailure(CollectionRequestError):
    """Raised when a metadata URI cannot be fetched or lacks required fields.

    Never fatal: the validator falls back to the configured default URI.
    """

    kind = "metadata_check_failure"
