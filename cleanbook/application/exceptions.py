class DraftValidationError(ValueError):
    """Raised when a forward transition is refused (missing or invalid field)."""

    def __init__(self, message: str, step: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.step = step


class SourceUnavailable(RuntimeError):
    """Raised by adapters when a remote collaborator fails (retryable)."""
    pass


class CatalogUnavailable(RuntimeError):
    """Raised when services/add-ons cannot be loaded from the catalog source."""
    pass


class SubmissionFailed(RuntimeError):
    """Raised when the order sink rejects a write. The draft stays intact."""
    pass


class ResumeDeserializationFailed(ValueError):
    """Raised when a persisted draft snapshot cannot be decoded."""
    pass
