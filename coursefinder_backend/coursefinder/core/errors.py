class SearchError(Exception):
    """Base error for the search engine; carries the failing operation and field."""

    def __init__(self, message: str, operation: str, field: str | None = None):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.field = field

    def to_dict(self) -> dict:
        return {"operation": self.operation, "field": self.field, "message": self.message}


class CriteriaValidationError(SearchError):
    """Malformed or out-of-range request field, raised before any catalog I/O."""


class CatalogQueryError(SearchError):
    """The catalog store failed. Not retried here; callers own retry policy."""


class InternalScoringError(SearchError):
    """Unexpected failure while scoring strings or building suggestions."""


class SearchCancelledError(SearchError):
    """The caller's cancellation signal fired before scoring could run."""
