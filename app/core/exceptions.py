"""Application exception hierarchy."""


class StandupTrackerError(Exception):
    """Base exception for all standup tracker errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class AIProcessingError(StandupTrackerError):
    """Error while talking to a hosted model."""

    def __init__(
        self,
        message: str,
        model: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.model = model


class EmbeddingError(AIProcessingError):
    """Embedding could not be generated or has the wrong shape."""


class SearchError(StandupTrackerError):
    """Error in one of the search paths."""

    stage = "search"

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, details)


class SimilarityQueryError(SearchError):
    """The vector similarity query failed."""

    stage = "semantic"


class TextSearchError(SearchError):
    """The text fallback query failed."""

    stage = "text"


class SearchUnavailableError(SearchError):
    """Both the semantic and the text path failed."""

    stage = "orchestrator"


class InvalidRequestError(StandupTrackerError):
    """Malformed request (bad body, missing or short query, bad upload)."""

    status_code = 400


class StorageError(StandupTrackerError):
    """Error during object storage operations."""

    def __init__(
        self,
        message: str,
        bucket: str | None = None,
        path: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.bucket = bucket
        self.path = path


class DatabaseError(StandupTrackerError):
    """Error during database operations."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        table: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.operation = operation
        self.table = table


class NotFoundError(StandupTrackerError):
    """A referenced row does not exist."""

    def __init__(self, entity: str, entity_id: int | str, details: dict | None = None):
        super().__init__(f"{entity} {entity_id} not found", details)
        self.entity = entity
        self.entity_id = entity_id
