from typing import Optional


class RetrievalError(Exception):
    """Base class for errors surfaced by the retrieval pipeline.

    Every error carries a stable ``code`` and the HTTP status the API layer
    should answer with. ``message`` is safe to show to the caller.
    """

    code: str = "internal_error"
    status_code: int = 500

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code

    def to_dict(self) -> dict:
        return {"error": {"code": self.code, "message": self.message}}


class ValidationError(RetrievalError):
    """Bad or missing input. Not retried."""

    code = "validation_error"
    status_code = 400


class NotFoundError(RetrievalError):
    """Document missing or owned by another tenant."""

    code = "not_found"
    status_code = 404


class EmbeddingError(RetrievalError):
    """Embedding provider failure. Callers recover by falling back to text scoring."""

    code = "embedding_error"
    status_code = 502


class StorageError(RetrievalError):
    """Backend unavailable or transaction failure. Safe to retry."""

    code = "storage_error"
    status_code = 500
