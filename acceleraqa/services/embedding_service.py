from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence
import logging

import requests

from acceleraqa.core.config import settings, Settings
from acceleraqa.core.errors import EmbeddingError

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

CONNECT_TIMEOUT_SECONDS = 5.0

class EmbeddingProvider:
    """Client for an OpenAI-compatible embeddings endpoint."""

    def __init__(
        self,
        api_key: Optional[str] = settings.EMBEDDING_API_KEY,
        api_base: str = settings.EMBEDDING_API_BASE,
        model_name: str = settings.EMBEDDING_MODEL_NAME,
        timeout: float = settings.EMBEDDING_TIMEOUT_SECONDS,
        max_input_chars: int = settings.EMBEDDING_MAX_INPUT_CHARS,
        max_workers: int = settings.EMBEDDING_MAX_WORKERS,
        dimension: Optional[int] = settings.EMBEDDING_DIMENSION,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            api_key: Bearer key for the embeddings API; None disables embedding
            api_base: Base URL of the API, without the /embeddings suffix
            model_name: Embedding model to request
            timeout: Read timeout in seconds. requests applies it per socket
                read, so a server trickling bytes can stretch one call past it
            max_input_chars: Input is truncated to this length before sending
            max_workers: Thread pool size used by embed_many
            dimension: Expected vector length; None accepts any length
            session: Optional requests session, mostly for tests
        """
        self.api_key = api_key
        self.api_base = api_base.rstrip("/")
        self.model_name = model_name
        self.timeout = timeout
        self.max_input_chars = max_input_chars
        self.max_workers = max_workers
        self.dimension = dimension
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, config: Settings) -> "EmbeddingProvider":
        return cls(
            api_key=config.EMBEDDING_API_KEY,
            api_base=config.EMBEDDING_API_BASE,
            model_name=config.EMBEDDING_MODEL_NAME,
            timeout=config.EMBEDDING_TIMEOUT_SECONDS,
            max_input_chars=config.EMBEDDING_MAX_INPUT_CHARS,
            max_workers=config.EMBEDDING_MAX_WORKERS,
            dimension=config.EMBEDDING_DIMENSION,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def embed(self, text: str) -> List[float]:
        """
        Converts text to an embedding vector with one API call.

        Raises:
            EmbeddingError: key missing, transport failure or timeout,
                non-success status, or a response without a usable vector
                of the expected length.
        """
        if not self.is_configured:
            raise EmbeddingError("Embedding API key is not configured.")

        try:
            response = self.session.post(
                f"{self.api_base}/embeddings",
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {self.api_key}",
                },
                json={
                    "model": self.model_name,
                    "input": text[: self.max_input_chars],
                    "encoding_format": "float",
                },
                timeout=(min(CONNECT_TIMEOUT_SECONDS, self.timeout), self.timeout),
            )
        except requests.Timeout as e:
            raise EmbeddingError(f"Embedding request timed out after {self.timeout}s.") from e
        except requests.RequestException as e:
            raise EmbeddingError(f"Embedding request failed: {e.__class__.__name__}.") from e

        if not response.ok:
            logger.error("Embedding request failed: status %d", response.status_code)
            raise EmbeddingError(f"Embedding API error: {response.status_code}")

        try:
            embedding = response.json()["data"][0]["embedding"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise EmbeddingError("Invalid embedding response.") from e
        if not isinstance(embedding, list) or not embedding:
            raise EmbeddingError("Invalid embedding response.")
        try:
            vector = [float(value) for value in embedding]
        except (TypeError, ValueError) as e:
            raise EmbeddingError("Invalid embedding response.") from e
        if self.dimension is not None and len(vector) != self.dimension:
            raise EmbeddingError(
                f"Embedding has {len(vector)} dimensions, expected {self.dimension}."
            )
        return vector

    def embed_many(self, texts: Sequence[str]) -> List[Optional[List[float]]]:
        """
        Embeds several texts concurrently. A failed call yields None for that
        position only; the output order always matches the input order.
        """
        if not texts:
            return []
        if not self.is_configured:
            logger.warning("Embedding API key not configured; storing %d chunks without embeddings.", len(texts))
            return [None] * len(texts)

        with ThreadPoolExecutor(max_workers=max(1, min(self.max_workers, len(texts)))) as pool:
            return list(pool.map(self._embed_or_none, texts))

    def _embed_or_none(self, text: str) -> Optional[List[float]]:
        try:
            return self.embed(text)
        except EmbeddingError as e:
            logger.warning("Embedding failed, continuing without vector: %s", e.message)
            return None
