"""Embedding generation against the hosted embedding model."""

from typing import Iterable, List, Optional

from openai import OpenAI

from app.core.exceptions import EmbeddingError
from app.core.logging import get_logger
from app.settings import Settings, settings as default_settings

logger = get_logger("services.embedding")

# Hosted model input cap (~8000 tokens)
MAX_INPUT_CHARS = 30000


def build_profile_text(
    name: Optional[str],
    role: Optional[str],
    description: Optional[str],
    skills: Optional[Iterable[str]] = None,
) -> str:
    """Concatenate the searchable profile fields into one text.

    Name, role and description come first, then the skills, all space
    separated. Missing fields are skipped.
    """
    parts = [name or "", role or "", description or ""]
    text = " ".join(parts)
    skill_list = [s for s in (skills or []) if s]
    if skill_list:
        text = f"{text} {' '.join(skill_list)}"
    return " ".join(text.split())


class EmbeddingService:
    """Service for creating fixed-size text embeddings.

    Failures are not retried; they surface as EmbeddingError.
    """

    def __init__(
        self,
        openai_client: Optional[OpenAI] = None,
        settings: Optional[Settings] = None,
    ):
        """Initialize embedding service.

        Args:
            openai_client: Optional OpenAI client instance
            settings: Optional settings instance
        """
        self._settings = settings or default_settings
        self._client = openai_client or OpenAI(api_key=self._settings.openai_api_key)

    @property
    def dimension(self) -> int:
        return self._settings.embedding_dimension

    def create_embedding(self, text: str) -> List[float]:
        """Create embedding vector for text.

        Args:
            text: Text to embed

        Returns:
            List of floats with exactly ``embedding_dimension`` entries

        Raises:
            EmbeddingError: If the model call fails or the vector has the wrong size
        """
        text = (text or "").strip()
        if not text:
            raise EmbeddingError("Cannot embed empty text", model=self._settings.embedding_model)
        if len(text) > MAX_INPUT_CHARS:
            text = text[:MAX_INPUT_CHARS]
            logger.debug("Truncated text to %d chars for embedding", MAX_INPUT_CHARS)

        try:
            response = self._client.embeddings.create(
                model=self._settings.embedding_model,
                input=text,
                dimensions=self._settings.embedding_dimension,
            )
            vector = list(response.data[0].embedding)
        except Exception as e:
            logger.error("Failed to create embedding: %s", e)
            raise EmbeddingError(
                f"Failed to generate embedding: {e}",
                model=self._settings.embedding_model,
            ) from e

        self._check_dimension(vector)
        return vector

    def create_embeddings_batch(self, texts: List[str]) -> List[List[float]]:
        """Create embeddings for multiple texts in a single API call.

        Args:
            texts: List of texts to embed

        Returns:
            List of embedding vectors, in input order

        Raises:
            EmbeddingError: If the batch call fails or any vector has the wrong size
        """
        if not texts:
            return []

        cleaned_texts = [t.strip()[:MAX_INPUT_CHARS] for t in texts]

        try:
            response = self._client.embeddings.create(
                model=self._settings.embedding_model,
                input=cleaned_texts,
                dimensions=self._settings.embedding_dimension,
            )
            # Sort by index to maintain order
            sorted_data = sorted(response.data, key=lambda x: x.index)
            vectors = [list(d.embedding) for d in sorted_data]
        except Exception as e:
            logger.error("Failed to create batch embeddings: %s", e)
            raise EmbeddingError(
                f"Failed to generate batch embeddings: {e}",
                model=self._settings.embedding_model,
            ) from e

        if len(vectors) != len(texts):
            raise EmbeddingError(
                f"Expected {len(texts)} embeddings, got {len(vectors)}",
                model=self._settings.embedding_model,
            )
        for vector in vectors:
            self._check_dimension(vector)
        return vectors

    def _check_dimension(self, vector: List[float]) -> None:
        if len(vector) != self._settings.embedding_dimension:
            raise EmbeddingError(
                f"Embedding has {len(vector)} dimensions, "
                f"expected {self._settings.embedding_dimension}",
                model=self._settings.embedding_model,
            )
