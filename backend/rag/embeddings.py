"""
Embedding Service for RAG.

Provides text embeddings from a hosted model (Gemini embeddings through
langchain-google-genai) or, for offline use, a local sentence-transformers
model. Caches query embeddings for efficiency.
"""

import hashlib
import logging

from rag.schemas import Document

logger = logging.getLogger(__name__)

GOOGLE_PROVIDER = "google"
LOCAL_PROVIDER = "sentence-transformers"


class EmbeddingService:
    """Service for generating text embeddings."""

    def __init__(
        self,
        provider: str = GOOGLE_PROVIDER,
        model_name: str = "models/gemini-embedding-001",
        dimension: int = 768,
        api_key: str | None = None,
        cache_size: int = 10000,
    ):
        """
        Initialize the embedding service.

        Args:
            provider: "google" (hosted) or "sentence-transformers" (local)
            model_name: Embedding model name
            dimension: Output vector dimension
            api_key: Google API key for the hosted model
            cache_size: Maximum number of embeddings to cache
        """
        if provider not in (GOOGLE_PROVIDER, LOCAL_PROVIDER):
            raise ValueError(f"Unknown embedding provider: {provider}")

        self.provider = provider
        self.model_name = model_name
        self.dimension = dimension
        self.api_key = api_key
        self.model = None
        self._cache: dict[str, list[float]] = {}
        self._cache_size = cache_size
        self._initialized = False

    def initialize(self):
        """Create the embedding client."""
        if self._initialized:
            return

        try:
            if self.provider == GOOGLE_PROVIDER:
                from langchain_google_genai import GoogleGenerativeAIEmbeddings

                if not self.api_key:
                    raise ValueError("GOOGLE_API_KEY is not set")
                self.model = GoogleGenerativeAIEmbeddings(
                    model=self.model_name,
                    google_api_key=self.api_key,
                )
            else:
                from sentence_transformers import SentenceTransformer

                self.model = SentenceTransformer(self.model_name)
                self.dimension = self.model.get_sentence_embedding_dimension()

            self._initialized = True
            logger.info(f"Embedding model ready: {self.model_name} (dim={self.dimension})")
        except Exception as e:
            logger.error(f"Failed to load embedding model: {e}")
            raise

    def _get_cache_key(self, text: str) -> str:
        """Generate cache key for text."""
        return hashlib.md5(text.encode()).hexdigest()

    def _encode_query(self, text: str) -> list[float]:
        if self.provider == GOOGLE_PROVIDER:
            return self.model.embed_query(text, output_dimensionality=self.dimension)
        return self.model.encode(text, normalize_embeddings=True).tolist()

    def _encode_documents(self, texts: list[str]) -> list[list[float]]:
        if self.provider == GOOGLE_PROVIDER:
            return self.model.embed_documents(texts, output_dimensionality=self.dimension)
        embeddings = self.model.encode(
            texts,
            normalize_embeddings=True,
            show_progress_bar=len(texts) > 100,
        )
        return [e.tolist() for e in embeddings]

    def embed(self, text: str) -> list[float]:
        """
        Embed a single query text.

        Args:
            text: Text to embed

        Returns:
            Embedding vector
        """
        if not self._initialized:
            self.initialize()

        cache_key = self._get_cache_key(text)
        if cache_key in self._cache:
            return self._cache[cache_key]

        embedding = list(self._encode_query(text))

        if len(self._cache) >= self._cache_size:
            # Remove oldest entry (simple FIFO)
            oldest_key = next(iter(self._cache))
            del self._cache[oldest_key]
        self._cache[cache_key] = embedding

        return embedding

    def embed_batch(self, texts: list[str], batch_size: int = 32) -> list[list[float]]:
        """
        Embed multiple document texts.

        Args:
            texts: List of texts to embed
            batch_size: Number of texts sent per request

        Returns:
            List of embedding vectors, one per text
        """
        if not self._initialized:
            self.initialize()

        results: list[list[float]] = []
        for i in range(0, len(texts), batch_size):
            batch = texts[i : i + batch_size]
            results.extend(list(v) for v in self._encode_documents(batch))

            done = min(i + batch_size, len(texts))
            if done % 100 < batch_size or done == len(texts):
                logger.info(f"Generated {done}/{len(texts)} embeddings")

        return results

    def get_dimension(self) -> int:
        """Get embedding dimension."""
        return self.dimension

    def clear_cache(self):
        """Clear the embedding cache."""
        self._cache.clear()
        logger.info("Embedding cache cleared")


def prepare_text_for_embedding(document: Document) -> str:
    """
    Combine document metadata and content into the text that gets embedded.

    Title, type, related entities and season are prepended so that
    short documents still carry their context into the vector.
    """
    metadata = document.metadata
    parts = []

    if metadata.title:
        parts.append(f"Title: {metadata.title}")

    if metadata.type:
        parts.append(f"Type: {str(metadata.type).replace('_', ' ')}")

    if metadata.entities:
        parts.append(f"Related to: {', '.join(metadata.entities)}")

    if metadata.season:
        parts.append(f"Season: {metadata.season}")

    parts.append(document.content)
    return "\n".join(parts)
