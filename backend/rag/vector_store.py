"""
Qdrant Vector Store

Stores F1 documents with their embeddings in a single Qdrant collection
and serves cosine-similarity search with optional metadata filters.

Payload layout per point:
    {"content": str, "metadata": {source, type, date, title, entities, ...}}
"""

import logging
from typing import Any

from qdrant_client import QdrantClient
from qdrant_client.http import models
from qdrant_client.http.models import Distance, VectorParams

from rag.config import Settings
from rag.schemas import Document

logger = logging.getLogger(__name__)

# Payload fields indexed for filtering
PAYLOAD_INDEXES = {
    "metadata.source": models.PayloadSchemaType.KEYWORD,
    "metadata.type": models.PayloadSchemaType.KEYWORD,
    "metadata.entities": models.PayloadSchemaType.KEYWORD,
    "metadata.season": models.PayloadSchemaType.INTEGER,
}


def create_qdrant_client(settings: Settings) -> QdrantClient:
    """Build a Qdrant client for a managed cluster, a server or in-memory use."""
    if settings.qdrant_url:
        if settings.qdrant_url == ":memory:":
            return QdrantClient(":memory:")
        return QdrantClient(url=settings.qdrant_url, api_key=settings.qdrant_api_key)
    # Disable version check to support different server versions
    return QdrantClient(
        host=settings.qdrant_host,
        port=settings.qdrant_port,
        api_key=settings.qdrant_api_key,
        check_compatibility=False,
    )


def build_filter(filters: dict[str, Any] | None) -> models.Filter | None:
    """
    Build a Qdrant filter from exact-match conditions.

    List values match any of their items; None values are ignored.
    """
    if not filters:
        return None

    conditions = []
    for key, value in filters.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple, set)):
            conditions.append(
                models.FieldCondition(key=key, match=models.MatchAny(any=list(value)))
            )
        else:
            conditions.append(
                models.FieldCondition(key=key, match=models.MatchValue(value=value))
            )

    if not conditions:
        return None
    return models.Filter(must=conditions)


class VectorStore:
    """Qdrant-backed document store."""

    def __init__(
        self,
        client: QdrantClient,
        collection_name: str = "f1_documents",
        embedding_dim: int = 768,
    ):
        """
        Initialize the vector store.

        Args:
            client: Qdrant client
            collection_name: Collection holding the documents
            embedding_dim: Dimension of stored vectors
        """
        self.client = client
        self.collection_name = collection_name
        self.embedding_dim = embedding_dim
        self._initialized = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "VectorStore":
        return cls(
            client=create_qdrant_client(settings),
            collection_name=settings.qdrant_collection,
            embedding_dim=settings.embedding_dim,
        )

    def initialize(self):
        """Create the collection if it doesn't exist."""
        if self._initialized:
            return

        if not self.client.collection_exists(self.collection_name):
            self._create_collection()
        else:
            logger.debug(f"Collection exists: {self.collection_name}")

        self._initialized = True

    def _create_collection(self):
        self.client.create_collection(
            collection_name=self.collection_name,
            vectors_config=VectorParams(
                size=self.embedding_dim,
                distance=Distance.COSINE,
            ),
        )

        for field_name, field_type in PAYLOAD_INDEXES.items():
            try:
                self.client.create_payload_index(
                    collection_name=self.collection_name,
                    field_name=field_name,
                    field_schema=field_type,
                )
            except Exception as e:
                logger.debug(f"Index {field_name} not created: {e}")

        logger.info(
            f"Created collection '{self.collection_name}' ({self.embedding_dim}-dim, cosine)"
        )

    def reset_collection(self):
        """Drop and recreate the collection (ensures the vector dimension matches)."""
        if self.client.collection_exists(self.collection_name):
            self.client.delete_collection(self.collection_name)
            logger.info(f"Deleted collection '{self.collection_name}'")
        self._create_collection()
        self._initialized = True

    def upsert(
        self,
        documents: list[tuple[Document, list[float]]],
        batch_size: int = 20,
    ) -> int:
        """
        Insert or overwrite documents with their embeddings.

        Args:
            documents: (document, embedding) pairs
            batch_size: Points per upsert request

        Returns:
            Number of documents written
        """
        self.initialize()
        total = 0

        for i in range(0, len(documents), batch_size):
            batch = documents[i : i + batch_size]
            points = [
                models.PointStruct(
                    id=doc.id,
                    vector=vector,
                    payload={
                        "content": doc.content,
                        "metadata": doc.metadata.model_dump(exclude_none=True),
                    },
                )
                for doc, vector in batch
            ]
            self.client.upsert(collection_name=self.collection_name, points=points)
            total += len(points)
            logger.info(f"Inserted batch {i // batch_size + 1}: {len(points)} documents")

        return total

    def search(
        self,
        query_vector: list[float],
        limit: int = 5,
        filters: dict[str, Any] | None = None,
    ) -> list[tuple[Document, float]]:
        """
        Nearest-neighbour search by cosine similarity.

        Args:
            query_vector: Query embedding
            limit: Maximum results
            filters: Exact-match payload filters, e.g. {"metadata.type": "news"}

        Returns:
            (document, score) pairs, best first
        """
        self.initialize()

        hits = self.client.query_points(
            collection_name=self.collection_name,
            query=query_vector,
            query_filter=build_filter(filters),
            limit=limit,
            with_payload=True,
        ).points

        return [
            (self._to_document(hit.id, hit.payload), hit.score if hit.score is not None else 0.0)
            for hit in hits
        ]

    def delete(self, filters: dict[str, Any]) -> int:
        """
        Delete documents matching a filter.

        Returns:
            Number of documents deleted
        """
        self.initialize()
        query_filter = build_filter(filters)
        if query_filter is None:
            raise ValueError("Refusing to delete without a filter; use clear() instead")

        count = self.count(filters)
        if count:
            self.client.delete(
                collection_name=self.collection_name,
                points_selector=models.FilterSelector(filter=query_filter),
            )
        logger.info(f"Deleted {count} documents matching {filters}")
        return count

    def clear(self):
        """Remove every document, keeping the collection."""
        self.reset_collection()
        logger.info("Collection cleared")

    def count(self, filters: dict[str, Any] | None = None) -> int:
        """Count documents, optionally matching a filter."""
        self.initialize()
        result = self.client.count(
            collection_name=self.collection_name,
            count_filter=build_filter(filters),
            exact=True,
        )
        return result.count

    def get_stats(self) -> dict:
        """Get statistics for the collection."""
        try:
            info = self.client.get_collection(self.collection_name)
            return {
                "name": self.collection_name,
                "points_count": getattr(info, "points_count", 0),
                "status": str(getattr(info, "status", "unknown")),
            }
        except Exception as e:
            return {"name": self.collection_name, "error": str(e)}

    def health_check(self) -> bool:
        """Check if Qdrant is reachable."""
        try:
            self.client.get_collections()
            return True
        except Exception:
            return False

    @staticmethod
    def _to_document(point_id: Any, payload: dict | None) -> Document:
        payload = payload or {}
        return Document(
            id=str(point_id),
            content=payload.get("content", ""),
            metadata=payload.get("metadata", {}),
        )
