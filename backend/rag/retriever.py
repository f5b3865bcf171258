"""
Document Retriever

Hybrid retrieval over the F1 document store:
- Single-query semantic search with a score floor
- Type- and entity-scoped retrieval
- Multi-query retrieval with max-score fusion across query variants

A document that matches one variant very well outranks documents that
match several variants moderately: fusion keeps the best score per
document id, never a sum or average.
"""

import asyncio
import logging
from typing import Any

from observability import add_breadcrumb
from preprocessing.query_expander import QueryExpander
from rag.embeddings import EmbeddingService
from rag.exceptions import RetrievalError
from rag.schemas import Document, DocumentType, RetrievalResult
from rag.vector_store import VectorStore

logger = logging.getLogger(__name__)

DEFAULT_MIN_SCORE = 0.7
DEFAULT_LIMIT = 5


def fuse_max_scores(
    result_sets: list[list[tuple[Document, float]]],
    limit: int,
) -> list[tuple[Document, float]]:
    """
    Merge per-variant results keeping the maximum score per document id.

    Ties at an identical score are ordered by document id, so the
    ranking does not depend on the order the result sets arrive in.

    Args:
        result_sets: (document, score) pairs, one list per query variant
        limit: Maximum number of fused results

    Returns:
        (document, score) pairs sorted by descending score
    """
    best: dict[str, tuple[Document, float]] = {}

    for pairs in result_sets:
        for doc, score in pairs:
            current = best.get(doc.id)
            if current is None or score > current[1]:
                best[doc.id] = (doc, score)

    ranked = sorted(best.values(), key=lambda pair: (-pair[1], pair[0].id))
    return ranked[:limit]


class DocumentRetriever:
    """Retrieves F1 documents for a question."""

    def __init__(
        self,
        embedder: EmbeddingService,
        vector_store: VectorStore,
        expander: QueryExpander | None = None,
        min_score: float = DEFAULT_MIN_SCORE,
        default_limit: int = DEFAULT_LIMIT,
    ):
        """
        Initialize the retriever.

        Args:
            embedder: Embedding service used for query vectors
            vector_store: Document store to search
            expander: Query expander (created if not provided)
            min_score: Similarity floor; weaker matches are dropped
            default_limit: Result count when a call gives no limit
        """
        self.embedder = embedder
        self.vector_store = vector_store
        self.expander = expander or QueryExpander()
        self.min_score = min_score
        self.default_limit = default_limit

    async def _search(
        self,
        query: str,
        limit: int,
        filters: dict[str, Any] | None = None,
    ) -> list[tuple[Document, float]]:
        """Embed one query and search the store, applying the score floor."""
        # Both calls block on network I/O
        vector = await asyncio.to_thread(self.embedder.embed, query)
        hits = await asyncio.to_thread(self.vector_store.search, vector, limit, filters)
        return [(doc, score) for doc, score in hits if score >= self.min_score]

    async def retrieve_documents(
        self,
        query: str,
        limit: int | None = None,
        filters: dict[str, Any] | None = None,
    ) -> RetrievalResult:
        """
        Retrieve documents for a single query.

        Args:
            query: Query text
            limit: Maximum documents
            filters: Exact-match payload filters

        Returns:
            Documents scoring at or above the floor, best first
        """
        if limit is None:
            limit = self.default_limit
        if limit <= 0:
            return RetrievalResult()
        pairs = await self._search(query, limit, filters)
        return RetrievalResult.from_pairs(pairs)

    async def retrieve_by_type(
        self,
        query: str,
        doc_type: DocumentType | str,
        limit: int | None = None,
    ) -> RetrievalResult:
        """Retrieve documents of one type (e.g. only news)."""
        type_value = doc_type.value if isinstance(doc_type, DocumentType) else doc_type
        return await self.retrieve_documents(
            query,
            limit=limit,
            filters={"metadata.type": type_value},
        )

    async def retrieve_by_entity(
        self,
        query: str,
        entity: str,
        limit: int | None = None,
    ) -> RetrievalResult:
        """
        Retrieve documents about a specific driver, team or circuit.

        Over-fetches twice the limit, then keeps only documents whose
        content or entity tags mention the entity. Returns fewer than
        limit documents rather than padding with unrelated ones.
        """
        if limit is None:
            limit = self.default_limit
        candidates = await self.retrieve_documents(query, limit=limit * 2)

        matching = [
            (doc, score) for doc, score in candidates.pairs() if doc.mentions(entity)
        ]
        logger.debug(
            f"Entity filter '{entity}' kept {len(matching)}/{len(candidates)} candidates"
        )
        return RetrievalResult.from_pairs(matching[:limit])

    async def multi_query_retrieve(
        self,
        queries: list[str],
        limit: int | None = None,
    ) -> RetrievalResult:
        """
        Retrieve with several query variants and fuse by maximum score.

        Variants are searched concurrently. A variant that fails contributes
        no documents; if every variant fails, RetrievalError is raised.

        Args:
            queries: Query variants, original question first
            limit: Maximum documents in the fused result

        Returns:
            Fused documents, best first
        """
        if limit is None:
            limit = self.default_limit
        if not queries or limit <= 0:
            return RetrievalResult()

        outcomes = await asyncio.gather(
            *(self._search(query, limit) for query in queries),
            return_exceptions=True,
        )

        result_sets = []
        errors = []
        for query, outcome in zip(queries, outcomes):
            if isinstance(outcome, Exception):
                logger.warning(f"Retrieval failed for variant '{query}': {outcome}")
                errors.append(outcome)
                continue
            if isinstance(outcome, BaseException):
                raise outcome
            result_sets.append(outcome)

        if len(errors) == len(queries):
            raise RetrievalError(
                f"All {len(queries)} query variants failed"
            ) from errors[0]

        fused = fuse_max_scores(result_sets, limit)
        add_breadcrumb(
            message="Multi-query retrieval",
            data={
                "variants": len(queries),
                "failed": len(errors),
                "documents": len(fused),
            },
        )
        return RetrievalResult.from_pairs(fused)

    async def hybrid_retrieve(
        self,
        question: str,
        limit: int | None = None,
    ) -> RetrievalResult:
        """Expand the question into variants and run multi-query retrieval."""
        variants = self.expander.expand(question)
        logger.info(f"Hybrid retrieval with {len(variants)} variants: {variants}")
        return await self.multi_query_retrieve(variants, limit)
