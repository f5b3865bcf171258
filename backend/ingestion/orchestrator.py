"""
Ingestion Orchestrator

Coordinates scraping, embedding and loading into the vector store:
- Scrapers (Ergast, Jolpica, OpenF1, Wikipedia, RSS, curated) -> documents
- Embedding service -> vectors
- Qdrant -> stored documents

Used by the seed/scrape API endpoints and the seeding scripts.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime

from ingestion.content import (
    CuratedContentScraper,
    ErgastClient,
    ErgastScraper,
    JolpicaScraper,
    OpenF1Scraper,
    RSSNewsScraper,
    WikipediaScraper,
)
from ingestion.documents import document_id
from ingestion.http import HTTPFetcher
from ingestion.text import chunk_text
from observability import span
from rag.embeddings import EmbeddingService, prepare_text_for_embedding
from rag.schemas import Document, DocumentType
from rag.vector_store import VectorStore

logger = logging.getLogger(__name__)

# Documents replaced on every update: results/standings change after each race
STALE_ON_UPDATE = [
    {"metadata.source": "ergast", "metadata.type": [DocumentType.RACE_RESULT.value, DocumentType.STANDINGS.value]},
    {"metadata.source": "formula1.com", "metadata.type": DocumentType.NEWS.value},
]


@dataclass
class IngestionStats:
    """Statistics from an ingestion run."""

    documents_scraped: int = 0
    documents_inserted: int = 0
    documents_deleted: int = 0
    per_source: dict[str, int] = field(default_factory=dict)
    sources_failed: list[str] = field(default_factory=list)
    start_time: datetime | None = None
    end_time: datetime | None = None

    @property
    def duration_seconds(self) -> float:
        if self.start_time and self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return 0

    def to_dict(self) -> dict:
        return {
            "documents_scraped": self.documents_scraped,
            "documents_inserted": self.documents_inserted,
            "documents_deleted": self.documents_deleted,
            "per_source": dict(self.per_source),
            "sources_failed": list(self.sources_failed),
            "duration_seconds": round(self.duration_seconds, 1),
        }

    def __str__(self) -> str:
        return (
            f"Ingestion Stats:\n"
            f"  Documents: {self.documents_scraped} scraped, {self.documents_inserted} inserted, "
            f"{self.documents_deleted} deleted\n"
            f"  Failed sources: {', '.join(self.sources_failed) or 'none'}\n"
            f"  Duration: {self.duration_seconds:.1f}s"
        )


def default_scrapers(fetcher: HTTPFetcher) -> list:
    """All scrapers in scraping order."""
    ergast_client = ErgastClient(fetcher)
    return [
        ErgastScraper(ergast_client),
        JolpicaScraper(ergast_client),
        OpenF1Scraper(fetcher),
        WikipediaScraper(fetcher),
        RSSNewsScraper(fetcher),
        CuratedContentScraper(),
    ]


def split_long_documents(documents: list[Document], max_chars: int = 4000) -> list[Document]:
    """
    Split documents longer than max_chars into overlapping parts.

    The first part keeps the original id; later parts get ids derived
    from it, so re-scraping yields the same ids.
    """
    result = []
    for doc in documents:
        if len(doc.content) <= max_chars:
            result.append(doc)
            continue

        chunks = chunk_text(doc.content, chunk_size=max_chars)
        for i, chunk in enumerate(chunks):
            if i == 0:
                result.append(doc.model_copy(update={"content": chunk}))
                continue
            metadata = doc.metadata.model_copy(
                update={"title": f"{doc.display_name} (part {i + 1})"}
            )
            result.append(
                Document(
                    id=document_id(doc.metadata.source, f"{doc.id}#{i}"),
                    content=chunk,
                    metadata=metadata,
                )
            )
    return result


class IngestionOrchestrator:
    """Orchestrate scraping and loading of F1 documents."""

    def __init__(
        self,
        embedder: EmbeddingService,
        vector_store: VectorStore,
        fetcher: HTTPFetcher | None = None,
        scrapers: list | None = None,
        batch_size: int = 20,
        max_document_chars: int = 4000,
    ):
        """
        Initialize the orchestrator.

        Args:
            embedder: Embedding service for document vectors
            vector_store: Destination store
            fetcher: Shared HTTP fetcher (created if not provided)
            scrapers: Scrapers to run (all sources if not provided)
            batch_size: Documents per upsert batch
            max_document_chars: Longer documents are split before embedding
        """
        self.embedder = embedder
        self.vector_store = vector_store
        self.fetcher = fetcher or HTTPFetcher()
        self.scrapers = scrapers if scrapers is not None else default_scrapers(self.fetcher)
        self.batch_size = batch_size
        self.max_document_chars = max_document_chars

    async def close(self):
        await self.fetcher.close()

    def _scraper(self, scraper_type: type):
        return next((s for s in self.scrapers if isinstance(s, scraper_type)), None)

    async def scrape_all_sources(self, stats: IngestionStats | None = None) -> list[Document]:
        """
        Run every scraper in turn.

        A failing scraper is logged and skipped; the others still run.
        """
        stats = stats or IngestionStats()
        documents: list[Document] = []

        for scraper in self.scrapers:
            logger.info(f"=== Scraping {scraper.name} ===")
            try:
                scraped = await scraper.scrape()
            except Exception as e:
                logger.error(f"{scraper.name} scraping failed: {e}", exc_info=True)
                stats.sources_failed.append(scraper.name)
                continue

            stats.per_source[scraper.name] = len(scraped)
            documents.extend(scraped)
            logger.info(f"{scraper.name}: {len(scraped)} documents")

        stats.documents_scraped += len(documents)
        logger.info(f"Total documents collected: {len(documents)}")
        return documents

    async def embed_and_store(self, documents: list[Document]) -> int:
        """Embed documents and upsert them into the vector store."""
        documents = split_long_documents(documents, self.max_document_chars)
        if not documents:
            return 0

        texts = [prepare_text_for_embedding(doc) for doc in documents]
        logger.info(f"Generating embeddings for {len(texts)} documents...")
        with span("ingestion.embed", "Embed documents", {"documents": len(texts)}):
            vectors = await asyncio.to_thread(self.embedder.embed_batch, texts)

        return await asyncio.to_thread(
            self.vector_store.upsert,
            list(zip(documents, vectors)),
            self.batch_size,
        )

    async def seed(self, clear: bool = False) -> IngestionStats:
        """
        Scrape all sources and load them.

        Args:
            clear: Recreate the collection first

        Returns:
            Run statistics
        """
        stats = IngestionStats(start_time=datetime.now())

        if clear:
            await asyncio.to_thread(self.vector_store.clear)

        documents = await self.scrape_all_sources(stats)
        if documents:
            stats.documents_inserted = await self.embed_and_store(documents)
        else:
            logger.warning("No documents scraped")

        stats.end_time = datetime.now()
        logger.info(str(stats))
        return stats

    async def update(self) -> IngestionStats:
        """
        Refresh fast-changing data: race results, standings and curated news.

        Stale documents are deleted first, then re-scraped and loaded.
        """
        stats = IngestionStats(start_time=datetime.now())

        for filters in STALE_ON_UPDATE:
            deleted = await asyncio.to_thread(self.vector_store.delete, filters)
            stats.documents_deleted += deleted
            logger.info(f"Removed {deleted} outdated documents ({filters})")

        documents: list[Document] = []

        ergast = self._scraper(ErgastScraper)
        if ergast:
            try:
                results = await ergast.scrape_results()
                stats.per_source["ergast"] = len(results)
                documents.extend(results)
            except Exception as e:
                logger.error(f"Ergast update failed: {e}", exc_info=True)
                stats.sources_failed.append("ergast")

        curated = self._scraper(CuratedContentScraper)
        if curated:
            news = curated.news_articles()
            stats.per_source["curated"] = len(news)
            documents.extend(news)

        stats.documents_scraped = len(documents)
        if documents:
            stats.documents_inserted = await self.embed_and_store(documents)

        stats.end_time = datetime.now()
        logger.info(str(stats))
        return stats

    async def status(self) -> dict:
        """Document count and collection information."""
        count = await asyncio.to_thread(self.vector_store.count)
        return {
            "document_count": count,
            "collection": await asyncio.to_thread(self.vector_store.get_stats),
        }
