"""
Wikipedia articles.

Fetches plain-text extracts for a fixed set of team, driver, circuit and
general F1 pages, plus the top search hits for a few topics, keeping the
leading substantial paragraphs.
"""

import asyncio
import logging

import httpx

from ingestion.documents import build_document
from ingestion.http import HTTPFetcher
from ingestion.text import extract_sections
from rag.schemas import Document, DocumentType

logger = logging.getLogger(__name__)

WIKIPEDIA_API = "https://en.wikipedia.org/w/api.php"
SOURCE = "wikipedia"

# Topics looked up through search, on top of the fixed page list
SEARCH_TOPICS = ["pit stop", "safety car", "Drag reduction system"]

# (page title, document type)
F1_WIKIPEDIA_PAGES: list[tuple[str, DocumentType]] = [
    # Teams
    ("Red Bull Racing", DocumentType.TEAM_INFO),
    ("Scuderia Ferrari", DocumentType.TEAM_INFO),
    ("Mercedes-AMG Petronas F1 Team", DocumentType.TEAM_INFO),
    ("McLaren", DocumentType.TEAM_INFO),
    ("Aston Martin in Formula One", DocumentType.TEAM_INFO),
    ("Alpine F1 Team", DocumentType.TEAM_INFO),
    ("Williams Racing", DocumentType.TEAM_INFO),
    ("Sauber Motorsport", DocumentType.TEAM_INFO),
    ("Racing Bulls", DocumentType.TEAM_INFO),
    ("Haas F1 Team", DocumentType.TEAM_INFO),
    # Drivers
    ("Max Verstappen", DocumentType.DRIVER_BIO),
    ("Lewis Hamilton", DocumentType.DRIVER_BIO),
    ("Charles Leclerc", DocumentType.DRIVER_BIO),
    ("Lando Norris", DocumentType.DRIVER_BIO),
    ("Carlos Sainz Jr.", DocumentType.DRIVER_BIO),
    ("George Russell (racing driver)", DocumentType.DRIVER_BIO),
    ("Oscar Piastri", DocumentType.DRIVER_BIO),
    ("Sergio Pérez", DocumentType.DRIVER_BIO),
    ("Fernando Alonso", DocumentType.DRIVER_BIO),
    ("Lance Stroll", DocumentType.DRIVER_BIO),
    # General
    ("Formula One", DocumentType.REGULATION),
    ("Formula One regulations", DocumentType.REGULATION),
    ("Formula One World Championship", DocumentType.HISTORICAL),
    ("List of Formula One World Drivers' Champions", DocumentType.HISTORICAL),
    # Circuits
    ("Circuit de Monaco", DocumentType.CIRCUIT),
    ("Silverstone Circuit", DocumentType.CIRCUIT),
    ("Circuit de Spa-Francorchamps", DocumentType.CIRCUIT),
    ("Monza Circuit", DocumentType.CIRCUIT),
    ("Suzuka International Racing Course", DocumentType.CIRCUIT),
]


class WikipediaScraper:
    """Scrapes Wikipedia page extracts."""

    name = "wikipedia"

    def __init__(
        self,
        fetcher: HTTPFetcher,
        pages: list[tuple[str, DocumentType]] | None = None,
        search_topics: list[str] | None = None,
        request_delay: float = 0.3,
        max_length: int = 2000,
    ):
        """
        Initialize the scraper.

        Args:
            fetcher: Shared HTTP fetcher
            pages: (title, document type) pages to fetch
            search_topics: Topics whose top search hits are also scraped
            request_delay: Pause between page requests (rate limiting)
            max_length: Maximum characters kept per page
        """
        self.fetcher = fetcher
        self.pages = pages if pages is not None else F1_WIKIPEDIA_PAGES
        self.search_topics = search_topics if search_topics is not None else SEARCH_TOPICS
        self.request_delay = request_delay
        self.max_length = max_length

    async def fetch_page(self, title: str) -> dict | None:
        """Fetch a page's plain-text extract, or None if it doesn't exist."""
        data = await self.fetcher.get_json(
            WIKIPEDIA_API,
            params={
                "action": "query",
                "titles": title,
                "prop": "extracts|info",
                "explaintext": "true",
                "inprop": "url",
                "redirects": "1",
                "format": "json",
            },
        )
        pages = data.get("query", {}).get("pages", {})
        for page_id, page in pages.items():
            if page_id != "-1" and page.get("extract"):
                return page
        return None

    async def search(self, query: str, limit: int = 10) -> list[str]:
        """Search for page titles."""
        data = await self.fetcher.get_json(
            WIKIPEDIA_API,
            params={
                "action": "opensearch",
                "search": query,
                "limit": limit,
                "namespace": 0,
                "format": "json",
            },
        )
        return data[1] if isinstance(data, list) and len(data) > 1 else []

    def page_to_document(self, page: dict, doc_type: DocumentType) -> Document | None:
        content = extract_sections(page["extract"], max_length=self.max_length)
        if not content:
            return None
        return build_document(
            content=content,
            source=SOURCE,
            doc_type=doc_type,
            title=page["title"],
            url=page.get("fullurl"),
        )

    async def _scrape_page(self, title: str, doc_type: DocumentType) -> Document | None:
        try:
            page = await self.fetch_page(title)
        except httpx.HTTPError as e:
            logger.error(f"Error fetching {title}: {e}")
            return None
        finally:
            if self.request_delay:
                await asyncio.sleep(self.request_delay)

        document = self.page_to_document(page, doc_type) if page else None
        if document is None:
            logger.warning(f"No usable content for {title}")
        return document

    async def scrape(self) -> list[Document]:
        """Fixed pages first, then search hits for each topic; duplicates dropped."""
        documents: dict[str, Document] = {}

        for title, doc_type in self.pages:
            document = await self._scrape_page(title, doc_type)
            if document:
                documents[document.id] = document
                logger.debug(f"Added: {title}")

        for topic in self.search_topics:
            for document in await self.scrape_search(topic):
                documents.setdefault(document.id, document)

        logger.info(f"Wikipedia: {len(documents)} documents")
        return list(documents.values())

    async def scrape_search(self, query: str, limit: int = 5) -> list[Document]:
        """Scrape the top search hits for an F1 topic."""
        try:
            titles = await self.search(f"Formula 1 {query}", limit)
        except httpx.HTTPError as e:
            logger.error(f"Error searching Wikipedia for {query}: {e}")
            return []

        documents = []
        for title in titles:
            document = await self._scrape_page(title, DocumentType.HISTORICAL)
            if document:
                documents.append(document)
        return documents
