"""
Curated F1 content.

Explainer articles and historical facts shipped with the package in
ingestion/data/curated_content.json.
"""

import json
import logging
from pathlib import Path

from ingestion.documents import build_document
from preprocessing.entity_extractor import EntityExtractor
from rag.schemas import Document, DocumentType

logger = logging.getLogger(__name__)

CURATED_CONTENT_PATH = Path(__file__).parent.parent / "data" / "curated_content.json"
ARTICLE_SOURCE = "formula1.com"
FACTS_SOURCE = "compiled"


class CuratedContentScraper:
    """Builds documents from the bundled curated content."""

    name = "curated"

    def __init__(
        self,
        path: Path = CURATED_CONTENT_PATH,
        extractor: EntityExtractor | None = None,
    ):
        self.path = path
        self.extractor = extractor or EntityExtractor()
        self._content: dict | None = None

    @property
    def content(self) -> dict:
        if self._content is None:
            with open(self.path, encoding="utf-8") as f:
                self._content = json.load(f)
        return self._content

    def news_articles(self) -> list[Document]:
        documents = []
        for article in self.content.get("articles", []):
            text = f"{article['title']}\n\n{article['content']}"
            documents.append(
                build_document(
                    content=text,
                    source=ARTICLE_SOURCE,
                    doc_type=DocumentType.NEWS,
                    title=article["title"],
                    extractor=self.extractor,
                    url=article.get("url"),
                )
            )
        return documents

    def historical_facts(self) -> list[Document]:
        return [
            build_document(
                content=f"{fact['title']}\n\n{fact['content']}",
                source=FACTS_SOURCE,
                doc_type=DocumentType.HISTORICAL,
                title=fact["title"],
                extractor=self.extractor,
            )
            for fact in self.content.get("historical_facts", [])
        ]

    async def scrape(self) -> list[Document]:
        documents = self.news_articles() + self.historical_facts()
        logger.info(f"Curated: {len(documents)} documents")
        return documents
