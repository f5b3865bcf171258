"""
F1 news from RSS feeds.

Latest articles from the major F1 news outlets, tagged with the drivers,
teams and circuits they mention.
"""

import logging
import re
from dataclasses import dataclass

import httpx

from ingestion.documents import build_document
from ingestion.http import HTTPFetcher
from ingestion.parsers.rss import RSSItem, parse_feed
from preprocessing.entity_extractor import EntityExtractor
from rag.schemas import Document, DocumentType

logger = logging.getLogger(__name__)

RSS_ACCEPT = "application/rss+xml, application/xml, text/xml"


@dataclass(frozen=True)
class FeedSource:
    """An RSS feed and the publication it belongs to."""
    url: str
    source: str


RSS_FEEDS = [
    FeedSource("https://www.autosport.com/rss/f1/news/", "Autosport"),
    FeedSource("https://www.motorsport.com/rss/f1/news/", "Motorsport.com"),
    FeedSource("https://www.racefans.net/feed/", "RaceFans"),
    FeedSource("https://racingnews365.com/feed", "RacingNews365"),
    FeedSource("https://the-race.com/feed/", "The Race"),
    FeedSource("https://www.planetf1.com/feed/", "PlanetF1"),
]


def source_slug(name: str) -> str:
    """Publication name as a source key ("The Race" -> "the-race")."""
    return re.sub(r"\s+", "-", name.strip().lower())


class RSSNewsScraper:
    """Scrapes the latest articles from each configured feed."""

    name = "rss"

    def __init__(
        self,
        fetcher: HTTPFetcher,
        feeds: list[FeedSource] | None = None,
        items_per_feed: int = 10,
        extractor: EntityExtractor | None = None,
    ):
        self.fetcher = fetcher
        self.feeds = feeds if feeds is not None else RSS_FEEDS
        self.items_per_feed = items_per_feed
        self.extractor = extractor or EntityExtractor()

    def item_to_document(self, item: RSSItem) -> Document:
        content = f"{item.title}\n\n{item.description}"
        return build_document(
            content=content,
            source=source_slug(item.source),
            doc_type=DocumentType.NEWS,
            title=item.title,
            extractor=self.extractor,
            date=item.published,
            url=item.link or None,
            key=item.link or item.title,
        )

    async def fetch_feed(self, feed: FeedSource) -> list[RSSItem]:
        body = await self.fetcher.get_bytes(feed.url, accept=RSS_ACCEPT)
        return parse_feed(body, feed.source, limit=self.items_per_feed)

    async def scrape(self) -> list[Document]:
        documents = []

        for feed in self.feeds:
            try:
                items = await self.fetch_feed(feed)
            except httpx.HTTPError as e:
                logger.warning(f"{feed.source}: failed to fetch feed ({e})")
                continue

            documents.extend(self.item_to_document(item) for item in items)
            logger.info(f"{feed.source}: {len(items)} articles")

        return documents
