"""
Structured RSS parsing.

Reads the item fields the news scrapers rely on: title, link,
description and pubDate. Markup is stripped from titles and
descriptions; items without a title or description are skipped.
"""

import logging
from dataclasses import dataclass

import feedparser

from ingestion.text import clean_html, parse_date

logger = logging.getLogger(__name__)


@dataclass
class RSSItem:
    """A single feed item."""
    title: str
    link: str
    description: str
    published: str  # YYYY-MM-DD
    source: str


def parse_feed(content: bytes | str, source: str, limit: int | None = None) -> list[RSSItem]:
    """
    Parse an RSS (or Atom) document into items.

    Args:
        content: Raw feed body
        source: Name of the publication the feed belongs to
        limit: Maximum number of items to return

    Returns:
        Items in feed order
    """
    feed = feedparser.parse(content)
    if feed.bozo and not feed.entries:
        logger.warning(f"{source}: unreadable feed ({feed.get('bozo_exception')})")
        return []

    items: list[RSSItem] = []
    for entry in feed.entries:
        title = clean_html(entry.get("title", ""))
        description = clean_html(entry.get("summary") or entry.get("description", ""))
        if not title or not description:
            continue

        items.append(
            RSSItem(
                title=title,
                link=entry.get("link", "").strip(),
                description=description,
                published=parse_date(entry.get("published") or entry.get("updated")),
                source=source,
            )
        )
        if limit is not None and len(items) >= limit:
            break

    return items
