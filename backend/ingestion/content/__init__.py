"""
Content Scrapers

Each scraper turns one public source into documents:
- Ergast / Jolpica championship data
- OpenF1 sessions
- Wikipedia articles
- RSS news feeds
- Curated explainers and historical facts
"""

from ingestion.content.curated import CuratedContentScraper
from ingestion.content.ergast import ErgastClient, ErgastScraper
from ingestion.content.jolpica import JolpicaScraper
from ingestion.content.openf1 import OpenF1Scraper
from ingestion.content.rss import RSS_FEEDS, FeedSource, RSSNewsScraper
from ingestion.content.wikipedia import WikipediaScraper

__all__ = [
    "CuratedContentScraper",
    "ErgastClient",
    "ErgastScraper",
    "JolpicaScraper",
    "OpenF1Scraper",
    "RSS_FEEDS",
    "FeedSource",
    "RSSNewsScraper",
    "WikipediaScraper",
]
