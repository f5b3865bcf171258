"""Parsers for external content formats."""

from ingestion.parsers.rss import RSSItem, parse_feed

__all__ = ["RSSItem", "parse_feed"]
