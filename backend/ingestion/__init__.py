"""
F1 Data Ingestion Package

Scrapes public F1 sources into documents, embeds them and loads them
into the Qdrant document store.
"""

from ingestion.orchestrator import (
    IngestionOrchestrator,
    IngestionStats,
    default_scrapers,
)

__all__ = [
    "IngestionOrchestrator",
    "IngestionStats",
    "default_scrapers",
]
