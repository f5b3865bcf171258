"""Document construction with deterministic ids."""

import datetime
import uuid
from functools import lru_cache

from preprocessing.entity_extractor import EntityExtractor
from rag.schemas import Document, DocumentMetadata, DocumentType

# Namespace for document ids; changing it re-keys every stored document
DOCUMENT_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_URL, "https://f1-rag-chatbot/documents")


@lru_cache(maxsize=1)
def default_extractor() -> EntityExtractor:
    """Extractor over the packaged vocabulary, shared by all scrapers."""
    return EntityExtractor()


def today_iso() -> str:
    """Today's date as YYYY-MM-DD."""
    return datetime.date.today().isoformat()


def document_id(source: str, key: str) -> str:
    """
    Stable id for a logical document.

    Re-scraping the same (source, key) pair yields the same id, so an
    upsert overwrites the previous version instead of duplicating it.
    """
    return str(uuid.uuid5(DOCUMENT_NAMESPACE, f"{source.lower()}:{key.strip().lower()}"))


def build_document(
    content: str,
    source: str,
    doc_type: DocumentType,
    title: str,
    entities: list[str] | None = None,
    date: str | None = None,
    url: str | None = None,
    season: int | None = None,
    round: int | None = None,
    key: str | None = None,
    extractor: EntityExtractor | None = None,
) -> Document:
    """
    Build a document keyed by its source and natural key.

    Args:
        content: Document text
        source: Source name (e.g. "ergast", "wikipedia", "autosport")
        doc_type: Kind of content
        title: Human-readable title
        entities: Related drivers, teams and circuits; tagged from the
            vocabulary (title and content) when not given
        date: ISO date; defaults to today
        url: Link to the original content
        season: Championship year
        round: Round within the season
        key: Natural key for the id; defaults to the title
        extractor: Extractor used for tagging (shared vocabulary if not given)
    """
    if entities is None:
        entities = (extractor or default_extractor()).extract(f"{title}\n{content}")

    return Document(
        id=document_id(source, key or title),
        content=content,
        metadata=DocumentMetadata(
            source=source,
            type=doc_type,
            date=date or today_iso(),
            title=title,
            entities=list(dict.fromkeys(entities)),
            url=url,
            season=season,
            round=round,
        ),
    )
