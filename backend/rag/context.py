"""Render retrieved documents into prompt context and source citations."""

from collections.abc import Mapping
from typing import Any

from rag.schemas import Document, RetrievalResult, SourceReference

NO_CONTEXT_AVAILABLE = "No specific context available. Using general F1 knowledge."
CONTEXT_SEPARATOR = "\n\n---\n\n"


def _label_and_content(document: Document | Mapping[str, Any]) -> tuple[str, str]:
    if isinstance(document, Document):
        return document.display_name, document.content

    metadata = document.get("metadata") or {}
    label = metadata.get("title") or metadata.get("source", "")
    return label, document.get("content", "")


def format_context(documents: list[Document] | list[Mapping[str, Any]]) -> str:
    """
    Format documents into a numbered, source-labelled context block.

    Each document becomes "[Source {n}: {title or source}]" followed by its
    content. Order is preserved and nothing is truncated.

    Args:
        documents: Document models or {"content", "metadata"} mappings

    Returns:
        Context text, or the no-context sentinel when there are no documents
    """
    if not documents:
        return NO_CONTEXT_AVAILABLE

    blocks = []
    for index, document in enumerate(documents, start=1):
        label, content = _label_and_content(document)
        blocks.append(f"[Source {index}: {label}]\n{content}")

    return CONTEXT_SEPARATOR.join(blocks)


def build_source_references(result: RetrievalResult | None) -> list[SourceReference]:
    """Build citations for a retrieval result, one per document."""
    if result is None:
        return []

    return [
        SourceReference(
            title=doc.display_name,
            source=doc.metadata.source,
            url=doc.metadata.url,
            relevance_score=score,
        )
        for doc, score in result.pairs()
    ]
