"""
Query expansion for F1 retrieval.

Builds a small set of query variants: the original question followed by
entity-anchored variants ("Verstappen Formula 1"). The variant count is
capped to bound the number of downstream retrieval calls.
"""

import logging
from dataclasses import dataclass, field

from preprocessing.entity_extractor import EntityExtractor

logger = logging.getLogger(__name__)

MAX_QUERY_VARIANTS = 3
ENTITY_QUERY_SUFFIX = "Formula 1"


@dataclass
class ExpandedQuery:
    """Result of query expansion."""
    original: str
    variants: list[str] = field(default_factory=list)
    entities: list[str] = field(default_factory=list)


class QueryExpander:
    """Expands a question into entity-anchored query variants."""

    def __init__(
        self,
        extractor: EntityExtractor | None = None,
        max_variants: int = MAX_QUERY_VARIANTS,
    ):
        """
        Initialize the query expander.

        Args:
            extractor: EntityExtractor instance (created if not provided)
            max_variants: Maximum number of variants, original question included
        """
        if max_variants < 1:
            raise ValueError("max_variants must be at least 1")
        self.extractor = extractor or EntityExtractor()
        self.max_variants = max_variants

    def expand(self, question: str) -> list[str]:
        """
        Expand a question into query variants.

        Args:
            question: Raw user question

        Returns:
            The question verbatim, then up to max_variants - 1 entity variants
        """
        return self.expand_query(question).variants

    def expand_query(self, question: str) -> ExpandedQuery:
        """Expand a question and keep the extracted entities alongside."""
        entities = self.extractor.extract(question)

        variants = [question]
        for entity in entities:
            variant = f"{entity} {ENTITY_QUERY_SUFFIX}"
            if variant not in variants:
                variants.append(variant)

        variants = variants[: self.max_variants]
        logger.debug(f"Expanded query into {len(variants)} variants (entities: {entities})")

        return ExpandedQuery(original=question, variants=variants, entities=entities)
