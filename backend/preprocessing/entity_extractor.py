"""
Entity extraction for F1 text.

Matches known driver, team and circuit names against free text using
case-insensitive substring containment.
"""

import logging

from preprocessing.vocabulary import F1Vocabulary, load_vocabulary

logger = logging.getLogger(__name__)


class EntityExtractor:
    """Finds canonical F1 entity names mentioned in text."""

    def __init__(self, vocabulary: F1Vocabulary | None = None):
        """
        Initialize the extractor.

        Args:
            vocabulary: Vocabulary to match against (packaged dataset if not provided)
        """
        self.vocabulary = vocabulary or load_vocabulary()
        # (lowercased, canonical) pairs in extraction order
        self._needles = [(name.lower(), name) for name in self.vocabulary.all_names()]

    def extract(self, text: str) -> list[str]:
        """
        Extract entity names mentioned in text.

        Args:
            text: Arbitrary text

        Returns:
            Deduplicated canonical names, drivers first, then teams, then circuits
        """
        if not text:
            return []

        haystack = text.lower()
        found: list[str] = []
        for needle, canonical in self._needles:
            if needle in haystack and canonical not in found:
                found.append(canonical)

        return found
