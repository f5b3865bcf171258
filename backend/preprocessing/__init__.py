"""
F1 Query Preprocessing Module

Provides the shared entity vocabulary, entity extraction and
query expansion used ahead of document retrieval.
"""

from preprocessing.entity_extractor import EntityExtractor
from preprocessing.query_expander import ExpandedQuery, QueryExpander
from preprocessing.vocabulary import F1Vocabulary, load_vocabulary

__all__ = [
    "EntityExtractor",
    "ExpandedQuery",
    "QueryExpander",
    "F1Vocabulary",
    "load_vocabulary",
]
