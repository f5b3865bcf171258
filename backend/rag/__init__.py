"""
RAG (Retrieval Augmented Generation) module for the F1 chatbot.

Provides hybrid retrieval over the F1 document store (Qdrant), context
formatting and chat generation.
"""

from rag.chat import ChatAnswer, ChatService
from rag.config import Settings
from rag.context import NO_CONTEXT_AVAILABLE, build_source_references, format_context
from rag.embeddings import EmbeddingService
from rag.exceptions import F1RAGError, GenerationError, RetrievalError
from rag.llm import LLMProvider, LLMRouter
from rag.retriever import DocumentRetriever, fuse_max_scores
from rag.schemas import Document, DocumentMetadata, DocumentType, RetrievalResult, SourceReference
from rag.vector_store import VectorStore

__all__ = [
    "ChatAnswer",
    "ChatService",
    "Settings",
    "NO_CONTEXT_AVAILABLE",
    "build_source_references",
    "format_context",
    "EmbeddingService",
    "F1RAGError",
    "GenerationError",
    "RetrievalError",
    "LLMProvider",
    "LLMRouter",
    "DocumentRetriever",
    "fuse_max_scores",
    "Document",
    "DocumentMetadata",
    "DocumentType",
    "RetrievalResult",
    "SourceReference",
    "VectorStore",
]
