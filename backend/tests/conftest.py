"""
Pytest configuration and fixtures.
"""

import sys
from pathlib import Path

# Add the backend directory to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

import hashlib

import pytest
from fastapi.testclient import TestClient
from langchain_core.language_models import FakeListChatModel

from api.dependencies import get_chat_service, get_settings, get_vector_store
from api.main import app
from ingestion.documents import document_id
from rag.chat import ChatService
from rag.config import Settings
from rag.exceptions import GenerationError
from rag.retriever import DocumentRetriever
from rag.schemas import Document, DocumentMetadata


def make_document(
    key: str,
    content: str | None = None,
    title: str | None = None,
    source: str = "test",
    doc_type: str = "news",
    entities: list[str] | None = None,
    url: str | None = None,
) -> Document:
    """Build a document with a deterministic id derived from key."""
    return Document(
        id=document_id(source, key),
        content=content or f"Content about {key}",
        metadata=DocumentMetadata(
            source=source,
            type=doc_type,
            date="2024-05-26",
            title=title,
            entities=entities or [],
            url=url,
        ),
    )


class FakeEmbedder:
    """Embeds each distinct text as a one-element vector holding its index."""

    def __init__(self, failing: set[str] | None = None, dimension: int = 4):
        self.failing = failing or set()
        self.dimension = dimension
        self.calls: list[str] = []
        self._ids: dict[str, int] = {}

    def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        if text in self.failing:
            raise ConnectionError(f"embedding service unavailable for '{text}'")
        index = self._ids.setdefault(text, len(self._ids))
        return [float(index)]

    def text_for(self, vector: list[float]) -> str:
        index = int(vector[0])
        return next(text for text, i in self._ids.items() if i == index)

    def embed_batch(self, texts: list[str], batch_size: int = 32) -> list[list[float]]:
        vectors = []
        for text in texts:
            digest = hashlib.sha256(text.encode()).digest()
            vectors.append([b / 255 + 0.01 for b in digest[: self.dimension]])
        return vectors


class FakeVectorStore:
    """Returns canned (document, score) hits per query text."""

    def __init__(self, embedder: FakeEmbedder, hits: dict[str, list[tuple[Document, float]]] | None = None):
        self.embedder = embedder
        self.hits = hits or {}
        self.searches: list[tuple[str, int, dict | None]] = []

    def search(self, query_vector, limit=5, filters=None):
        query = self.embedder.text_for(query_vector)
        self.searches.append((query, limit, filters))

        hits = self.hits.get(query, [])
        if filters and "metadata.type" in filters:
            hits = [(d, s) for d, s in hits if d.metadata.type == filters["metadata.type"]]
        return sorted(hits, key=lambda pair: -pair[1])[:limit]

    def health_check(self) -> bool:
        return True

    def get_stats(self) -> dict:
        return {"name": "f1_documents", "points_count": 0, "status": "green"}


class FakeLLMRouter:
    """Hands out a fixed chat model (or fails like an unconfigured router)."""

    def __init__(self, llm=None):
        self.llm = llm

    def get_llm(self, provider=None):
        if self.llm is None:
            raise GenerationError("No LLM provider configured")
        return self.llm


@pytest.fixture
def embedder():
    return FakeEmbedder()


@pytest.fixture
def sample_documents():
    """Documents used across retrieval and chat tests."""
    return {
        "monaco": make_document(
            "monaco-2024",
            content="Charles Leclerc won the 2024 Monaco Grand Prix for Ferrari.",
            title="2024 Monaco Grand Prix Results",
            source="ergast",
            doc_type="race_result",
            entities=["Charles Leclerc", "Ferrari", "Circuit de Monaco"],
        ),
        "verstappen": make_document(
            "verstappen-bio",
            content="Max Verstappen is a Dutch racing driver and four-time world champion.",
            title="Max Verstappen",
            source="wikipedia",
            doc_type="driver_bio",
            entities=["Max Verstappen", "Verstappen"],
        ),
        "drs": make_document(
            "drs-explainer",
            content="DRS opens a flap in the rear wing to reduce drag.",
            title="Understanding DRS",
            source="formula1.com",
            doc_type="news",
        ),
        "untitled": make_document(
            "untitled-news",
            content="Silverstone hosts the British Grand Prix.",
            source="autosport",
            doc_type="news",
        ),
    }


def build_retriever(hits, failing=None, min_score=0.7):
    """Retriever over fake embedding and search services."""
    fake_embedder = FakeEmbedder(failing=failing)
    store = FakeVectorStore(fake_embedder, hits)
    retriever = DocumentRetriever(
        embedder=fake_embedder,
        vector_store=store,
        min_score=min_score,
    )
    return retriever, fake_embedder, store


@pytest.fixture
def chat_model():
    return FakeListChatModel(responses=["Leclerc won Monaco in 2024."])


@pytest.fixture
def chat_service(sample_documents, chat_model):
    question = "Who won the Monaco Grand Prix?"
    retriever, _, _ = build_retriever({question: [(sample_documents["monaco"], 0.91)]})
    return ChatService(retriever=retriever, llm_router=FakeLLMRouter(chat_model))


@pytest.fixture
def client(chat_service):
    """Create a test client with fake services injected."""
    store = FakeVectorStore(FakeEmbedder())
    app.dependency_overrides[get_chat_service] = lambda: chat_service
    app.dependency_overrides[get_vector_store] = lambda: store
    app.dependency_overrides[get_settings] = lambda: Settings()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def override_dependency():
    """Override an app dependency for one test."""
    def _override(dependency, value):
        app.dependency_overrides[dependency] = lambda: value

    yield _override
    app.dependency_overrides.clear()

