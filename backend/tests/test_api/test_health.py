"""
Tests for API health endpoints.
"""

import asyncio

from api.dependencies import get_vector_store


def test_root(client):
    """Test root endpoint returns expected response."""
    response = client.get("/")
    assert response.status_code == 200

    data = response.json()
    assert data["name"] == "F1 RAG Chatbot"
    assert data["status"] == "running"


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/api/health")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "healthy"
    assert data["services"] == {"api": "healthy", "qdrant": "healthy"}
    assert data["collection"]["name"] == "f1_documents"


def test_health_check_degraded(client, override_dependency):
    """Unreachable Qdrant reports degraded, not an error."""
    class DownStore:
        def health_check(self):
            return False

    override_dependency(get_vector_store, DownStore())

    data = client.get("/api/health").json()
    assert data["status"] == "degraded"
    assert data["services"]["qdrant"] == "not_connected"
    assert data["collection"] is None


def test_health_check_queries_qdrant_off_event_loop(client, override_dependency):
    """Blocking Qdrant calls run in a worker thread."""
    class LoopCheckingStore:
        def __init__(self):
            self.saw_loop = []

        def _on_loop(self):
            try:
                asyncio.get_running_loop()
            except RuntimeError:
                return False
            return True

        def health_check(self):
            self.saw_loop.append(self._on_loop())
            return True

        def get_stats(self):
            self.saw_loop.append(self._on_loop())
            return {"name": "f1_documents", "points_count": 0}

    store = LoopCheckingStore()
    override_dependency(get_vector_store, store)

    data = client.get("/api/health").json()
    assert data["status"] == "healthy"
    assert store.saw_loop == [False, False]
