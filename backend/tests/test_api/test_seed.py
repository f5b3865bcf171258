"""
Tests for the seed and scrape endpoints.
"""

import pytest

from api.dependencies import get_orchestrator, get_settings
from ingestion.orchestrator import IngestionStats
from rag.config import Settings


class FakeOrchestrator:
    """Records seed calls and reports a fixed document count."""

    def __init__(self, scraped=12, fail=False):
        self.scraped = scraped
        self.fail = fail
        self.seed_calls = []

    async def seed(self, clear=False):
        self.seed_calls.append(clear)
        if self.fail:
            raise RuntimeError("qdrant unavailable")
        return IngestionStats(documents_scraped=self.scraped, documents_inserted=self.scraped)

    async def status(self):
        return {"document_count": 42, "collection": {"name": "f1_documents"}}


@pytest.fixture
def orchestrator(override_dependency):
    fake = FakeOrchestrator()
    override_dependency(get_orchestrator, fake)
    return fake


@pytest.fixture
def protected(client, override_dependency):
    override_dependency(get_settings, Settings(seed_api_key="seed-secret", scrape_api_key="scrape-secret"))
    return client


class TestSeedEndpoint:
    """Tests for /api/seed."""

    def test_seed_without_key_configured(self, client, orchestrator):
        response = client.post("/api/seed")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["documents_scraped"] == 12
        assert data["total_in_database"] == 42
        assert orchestrator.seed_calls == [False]

    def test_seed_with_clear(self, client, orchestrator):
        client.post("/api/seed?clear=true")
        assert orchestrator.seed_calls == [True]

    def test_seed_requires_bearer(self, protected, orchestrator):
        response = protected.post("/api/seed")

        assert response.status_code == 401
        assert orchestrator.seed_calls == []

    def test_seed_wrong_bearer(self, protected, orchestrator):
        response = protected.post("/api/seed", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    def test_seed_with_bearer(self, protected, orchestrator):
        response = protected.post("/api/seed", headers={"Authorization": "Bearer seed-secret"})
        assert response.status_code == 200

    def test_seed_nothing_scraped(self, client, override_dependency):
        override_dependency(get_orchestrator, FakeOrchestrator(scraped=0))

        data = client.post("/api/seed").json()
        assert data["success"] is False

    def test_seed_failure(self, client, override_dependency):
        override_dependency(get_orchestrator, FakeOrchestrator(fail=True))

        response = client.post("/api/seed")
        assert response.status_code == 500
        assert response.json()["success"] is False

    def test_seed_status(self, client, orchestrator):
        data = client.get("/api/seed").json()

        assert data["status"] == "ready"
        assert data["documents_in_database"] == 42
        assert "Wikipedia" in data["sources"]


class TestScrapeEndpoint:
    """Tests for /api/scrape."""

    def test_scrape_requires_scrape_key(self, protected, orchestrator):
        response = protected.post("/api/scrape", headers={"Authorization": "Bearer seed-secret"})
        assert response.status_code == 401

    def test_scrape_with_key(self, protected, orchestrator):
        response = protected.post("/api/scrape", headers={"Authorization": "Bearer scrape-secret"})

        assert response.status_code == 200
        assert response.json()["documents_processed"] == 12
        assert orchestrator.seed_calls == [False]

    def test_scrape_status(self, client, orchestrator):
        assert client.get("/api/scrape").json() == {"status": "ready", "document_count": 42}
