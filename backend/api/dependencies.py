"""
FastAPI dependencies.

Services are built once in the application lifespan and kept on
app.state; endpoints receive them through these providers.
"""

import secrets

from fastapi import Depends, HTTPException, Request, status

from ingestion.orchestrator import IngestionOrchestrator
from rag.chat import ChatService
from rag.config import Settings
from rag.vector_store import VectorStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_chat_service(request: Request) -> ChatService:
    return request.app.state.chat_service


def get_vector_store(request: Request) -> VectorStore:
    return request.app.state.vector_store


def get_orchestrator(request: Request) -> IngestionOrchestrator:
    return request.app.state.orchestrator


def _check_bearer(request: Request, api_key: str | None):
    """Reject the request unless it carries the key (when one is configured)."""
    if not api_key:
        return
    auth_header = request.headers.get("Authorization", "")
    if not secrets.compare_digest(auth_header.encode(), f"Bearer {api_key}".encode()):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


def require_seed_key(request: Request, settings: Settings = Depends(get_settings)):
    _check_bearer(request, settings.seed_api_key or settings.scrape_api_key)


def require_scrape_key(request: Request, settings: Settings = Depends(get_settings)):
    _check_bearer(request, settings.scrape_api_key)
