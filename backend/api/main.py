"""
F1 RAG Chatbot - FastAPI Application

Main entry point for the backend API.
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.dependencies import get_vector_store
from api.routers import chat, seed
from ingestion.orchestrator import IngestionOrchestrator
from observability import init_sentry
from preprocessing import QueryExpander
from rag.chat import ChatService
from rag.config import Settings
from rag.embeddings import EmbeddingService
from rag.llm import LLMRouter
from rag.retriever import DocumentRetriever
from rag.vector_store import VectorStore

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

settings = Settings.from_env()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build services on startup, release them on shutdown."""
    logger.info("Starting F1 RAG Chatbot API...")

    sentry_enabled = init_sentry(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        traces_sample_rate=0.1 if settings.environment == "production" else 1.0,
    )
    if sentry_enabled:
        logger.info("Sentry error monitoring initialized")

    embedder = EmbeddingService(
        provider=settings.embedding_provider,
        model_name=settings.embedding_model,
        dimension=settings.embedding_dim,
        api_key=settings.google_api_key,
    )
    vector_store = VectorStore.from_settings(settings)
    retriever = DocumentRetriever(
        embedder=embedder,
        vector_store=vector_store,
        expander=QueryExpander(),
        min_score=settings.retrieval_min_score,
        default_limit=settings.retrieval_limit,
    )
    llm_router = LLMRouter(settings)
    orchestrator = IngestionOrchestrator(embedder=embedder, vector_store=vector_store)

    app.state.settings = settings
    app.state.vector_store = vector_store
    app.state.chat_service = ChatService(
        retriever=retriever,
        llm_router=llm_router,
        retrieval_limit=settings.retrieval_limit,
    )
    app.state.orchestrator = orchestrator

    providers = [p.value for p in llm_router.get_available_providers()]
    logger.info(f"API startup complete (LLM providers: {providers or 'none'})")

    yield

    logger.info("Shutting down API...")
    await orchestrator.close()
    vector_store.client.close()


app = FastAPI(
    title="F1 RAG Chatbot",
    description="Retrieval-augmented Formula 1 question answering",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(chat.router, prefix="/api/chat", tags=["chat"])
app.include_router(seed.router, prefix="/api", tags=["seed"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "F1 RAG Chatbot",
        "version": "0.1.0",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/api/health")
async def health_check(vector_store: VectorStore = Depends(get_vector_store)):
    """Health check endpoint."""
    qdrant_ok = await asyncio.to_thread(vector_store.health_check)
    checks = {
        "api": "healthy",
        "qdrant": "healthy" if qdrant_ok else "not_connected",
    }
    overall = "healthy" if all(v == "healthy" for v in checks.values()) else "degraded"

    collection = await asyncio.to_thread(vector_store.get_stats) if qdrant_ok else None

    return {
        "status": overall,
        "version": "0.1.0",
        "services": checks,
        "collection": collection,
    }
