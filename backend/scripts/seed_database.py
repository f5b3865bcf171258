#!/usr/bin/env python3
"""
Database Seed Script

Recreates the Qdrant collection (so the vector dimension matches the
embedding model) and loads every F1 source into it.

Run: python scripts/seed_database.py
Monitor progress: tail -f /tmp/f1_seed.log
"""

import asyncio
import logging
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from ingestion.orchestrator import IngestionOrchestrator
from rag.config import Settings
from rag.embeddings import EmbeddingService
from rag.vector_store import VectorStore

# Log file path
LOG_FILE = "/tmp/f1_seed.log"


async def main() -> int:
    """Main entry point for seeding."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.FileHandler(LOG_FILE),
            logging.StreamHandler(sys.stdout),
        ],
    )
    logger = logging.getLogger(__name__)

    settings = Settings.from_env()
    if settings.embedding_provider == "google" and not settings.google_api_key:
        logger.error("GOOGLE_API_KEY is not set")
        return 1

    embedder = EmbeddingService(
        provider=settings.embedding_provider,
        model_name=settings.embedding_model,
        dimension=settings.embedding_dim,
        api_key=settings.google_api_key,
    )
    vector_store = VectorStore.from_settings(settings)
    if not vector_store.health_check():
        logger.error("Cannot reach Qdrant; check QDRANT_URL / QDRANT_HOST")
        return 1

    orchestrator = IngestionOrchestrator(embedder=embedder, vector_store=vector_store)

    try:
        logger.info("=" * 60)
        logger.info("F1 RAG Chatbot - Database Seeding")
        logger.info("=" * 60)

        logger.info("Resetting collection...")
        stats = await orchestrator.seed(clear=True)

        if stats.documents_scraped == 0:
            logger.warning("No documents scraped. Check your internet connection.")
            return 1

        status = await orchestrator.status()
        logger.info(f"Total documents in database: {status['document_count']}")
        logger.info("=" * 60)
        logger.info("Database seeding complete")
        return 0

    except Exception as e:
        logger.error(f"Seeding failed: {e}", exc_info=True)
        return 1

    finally:
        await orchestrator.close()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
