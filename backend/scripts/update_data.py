#!/usr/bin/env python3
"""
Database Update Script

Refreshes race results, standings and curated news. Meant to run on a
schedule (e.g. cron after each race weekend).

Run: python scripts/update_data.py
"""

import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from ingestion.orchestrator import IngestionOrchestrator
from rag.config import Settings
from rag.embeddings import EmbeddingService
from rag.vector_store import VectorStore

LOG_FILE = "/tmp/f1_update.log"


async def main() -> int:
    """Main entry point for the update."""
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
    embedder = EmbeddingService(
        provider=settings.embedding_provider,
        model_name=settings.embedding_model,
        dimension=settings.embedding_dim,
        api_key=settings.google_api_key,
    )
    vector_store = VectorStore.from_settings(settings)
    orchestrator = IngestionOrchestrator(embedder=embedder, vector_store=vector_store)

    logger.info(f"Update started at: {datetime.now().isoformat()}")
    try:
        stats = await orchestrator.update()
        status = await orchestrator.status()
        logger.info(f"Total documents in database: {status['document_count']}")
        logger.info(f"Update finished at: {datetime.now().isoformat()}")
        return 1 if stats.sources_failed else 0

    except Exception as e:
        logger.error(f"Update failed: {e}", exc_info=True)
        return 1

    finally:
        await orchestrator.close()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
