"""
Seed router - Scraping and loading endpoints.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from api.dependencies import get_orchestrator, require_scrape_key, require_seed_key
from ingestion.content import RSS_FEEDS
from ingestion.orchestrator import IngestionOrchestrator
from observability import capture_exception

router = APIRouter()
logger = logging.getLogger(__name__)

SOURCES = [
    "Ergast API",
    "Jolpica API",
    "OpenF1 API",
    "Wikipedia",
    *(f"{feed.source} RSS" for feed in RSS_FEEDS),
    "Curated articles and historical facts",
]


@router.post("/seed", dependencies=[Depends(require_seed_key)])
async def seed(
    clear: bool = Query(False, description="Recreate the collection before seeding"),
    orchestrator: IngestionOrchestrator = Depends(get_orchestrator),
):
    """Scrape every source, embed the documents and load them."""
    try:
        stats = await orchestrator.seed(clear=clear)
        status = await orchestrator.status()
    except Exception as e:
        logger.error(f"Seeding failed: {e}", exc_info=True)
        capture_exception(e, tags={"endpoint": "seed"})
        return JSONResponse(
            {"success": False, "error": "Seeding failed", "message": str(e)},
            status_code=500,
        )

    if stats.documents_scraped == 0:
        return {"success": False, "message": "No documents scraped", "documents_scraped": 0}

    return {
        "success": True,
        "message": "Database seeded successfully",
        "documents_scraped": stats.documents_scraped,
        "documents_inserted": stats.documents_inserted,
        "total_in_database": status["document_count"],
        "stats": stats.to_dict(),
        "sources": SOURCES,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/seed")
async def seed_status(orchestrator: IngestionOrchestrator = Depends(get_orchestrator)):
    """Document count and usage instructions."""
    try:
        status = await orchestrator.status()
    except Exception as e:
        logger.error(f"Failed to get database status: {e}")
        return JSONResponse(
            {"status": "error", "message": "Failed to get database status"},
            status_code=500,
        )

    return {
        "status": "ready",
        "documents_in_database": status["document_count"],
        "sources": SOURCES,
        "instructions": {
            "seed": "POST /api/seed with Authorization: Bearer <API_KEY>",
            "seed_and_clear": "POST /api/seed?clear=true",
        },
    }


@router.post("/scrape", dependencies=[Depends(require_scrape_key)])
async def scrape(orchestrator: IngestionOrchestrator = Depends(get_orchestrator)):
    """Scrape, embed and insert without clearing existing data."""
    try:
        stats = await orchestrator.seed(clear=False)
        status = await orchestrator.status()
    except Exception as e:
        logger.error(f"Scrape failed: {e}", exc_info=True)
        capture_exception(e, tags={"endpoint": "scrape"})
        return JSONResponse({"success": False, "error": str(e)}, status_code=500)

    if stats.documents_scraped == 0:
        return {"success": False, "message": "No documents scraped"}

    return {
        "success": True,
        "message": "Data scraping and embedding complete",
        "documents_processed": stats.documents_scraped,
        "total_documents_in_db": status["document_count"],
    }


@router.get("/scrape")
async def scrape_status(orchestrator: IngestionOrchestrator = Depends(get_orchestrator)):
    try:
        status = await orchestrator.status()
    except Exception as e:
        return JSONResponse({"status": "error", "error": str(e)})
    return {"status": "ready", "document_count": status["document_count"]}
