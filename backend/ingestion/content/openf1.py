"""
OpenF1 sessions.

Recent sessions of the current year and the driver line-up of each.

API: https://openf1.org/
"""

import logging
from datetime import date

import httpx

from ingestion.documents import build_document
from ingestion.http import HTTPFetcher
from rag.schemas import Document, DocumentType

logger = logging.getLogger(__name__)

OPENF1_BASE_URL = "https://api.openf1.org/v1"
OPENF1_URL = "https://openf1.org/"
SOURCE = "openf1"


class OpenF1Scraper:
    """Scrapes the most recent OpenF1 sessions."""

    name = "openf1"

    def __init__(
        self,
        fetcher: HTTPFetcher,
        base_url: str = OPENF1_BASE_URL,
        recent_sessions: int = 5,
        year: int | None = None,
    ):
        self.fetcher = fetcher
        self.base_url = base_url
        self.recent_sessions = recent_sessions
        self.year = year or date.today().year

    async def _fetch(self, endpoint: str, params: dict) -> list[dict]:
        try:
            data = await self.fetcher.get_json(f"{self.base_url}/{endpoint}", params=params)
        except httpx.HTTPError as e:
            logger.warning(f"OpenF1 {endpoint}: {e}")
            return []
        return data if isinstance(data, list) else []

    async def get_sessions(self) -> list[dict]:
        return await self._fetch("sessions", {"year": self.year})

    async def get_session_drivers(self, session_key: int) -> list[dict]:
        return await self._fetch("drivers", {"session_key": session_key})

    async def scrape(self) -> list[Document]:
        documents = []
        sessions = (await self.get_sessions())[-self.recent_sessions:]

        for session in sessions:
            session_date = session["date_start"].split("T")[0]
            key = f"session-{session['session_key']}"
            session_type = session.get("session_type", "Session")

            documents.append(
                build_document(
                    content=(
                        f"{session_type} - {session['session_name']}\n"
                        f"Location: {session['location']}, {session['country_name']}\n"
                        f"Circuit: {session['circuit_short_name']}\n"
                        f"Date: {session['date_start']}\n\n"
                        f"This {session_type.lower()} session took place at "
                        f"{session['circuit_short_name']} in {session['country_name']}."
                    ),
                    source=SOURCE,
                    doc_type=DocumentType.RACE,
                    title=f"{session['session_name']} - {session_type}",
                    date=session_date,
                    url=OPENF1_URL,
                    key=key,
                )
            )

            drivers = await self.get_session_drivers(session["session_key"])
            if drivers:
                lineup = "\n".join(
                    f"{d['driver_number']}. {d['full_name']} ({d.get('team_name') or 'Unknown'})"
                    for d in drivers
                )
                documents.append(
                    build_document(
                        content=f"Drivers participating in {session['session_name']}:\n\n{lineup}",
                        source=SOURCE,
                        doc_type=DocumentType.DRIVER,
                        title=f"{session['session_name']} Driver Lineup",
                        date=session_date,
                        url=OPENF1_URL,
                        key=f"{key}-drivers",
                    )
                )

        logger.info(f"OpenF1: {len(documents)} documents")
        return documents
