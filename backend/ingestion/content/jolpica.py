"""
Jolpica season snapshot.

A compact view of the current season from the Jolpica API: the race
calendar, the latest race's top ten and both championship tables.
"""

import logging
from datetime import date

from ingestion.content.ergast import ErgastClient
from ingestion.documents import build_document
from rag.schemas import Document, DocumentType

logger = logging.getLogger(__name__)

SOURCE = "jolpica"
JOLPICA_URL = "https://api.jolpi.ca/ergast/f1"


class JolpicaScraper:
    """Scrapes the current season snapshot."""

    name = "jolpica"

    def __init__(self, client: ErgastClient, season: int | None = None):
        self.client = client
        self.season = str(season or date.today().year)

    async def scrape_calendar(self) -> list[Document]:
        races = await self.client.get_season_races(self.season)
        if not races:
            return []

        lines = [
            f"Round {race['round']}: {race['raceName']} - {race['Circuit']['circuitName']}, "
            f"{race['Circuit']['Location']['country']} ({race['date']})"
            for race in races
        ]
        return [
            build_document(
                content=f"{self.season} Formula 1 Race Calendar:\n\n" + "\n".join(lines),
                source=SOURCE,
                doc_type=DocumentType.CALENDAR,
                title=f"{self.season} F1 Season Calendar",
                url=JOLPICA_URL,
                season=int(self.season),
            )
        ]

    async def scrape_latest_race(self) -> list[Document]:
        race = await self.client.get_last_race_results(self.season)
        if not race:
            return []

        top_ten = race.get("Results", [])[:10]
        lines = [
            f"P{r['position']}: {r['Driver']['givenName']} {r['Driver']['familyName']} "
            f"({r['Constructor']['name']}) - {r.get('status', '')}"
            for r in top_ten
        ]
        content = (
            f"{race['raceName']} {race['season']} - Race Results\n\n"
            f"Circuit: {race['Circuit']['circuitName']}\n"
            f"Date: {race['date']}\n\n"
            "Top 10 Results:\n" + "\n".join(lines)
        )
        return [
            build_document(
                content=content,
                source=SOURCE,
                doc_type=DocumentType.RACE,
                title=f"{race['raceName']} {race['season']} Results",
                date=race["date"],
                url=JOLPICA_URL,
                season=int(race["season"]),
                round=int(race["round"]),
            )
        ]

    async def scrape_standings(self) -> list[Document]:
        documents = []

        _, drivers = await self.client.get_driver_standings(self.season)
        if drivers:
            lines = [
                f"{s['position']}. {s['Driver']['givenName']} {s['Driver']['familyName']} "
                f"({s['Constructors'][0]['name'] if s.get('Constructors') else 'Unknown'}) - "
                f"{s['points']} pts ({s['wins']} wins)"
                for s in drivers
            ]
            documents.append(
                build_document(
                    content=f"{self.season} F1 Driver Championship Standings:\n\n" + "\n".join(lines),
                    source=SOURCE,
                    doc_type=DocumentType.STANDINGS,
                    title=f"{self.season} Driver Standings",
                    url=JOLPICA_URL,
                    season=int(self.season),
                )
            )

        _, constructors = await self.client.get_constructor_standings(self.season)
        if constructors:
            lines = [
                f"{s['position']}. {s['Constructor']['name']} - {s['points']} pts ({s['wins']} wins)"
                for s in constructors
            ]
            documents.append(
                build_document(
                    content=f"{self.season} F1 Constructor Championship Standings:\n\n" + "\n".join(lines),
                    source=SOURCE,
                    doc_type=DocumentType.STANDINGS,
                    title=f"{self.season} Constructor Standings",
                    url=JOLPICA_URL,
                    season=int(self.season),
                )
            )

        return documents

    async def scrape(self) -> list[Document]:
        documents = await self.scrape_calendar()
        documents += await self.scrape_latest_race()
        documents += await self.scrape_standings()
        logger.info(f"Jolpica: {len(documents)} documents")
        return documents
