"""
Ergast API Integration

Fetches championship data in the Ergast format: race results, driver and
constructor standings, driver, constructor and circuit profiles.
The original ergast.com host is retired; Jolpica serves the same API.

API: https://github.com/jolpica/jolpica-f1
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import date

import httpx

from ingestion.documents import build_document, today_iso
from ingestion.http import HTTPFetcher
from rag.schemas import Document, DocumentType

logger = logging.getLogger(__name__)

ERGAST_BASE_URL = "https://api.jolpi.ca/ergast/f1"
SOURCE = "ergast"


@dataclass
class DriverInfo:
    """Driver information from Ergast."""

    driver_id: str
    code: str | None
    permanent_number: str | None
    given_name: str
    family_name: str
    date_of_birth: str | None
    nationality: str
    url: str | None

    @property
    def full_name(self) -> str:
        return f"{self.given_name} {self.family_name}"


@dataclass
class ConstructorInfo:
    """Constructor/team information from Ergast."""

    constructor_id: str
    name: str
    nationality: str
    url: str | None


def _driver_name(driver: dict) -> str:
    return f"{driver['givenName']} {driver['familyName']}"


class ErgastClient:
    """Client for the Ergast-format F1 API."""

    def __init__(self, fetcher: HTTPFetcher, base_url: str = ERGAST_BASE_URL):
        self.fetcher = fetcher
        self.base_url = base_url

    async def _fetch(self, endpoint: str, params: dict | None = None) -> dict | None:
        """Fetch an endpoint and return its MRData payload."""
        url = f"{self.base_url}/{endpoint}.json"

        try:
            data = await self.fetcher.get_json(url, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Ergast API error for {endpoint}: {e}")
            return None

        return data.get("MRData") if isinstance(data, dict) else None

    async def get_season_races(self, season: str = "current") -> list[dict]:
        """Get the race calendar for a season."""
        data = await self._fetch(season)
        if data:
            return data["RaceTable"]["Races"]
        return []

    async def get_race_results(self, season: str | int, round_num: str | int) -> dict | None:
        """Get a race with its results, or None if it has not been run."""
        data = await self._fetch(f"{season}/{round_num}/results")
        if not data:
            return None
        races = data["RaceTable"]["Races"]
        if not races or not races[0].get("Results"):
            return None
        return races[0]

    async def get_last_race_results(self, season: str = "current") -> dict | None:
        """Get the most recent race with results."""
        return await self.get_race_results(season, "last")

    async def get_driver_standings(self, season: str = "current") -> tuple[str | None, list[dict]]:
        """Get driver standings as (season, standings)."""
        data = await self._fetch(f"{season}/driverStandings")
        if data:
            lists = data["StandingsTable"].get("StandingsLists", [])
            if lists:
                return lists[0].get("season"), lists[0].get("DriverStandings", [])
        return None, []

    async def get_constructor_standings(self, season: str = "current") -> tuple[str | None, list[dict]]:
        """Get constructor standings as (season, standings)."""
        data = await self._fetch(f"{season}/constructorStandings")
        if data:
            lists = data["StandingsTable"].get("StandingsLists", [])
            if lists:
                return lists[0].get("season"), lists[0].get("ConstructorStandings", [])
        return None, []

    async def get_drivers(self, season: str = "current") -> list[DriverInfo]:
        """Get drivers entered in a season."""
        data = await self._fetch(f"{season}/drivers")
        if not data:
            return []

        return [
            DriverInfo(
                driver_id=d["driverId"],
                code=d.get("code"),
                permanent_number=d.get("permanentNumber"),
                given_name=d["givenName"],
                family_name=d["familyName"],
                date_of_birth=d.get("dateOfBirth"),
                nationality=d.get("nationality", ""),
                url=d.get("url"),
            )
            for d in data["DriverTable"]["Drivers"]
        ]

    async def get_constructors(self, season: str = "current") -> list[ConstructorInfo]:
        """Get constructors entered in a season."""
        data = await self._fetch(f"{season}/constructors")
        if not data:
            return []

        return [
            ConstructorInfo(
                constructor_id=c["constructorId"],
                name=c["name"],
                nationality=c.get("nationality", ""),
                url=c.get("url"),
            )
            for c in data["ConstructorTable"]["Constructors"]
        ]

    async def get_circuits(self, season: str = "current") -> list[dict]:
        """Get circuits used in a season."""
        data = await self._fetch(f"{season}/circuits")
        if data:
            return data["CircuitTable"]["Circuits"]
        return []


def race_result_document(race: dict) -> Document:
    """Format a race and its full classification."""
    results = race.get("Results", [])
    circuit = race["Circuit"]
    location = circuit["Location"]

    lines = [
        f"{race['raceName']} - {race['season']} Season, Round {race['round']}",
        f"Circuit: {circuit['circuitName']}, {location['locality']}, {location['country']}",
        f"Date: {race['date']}",
        "",
    ]

    if results:
        winner = results[0]
        lines.append(
            f"Race Winner: {_driver_name(winner['Driver'])} ({winner['Constructor']['name']})"
        )
        if winner.get("Time"):
            lines.append(f"Winning Time: {winner['Time']['time']}")

    lines.extend(["", "Full Results:"])
    for result in results:
        line = (
            f"{result['position']}. {_driver_name(result['Driver'])} "
            f"({result['Constructor']['name']}) - {result['points']} pts"
        )
        if result.get("Time"):
            line += f" - {result['Time']['time']}"
        if result.get("status") and result["status"] != "Finished":
            line += f" - {result['status']}"
        lines.append(line)

    season, round_num = int(race["season"]), int(race["round"])
    return build_document(
        content="\n".join(lines),
        source=SOURCE,
        doc_type=DocumentType.RACE_RESULT,
        title=f"{race['raceName']} {race['season']} Results",
        date=race["date"],
        url=race.get("url"),
        season=season,
        round=round_num,
        key=f"{season}-{round_num}-results",
    )


def driver_standings_document(standings: list[dict], season: str) -> Document:
    lines = [f"Formula 1 {season} Driver Championship Standings", ""]
    for s in standings:
        teams = ", ".join(c["name"] for c in s.get("Constructors", []))
        lines.append(
            f"{s['position']}. {_driver_name(s['Driver'])} ({teams}) - "
            f"{s['points']} points, {s['wins']} wins"
        )

    return build_document(
        content="\n".join(lines),
        source=SOURCE,
        doc_type=DocumentType.STANDINGS,
        title=f"{season} Driver Championship Standings",
        season=int(season),
    )


def constructor_standings_document(standings: list[dict], season: str) -> Document:
    lines = [f"Formula 1 {season} Constructor Championship Standings", ""]
    for s in standings:
        lines.append(
            f"{s['position']}. {s['Constructor']['name']} - {s['points']} points, {s['wins']} wins"
        )

    return build_document(
        content="\n".join(lines),
        source=SOURCE,
        doc_type=DocumentType.STANDINGS,
        title=f"{season} Constructor Championship Standings",
        season=int(season),
    )


def driver_document(driver: DriverInfo, season: str) -> Document:
    lines = [
        f"Driver Profile: {driver.full_name}",
        f"Nationality: {driver.nationality}",
    ]
    if driver.date_of_birth:
        lines.append(f"Date of Birth: {driver.date_of_birth}")
    if driver.permanent_number:
        lines.append(f"Number: {driver.permanent_number}")
    if driver.code:
        lines.append(f"Code: {driver.code}")
    lines.extend([
        "",
        f"{driver.full_name} is a {driver.nationality} Formula 1 driver "
        f"competing in the {season} season.",
    ])

    return build_document(
        content="\n".join(lines),
        source=SOURCE,
        doc_type=DocumentType.DRIVER_BIO,
        title=f"{driver.full_name} Profile",
        url=driver.url,
        season=int(season),
        key=f"driver-{driver.driver_id}",
    )


def constructor_document(constructor: ConstructorInfo, season: str) -> Document:
    content = (
        f"Team Profile: {constructor.name}\n"
        f"Nationality: {constructor.nationality}\n\n"
        f"{constructor.name} is a {constructor.nationality} Formula 1 constructor "
        f"competing in the {season} season."
    )
    return build_document(
        content=content,
        source=SOURCE,
        doc_type=DocumentType.TEAM_INFO,
        title=f"{constructor.name} Team Profile",
        url=constructor.url,
        season=int(season),
        key=f"constructor-{constructor.constructor_id}",
    )


def circuit_document(circuit: dict) -> Document:
    location = circuit["Location"]
    name = circuit["circuitName"]
    content = (
        f"Circuit: {name}\n"
        f"Location: {location['locality']}, {location['country']}\n"
        f"Coordinates: {location.get('lat')}, {location.get('long')}\n\n"
        f"{name} is located in {location['locality']}, {location['country']}. "
        f"It is one of the circuits on the Formula 1 calendar."
    )
    return build_document(
        content=content,
        source=SOURCE,
        doc_type=DocumentType.CIRCUIT,
        title=f"{name} Circuit Information",
        url=circuit.get("url"),
        key=f"circuit-{circuit['circuitId']}",
    )


class ErgastScraper:
    """Scrapes a season from the Ergast API into documents."""

    name = "ergast"

    def __init__(self, client: ErgastClient, season: str = "current", request_delay: float = 0.2):
        """
        Initialize the scraper.

        Args:
            client: Ergast API client
            season: Season year or "current"
            request_delay: Pause between per-round requests (rate limiting)
        """
        self.client = client
        self.season = season
        self.request_delay = request_delay

    async def scrape_results(self) -> list[Document]:
        """Race results for completed rounds plus both standings tables."""
        documents = []

        races = await self.client.get_season_races(self.season)
        logger.info(f"Found {len(races)} races")

        today = today_iso()
        for race in races:
            if race.get("date", "") > today:
                continue

            race_with_results = await self.client.get_race_results(race["season"], race["round"])
            if race_with_results:
                documents.append(race_result_document(race_with_results))
                logger.debug(f"Added results for {race['raceName']}")
            else:
                logger.debug(f"No results yet for {race['raceName']}")

            if self.request_delay:
                await asyncio.sleep(self.request_delay)

        season, driver_standings = await self.client.get_driver_standings(self.season)
        if driver_standings:
            documents.append(driver_standings_document(driver_standings, season or self._year()))

        season, constructor_standings = await self.client.get_constructor_standings(self.season)
        if constructor_standings:
            documents.append(
                constructor_standings_document(constructor_standings, season or self._year())
            )

        return documents

    async def scrape_profiles(self) -> list[Document]:
        """Driver, constructor and circuit profiles."""
        season = self._year()

        drivers = await self.client.get_drivers(self.season)
        constructors = await self.client.get_constructors(self.season)
        circuits = await self.client.get_circuits(self.season)

        documents = [driver_document(d, season) for d in drivers]
        documents += [constructor_document(c, season) for c in constructors]
        documents += [circuit_document(c) for c in circuits]

        logger.info(
            f"Added {len(drivers)} driver, {len(constructors)} constructor "
            f"and {len(circuits)} circuit profiles"
        )
        return documents

    async def scrape(self) -> list[Document]:
        documents = await self.scrape_results()
        documents += await self.scrape_profiles()
        logger.info(f"Ergast: {len(documents)} documents")
        return documents

    def _year(self) -> str:
        return str(date.today().year) if self.season == "current" else str(self.season)
