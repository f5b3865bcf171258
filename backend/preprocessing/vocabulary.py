"""
Shared F1 reference vocabulary.

Single source of driver, team and circuit names used both for
entity extraction at query time and for entity tagging at scrape time.
"""

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_VOCABULARY_PATH = Path(__file__).parent / "data" / "f1_vocabulary.json"


@dataclass(frozen=True)
class F1Vocabulary:
    """Canonical entity names, grouped by kind."""

    version: str
    drivers: tuple[str, ...]
    teams: tuple[str, ...]
    circuits: tuple[str, ...]

    def all_names(self) -> tuple[str, ...]:
        """Names in extraction order: drivers, teams, circuits."""
        return self.drivers + self.teams + self.circuits


def _unique(names: list[str]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for name in names:
        name = name.strip()
        if name and name not in seen:
            seen[name] = None
    return tuple(seen)


@lru_cache(maxsize=8)
def load_vocabulary(path: str | Path | None = None) -> F1Vocabulary:
    """
    Load the vocabulary JSON file.

    Args:
        path: Path to a vocabulary file (defaults to the packaged dataset)

    Returns:
        Parsed F1Vocabulary
    """
    path = Path(path) if path is not None else DEFAULT_VOCABULARY_PATH

    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    vocabulary = F1Vocabulary(
        version=str(data.get("version", "unversioned")),
        drivers=_unique(data.get("drivers", [])),
        teams=_unique(data.get("teams", [])),
        circuits=_unique(data.get("circuits", [])),
    )

    logger.info(
        f"Vocabulary {vocabulary.version} loaded: {len(vocabulary.drivers)} drivers, "
        f"{len(vocabulary.teams)} teams, {len(vocabulary.circuits)} circuits"
    )
    return vocabulary
