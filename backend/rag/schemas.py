"""Schemas for stored documents and retrieval results."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class DocumentType(str, Enum):
    """Kind of content a document holds."""
    RACE_RESULT = "race_result"
    DRIVER_BIO = "driver_bio"
    TEAM_INFO = "team_info"
    NEWS = "news"
    REGULATION = "regulation"
    STATS = "stats"
    QUALIFYING = "qualifying"
    STANDINGS = "standings"
    CIRCUIT = "circuit"
    HISTORICAL = "historical"
    CALENDAR = "calendar"
    RACE = "race"
    DRIVER = "driver"


class DocumentMetadata(BaseModel):
    """Source metadata attached to every document."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    source: str
    type: DocumentType
    date: str = Field(description="ISO date (YYYY-MM-DD)")
    title: str | None = None
    entities: list[str] = Field(default_factory=list)
    url: str | None = None
    season: int | None = None
    round: int | None = None


class Document(BaseModel):
    """A unit of scraped or curated text stored for retrieval."""

    model_config = ConfigDict(frozen=True)

    id: str
    content: str
    metadata: DocumentMetadata

    @property
    def display_name(self) -> str:
        """Title if present, otherwise the source name."""
        return self.metadata.title or self.metadata.source

    def mentions(self, entity: str) -> bool:
        """Case-insensitive check against content and metadata entities."""
        needle = entity.lower()
        if needle in self.content.lower():
            return True
        return any(needle in e.lower() for e in self.metadata.entities)


class RetrievalResult(BaseModel):
    """Documents with parallel scores, ordered by descending score."""

    documents: list[Document] = Field(default_factory=list)
    scores: list[float] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_parallel(self) -> "RetrievalResult":
        if len(self.documents) != len(self.scores):
            raise ValueError("documents and scores must have the same length")
        return self

    @classmethod
    def from_pairs(cls, pairs: list[tuple[Document, float]]) -> "RetrievalResult":
        return cls(
            documents=[doc for doc, _ in pairs],
            scores=[score for _, score in pairs],
        )

    def pairs(self) -> list[tuple[Document, float]]:
        return list(zip(self.documents, self.scores))

    def __len__(self) -> int:
        return len(self.documents)


class SourceReference(BaseModel):
    """Citation returned alongside a generated answer."""

    title: str
    source: str
    url: str | None = None
    relevance_score: float | None = None
