"""Text utilities for scraped content."""

import logging
import re
from datetime import date, timedelta, timezone

from bs4 import BeautifulSoup
from dateutil.parser import ParserError
from dateutil.parser import parse as parse_datetime

logger = logging.getLogger(__name__)

# Common timezone abbreviations in feed dates
TZINFOS = {
    "EST": timezone(timedelta(hours=-5)),
    "EDT": timezone(timedelta(hours=-4)),
    "CST": timezone(timedelta(hours=-6)),
    "CDT": timezone(timedelta(hours=-5)),
    "PST": timezone(timedelta(hours=-8)),
    "PDT": timezone(timedelta(hours=-7)),
    "GMT": timezone.utc,
    "UTC": timezone.utc,
    "BST": timezone(timedelta(hours=1)),
    "CET": timezone(timedelta(hours=1)),
    "CEST": timezone(timedelta(hours=2)),
}

_URL_PATTERN = re.compile(r"https?://\S+")
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def sanitize_text(text: str) -> str:
    """
    Normalize text to a single line for embedding.

    Collapses whitespace, drops control characters, normalizes curly
    quotes and long dashes, and replaces URLs with a placeholder.
    """
    text = re.sub(r"\s+", " ", text)
    text = _CONTROL_CHARS.sub("", text)
    text = text.replace("“", '"').replace("”", '"')
    text = text.replace("‘", "'").replace("’", "'")
    text = text.replace("–", "-").replace("—", "-")
    text = _URL_PATTERN.sub("[URL]", text)
    return text.strip()


def clean_html(html: str) -> str:
    """Strip tags, scripts and styles; decode entities; collapse whitespace."""
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style"]):
        tag.decompose()
    return re.sub(r"\s+", " ", soup.get_text(" ")).strip()


def extract_sections(content: str, max_length: int = 2000, min_paragraph: int = 50) -> str:
    """
    Keep the leading substantial paragraphs of an article.

    Paragraphs shorter than min_paragraph characters (headings, captions)
    are skipped; paragraphs are added until max_length would be exceeded.
    """
    paragraphs = [p.strip() for p in content.split("\n\n") if len(p.strip()) > min_paragraph]

    kept: list[str] = []
    length = 0
    for paragraph in paragraphs:
        if length + len(paragraph) > max_length:
            break
        kept.append(paragraph)
        length += len(paragraph) + 2

    return "\n\n".join(kept)


def chunk_text(text: str, chunk_size: int = 1000, overlap: int = 200) -> list[str]:
    """
    Split text on paragraph boundaries into chunks of roughly chunk_size.

    Each new chunk starts with the trailing words of the previous one
    (about overlap characters) so context carries across the boundary.
    """
    chunks: list[str] = []
    current = ""
    overlap_words = max(overlap // 5, 0)

    for paragraph in re.split(r"\n\n+", text):
        if current and len(current) + len(paragraph) > chunk_size:
            chunks.append(current.strip())
            tail = current.split()[-overlap_words:] if overlap_words else []
            current = " ".join(tail) + "\n\n" + paragraph if tail else paragraph
        else:
            current = f"{current}\n\n{paragraph}" if current else paragraph

    if current.strip():
        chunks.append(current.strip())
    return chunks


def parse_date(value: str | None, default: date | None = None) -> str:
    """
    Parse a date in any common format to YYYY-MM-DD.

    Falls back to default (today if not given) when the value is missing
    or unparseable.
    """
    fallback = (default or date.today()).isoformat()
    if not value:
        return fallback

    try:
        parsed = parse_datetime(value, tzinfos=TZINFOS)
    except (ParserError, ValueError, OverflowError) as e:
        logger.debug(f"Unparseable date '{value}': {e}")
        return fallback

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date().isoformat()
