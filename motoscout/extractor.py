"""
Heuristic extraction of motorcycle listings from fetched search pages.

Each source has a strategy turning page text into ListingRecord objects.
When the source strategy finds nothing, the generic fallback strategy runs.
"""
import logging
import re
from typing import Any, Callable, Dict, List, Optional, Sequence

from .models import FetchResult, ListingRecord, Source
from .utils import clean_text

logger = logging.getLogger(__name__)

Strategy = Callable[[str, str, Source], List[ListingRecord]]

AUTOSCOUT24_MAX_RECORDS = 10
SUBITO_MAX_RECORDS = 10
FALLBACK_MAX_RECORDS = 5
FALLBACK_MIN_LINE_LENGTH = 10
FALLBACK_MAX_LINE_LENGTH = 200
UNKNOWN = "N/A"

# Horizontal whitespace only, so that a match never spans two lines
_SP = r"[ \t\u00a0]*"
# A number starts only where a digit run starts, so a long run is scanned once
_NUM = r"(?<![\d.,])\d(?:[\d.,]*\d)?"

PRICE_BEFORE_RE = re.compile(rf"€{_SP}{_NUM}")
PRICE_AFTER_RE = re.compile(rf"{_NUM}{_SP}€")
PRICE_RE = re.compile(rf"€{_SP}{_NUM}|{_NUM}{_SP}€")
YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")
KM_BEFORE_RE = re.compile(rf"km{_SP}{_NUM}", re.I)
KM_AFTER_RE = re.compile(rf"{_NUM}{_SP}km", re.I)
TITLE_RE = re.compile(r"[A-Z][a-z]+[ \t]+[A-Za-z0-9 \t]+")

PRICE_PATTERNS = (PRICE_BEFORE_RE, PRICE_AFTER_RE)
KM_PATTERNS = (KM_BEFORE_RE, KM_AFTER_RE)

SUBITO_KEYWORDS = ("moto", "scooter")


def classify_source(source_url: str) -> Source:
    """Tell which website a fetched URL belongs to."""
    if "subito.it" in source_url:
        return Source.SUBITO
    if "ebay" in source_url:
        return Source.EBAY_MOTORS
    return Source.AUTOSCOUT24


def first_match(text: str, patterns: Sequence[re.Pattern]) -> Optional[str]:
    """Return the first match of the first pattern that matches."""
    for pattern in patterns:
        m = pattern.search(text)
        if m:
            return m.group(0)
    return None


def find_year(text: str) -> Optional[str]:
    m = YEAR_RE.search(text)
    return m.group(0) if m else None


def _words(line: str) -> List[str]:
    return [w for w in line.split() if len(w) > 2]


def _lines(content: str) -> List[str]:
    return [line for line in content.split("\n") if line.strip()]


def extract_autoscout24(content: str, link: str, source: Source) -> List[ListingRecord]:
    """Pair the i-th capitalised title with the i-th price on the page."""
    titles = [clean_text(m.group(0)) for m in TITLE_RE.finditer(content)]
    prices = [m.group(0) for m in PRICE_RE.finditer(content)]

    results = []
    for title, price in list(zip(titles, prices))[:AUTOSCOUT24_MAX_RECORDS]:
        parts = title.split()
        results.append(ListingRecord(
            title=title,
            price=price,
            brand=parts[0] if parts else "",
            model=" ".join(parts[1:]),
            link=link,
            source=source,
        ))
    return results


def extract_subito(content: str, link: str, source: Source) -> List[ListingRecord]:
    """One listing per line mentioning a price and a motorcycle keyword."""
    results = []
    for line in _lines(content):
        if len(results) >= SUBITO_MAX_RECORDS:
            break
        lowered = line.lower()
        if "€" not in line or not any(k in lowered for k in SUBITO_KEYWORDS):
            continue

        price = first_match(line, PRICE_PATTERNS)
        if not price:
            continue

        words = _words(line)
        results.append(ListingRecord(
            title=clean_text(line),
            price=price,
            year=find_year(line),
            mileage=first_match(line, KM_PATTERNS),
            brand=words[0] if words else "",
            model=" ".join(words[1:3]),
            link=link,
            source=source,
        ))
    return results


def extract_generic(content: str, link: str, source: Source) -> List[ListingRecord]:
    """Fallback: take the first short lines that look like listings."""
    candidates = [
        line for line in _lines(content)
        if ("€" in line or YEAR_RE.search(line))
        and FALLBACK_MIN_LINE_LENGTH < len(line) < FALLBACK_MAX_LINE_LENGTH
    ]

    results = []
    for line in candidates[:FALLBACK_MAX_RECORDS]:
        words = _words(line)
        results.append(ListingRecord(
            title=clean_text(line),
            price=first_match(line, PRICE_PATTERNS) or UNKNOWN,
            year=find_year(line),
            brand=words[0] if words else UNKNOWN,
            model=" ".join(words[1:3]) or UNKNOWN,
            link=link,
            source=source,
        ))
    return results


STRATEGIES: Dict[Source, Strategy] = {
    Source.AUTOSCOUT24: extract_autoscout24,
    Source.SUBITO: extract_subito,
}
FALLBACK_STRATEGY: Strategy = extract_generic


def register_strategy(source: Source, strategy: Strategy) -> None:
    """Install or replace the extraction strategy for a source."""
    STRATEGIES[source] = strategy


def _as_text(content: Any) -> str:
    if content is None:
        return ""
    if isinstance(content, bytes):
        return content.decode("utf-8", errors="replace")
    if isinstance(content, str):
        return content
    return str(content)


def extract(content: Any, source_url: str) -> List[ListingRecord]:
    """
    Parse page content into listing records. Never raises.

    The source strategy runs first; the fallback only runs when it
    produced no records. Records without a title or price are dropped.
    """
    source_url = source_url or ""
    records: List[ListingRecord] = []
    try:
        text = _as_text(content)
        source = classify_source(source_url)
        strategy = STRATEGIES.get(source)
        if strategy is not None:
            records = strategy(text, source_url, source)
        if not records:
            records = FALLBACK_STRATEGY(text, source_url, source)
    except Exception:
        logger.exception(f"Error extracting data from {source_url}")
        return []

    return [r for r in records if r.title and r.price]


def extract_from_response(response: FetchResult, source_url: str) -> List[ListingRecord]:
    """Extract from a fetch result, preferring markdown over raw HTML."""
    return extract(response.content, source_url)
