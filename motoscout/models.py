"""
Data models for the motorcycle listings search.
"""
import math
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from .errors import InvalidFiltersError
from .utils import parse_price

Number = Union[int, float]

MIN_YEAR = 1900

# Italian keys sent by the web search form
FILTER_ALIASES = {
    "marca": "brand",
    "modello": "model",
    "prezzoMin": "min_price",
    "prezzoMax": "max_price",
    "annoMin": "min_year",
    "annoMax": "max_year",
    "chilometraggioMax": "max_mileage",
    "regione": "region",
}


class Source(str, Enum):
    """Classifieds websites a listing can come from."""

    AUTOSCOUT24 = "AutoScout24"
    SUBITO = "Subito"
    # No search URL is built for eBay; the tag only exists for classification.
    EBAY_MOTORS = "eBay Motors"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SearchFilters:
    """User search criteria. Every field is optional."""

    brand: Optional[str] = None
    model: Optional[str] = None
    min_price: Optional[Number] = None
    max_price: Optional[Number] = None
    min_year: Optional[int] = None
    max_year: Optional[int] = None
    max_mileage: Optional[Number] = None
    region: Optional[str] = None

    def __post_init__(self):
        for name in ("min_price", "max_price", "max_mileage"):
            value = getattr(self, name)
            if value is not None and not (_is_number(value) and math.isfinite(value) and value >= 0):
                raise InvalidFiltersError(f"{name} must be a non-negative number, got {value!r}")

        max_year = datetime.now().year + 1
        for name in ("min_year", "max_year"):
            value = getattr(self, name)
            if value is None:
                continue
            if not isinstance(value, int) or isinstance(value, bool):
                raise InvalidFiltersError(f"{name} must be an integer year, got {value!r}")
            if not (MIN_YEAR <= value <= max_year):
                raise InvalidFiltersError(f"{name} must be between {MIN_YEAR} and {max_year}, got {value!r}")

        if self.min_price is not None and self.max_price is not None and self.max_price < self.min_price:
            raise InvalidFiltersError("max_price must be greater than or equal to min_price")
        if self.min_year is not None and self.max_year is not None and self.max_year < self.min_year:
            raise InvalidFiltersError("max_year must be greater than or equal to min_year")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SearchFilters":
        """
        Build filters from a loose mapping (form data, JSON body).

        Accepts both English field names and the Italian form keys
        (marca, prezzoMin, ...). None, empty strings and NaN are dropped.
        """
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            name = FILTER_ALIASES.get(key, key)
            if name not in cls.__dataclass_fields__:
                continue
            if value is None:
                continue
            if isinstance(value, str):
                value = value.strip()
                if not value:
                    continue
            if isinstance(value, float) and math.isnan(value):
                continue
            if name in ("min_year", "max_year"):
                value = _to_int(name, value)
            elif name in ("min_price", "max_price", "max_mileage"):
                value = _to_number(name, value)
            kwargs[name] = value
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _to_number(name: str, value: Any) -> Number:
    if _is_number(value):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidFiltersError(f"{name} must be a number, got {value!r}")
    return int(number) if number.is_integer() else number


def _to_int(name: str, value: Any) -> int:
    number = _to_number(name, value)
    if isinstance(number, float):
        if not number.is_integer():
            raise InvalidFiltersError(f"{name} must be an integer year, got {value!r}")
        number = int(number)
    return number


@dataclass(frozen=True)
class SourceTarget:
    """A source tag paired with the search URL built for it."""

    source: Source
    url: str


@dataclass(frozen=True)
class ListingRecord:
    """One motorcycle listing extracted from a search-results page."""

    title: str
    price: str
    link: str
    source: Source
    brand: str = ""
    model: str = ""
    year: Optional[str] = None
    mileage: Optional[str] = None
    location: Optional[str] = None
    image: Optional[str] = None

    @property
    def price_value(self) -> Optional[float]:
        return self._parsed_price()[0]

    @property
    def price_currency(self) -> Optional[str]:
        return self._parsed_price()[1]

    def _parsed_price(self) -> Tuple[Optional[float], Optional[str]]:
        return parse_price(self.price)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["source"] = self.source.value
        return data


@dataclass
class FetchResult:
    """
    Page content returned by a fetcher.

    ``markdown`` holds the text rendition of the page, ``html`` the raw markup.
    """

    success: bool
    markdown: Optional[str] = None
    html: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def content(self) -> str:
        return self.markdown or self.html or ""


@dataclass
class TargetOutcome:
    """Result of fetching and extracting a single target."""

    target: SourceTarget
    records: List[ListingRecord] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SearchResult:
    """Aggregated answer of one search request."""

    success: bool
    data: Optional[List[ListingRecord]] = None
    error: Optional[str] = None
    outcomes: List[TargetOutcome] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        if not self.success:
            return {"success": False, "error": self.error}
        return {"success": True, "data": [r.to_dict() for r in self.data or []]}
