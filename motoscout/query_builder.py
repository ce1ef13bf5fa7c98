"""
Search URL construction for the supported classifieds websites.
"""
from typing import Callable, List, Optional, Tuple
from urllib.parse import urlencode

from .models import Number, SearchFilters, Source, SourceTarget

AUTOSCOUT24_BASE_URL = "https://www.autoscout24.it/lista/moto"
SUBITO_BASE_URL = "https://www.subito.it/annunci-italia/vendita/moto-e-scooter/"


def format_number(value: Number) -> str:
    """Serialize a number as a plain decimal string: 1000.0 -> "1000"."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _with_query(base_url: str, params: List[Tuple[str, str]]) -> str:
    if not params:
        return base_url
    return f"{base_url}?{urlencode(params)}"


def build_autoscout24_url(filters: SearchFilters) -> str:
    """AutoScout24 supports make, model, price and first-registration year."""
    params = []
    if filters.brand:
        params.append(("make", filters.brand))
    if filters.model:
        params.append(("model", filters.model))
    if filters.min_price:
        params.append(("pricefrom", format_number(filters.min_price)))
    if filters.max_price:
        params.append(("priceto", format_number(filters.max_price)))
    if filters.min_year:
        params.append(("fregfrom", format_number(filters.min_year)))
    if filters.max_year:
        params.append(("fregto", format_number(filters.max_year)))
    return _with_query(AUTOSCOUT24_BASE_URL, params)


def subito_query_text(filters: SearchFilters) -> Optional[str]:
    if filters.brand and filters.model:
        return f"{filters.brand} {filters.model}"
    if filters.brand:
        return filters.brand
    return None


def build_subito_url(filters: SearchFilters) -> str:
    """Subito supports a price range and a free-text query."""
    params = []
    if filters.min_price:
        params.append(("ps", format_number(filters.min_price)))
    if filters.max_price:
        params.append(("pe", format_number(filters.max_price)))
    q = subito_query_text(filters)
    if q:
        params.append(("q", q))
    return _with_query(SUBITO_BASE_URL, params)


# Emission order is fixed: AutoScout24 first, then Subito
SOURCE_URL_BUILDERS: List[Tuple[Source, Callable[[SearchFilters], str]]] = [
    (Source.AUTOSCOUT24, build_autoscout24_url),
    (Source.SUBITO, build_subito_url),
]


def build_search_urls(filters: Optional[SearchFilters] = None) -> List[SourceTarget]:
    """Build one search target per supported source for the given filters."""
    filters = filters or SearchFilters()
    return [SourceTarget(source=source, url=build(filters)) for source, build in SOURCE_URL_BUILDERS]
