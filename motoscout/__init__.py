"""
Motorcycle listings search across Italian classifieds websites
"""
from .models import (
    FetchResult,
    ListingRecord,
    SearchFilters,
    SearchResult,
    Source,
    SourceTarget,
    TargetOutcome,
)
from .errors import FetchError, InvalidFiltersError, MissingCredentialError, MotoScoutError
from .query_builder import build_search_urls
from .extractor import extract, extract_from_response
from .fetcher import ContentFetcher, FirecrawlClient, PlaywrightFetcher, ScrapeOptions
from .credentials import CredentialStore, MemoryCredentialStore, validate_api_key
from .core import SearchSession, run_search
from .export import save_output_rows
from .utils import init_logger

__version__ = "1.0.0"

__all__ = [
    "FetchResult",
    "ListingRecord",
    "SearchFilters",
    "SearchResult",
    "Source",
    "SourceTarget",
    "TargetOutcome",
    "FetchError",
    "InvalidFiltersError",
    "MissingCredentialError",
    "MotoScoutError",
    "build_search_urls",
    "extract",
    "extract_from_response",
    "ContentFetcher",
    "FirecrawlClient",
    "PlaywrightFetcher",
    "ScrapeOptions",
    "CredentialStore",
    "MemoryCredentialStore",
    "validate_api_key",
    "SearchSession",
    "run_search",
    "save_output_rows",
    "init_logger",
]
