"""
Search orchestration: build targets, fetch each page, extract listings.
"""
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from .config import RESULTS_CAP, config
from .credentials import CredentialStore, validate_api_key
from .errors import MissingCredentialError
from .extractor import extract_from_response
from .fetcher import DEFAULT_SCRAPE_OPTIONS, ContentFetcher, FirecrawlClient, ScrapeOptions
from .models import ListingRecord, SearchFilters, SearchResult, SourceTarget, TargetOutcome
from .query_builder import build_search_urls

MISSING_API_KEY_MESSAGE = "API key not found. Please set your Firecrawl API key first."
SEARCH_FAILED_MESSAGE = "Failed to search motorcycles"

FiltersLike = Union[SearchFilters, Dict[str, Any], None]


def _as_filters(filters: FiltersLike) -> SearchFilters:
    if filters is None:
        return SearchFilters()
    if isinstance(filters, SearchFilters):
        return filters
    return SearchFilters.from_dict(filters)


async def scrape_target(
    fetcher: ContentFetcher,
    target: SourceTarget,
    options: ScrapeOptions = DEFAULT_SCRAPE_OPTIONS,
    logger=None
) -> TargetOutcome:
    """Fetch one target and extract its listings. Fetch failures are returned, not raised."""
    logger = logger or logging.getLogger("motoscout")
    logger.info(f">>> Scraping URL: {target.url}")

    try:
        response = await fetcher.fetch(target.url, options)
    except Exception as e:
        logger.error(f"Error scraping {target.url}: {e}")
        return TargetOutcome(target=target, error=str(e) or e.__class__.__name__)

    if not response.success:
        logger.warning(f">>> Fetch reported failure for {target.url}")
        return TargetOutcome(target=target, error=f"Fetch reported failure for {target.url}")

    records = extract_from_response(response, target.url)
    logger.info(f">>> Found {len(records)} results from {target.url}")
    return TargetOutcome(target=target, records=records)


async def run_search(
    filters: FiltersLike,
    fetcher: ContentFetcher,
    options: ScrapeOptions = DEFAULT_SCRAPE_OPTIONS,
    max_results: int = config.MAX_RESULTS,
    logger=None
) -> SearchResult:
    """
    Main search orchestration function.

    Targets are fetched one after the other in builder order. A failing
    source is recorded in ``outcomes`` and skipped; the search itself
    succeeds even when nothing was found. ``max_results`` can
    lower the result cap but not raise it.
    """
    logger = logger or logging.getLogger("motoscout")
    targets = build_search_urls(_as_filters(filters))

    outcomes: List[TargetOutcome] = []
    all_results: List[ListingRecord] = []
    for target in targets:
        outcome = await scrape_target(fetcher, target, options, logger)
        outcomes.append(outcome)
        all_results.extend(outcome.records)

    failed = [o.target.source.value for o in outcomes if not o.ok]
    if failed:
        logger.warning(f">>> Sources skipped after errors: {', '.join(failed)}")
    logger.info(f">>> Search finished with {len(all_results)} results")

    return SearchResult(success=True, data=all_results[:min(max_results, RESULTS_CAP)], outcomes=outcomes)


class SearchSession:
    """
    Owns the credential store and the fetch client built from it.

    The client is created on first use and reused until the stored key
    changes. A replaced client is closed once no running search holds it.
    """

    def __init__(
        self,
        store: CredentialStore,
        fetcher_factory: Callable[[str], ContentFetcher] = FirecrawlClient,
        options: ScrapeOptions = DEFAULT_SCRAPE_OPTIONS,
        max_results: int = config.MAX_RESULTS,
        logger=None
    ):
        self.store = store
        self.fetcher_factory = fetcher_factory
        self.options = options
        self.max_results = max_results
        self.logger = logger or logging.getLogger("motoscout")
        self._client: Optional[ContentFetcher] = None
        self._client_token: Optional[str] = None
        # id(client) -> number of searches using it
        self._leases: Dict[int, int] = {}

    def has_api_key(self) -> bool:
        return bool(self.store.get())

    def _current_client(self) -> Tuple[ContentFetcher, Optional[ContentFetcher]]:
        """Return the client for the stored key and the client it replaced, if any."""
        token = self.store.get()
        if not token:
            raise MissingCredentialError(MISSING_API_KEY_MESSAGE)
        replaced = None
        if self._client is None or token != self._client_token:
            replaced = self._client
            self._client = self.fetcher_factory(token)
            self._client_token = token
        return self._client, replaced

    async def _close_if_idle(self, client: Optional[ContentFetcher]) -> None:
        if client is None or client is self._client or id(client) in self._leases:
            return
        await client.aclose()

    async def client(self) -> ContentFetcher:
        client, replaced = self._current_client()
        await self._close_if_idle(replaced)
        return client

    def _acquire(self) -> Tuple[ContentFetcher, Optional[ContentFetcher]]:
        client, replaced = self._current_client()
        self._leases[id(client)] = self._leases.get(id(client), 0) + 1
        return client, replaced

    async def _release(self, client: ContentFetcher) -> None:
        remaining = self._leases.get(id(client), 0) - 1
        if remaining > 0:
            self._leases[id(client)] = remaining
            return
        self._leases.pop(id(client), None)
        await self._close_if_idle(client)

    async def test_api_key(self, token: str) -> bool:
        return await validate_api_key(token, self.fetcher_factory)

    def save_api_key(self, token: str) -> None:
        self.store.save(token.strip())

    async def configure_api_key(self, token: str) -> bool:
        """Validate a key and store it only if it works."""
        if not await self.test_api_key(token):
            return False
        self.save_api_key(token)
        return True

    def clear_api_key(self) -> None:
        self.store.clear()

    async def search(self, filters: FiltersLike) -> SearchResult:
        fetcher = None
        try:
            if not self.store.get():
                return SearchResult(success=False, error=MISSING_API_KEY_MESSAGE)
            fetcher, replaced = self._acquire()
            await self._close_if_idle(replaced)
            return await run_search(
                filters, fetcher, self.options, self.max_results, self.logger
            )
        except Exception as e:
            self.logger.error(f"Error during search: {e}")
            return SearchResult(success=False, error=str(e) or SEARCH_FAILED_MESSAGE)
        finally:
            if fetcher is not None:
                await self._release(fetcher)

    async def aclose(self) -> None:
        """Drop the current client. Searches still using it close it when they finish."""
        client = self._client
        self._client = None
        self._client_token = None
        await self._close_if_idle(client)
