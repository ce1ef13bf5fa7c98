"""
Page fetchers: the Firecrawl scrape API and a local Playwright renderer.
"""
import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

import httpx
from playwright.async_api import async_playwright, TimeoutError as PlaywrightTimeout

from .config import config
from .errors import FetchError
from .models import FetchResult

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/124.0.0.0 Safari/537.36"
)


@dataclass(frozen=True)
class ScrapeOptions:
    """Which renditions to request and which tags to keep or strip."""

    formats: Sequence[str] = ("markdown", "html")
    include_tags: Sequence[str] = ("img", "a", "h1", "h2", "h3", "span", "div")
    exclude_tags: Sequence[str] = ("nav", "footer", "header")

    def to_payload(self) -> Dict[str, Any]:
        return {
            "formats": list(self.formats),
            "includeTags": list(self.include_tags),
            "excludeTags": list(self.exclude_tags),
        }


DEFAULT_SCRAPE_OPTIONS = ScrapeOptions()


class ContentFetcher:
    """Base class for page fetchers. Usable as an async context manager."""

    async def fetch(self, url: str, options: Optional[ScrapeOptions] = None) -> FetchResult:
        raise NotImplementedError

    async def aclose(self) -> None:
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()


class FirecrawlClient(ContentFetcher):
    """Client for the Firecrawl scrape endpoint. One HTTP client per instance."""

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not api_key:
            raise ValueError("Firecrawl API key is required")
        self.api_key = api_key
        self.base_url = (base_url or config.FIRECRAWL_API_URL).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            timeout=timeout if timeout is not None else config.FIRECRAWL_TIMEOUT,
            transport=transport,
        )

    async def fetch(self, url: str, options: Optional[ScrapeOptions] = None) -> FetchResult:
        body = {"url": url}
        if options is not None:
            body.update(options.to_payload())

        try:
            response = await self._client.post("/v1/scrape", json=body)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise FetchError(f"Firecrawl returned HTTP {e.response.status_code} for {url}") from e
        except httpx.HTTPError as e:
            raise FetchError(f"Firecrawl request failed for {url}: {e}") from e
        except ValueError as e:
            raise FetchError(f"Firecrawl returned invalid JSON for {url}") from e

        if not payload.get("success"):
            raise FetchError(payload.get("error") or f"Firecrawl could not scrape {url}")

        data = payload.get("data") or {}
        return FetchResult(
            success=True,
            markdown=data.get("markdown"),
            html=data.get("html"),
            metadata=data.get("metadata") or {},
        )

    async def aclose(self) -> None:
        await self._client.aclose()


class PlaywrightFetcher(ContentFetcher):
    """
    Render pages locally in headless Chromium.

    No API key needed. Excluded tags are removed from the DOM before the
    body text is read; the text goes into ``markdown`` and the page HTML
    into ``html``.
    """

    def __init__(self, headless: Optional[bool] = None, timeout_ms: int = 120_000):
        self.headless = config.HEADLESS if headless is None else headless
        self.timeout_ms = timeout_ms
        self._pw = None
        self._browser = None
        self._context = None

    async def start(self) -> None:
        if self._context is not None:
            return

        launch_args = ["--disable-blink-features=AutomationControlled"]
        if self.headless:
            launch_args += ["--disable-dev-shm-usage", "--no-sandbox", "--disable-gpu"]

        self._pw = await async_playwright().start()
        self._browser = await self._pw.chromium.launch(headless=self.headless, args=launch_args)
        self._context = await self._browser.new_context(
            viewport={"width": 1280, "height": 900},
            user_agent=USER_AGENT,
            locale="it-IT",
        )
        self._context.set_default_timeout(30_000)
        self._context.set_default_navigation_timeout(45_000)
        logger.info(f">>> Browser started (headless={self.headless})")

    async def fetch(self, url: str, options: Optional[ScrapeOptions] = None) -> FetchResult:
        options = options or DEFAULT_SCRAPE_OPTIONS
        await self.start()

        page = await self._context.new_page()
        try:
            response = await page.goto(url, timeout=self.timeout_ms, wait_until="domcontentloaded")
            try:
                await page.wait_for_load_state("networkidle", timeout=15_000)
            except PlaywrightTimeout:
                # Heavy pages may never go idle
                await asyncio.sleep(random.uniform(1.0, 2.0))

            if options.exclude_tags:
                await page.evaluate(
                    "(tags) => tags.forEach(t => document.querySelectorAll(t).forEach(el => el.remove()))",
                    list(options.exclude_tags),
                )

            html = await page.content() if "html" in options.formats else None
            text = await page.inner_text("body") if "markdown" in options.formats else None
            status = response.status if response is not None else None
            return FetchResult(
                success=status is None or status < 400,
                markdown=text,
                html=html,
                metadata={"title": await page.title(), "sourceURL": url, "statusCode": status},
            )
        except Exception as e:
            raise FetchError(f"Browser failed to render {url}: {e}") from e
        finally:
            await page.close()

    async def aclose(self) -> None:
        if self._context is not None:
            await self._context.close()
        if self._browser is not None:
            await self._browser.close()
        if self._pw is not None:
            await self._pw.stop()
        self._pw = self._browser = self._context = None
