"""
Storage and validation of the page-fetch service API key.
"""
import json
import logging
import os
from typing import Callable, Optional

from .config import config
from .fetcher import ContentFetcher, FirecrawlClient

logger = logging.getLogger(__name__)


class CredentialStore:
    """A single named slot holding the API key, persisted as a JSON file."""

    def __init__(self, path: Optional[str] = None, slot: str = config.API_KEY_SLOT):
        self.path = path or config.CREDENTIALS_PATH
        self.slot = slot

    def _read(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable credentials file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def get(self) -> Optional[str]:
        return self._read().get(self.slot) or None

    def save(self, token: str) -> None:
        data = self._read()
        data[self.slot] = token
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f)
        try:
            os.chmod(self.path, 0o600)
        except OSError:
            pass
        logger.info("API key saved successfully")

    def clear(self) -> None:
        data = self._read()
        if data.pop(self.slot, None) is not None:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f)


class MemoryCredentialStore(CredentialStore):
    """In-process credential slot."""

    def __init__(self, token: Optional[str] = None):
        self._token = token

    def get(self) -> Optional[str]:
        return self._token or None

    def save(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


async def validate_api_key(
    token: str,
    fetcher_factory: Callable[[str], ContentFetcher] = FirecrawlClient,
    url: Optional[str] = None,
) -> bool:
    """
    Check an API key with one lightweight scrape of a stable page.

    Any failure, including a blank key, counts as an invalid key.
    """
    if not token or not token.strip():
        return False

    url = url or config.VALIDATION_URL
    logger.info("Testing API key with Firecrawl API")
    try:
        async with fetcher_factory(token.strip()) as fetcher:
            result = await fetcher.fetch(url)
        return bool(result.success)
    except Exception as e:
        logger.error(f"Error testing API key: {e}")
        return False
