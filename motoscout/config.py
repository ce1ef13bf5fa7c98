"""
Search pipeline configuration and settings management.
"""
import os

# Hard upper bound on listings returned by one search
RESULTS_CAP = 50


def results_limit(raw: str) -> int:
    """Parse a results limit; it can lower the cap but never raise it."""
    return max(0, min(int(raw), RESULTS_CAP))


class Config:
    """Pipeline configuration."""

    # Page-fetch service
    FIRECRAWL_API_URL: str = os.getenv("FIRECRAWL_API_URL", "https://api.firecrawl.dev").rstrip("/")
    FIRECRAWL_TIMEOUT: float = float(os.getenv("FIRECRAWL_TIMEOUT", "60"))
    VALIDATION_URL: str = os.getenv("MOTOSCOUT_VALIDATION_URL", "https://example.com")

    # Credential slot
    CREDENTIALS_PATH: str = os.getenv(
        "MOTOSCOUT_CREDENTIALS",
        os.path.join(os.path.expanduser("~"), ".motoscout", "credentials.json"),
    )
    API_KEY_SLOT: str = "firecrawl_api_key"

    # Results
    MAX_RESULTS: int = results_limit(os.getenv("MOTOSCOUT_MAX_RESULTS", str(RESULTS_CAP)))

    # Local browser backend
    HEADLESS: bool = os.getenv("HEADLESS", "1").strip().lower() in ("1", "true", "yes")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE_PATH: str = os.getenv("LOG_FILE_PATH", "motoscout.log")


# Global config instance
config = Config()
