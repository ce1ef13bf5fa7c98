class MotoScoutError(Exception):
    """Base class for motoscout exceptions."""
    pass


class InvalidFiltersError(MotoScoutError, ValueError):
    """Raised when search filters are out of range or inconsistent."""
    pass


class FetchError(MotoScoutError):
    """Raised when the page-fetch service fails for a URL."""
    pass


class MissingCredentialError(MotoScoutError):
    """Raised when no fetch-service API key has been stored."""
    pass
