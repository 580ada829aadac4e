"""
Dexloader error taxonomy
"""
from typing import Optional


class DexloaderError(Exception):
    """
    Base class for every error raised by dexloader
    """


class FetchError(DexloaderError):
    """
    Upstream could not deliver a usable response
    """


class HttpError(FetchError):
    """
    Upstream answered with a non-2xx status
    """

    status: int
    url: Optional[str]

    def __init__(self, status: int, url: Optional[str] = None) -> None:
        super().__init__(f"HTTP {status}" + (f" ({url})" if url else ""))
        self.status = status
        self.url = url


class FetchTimeoutError(FetchError):
    """
    Single record fetch exceeded its time budget and was abandoned
    """

    def __init__(self, species_id: int, timeout: float) -> None:
        super().__init__(f"Fetching #{species_id} exceeded {timeout:g}s")
        self.species_id = species_id
        self.timeout = timeout


class PayloadError(FetchError):
    """
    Upstream answered, but the body is not shaped as expected
    """


class ParseError(DexloaderError):
    """
    A persisted cache document is malformed
    """
