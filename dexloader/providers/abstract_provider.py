"""
API for how providers need to interact with other classes
"""
import logging
from typing import Any, Dict, Optional, Union

import aiohttp

from ..dexloader_config import DexloaderConfig
from ..errors import FetchError, HttpError, PayloadError

LOGGER = logging.getLogger(__name__)


class AbstractProvider:
    """
    Abstract class to indicate what other providers should provide.

    Providers are async context managers; entering one opens an
    aiohttp session unless one was injected with set_session().
    """

    api_url: str
    session: Optional[aiohttp.ClientSession]

    def __init__(self, api_url: Optional[str] = None) -> None:
        self.api_url = (api_url or DexloaderConfig().api_url).rstrip("/")
        self.session = None
        self._owns_session = False

    async def __aenter__(self) -> "AbstractProvider":
        if self.session is None:
            self.session = aiohttp.ClientSession(headers=self._build_http_header())
            self._owns_session = True
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._owns_session and self.session is not None:
            await self.session.close()
            self.session = None
            self._owns_session = False

    def _build_http_header(self) -> Dict[str, str]:
        """
        Construct the HTTP header
        :return: Header
        """
        return {
            "Accept": "application/json",
            "User-Agent": DexloaderConfig().user_agent,
        }

    def set_session(self, session: Any) -> None:
        """
        Override the HTTP session (primarily for test injection).
        :param session: Custom session to use for HTTP requests
        """
        self.session = session
        self._owns_session = False

    async def download(
        self, url: str, params: Optional[Dict[str, Union[str, int]]] = None
    ) -> Any:
        """
        GET a JSON document
        :param url: URL to download content from
        :param params: Options to give to the GET request
        :return: Decoded JSON body
        """
        if self.session is None:
            raise RuntimeError("Provider not initialized. Use async context manager.")

        try:
            async with self.session.get(url, params=params) as response:
                if not 200 <= response.status < 300:
                    raise HttpError(response.status, url)
                self.log_download(response)
                return await response.json(content_type=None)
        except aiohttp.ClientError as error:
            raise FetchError(f"Unable to download {url}: {error}") from error
        except ValueError as error:
            raise PayloadError(f"{url} did not return JSON: {error}") from error

    @staticmethod
    def log_download(response: Any) -> None:
        """
        Log how the URL was acquired
        :param response: Response from Server
        """
        LOGGER.debug(f"Downloaded {response.url} ({response.status})")
