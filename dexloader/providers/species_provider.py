"""
Per-species name lookups (slow, one record per call)
"""
import asyncio
import logging
from typing import Any, Optional

from .. import constants
from ..dexloader_config import DexloaderConfig
from ..errors import FetchTimeoutError, PayloadError
from ..models import NameRecord
from .abstract_provider import AbstractProvider

LOGGER = logging.getLogger(__name__)


class SpeciesProvider(AbstractProvider):
    """
    Fetches and normalizes one species' localized + canonical name
    """

    locale: str

    def __init__(
        self, api_url: Optional[str] = None, locale: Optional[str] = None
    ) -> None:
        super().__init__(api_url)
        self.locale = locale or DexloaderConfig().locale

    def species_url(self, species_id: int) -> str:
        """
        Endpoint for one species
        :param species_id: Dex number
        :return: URL
        """
        return f"{self.api_url}/pokemon-species/{species_id}/"

    async def fetch_one(
        self, species_id: int, timeout: float = constants.SINGLE_FETCH_TIMEOUT
    ) -> NameRecord:
        """
        Download a single species. No retries; a failure is final for this call.
        :param species_id: Dex number
        :param timeout: Seconds before the in-flight request is abandoned
        :return: Normalized record
        """
        try:
            payload = await asyncio.wait_for(
                self.download(self.species_url(species_id)), timeout
            )
        except asyncio.TimeoutError as error:
            raise FetchTimeoutError(species_id, timeout) from error

        return self.parse_species(payload, self.locale)

    @staticmethod
    def parse_species(payload: Any, locale: str) -> NameRecord:
        """
        Pick the localized name for a locale, falling back to the canonical one
        :param payload: Species JSON body
        :param locale: Language code, ala "de"
        :return: Normalized record
        """
        if not isinstance(payload, dict) or not payload.get("name"):
            raise PayloadError("Species payload has no canonical name")

        canonical = str(payload["name"])
        localized = next(
            (
                entry.get("name")
                for entry in payload.get("names") or []
                if isinstance(entry, dict)
                and (entry.get("language") or {}).get("name") == locale
            ),
            None,
        )
        return NameRecord(localized=localized or canonical, canonical=canonical)
