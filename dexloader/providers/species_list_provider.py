"""
Bulk species listing (fast, canonical names only)
"""
import logging
from typing import Optional

from .. import constants
from ..errors import PayloadError
from ..models import NameCache, NameRecord
from .abstract_provider import AbstractProvider

LOGGER = logging.getLogger(__name__)


class SpeciesListProvider(AbstractProvider):
    """
    One call for the whole dex; list position decides the dex number
    """

    def __init__(self, api_url: Optional[str] = None) -> None:
        super().__init__(api_url)

    async def fetch_all_canonical(self, max_id: int = constants.MAX_ID) -> NameCache:
        """
        Download every species' canonical name, with placeholder localized names
        :param max_id: Highest dex number to keep
        :return: Placeholder name map
        """
        payload = await self.download(
            f"{self.api_url}/pokemon-species", params={"limit": max_id}
        )
        if not isinstance(payload, dict):
            raise PayloadError("Species list is not a JSON object")

        names: NameCache = {}
        for index, entry in enumerate(payload.get("results") or []):
            species_id = index + 1
            if species_id > max_id:
                break
            if not isinstance(entry, dict) or not entry.get("name"):
                raise PayloadError(f"Species list entry {index} has no name")
            names[species_id] = NameRecord.placeholder(species_id, entry["name"])

        LOGGER.info(f"Primed {len(names)} species from the bulk listing")
        return names
