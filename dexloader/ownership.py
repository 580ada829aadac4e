"""
Which species the user owns
"""
import logging
from typing import Optional

from .cache_store import CacheStore
from .models import OwnershipCache

LOGGER = logging.getLogger(__name__)


class OwnershipTracker:
    """
    Ownership flags, persisted on every toggle
    """

    store: CacheStore
    owned: OwnershipCache

    def __init__(self, store: Optional[CacheStore] = None) -> None:
        self.store = store or CacheStore()
        self.owned = self.store.load_ownership()

    def is_owned(self, species_id: int) -> bool:
        return bool(self.owned.get(species_id, False))

    def toggle(self, species_id: int) -> bool:
        """
        Flip one species and save straight away
        :param species_id: Dex number
        :return: New ownership flag
        """
        next_owned = dict(self.owned)
        next_owned[species_id] = not self.is_owned(species_id)
        self.store.save_ownership(next_owned)
        self.owned = next_owned
        LOGGER.debug(f"#{species_id} owned = {next_owned[species_id]}")
        return next_owned[species_id]

    def owned_count(self) -> int:
        return sum(1 for flag in self.owned.values() if flag)

    def reset(self) -> None:
        """
        Forget every flag in memory (after the cache was cleared)
        """
        self.owned = {}
