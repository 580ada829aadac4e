"""
dexloader, progressive species name acquisition and local caching
"""

from .cache_store import CacheStore
from .models import NameRecord, RunState, merge_name_maps
from .orchestrator import NameLoader, RunHandle
from .ownership import OwnershipTracker

__all__ = [
    "CacheStore",
    "NameLoader",
    "NameRecord",
    "OwnershipTracker",
    "RunHandle",
    "RunState",
    "merge_name_maps",
]
