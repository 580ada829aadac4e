"""
Dexloader Constants that cannot be changed and are hardcoded intentionally
"""

import os
import pathlib

TOP_LEVEL_DIR: pathlib.Path = pathlib.Path(__file__).resolve().parent.parent
RESOURCE_PATH: pathlib.Path = TOP_LEVEL_DIR.joinpath("dexloader").joinpath("resources")
CONFIG_PATH: pathlib.Path = RESOURCE_PATH.joinpath("dexloader.properties")

CACHE_PATH: pathlib.Path = (
    pathlib.Path(os.environ.get("DEXLOADER_CACHE_PATH", "~/.dexloader_cache"))
    .expanduser()
    .resolve()
)
LOG_PATH: pathlib.Path = (
    pathlib.Path(os.environ.get("DEXLOADER_LOG_PATH", CACHE_PATH.joinpath("logs")))
    .expanduser()
    .resolve()
)

# Gen 1-9
MAX_ID: int = 1025

# Versioned document keys
NAMES_CACHE_KEY: str = "pokedex_de_names_v3"
OWNERSHIP_CACHE_KEY: str = "pokedex_ownership_v1"

# A names document with fewer entries is a partial or corrupt write
MIN_CACHED_NAMES: int = 50

SINGLE_FETCH_TIMEOUT: float = 10.0

SERIAL_PROGRESS_STRIDE: int = 25
POOL_PROGRESS_STRIDE: int = 20
ULTRA_PROGRESS_STRIDE: int = 16

FAST_MAX_CONCURRENCY: int = 48
ULTRA_MAX_CONCURRENCY: int = 64
ULTRA_DEFAULT_CONCURRENCY: int = 32
DEFAULT_PARALLELISM: int = 8

# Share of the progress bar covered by the bulk priming step
PRIME_PROGRESS: float = 0.1
