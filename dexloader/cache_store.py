"""
Durable storage for the name and ownership documents
"""
import json
import logging
import pathlib
from typing import Any, Dict, Optional

import pydantic

from . import constants
from .errors import ParseError
from .models import (
    NAME_CACHE_ADAPTER,
    OWNERSHIP_CACHE_ADAPTER,
    NameCache,
    OwnershipCache,
)

LOGGER = logging.getLogger(__name__)


class CacheStore:
    """
    Two independent JSON documents inside one cache directory.

    Loads never raise: a missing or damaged document degrades to
    "no cache" for names and "nothing owned" for ownership.
    Saves and clear() are immediate and propagate I/O errors.
    """

    directory: pathlib.Path
    max_id: int

    def __init__(
        self,
        directory: Optional[pathlib.Path] = None,
        max_id: int = constants.MAX_ID,
    ) -> None:
        if directory is None:
            from .dexloader_config import DexloaderConfig

            directory = DexloaderConfig().cache_path
        self.directory = pathlib.Path(directory)
        self.max_id = max_id

    def document_path(self, key: str) -> pathlib.Path:
        """
        Where a versioned document lives on disk
        :param key: Document key
        :return: File path
        """
        return self.directory.joinpath(f"{key}.json")

    def load_names(self) -> Optional[NameCache]:
        """
        Load the name cache
        :return: Name map, or None if absent, malformed, or too small to trust
        """
        try:
            raw = self._read_document(constants.NAMES_CACHE_KEY)
            if raw is None:
                return None
            names: NameCache = self._in_range(
                NAME_CACHE_ADAPTER.validate_python(raw), "name"
            )
        except (ParseError, pydantic.ValidationError) as error:
            LOGGER.warning(f"Discarding name cache: {error}")
            return None

        if len(names) < constants.MIN_CACHED_NAMES:
            LOGGER.warning(
                f"Discarding name cache: only {len(names)} entries "
                f"(need {constants.MIN_CACHED_NAMES})"
            )
            return None

        LOGGER.debug(f"Loaded {len(names)} cached names")
        return names

    def save_names(self, cache: NameCache) -> None:
        """
        Persist the name cache, replacing the previous document
        :param cache: Name map to write
        """
        self._write_document(
            constants.NAMES_CACHE_KEY,
            {str(key): record.to_json() for key, record in sorted(cache.items())},
        )
        LOGGER.debug(f"Saved {len(cache)} names")

    def load_ownership(self) -> OwnershipCache:
        """
        Load the ownership flags
        :return: Ownership map, empty on any failure
        """
        try:
            raw = self._read_document(constants.OWNERSHIP_CACHE_KEY)
            if raw is None:
                return {}
            ownership: OwnershipCache = self._in_range(
                OWNERSHIP_CACHE_ADAPTER.validate_python(raw), "ownership"
            )
        except (ParseError, pydantic.ValidationError) as error:
            LOGGER.warning(f"Discarding ownership cache: {error}")
            return {}
        return ownership

    def save_ownership(self, cache: OwnershipCache) -> None:
        """
        Persist the ownership flags
        :param cache: Ownership map to write
        """
        self._write_document(
            constants.OWNERSHIP_CACHE_KEY,
            {str(key): bool(value) for key, value in sorted(cache.items())},
        )

    def clear(self) -> None:
        """
        Delete both documents. Destructive and immediate.
        """
        for key in (constants.NAMES_CACHE_KEY, constants.OWNERSHIP_CACHE_KEY):
            self.document_path(key).unlink(missing_ok=True)
        LOGGER.info(f"Cleared cache documents in {self.directory}")

    def _in_range(self, document: Dict[int, Any], label: str) -> Dict[int, Any]:
        kept = {
            key: value for key, value in document.items() if 1 <= key <= self.max_id
        }
        if len(kept) != len(document):
            LOGGER.warning(
                f"Dropped {len(document) - len(kept)} {label} entries "
                f"outside 1..{self.max_id}"
            )
        return kept

    def _read_document(self, key: str) -> Optional[Any]:
        path = self.document_path(key)
        try:
            if not path.is_file():
                return None
            with path.open(encoding="utf-8") as file:
                contents = json.load(file)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as error:
            raise ParseError(f"{path.name} is unreadable: {error}") from error

        if not isinstance(contents, dict):
            raise ParseError(f"{path.name} is not a JSON object")
        return contents

    def _write_document(self, key: str, contents: Any) -> None:
        path = self.document_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)

        temp_path = path.with_suffix(".json.tmp")
        with temp_path.open("w", encoding="utf-8") as file:
            json.dump(contents, file, ensure_ascii=False)
        temp_path.replace(path)
