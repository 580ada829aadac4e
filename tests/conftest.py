"""Pytest configuration and fixtures for dexloader tests."""

import asyncio
import pathlib
import threading
from typing import Any, Dict, List, Optional, Union

import pytest

from dexloader.cache_store import CacheStore
from dexloader.errors import HttpError
from dexloader.models import NameCache, NameRecord

TEST_API_URL = "https://pokeapi.test/api/v2"


def resolved(species_id: int) -> NameRecord:
    """Fully localized record used throughout the tests."""
    return NameRecord(localized=f"Name{species_id}", canonical=f"species-{species_id}")


def resolved_cache(first: int, last: int) -> NameCache:
    return {species_id: resolved(species_id) for species_id in range(first, last + 1)}


class FakeResponse:
    """Stands in for an aiohttp response used as an async context manager."""

    def __init__(self, url: str, payload: Any = None, status: int = 200, delay: float = 0.0) -> None:
        self.url = url
        self.payload = payload
        self.status = status
        self.delay = delay

    async def __aenter__(self) -> "FakeResponse":
        if self.delay:
            await asyncio.sleep(self.delay)
        return self

    async def __aexit__(self, *args: object) -> None:
        return None

    async def json(self, content_type: Optional[str] = None) -> Any:
        return self.payload


class FakeSession:
    """Routes GETs to canned responses and records what was asked for."""

    def __init__(self, responses: Dict[str, FakeResponse]) -> None:
        self.responses = responses
        self.requests: List[tuple] = []

    def get(self, url: str, params: Optional[Dict[str, Any]] = None) -> FakeResponse:
        self.requests.append((url, params))
        return self.responses[url]


class FakeSpeciesProvider:
    """
    In-memory single record provider.

    Outcomes default to a resolved record; an Exception outcome is raised.
    An asyncio gate holds every fetch until it is set; a thread gate does the
    same for fetches running on another event loop.
    """

    def __init__(
        self,
        outcomes: Optional[Dict[int, Union[NameRecord, Exception]]] = None,
        gate: Optional[asyncio.Event] = None,
        thread_gate: Optional[threading.Event] = None,
    ) -> None:
        self.outcomes = outcomes or {}
        self.gate = gate
        self.thread_gate = thread_gate
        self.started: List[int] = []

    async def __aenter__(self) -> "FakeSpeciesProvider":
        return self

    async def __aexit__(self, *args: object) -> None:
        return None

    async def fetch_one(self, species_id: int, timeout: float = 10.0) -> NameRecord:
        self.started.append(species_id)
        if self.gate is not None:
            await self.gate.wait()
        if self.thread_gate is not None:
            while not self.thread_gate.is_set():
                await asyncio.sleep(0.01)
        await asyncio.sleep(0)

        outcome = self.outcomes.get(species_id, resolved(species_id))
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeListProvider:
    """In-memory bulk provider returning placeholders for a list of names."""

    def __init__(
        self,
        canonical_names: List[str],
        error: Optional[Exception] = None,
        gate: Optional[asyncio.Event] = None,
    ) -> None:
        self.canonical_names = canonical_names
        self.error = error
        self.gate = gate
        self.calls = 0

    async def __aenter__(self) -> "FakeListProvider":
        return self

    async def __aexit__(self, *args: object) -> None:
        return None

    async def fetch_all_canonical(self, max_id: int) -> NameCache:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return {
            index + 1: NameRecord.placeholder(index + 1, name)
            for index, name in enumerate(self.canonical_names[:max_id])
        }


@pytest.fixture
def store(tmp_path: pathlib.Path) -> CacheStore:
    """CacheStore rooted in a throwaway directory."""
    return CacheStore(tmp_path / "cache")


@pytest.fixture
def canonical_names() -> List[str]:
    return [f"species-{species_id}" for species_id in range(1, 61)]


@pytest.fixture
def not_found() -> HttpError:
    return HttpError(404, f"{TEST_API_URL}/pokemon-species/0/")
