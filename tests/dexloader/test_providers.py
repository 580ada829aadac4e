"""Tests for the species providers, with a fake aiohttp session injected."""

import pytest
from conftest import TEST_API_URL, FakeResponse, FakeSession

from dexloader.dexloader_config import DexloaderConfig
from dexloader.errors import FetchTimeoutError, HttpError, PayloadError
from dexloader.models import NameRecord
from dexloader.providers import SpeciesListProvider, SpeciesProvider

SPECIES_1_URL = f"{TEST_API_URL}/pokemon-species/1/"
LIST_URL = f"{TEST_API_URL}/pokemon-species"


def species_provider(*responses: FakeResponse) -> SpeciesProvider:
    provider = SpeciesProvider(api_url=TEST_API_URL, locale="de")
    provider.set_session(FakeSession({response.url: response for response in responses}))
    return provider


def list_provider(*responses: FakeResponse) -> SpeciesListProvider:
    provider = SpeciesListProvider(api_url=TEST_API_URL)
    provider.set_session(FakeSession({response.url: response for response in responses}))
    return provider


@pytest.mark.asyncio
async def test_fetch_one_picks_locale_name():
    payload = {
        "name": "bulbasaur",
        "names": [
            {"language": {"name": "ja"}, "name": "フシギダネ"},
            {"language": {"name": "de"}, "name": "Bisasam"},
            {"language": {"name": "en"}, "name": "Bulbasaur"},
        ],
    }
    async with species_provider(FakeResponse(SPECIES_1_URL, payload)) as provider:
        record = await provider.fetch_one(1)

    assert record == NameRecord(localized="Bisasam", canonical="bulbasaur")


@pytest.mark.asyncio
async def test_fetch_one_falls_back_to_canonical_name():
    payload = {"name": "bulbasaur", "names": [{"language": {"name": "en"}, "name": "Bulbasaur"}]}
    async with species_provider(FakeResponse(SPECIES_1_URL, payload)) as provider:
        record = await provider.fetch_one(1)

    assert record == NameRecord(localized="bulbasaur", canonical="bulbasaur")


@pytest.mark.asyncio
async def test_fetch_one_http_error():
    async with species_provider(FakeResponse(SPECIES_1_URL, {}, status=404)) as provider:
        with pytest.raises(HttpError) as error:
            await provider.fetch_one(1)

    assert error.value.status == 404


@pytest.mark.asyncio
async def test_fetch_one_times_out():
    slow = FakeResponse(SPECIES_1_URL, {"name": "bulbasaur"}, delay=1.0)
    async with species_provider(slow) as provider:
        with pytest.raises(FetchTimeoutError) as error:
            await provider.fetch_one(1, timeout=0.05)

    assert error.value.species_id == 1


@pytest.mark.asyncio
async def test_fetch_one_rejects_payload_without_name():
    async with species_provider(FakeResponse(SPECIES_1_URL, {"names": []})) as provider:
        with pytest.raises(PayloadError):
            await provider.fetch_one(1)


@pytest.mark.asyncio
async def test_download_requires_a_session():
    provider = SpeciesProvider(api_url=TEST_API_URL, locale="de")
    with pytest.raises(RuntimeError):
        await provider.fetch_one(1)


@pytest.mark.asyncio
async def test_bulk_listing_builds_placeholders():
    payload = {"results": [{"name": "bulbasaur"}, {"name": "ivysaur"}, {"name": "venusaur"}]}
    provider = list_provider(FakeResponse(LIST_URL, payload))

    async with provider:
        names = await provider.fetch_all_canonical(max_id=3)

    assert names == {
        1: NameRecord(localized="#0001", canonical="bulbasaur"),
        2: NameRecord(localized="#0002", canonical="ivysaur"),
        3: NameRecord(localized="#0003", canonical="venusaur"),
    }
    assert provider.session.requests == [(LIST_URL, {"limit": 3})]


@pytest.mark.asyncio
async def test_bulk_listing_drops_entries_beyond_max_id():
    payload = {"results": [{"name": f"species-{i}"} for i in range(1, 6)]}
    async with list_provider(FakeResponse(LIST_URL, payload)) as provider:
        names = await provider.fetch_all_canonical(max_id=3)

    assert sorted(names) == [1, 2, 3]


@pytest.mark.asyncio
async def test_bulk_listing_http_error():
    async with list_provider(FakeResponse(LIST_URL, {}, status=503)) as provider:
        with pytest.raises(HttpError) as error:
            await provider.fetch_all_canonical(max_id=3)

    assert error.value.status == 503


def test_providers_share_request_headers():
    single = SpeciesProvider(api_url=TEST_API_URL, locale="de")._build_http_header()
    bulk = SpeciesListProvider(api_url=TEST_API_URL)._build_http_header()

    assert single == bulk
    assert single["Accept"] == "application/json"
    assert single["User-Agent"] == DexloaderConfig().user_agent
