"""Tests for the configuration service."""

from dexloader import constants
from dexloader.dexloader_config import DexloaderConfig


def test_config_is_a_singleton():
    assert DexloaderConfig() is DexloaderConfig()


def test_config_reads_properties():
    config = DexloaderConfig()

    assert config.has_section("DEXLOADER")
    assert config.api_url == "https://pokeapi.co/api/v2"
    assert config.locale == "de"
    assert config.cache_path == constants.CACHE_PATH


def test_config_fallbacks():
    config = DexloaderConfig()

    assert config.get("DEXLOADER", "missing", "fallback") == "fallback"
    assert config.get_boolean("DEXLOADER", "missing", True) is True
    assert config.get_int("DEXLOADER", "missing", 7) == 7
    assert not config.has_option("NOPE", "version")
