"""
Dexloader Configuration Service
"""

import configparser
import logging
import pathlib
from typing import Optional

from singleton_decorator import singleton

from . import constants


@singleton
class DexloaderConfig:
    """
    Configuration Class that loads in the appropriate configuration file
    and provides the contents for the running program
    """

    logger: logging.Logger
    config_parser: configparser.ConfigParser
    dexloader_version: str
    api_url: str
    locale: str
    user_agent: str
    cache_path: pathlib.Path

    def __init__(self, config_path: Optional[pathlib.Path] = None):
        self.logger = logging.getLogger(__name__)
        self.config_parser = configparser.ConfigParser()

        config_path = config_path or constants.CONFIG_PATH
        self.logger.debug(f"Loading configuration from {config_path}")
        self.config_parser.read(str(config_path))

        try:
            self.dexloader_version = self.config_parser.get(
                "DEXLOADER", "version", fallback="NO_VERSION_FOUND"
            )
        except configparser.NoSectionError:
            self.logger.warning(
                "Key 'version' is missing from Section 'DEXLOADER' in config file"
            )
            self.dexloader_version = "1.X.X"

        self.api_url = self.get(
            "DEXLOADER", "api_url", "https://pokeapi.co/api/v2"
        ).rstrip("/")
        self.locale = self.get("DEXLOADER", "locale", "de")
        self.user_agent = self.get(
            "DEXLOADER", "user_agent", f"dexloader/{self.dexloader_version}"
        )
        self.cache_path = constants.CACHE_PATH

    def get(self, section: str, option: str, fallback: str = "") -> str:
        """
        Get a specific value from configuration
        :param section: Section header
        :param option: Key in section
        :param fallback: Default value to use if key not found in section
        :returns Configuration value to use
        """
        if self.has_option(section, option):
            return self.config_parser.get(section, option, fallback=fallback)
        return fallback

    def get_boolean(self, section: str, option: str, fallback: bool = False) -> bool:
        """
        Get a specific value from configuration
        :param section: Section header
        :param option: Key in section
        :param fallback: Default value to use if key not found in section
        :returns Configuration value to use (as a Boolean)
        """
        if self.has_option(section, option):
            return self.config_parser.getboolean(section, option, fallback=fallback)
        return fallback

    def get_int(self, section: str, option: str, fallback: int = 0) -> int:
        """
        Get a specific value from configuration
        :param section: Section header
        :param option: Key in section
        :param fallback: Default value to use if key not found in section
        :returns Configuration value to use (as an Integer)
        """
        if self.has_option(section, option):
            return self.config_parser.getint(section, option, fallback=fallback)
        return fallback

    def has_section(self, section: str) -> bool:
        """
        Check if Configuration has a specific section
        :param section: Section header to find
        :return Does Section header exist
        """
        return self.config_parser.has_section(section)

    def has_option(self, section: str, option: str) -> bool:
        """
        Check if Configuration has a specific option in a specific section
        and has a defined value (ala not VAR=)
        :param section: Section header to find
        :param option: Option to find in section
        :return Does option exist in section
        """
        return (
            self.config_parser.has_option(section, option)
            and len(str(self.config_parser.get(section, option))) > 0
        )
