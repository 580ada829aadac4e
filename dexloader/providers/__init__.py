"""
Upstream data providers
"""

from .abstract_provider import AbstractProvider
from .species_list_provider import SpeciesListProvider
from .species_provider import SpeciesProvider

__all__ = [
    "AbstractProvider",
    "SpeciesListProvider",
    "SpeciesProvider",
]
