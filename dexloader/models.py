"""
Name records, run state and the merge contract shared by every loader
"""
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

PLACEHOLDER_PREFIX = "#"


def placeholder_name(species_id: int) -> str:
    """
    Build the stand-in display name for a species only known canonically
    :param species_id: Dex number
    :return: "#0025" style name
    """
    return f"{PLACEHOLDER_PREFIX}{species_id:04d}"


class NameRecord(BaseModel):
    """
    Localized + canonical identity of one species.

    Serialized with the ``de``/``en`` keys used by existing cache documents.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    localized: str = Field(alias="de")
    canonical: str = Field(alias="en")

    @property
    def is_placeholder(self) -> bool:
        """
        Is this record still waiting for its localized name
        :return: True for "#0001" style names
        """
        return self.localized.startswith(PLACEHOLDER_PREFIX)

    @classmethod
    def placeholder(cls, species_id: int, canonical: str) -> "NameRecord":
        """
        Record known only by its canonical name
        """
        return cls(localized=placeholder_name(species_id), canonical=canonical)

    @classmethod
    def fallback(cls, species_id: int) -> "NameRecord":
        """
        Synthetic record for a species the upstream could not deliver
        """
        return cls(localized=f"Entity {species_id}", canonical=f"entity-{species_id}")

    def to_json(self) -> Dict[str, str]:
        """
        Support json.dump()
        :return: JSON serialized object
        """
        return self.model_dump(by_alias=True)


NameCache = Dict[int, NameRecord]
OwnershipCache = Dict[int, bool]

NAME_CACHE_ADAPTER: TypeAdapter = TypeAdapter(Dict[int, NameRecord])
OWNERSHIP_CACHE_ADAPTER: TypeAdapter = TypeAdapter(Dict[int, bool])


@dataclass
class RunState:
    """
    Transient state of the current acquisition run
    """

    active: bool = False
    progress: float = 0.0
    cancel_requested: bool = False


def should_replace(existing: Optional[NameRecord], incoming: NameRecord) -> bool:
    """
    Decide if a freshly fetched record may overwrite what is known.
    A placeholder never downgrades a resolved record.
    :param existing: Record currently in the map, if any
    :param incoming: Newly fetched record
    :return: Should incoming win
    """
    if existing is None:
        return True
    return not (incoming.is_placeholder and not existing.is_placeholder)


def merge_name_maps(base: NameCache, incoming: Mapping[int, NameRecord]) -> int:
    """
    Fold fetched records into the working map, in place
    :param base: Map to update
    :param incoming: Records from a fetch batch
    :return: How many entries changed
    """
    changed = 0
    for species_id, record in incoming.items():
        existing = base.get(species_id)
        if should_replace(existing, record) and existing != record:
            base[species_id] = record
            changed += 1
    return changed
