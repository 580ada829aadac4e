"""Tests for the ownership flags."""

from dexloader.cache_store import CacheStore
from dexloader.ownership import OwnershipTracker


def test_toggle_persists_immediately(store: CacheStore) -> None:
    tracker = OwnershipTracker(store)

    assert tracker.toggle(25) is True
    assert OwnershipTracker(store).is_owned(25)

    assert tracker.toggle(25) is False
    assert store.load_ownership() == {25: False}


def test_owned_count(store: CacheStore) -> None:
    tracker = OwnershipTracker(store)
    for species_id in (1, 4, 7, 4):
        tracker.toggle(species_id)

    assert tracker.owned_count() == 2
    assert not tracker.is_owned(4)
    assert not tracker.is_owned(150)


def test_reset_after_clear(store: CacheStore) -> None:
    tracker = OwnershipTracker(store)
    tracker.toggle(1)

    store.clear()
    tracker.reset()

    assert tracker.owned_count() == 0
    assert OwnershipTracker(store).owned == {}
