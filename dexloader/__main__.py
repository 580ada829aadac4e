"""
Dexloader Main Executor
"""

import argparse
import asyncio
import contextlib
import logging
import signal
import sys
from collections.abc import Callable

from dexloader import constants
from dexloader.arg_parser import parse_args
from dexloader.cache_store import CacheStore
from dexloader.errors import DexloaderError
from dexloader.orchestrator import NameLoader, RunHandle
from dexloader.ownership import OwnershipTracker
from dexloader.utils import init_logger

LOGGER: logging.Logger = logging.getLogger(__name__)


def log_progress(strategy: str) -> Callable[[float], None]:
    """
    Progress reporter that logs once per ten percent
    :param strategy: Run being reported
    :return: Callback for RunHandle
    """
    logged_deciles = set()

    def report(fraction: float) -> None:
        decile = int(fraction * 10)
        if decile not in logged_deciles:
            logged_deciles.add(decile)
            LOGGER.info(f"[{strategy}] {decile * 10}%")

    return report


def confirm_clear(args: argparse.Namespace) -> bool:
    """
    Ask before deleting names and ownership
    """
    if args.yes:
        return True
    answer = input("Delete cached names AND ownership flags? [y/N] ")
    return answer.strip().lower() in ("y", "yes")


def print_status(loader: NameLoader, ownership: OwnershipTracker) -> None:
    """
    Summarize the caches
    """
    names = loader.names or {}
    placeholders = sum(1 for record in names.values() if record.is_placeholder)
    LOGGER.info(
        f"Names cached: {len(names)}/{loader.max_id} "
        f"({placeholders} still placeholders)"
        if loader.has_cache
        else "No usable name cache"
    )
    LOGGER.info(f"Owned: {ownership.owned_count()} / {loader.max_id}")


async def run_strategy(loader: NameLoader, args: argparse.Namespace) -> None:
    """
    Run one load to completion, cancelling on Ctrl-C
    """
    if args.strategy == "ultra" and args.prime:
        await loader.prime(log_progress("prime")).wait()

    starters = {
        "serial": loader.load_serial,
        "fast": loader.load_fast,
        "ultra": loader.load_ultra,
    }
    handle: RunHandle = starters[args.strategy](log_progress(args.strategy))

    with contextlib.suppress(NotImplementedError):
        asyncio.get_running_loop().add_signal_handler(signal.SIGINT, handle.cancel)

    try:
        await handle.wait()
    finally:
        loader.shutdown()


def dispatcher(args: argparse.Namespace) -> None:
    """
    Dexloader Dispatcher
    """
    store = CacheStore()
    ownership = OwnershipTracker(store)

    if args.clear_cache:
        if not confirm_clear(args):
            LOGGER.info("Cache left untouched")
            return
        store.clear()
        ownership.reset()

    for species_id in args.toggle_owned:
        if not 1 <= species_id <= constants.MAX_ID:
            LOGGER.warning(f"Ignoring #{species_id}: outside 1..{constants.MAX_ID}")
            continue
        owned = ownership.toggle(species_id)
        LOGGER.info(f"#{species_id:04d} {'owned' if owned else 'not owned'}")

    loader = NameLoader(store)
    if args.strategy:
        asyncio.run(run_strategy(loader, args))

    if args.status or not (args.strategy or args.toggle_owned or args.clear_cache):
        print_status(loader, ownership)


def main() -> None:
    """
    Dexloader entry point
    """
    init_logger()
    args = parse_args()

    try:
        dispatcher(args)
    except (DexloaderError, OSError) as error:
        LOGGER.error(f"Dexloader failed: {error}")
        sys.exit(1)


if __name__ == "__main__":
    main()
