"""
Dexloader Arg Parser to determine what actions to take
"""

import argparse
import logging

LOGGER = logging.getLogger(__name__)

STRATEGIES = ("serial", "fast", "ultra")


def parse_args() -> argparse.Namespace:
    """
    Parse command line arguments from user to determine how to spawn up
    dexloader and complete the request.
    :return: Namespace of requests
    """
    parser = argparse.ArgumentParser("dexloader")

    parser.add_argument(
        "--strategy",
        "-s",
        choices=STRATEGIES,
        help="Load names: 'serial' (one at a time, full coverage), "
        "'fast' (bulk prime then concurrent pool), 'ultra' (offloaded pool).",
    )
    parser.add_argument(
        "--prime",
        "-p",
        action="store_true",
        help="Prime every species from the bulk listing before an ultra load.",
    )
    parser.add_argument(
        "--toggle-owned",
        "-o",
        type=int,
        nargs="*",
        metavar="ID",
        default=[],
        help="Flip the ownership flag of the given dex numbers.",
    )
    parser.add_argument(
        "--status",
        action="store_true",
        help="Summarize cached names and owned species.",
    )

    clear_group = parser.add_argument_group("clearing")
    clear_group.add_argument(
        "--clear-cache",
        action="store_true",
        help="Delete cached names AND ownership flags.",
    )
    clear_group.add_argument(
        "--yes",
        "-y",
        action="store_true",
        help="Do not ask for confirmation before clearing.",
    )

    parsed_args = parser.parse_args()

    if parsed_args.prime and parsed_args.strategy not in (None, "ultra"):
        LOGGER.warning("--prime only applies to ultra loads; the fast load primes itself")

    return parsed_args
