"""
Dexloader simple utilities
"""
import logging
import os
import time

from . import constants


def init_logger() -> None:
    """
    Initialize the main system logger
    """
    constants.LOG_PATH.mkdir(parents=True, exist_ok=True)

    start_time = time.strftime("%Y-%m-%d_%H.%M.%S")

    logging.basicConfig(
        level=(
            logging.DEBUG
            if os.environ.get("DEXLOADER_DEBUG", "").lower() in ["true", "1"]
            else logging.INFO
        ),
        format="[%(levelname)s] %(asctime)s: %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(
                str(constants.LOG_PATH.joinpath(f"dexloader_{start_time}.log"))
            ),
        ],
    )
    logging.getLogger("aiohttp").setLevel(logging.ERROR)


def available_parallelism() -> int:
    """
    Number of CPUs the process may use, with a sane floor when unknown
    :return: CPU count
    """
    if hasattr(os, "sched_getaffinity"):
        return len(os.sched_getaffinity(0)) or constants.DEFAULT_PARALLELISM
    return os.cpu_count() or constants.DEFAULT_PARALLELISM


def pool_size(ceiling: int, parallelism: int) -> int:
    """
    Worker count for a pool: twice the parallelism, capped
    :param ceiling: Hard upper limit
    :param parallelism: Available CPUs
    :return: Worker count
    """
    return max(1, min(ceiling, parallelism * 2))
