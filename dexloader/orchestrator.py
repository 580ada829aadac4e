"""
Name acquisition runs: serial, fast-hybrid and ultra loaders that all
merge into one in-memory map and persist it through the CacheStore
"""
import asyncio
import logging
import threading
from collections.abc import Awaitable, Callable
from typing import List, Optional

from . import constants
from .cache_store import CacheStore
from .errors import FetchError
from .models import NameCache, NameRecord, RunState, merge_name_maps
from .parallel_call import drain_queue
from .providers import SpeciesListProvider, SpeciesProvider
from .ultra_worker import (
    DoneMessage,
    MessageChannel,
    StartMessage,
    UltraWorker,
    WorkerMessage,
)
from .utils import available_parallelism, pool_size

LOGGER = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]


class RunHandle:
    """
    Consumer's view of one acquisition run.

    Progress is published as a fraction in [0, 1]. cancel() only raises
    the abort flag; work already in flight is allowed to finish.
    """

    strategy: str
    abort: threading.Event

    def __init__(
        self, strategy: str, on_progress: Optional[ProgressCallback] = None
    ) -> None:
        self.strategy = strategy
        self.abort = threading.Event()
        self.cancelled = asyncio.Event()
        self.on_progress = on_progress
        self._progress = 0.0
        self._task: Optional["asyncio.Task[NameCache]"] = None

    def progress(self) -> float:
        """
        Last published progress
        :return: Fraction in [0, 1]
        """
        return self._progress

    def cancel(self) -> None:
        """
        Stop starting new items
        """
        if not self.abort.is_set():
            LOGGER.info(f"Cancelling {self.strategy} run")
        self.abort.set()
        self.cancelled.set()

    @property
    def cancel_requested(self) -> bool:
        return self.abort.is_set()

    def done(self) -> bool:
        return self._task is not None and self._task.done()

    def add_done_callback(self, callback: Callable[["RunHandle"], None]) -> None:
        """
        Get notified when the run ends, successfully or not
        :param callback: Called with this handle
        """
        if self._task is None:
            raise RuntimeError("Run has not been started")
        self._task.add_done_callback(lambda _: callback(self))

    async def wait(self) -> NameCache:
        """
        Wait for the run to end
        :return: The merged name map
        """
        if self._task is None:
            raise RuntimeError("Run has not been started")
        return await asyncio.shield(self._task)

    def publish(self, fraction: float) -> None:
        self._progress = min(max(fraction, 0.0), 1.0)
        if self.on_progress is not None:
            self.on_progress(self._progress)


class NameLoader:
    """
    Owns the working name map and is its only writer back to the CacheStore.
    Only one run may be active at a time.
    """

    store: CacheStore
    names: Optional[NameCache]
    max_id: int

    def __init__(
        self,
        store: Optional[CacheStore] = None,
        species_provider_factory: Callable[[], SpeciesProvider] = SpeciesProvider,
        list_provider_factory: Callable[[], SpeciesListProvider] = SpeciesListProvider,
        worker_factory: Optional[Callable[[MessageChannel], UltraWorker]] = None,
        max_id: int = constants.MAX_ID,
        cpu_count: Optional[int] = None,
    ) -> None:
        self.store = store or CacheStore(max_id=max_id)
        self.species_provider_factory = species_provider_factory
        self.list_provider_factory = list_provider_factory
        self.worker_factory = worker_factory or (
            lambda channel: UltraWorker(channel, species_provider_factory, max_id)
        )
        self.max_id = max_id
        self.parallelism = cpu_count or available_parallelism()
        self.names = self.store.load_names()
        self._active: Optional[RunHandle] = None

    @property
    def has_cache(self) -> bool:
        return self.names is not None

    @property
    def is_loading(self) -> bool:
        return self._active is not None and not self._active.done()

    @property
    def run_state(self) -> RunState:
        """
        Snapshot of the current run; idle state when nothing is running
        :return: Run state
        """
        if not self.is_loading:
            return RunState()
        return RunState(
            active=True,
            progress=self._active.progress(),
            cancel_requested=self._active.cancel_requested,
        )

    # Entry points
    def load_serial(self, on_progress: Optional[ProgressCallback] = None) -> RunHandle:
        """
        One request at a time over every uncached species, ascending.
        Failures become fallback records, so a full pass covers every ID.
        """
        return self._start("serial", self._run_serial, on_progress)

    def load_fast(self, on_progress: Optional[ProgressCallback] = None) -> RunHandle:
        """
        Prime every species from the bulk listing, then resolve
        placeholders with a concurrent pool.
        """
        return self._start("fast", self._run_fast, on_progress)

    def load_ultra(self, on_progress: Optional[ProgressCallback] = None) -> RunHandle:
        """
        Resolve every species on an offloaded worker with high concurrency.
        Does not prime; call prime() first if placeholders are wanted.
        """
        return self._start("ultra", self._run_ultra, on_progress)

    def prime(self, on_progress: Optional[ProgressCallback] = None) -> RunHandle:
        """
        Fill every species from the bulk listing and persist.
        Counts as a run, so no other load can start until it ends.
        """
        return self._start("prime", self._run_prime, on_progress)

    def shutdown(self) -> None:
        """
        Consumer teardown: stop the active run from starting new work
        """
        if self._active is not None:
            self._active.cancel()

    def clear_cache(self) -> None:
        """
        Delete both persisted documents and forget the loaded names.
        Callers confirm before calling.
        """
        self.store.clear()
        self.names = None

    # Internals
    def _start(
        self,
        strategy: str,
        runner: Callable[[RunHandle], Awaitable[NameCache]],
        on_progress: Optional[ProgressCallback],
    ) -> RunHandle:
        if self._active is not None and not self._active.done():
            LOGGER.warning(
                f"{self._active.strategy} run already active, ignoring {strategy} request"
            )
            return self._active

        handle = RunHandle(strategy, on_progress)
        handle._task = asyncio.get_running_loop().create_task(
            self._run(handle, runner)
        )
        self._active = handle
        return handle

    async def _run(
        self, handle: RunHandle, runner: Callable[[RunHandle], Awaitable[NameCache]]
    ) -> NameCache:
        LOGGER.info(f"Starting {handle.strategy} name load")
        handle.publish(0.0)
        try:
            names = await runner(handle)
        except Exception as error:
            LOGGER.error(f"{handle.strategy} name load failed: {error}")
            raise
        LOGGER.info(
            f"Finished {handle.strategy} name load with {len(names)}/{self.max_id} names"
            + (" (cancelled)" if handle.cancel_requested else "")
        )
        return names

    def _commit(self, working: NameCache) -> None:
        # Persist first; the in-memory map only moves once the write succeeded
        self.store.save_names(working)
        self.names = dict(working)

    async def _prime_into(self, working: NameCache) -> None:
        async with self.list_provider_factory() as list_provider:
            primed = await list_provider.fetch_all_canonical(self.max_id)
        merge_name_maps(working, primed)

    async def _run_prime(self, handle: RunHandle) -> NameCache:
        working = dict(self.names or {})
        await self._prime_into(working)
        self._commit(working)
        handle.publish(1.0)
        return working

    async def _run_serial(self, handle: RunHandle) -> NameCache:
        working = dict(self.names or {})
        ids = [
            species_id
            for species_id in range(1, self.max_id + 1)
            if species_id not in working
        ]
        # drain_queue pops from the end
        queue = list(reversed(ids))

        async with self.species_provider_factory() as provider:

            async def fetch_or_fallback(species_id: int) -> NameRecord:
                try:
                    return await provider.fetch_one(
                        species_id, constants.SINGLE_FETCH_TIMEOUT
                    )
                except FetchError as error:
                    LOGGER.debug(f"Using fallback for #{species_id}: {error}")
                    return NameRecord.fallback(species_id)

            fetched = await drain_queue(
                queue,
                fetch_or_fallback,
                1,
                abort=handle.abort,
                on_progress=lambda completed: handle.publish(completed / len(ids)),
                progress_stride=constants.SERIAL_PROGRESS_STRIDE,
            )

        merge_name_maps(working, fetched)
        self._commit(working)
        handle.publish(1.0)
        return working

    async def _run_fast(self, handle: RunHandle) -> NameCache:
        working = dict(self.names or {})
        await self._prime_into(working)
        self._commit(working)
        handle.publish(constants.PRIME_PROGRESS)

        ids = self._unresolved_ids(working)
        queue = list(ids)
        span = 1.0 - constants.PRIME_PROGRESS

        async with self.species_provider_factory() as provider:
            fetched = await drain_queue(
                queue,
                lambda species_id: provider.fetch_one(
                    species_id, constants.SINGLE_FETCH_TIMEOUT
                ),
                pool_size(constants.FAST_MAX_CONCURRENCY, self.parallelism),
                abort=handle.abort,
                on_progress=lambda completed: handle.publish(
                    constants.PRIME_PROGRESS + completed / len(ids) * span
                ),
                progress_stride=constants.POOL_PROGRESS_STRIDE,
            )

        merge_name_maps(working, fetched)
        self._commit(working)
        handle.publish(1.0)
        return working

    async def _run_ultra(self, handle: RunHandle) -> NameCache:
        channel = MessageChannel()
        worker = self.worker_factory(channel)
        worker.post_message(
            StartMessage(conc=pool_size(constants.ULTRA_MAX_CONCURRENCY, self.parallelism))
        )

        while True:
            message = await self._receive_unless_cancelled(channel, handle)
            if message is None:
                # The worker keeps running; its results are simply not collected
                LOGGER.info("Stopped listening to the ultra worker")
                return dict(self.names or {})
            if isinstance(message, DoneMessage):
                break
            handle.publish(message.completed / self.max_id)

        working = dict(self.names or {})
        merge_name_maps(working, message.out)
        self._commit(working)
        handle.publish(1.0)
        return working

    @staticmethod
    async def _receive_unless_cancelled(
        channel: MessageChannel, handle: RunHandle
    ) -> Optional[WorkerMessage]:
        if handle.cancel_requested:
            return None

        receive = asyncio.ensure_future(channel.receive())
        cancelled = asyncio.ensure_future(handle.cancelled.wait())
        done, pending = await asyncio.wait(
            {receive, cancelled}, return_when=asyncio.FIRST_COMPLETED
        )
        for future in pending:
            future.cancel()
        if receive in done and not handle.cancel_requested:
            return receive.result()
        return None

    def _unresolved_ids(self, working: NameCache) -> List[int]:
        return [
            species_id
            for species_id in range(1, self.max_id + 1)
            if species_id not in working or working[species_id].is_placeholder
        ]
