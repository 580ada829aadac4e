"""
Offloaded name loader: runs the pool on its own thread and event loop,
talking to the orchestrator only through messages.
"""
import asyncio
import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, Literal, Optional, Union

from . import constants
from .models import NameCache, NameRecord
from .parallel_call import drain_queue
from .providers import SpeciesProvider

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class StartMessage:
    """Inbound: begin draining with this many workers."""

    conc: int


@dataclass(frozen=True)
class ProgressMessage:
    """Outbound: items attempted so far."""

    completed: int
    type: Literal["progress"] = "progress"


@dataclass(frozen=True)
class DoneMessage:
    """Outbound: every record the worker resolved."""

    out: Dict[int, NameRecord] = field(default_factory=dict)
    type: Literal["done"] = "done"


WorkerMessage = Union[ProgressMessage, DoneMessage]


class MessageChannel:
    """
    Thread-safe hand-off from the worker thread into the listener's event loop
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop or asyncio.get_running_loop()
        self._queue: "asyncio.Queue[WorkerMessage]" = asyncio.Queue()

    def post(self, message: WorkerMessage) -> None:
        """
        Deliver a message from any thread
        :param message: Progress or done message
        """
        try:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, message)
        except RuntimeError:
            LOGGER.debug(f"Listener loop is gone, dropped {message.type} message")

    async def receive(self) -> WorkerMessage:
        """
        Wait for the next message from the worker
        :return: Progress or done message
        """
        return await self._queue.get()


class UltraWorker:
    """
    Isolated execution context for the high-concurrency load.

    Owns its own provider and session. Once started it cannot be
    cancelled and always finishes with a DoneMessage.
    """

    def __init__(
        self,
        channel: MessageChannel,
        provider_factory: Callable[[], SpeciesProvider] = SpeciesProvider,
        max_id: int = constants.MAX_ID,
    ) -> None:
        self.channel = channel
        self.provider_factory = provider_factory
        self.max_id = max_id
        self._executor: Optional[ThreadPoolExecutor] = None

    def post_message(self, message: StartMessage) -> None:
        """
        Start the worker (non-blocking)
        :param message: Start message with the desired concurrency
        """
        if self._executor is not None:
            LOGGER.warning("Ultra worker already started, ignoring start message")
            return

        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="ultra_loader"
        )
        self._executor.submit(self._run_async_in_thread, message)
        self._executor.shutdown(wait=False)
        LOGGER.info("Ultra name loading started in background thread")

    def join(self) -> None:
        """
        Block until the worker thread has exited
        """
        if self._executor is not None:
            self._executor.shutdown(wait=True)

    def _run_async_in_thread(self, message: StartMessage) -> None:
        """Run the drain in a new event loop (for thread execution)."""
        out: NameCache = {}
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        try:
            out = loop.run_until_complete(self._drain(message.conc))
        except Exception as error:
            LOGGER.error(f"Ultra name loading failed: {error!r}")
        finally:
            loop.close()
            self.channel.post(DoneMessage(out=out))

    async def _drain(self, conc: int) -> NameCache:
        conc = min(
            constants.ULTRA_MAX_CONCURRENCY, conc or constants.ULTRA_DEFAULT_CONCURRENCY
        )
        queue = list(range(1, self.max_id + 1))

        async with self.provider_factory() as provider:
            out = await drain_queue(
                queue,
                provider.fetch_one,
                conc,
                on_progress=lambda completed: self.channel.post(
                    ProgressMessage(completed=completed)
                ),
                progress_stride=constants.ULTRA_PROGRESS_STRIDE,
            )

        LOGGER.info(f"Ultra worker resolved {len(out)}/{self.max_id} names")
        return out
