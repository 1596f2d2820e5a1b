"""Coordinated shutdown: close the store, then stop the main flow."""

import asyncio
import signal
from typing import List, Optional

from loguru import logger

from hashtrack.store import StoreSession

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class ShutdownRequested(Exception):
    """Raised out of the main flow once the store was closed for a shutdown request."""

    def __init__(self, reason: Optional[str], exit_code: int = 1):
        self.reason = reason
        self.exit_code = exit_code
        super().__init__(f"Shutdown requested ({reason})")


class ShutdownHandler:
    """
    Background task that waits for a shutdown request, closes the store and
    cancels the main task.

    A request comes from SIGINT/SIGTERM once install_signal_handlers() has run,
    or from trigger(), which tests and the main flow can call directly.
    In-flight file reads are not interrupted.
    """

    def __init__(self, store: StoreSession, exit_code: int = 1):
        self.store = store
        self.exit_code = exit_code
        self.reason: Optional[str] = None
        self._event = asyncio.Event()
        self._task: Optional[asyncio.Task] = None
        self._main_task: Optional[asyncio.Task] = None
        self._stopping = False
        self._signals: List[signal.Signals] = []

    @property
    def event(self) -> asyncio.Event:
        """Set once shutdown has been requested."""
        return self._event

    def start(self, main_task: Optional[asyncio.Task] = None) -> None:
        """
        Start the background task. Must be called from a running loop.

        Args:
            main_task: Task cancelled once the store is closed
        """
        self._main_task = main_task
        if self._task is None:
            self._task = asyncio.create_task(self._wait_for_shutdown(), name="hashtrack-shutdown")

    def install_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in SHUTDOWN_SIGNALS:
            try:
                loop.add_signal_handler(sig, self.trigger, sig.name)
            except (NotImplementedError, RuntimeError, ValueError) as e:
                # no signal support off the main thread or on Windows event loops
                logger.debug(f"Cannot install handler for {sig.name}: {e}")
                continue
            self._signals.append(sig)

    def trigger(self, reason: str = "requested") -> None:
        if self._event.is_set():
            return
        self.reason = reason
        logger.warning(f"Shutdown requested ({reason}), closing store")
        self._event.set()

    async def wait(self) -> None:
        """Wait until the background task has finished closing the store."""
        if self._task is not None:
            await asyncio.shield(self._task)

    async def _wait_for_shutdown(self) -> None:
        await self._event.wait()
        await self.store.close()
        main_task = self._main_task
        if main_task is not None and not self._stopping and not main_task.done():
            main_task.cancel()

    async def stop(self) -> None:
        """Remove signal handlers and cancel the background task if still waiting."""
        self._stopping = True
        if self._signals:
            loop = asyncio.get_running_loop()
            for sig in self._signals:
                loop.remove_signal_handler(sig)
            self._signals = []

        task, self._task = self._task, None
        if task is None or task.done():
            return
        if self._event.is_set():
            # already closing, let it finish
            await task
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
