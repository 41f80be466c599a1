from __future__ import annotations

import asyncio
import logging
from typing import Optional

from ..domain.errors import ConfigurationMissing
from ..domain.ports.automation import WebSession
from .dispatcher import CycleReport, QueueDispatcher

logger = logging.getLogger(__name__)


class QueueWorker:
    """Runs the dispatcher on a fixed cadence until asked to stop."""

    def __init__(
        self,
        dispatcher: QueueDispatcher,
        session: WebSession,
        *,
        interval_seconds: float = 1.0,
    ) -> None:
        self._dispatcher = dispatcher
        self._session = session
        self._interval = interval_seconds
        self._stop = asyncio.Event()
        self._task: Optional[asyncio.Task[None]] = None
        self._cycles = 0

    @property
    def cycles(self) -> int:
        return self._cycles

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> Optional[CycleReport]:
        """Run a single cycle; failures are logged and reported as ``None``."""
        logger.debug("Checking queue")
        self._cycles += 1
        try:
            return await self._dispatcher.process_queue(self._session)
        except ConfigurationMissing as exc:
            logger.error("Process Queue (FAILED): %s", exc)
        except Exception:
            logger.exception("Process Queue (FAILED)")
        return None

    async def run_forever(self) -> None:
        while not self._stop.is_set():
            await self.run_once()
            logger.debug("Recheck queue in: %s seconds", self._interval)
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                continue
        logger.info("Queue worker stopped after %s cycles.", self._cycles)

    async def start(self) -> None:
        if self.is_running:
            return
        logger.info("Starting queue worker (interval=%ss).", self._interval)
        self._stop.clear()
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self.run_forever(), name="queue-worker")

    def request_stop(self) -> None:
        self._stop.set()

    async def stop(self) -> None:
        if self._task is None:
            return
        logger.info("Stopping queue worker.")
        self.request_stop()
        await asyncio.gather(self._task, return_exceptions=True)
        self._task = None
