"""Non-blocking audit emitter.

``emit`` only enqueues. A background task drains the queue into the sink,
so a slow or failing sink never delays or changes an authorization
decision. Under back-pressure events are dropped and counted.
"""

import asyncio
import logging
from contextlib import suppress
from typing import Optional

from cardshow_authz.config.settings import settings

from .events import AuditEvent
from .sinks import AuditSink, build_sink

logger = logging.getLogger(__name__)


class AuditEmitter:
    """Bounded queue in front of an audit sink."""

    def __init__(self, sink: AuditSink, maxsize: int = 1000):
        self.sink = sink
        self.maxsize = maxsize
        self.dropped = 0
        self._queue: Optional[asyncio.Queue] = None
        self._worker: Optional[asyncio.Task] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    def emit(self, event: AuditEvent) -> bool:
        """Enqueue an event without waiting. Returns False if it was dropped."""
        self._ensure_worker()
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning(
                "Audit queue full, dropping event",
                extra={"event": "audit_dropped", "dropped_total": self.dropped, **event.to_dict()},
            )
            return False
        return True

    async def start(self) -> None:
        self._ensure_worker()

    async def flush(self) -> None:
        """Wait until every queued event has been handed to the sink."""
        if self._queue is not None and self._loop is asyncio.get_running_loop():
            await self._queue.join()

    async def stop(self) -> None:
        """Drain the queue, then stop the worker."""
        await self.flush()
        if self._worker is not None:
            self._worker.cancel()
            with suppress(asyncio.CancelledError):
                await self._worker
        self._worker = None
        self._queue = None
        self._loop = None

    def _ensure_worker(self) -> None:
        loop = asyncio.get_running_loop()
        if self._loop is not loop:
            # Queue and worker belong to one event loop
            self._loop = loop
            self._queue = asyncio.Queue(maxsize=self.maxsize)
            self._worker = None
        if self._worker is None or self._worker.done():
            self._worker = loop.create_task(self._run())

    async def _run(self) -> None:
        queue = self._queue
        while True:
            event = await queue.get()
            try:
                await self.sink.emit(event)
            except Exception as e:
                logger.error(
                    f"Audit sink {type(self.sink).__name__} failed: {e}",
                    extra={"event": "audit_sink_error", **event.to_dict()},
                )
            finally:
                queue.task_done()


_emitter: Optional[AuditEmitter] = None


def get_audit_emitter() -> AuditEmitter:
    """Process-wide emitter built from settings."""
    global _emitter
    if _emitter is None:
        _emitter = AuditEmitter(build_sink(settings), maxsize=settings.AUDIT_QUEUE_MAXSIZE)
    return _emitter


def reset_audit_emitter() -> None:
    """Forget the process-wide emitter (tests)."""
    global _emitter
    _emitter = None
