# kvlog/handlers/buffered.py

"""Buffered delivery: a bounded queue drained by one worker thread."""

import logging
import queue
import threading
from typing import Optional

from ..core.constants import BUFFER_STOP_TIMEOUT_SECONDS
from ..core.exceptions import HandlerClosedError
from ..core.record import Record
from .base import Handler

logger = logging.getLogger(__name__)

_STOP = object()


class BufferWorker(threading.Thread):
    """Worker thread that delivers queued records to the inner handler."""

    def __init__(self, name: str, buffer: "BufferedHandler"):
        super().__init__(name=name, daemon=True)
        self.buffer = buffer
        self.records_delivered = 0
        self.delivery_errors = 0

    def run(self):
        records = self.buffer._queue
        handoff = self.buffer._handoff
        while True:
            item = records.get()
            if handoff is not None:
                handoff.release()
            try:
                if item is _STOP:
                    return
                self._deliver(item)
            finally:
                records.task_done()

    def _deliver(self, record: Record):
        try:
            self.buffer.inner.handle(record)
            self.records_delivered += 1
        except Exception as e:
            self.delivery_errors += 1
            logger.error(f"Buffered delivery to {type(self.buffer.inner).__name__} failed: {e}")


class BufferedHandler(Handler):
    """
    Decouples producers from a slow handler.

    ``handle`` enqueues and returns; one worker delivers records to
    ``inner`` strictly in enqueue order. When the queue is full the caller
    blocks until there is room, nothing is dropped. ``capacity=0`` is a
    synchronous hand-off: ``handle`` returns once the worker has taken the
    record.

    The worker lives until ``close()`` is called. A handler that is never
    closed keeps its worker thread alive for the life of the process.
    """

    def __init__(self, capacity: int, inner: Handler, name: Optional[str] = None):
        if capacity < 0:
            raise ValueError(f"capacity must be >= 0, got {capacity}")
        self.capacity = capacity
        self.inner = inner
        self._queue: "queue.Queue" = queue.Queue(maxsize=capacity or 1)
        self._handoff: Optional[threading.Semaphore] = threading.Semaphore(0) if capacity == 0 else None
        self._lock = threading.Lock()
        self._closed = False
        self.worker = BufferWorker(name or f"kvlog-buffer-{id(self):x}", self)
        self.worker.start()

    @property
    def closed(self) -> bool:
        return self._closed

    def pending(self) -> int:
        """Number of records waiting for the worker."""
        return self._queue.qsize()

    def _enqueue(self, item) -> None:
        self._queue.put(item)
        if self._handoff is not None:
            self._handoff.acquire()

    def handle(self, record: Record) -> None:
        with self._lock:
            if self._closed:
                raise HandlerClosedError(self)
            self._enqueue(record)

    def flush(self) -> None:
        """Block until every record enqueued so far has been delivered."""
        self._queue.join()

    def close(self, timeout: Optional[float] = BUFFER_STOP_TIMEOUT_SECONDS) -> None:
        """Deliver what is queued, then stop and join the worker."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._enqueue(_STOP)
        self.worker.join(timeout=timeout)
        if self.worker.is_alive():
            logger.warning(f"Buffer worker {self.worker.name} did not stop within {timeout}s")

    stop = close
