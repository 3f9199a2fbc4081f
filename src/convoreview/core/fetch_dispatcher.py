"""Runs blocking API calls off the UI thread and delivers results back on it"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Optional

from loguru import logger
from PySide6.QtCore import QObject, Signal, Slot


@dataclass
class FetchResult:
    """Outcome of a background job: a value or the exception it raised"""
    value: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


Job = Callable[[], Any]
Completion = Callable[[FetchResult], None]


class FetchDispatcher(QObject):
    """
    Thread pool for API calls.

    Jobs run on worker threads; completions are delivered through a queued
    signal so they always run on the thread that owns the dispatcher (the Qt
    main thread). The underlying request cannot be aborted, so callers guard
    completions by session identity.
    """

    _completed = Signal(object)

    def __init__(self, max_workers: int = 4, parent=None):
        super().__init__(parent)
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="fetch")
        self._completed.connect(self._deliver)
        self._shut_down = False

    def submit(self, job: Job, on_done: Completion):
        if self._shut_down:
            logger.warning("FetchDispatcher is shut down, dropping job")
            return
        self._executor.submit(self._run, job, on_done)

    def shutdown(self):
        """Stop accepting jobs; running requests finish in the background"""
        self._shut_down = True
        self._executor.shutdown(wait=False, cancel_futures=True)

    def _run(self, job: Job, on_done: Completion):
        """Runs in thread pool"""
        try:
            result = FetchResult(value=job())
        except Exception as e:
            result = FetchResult(error=e)
        self._completed.emit((on_done, result))

    @Slot(object)
    def _deliver(self, payload):
        on_done, result = payload
        try:
            on_done(result)
        except Exception as e:
            logger.exception(f"Fetch completion handler failed: {e}")
