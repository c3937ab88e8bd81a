from __future__ import annotations

import logging
from typing import Any, Callable

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal, Slot

from personal_notes.settings import APP_NAME

log = logging.getLogger(APP_NAME)


class StoreCallSignals(QObject):
    finished = Signal(int, object)  # req_id, result
    failed = Signal(int, object)    # req_id, exception


class StoreCallWorker(QRunnable):
    def __init__(self, *, req_id: int, call: Callable[[], Any]):
        super().__init__()
        self.req_id = req_id
        self.call = call
        self.signals = StoreCallSignals()

    def run(self) -> None:
        try:
            result = self.call()
        except Exception as e:
            self.signals.failed.emit(self.req_id, e)
            return
        self.signals.finished.emit(self.req_id, result)


class ThreadPoolRunner(QObject):
    """
    Runs store calls in a QThreadPool and hands results back on the GUI thread.

    Each call gets a monotonic req_id; the worker is kept alive until its
    result has been delivered.
    """

    def __init__(self, *, parent: QObject | None = None, pool: QThreadPool | None = None):
        super().__init__(parent)
        self._pool = pool or QThreadPool.globalInstance()
        self._req_id = 0
        self._pending: dict[int, tuple[StoreCallWorker, Callable, Callable]] = {}

    def submit(self, call, *, on_success, on_failure) -> None:
        self._req_id += 1
        req_id = self._req_id

        worker = StoreCallWorker(req_id=req_id, call=call)
        worker.signals.finished.connect(self._on_worker_finished)
        worker.signals.failed.connect(self._on_worker_failed)
        self._pending[req_id] = (worker, on_success, on_failure)
        log.debug("Store call started: req_id=%d", req_id)
        self._pool.start(worker)

    @Slot(int, object)
    def _on_worker_finished(self, req_id: int, result) -> None:
        entry = self._pending.pop(req_id, None)
        if entry is None:
            return
        _worker, on_success, _on_failure = entry
        on_success(result)

    @Slot(int, object)
    def _on_worker_failed(self, req_id: int, exc) -> None:
        entry = self._pending.pop(req_id, None)
        if entry is None:
            return
        _worker, _on_success, on_failure = entry
        on_failure(exc)
