"""
Refresh cycle orchestration.

State machine: IDLE -> REFRESHING -> IDLE, governed by a non-blocking guard.
A trigger that arrives while a cycle is in flight is dropped, not queued.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional, Protocol

from .cache import SessionCache
from .debug_report import build_debug_report
from .presentation import PresentationModel, build_menu, title_for
from .prober import CommandProber, ProbeResult

log = logging.getLogger(__name__)


class TrayHost(Protocol):
    def set_title(self, text: str) -> None:
        ...

    def set_menu(self, model: PresentationModel) -> None:
        ...

    def show_debug_report(self, text: str) -> None:
        ...


class RefreshCoordinator:
    """
    Runs fetch cycles: probe, replace the cache, then push title and menu to
    the host. The first cycle is started by `start()`; the periodic loop only
    refreshes once that first cycle has completed.
    """

    def __init__(
        self,
        config: dict,
        cache: SessionCache,
        prober: CommandProber,
        host: Optional[TrayHost] = None,
        debug_reporter: Optional[Callable[[], str]] = None,
    ) -> None:
        self._interval_s: float = float(config.get("refresh_interval_seconds", 120))
        self._cache = cache
        self._prober = prober
        self._host = host
        self._debug_reporter = debug_reporter or (lambda: build_debug_report(prober.extended_path))

        self._guard = threading.Lock()
        self._error_cb: Optional[Callable[[str], None]] = None

        self._pool: Optional[ThreadPoolExecutor] = None
        self._thread: Optional[threading.Thread] = None
        self._stop_evt = threading.Event()
        self._lifecycle_lock = threading.Lock()

    def attach_host(self, host: TrayHost) -> None:
        self._host = host

    def on_error(self, cb: Callable[[str], None]) -> None:
        self._error_cb = cb

    @property
    def is_refreshing(self) -> bool:
        return self._guard.locked()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        with self._lifecycle_lock:
            if self._pool is not None:
                return
            self._stop_evt.clear()
            self._pool = ThreadPoolExecutor(max_workers=2, thread_name_prefix="usage-task")
            self._thread = threading.Thread(target=self._run, name="RefreshCoordinator", daemon=True)
            self._thread.start()
        # Startup drives the first fetch; the timer waits for it.
        self.request_refresh()

    def stop(self) -> None:
        self._stop_evt.set()
        with self._lifecycle_lock:
            pool, self._pool = self._pool, None
            self._thread = None
        if pool is not None:
            # A stalled tool process must not block shutdown
            pool.shutdown(wait=False, cancel_futures=True)

    def request_refresh(self) -> Optional[Future]:
        return self._submit(self.refresh)

    def request_debug_report(self) -> Optional[Future]:
        return self._submit(self.show_debug_report)

    def refresh(self) -> bool:
        """Run one cycle. Returns False when another cycle is already in flight."""
        if not self._guard.acquire(blocking=False):
            log.debug("Refresh already in progress, skipping")
            return False
        try:
            try:
                result = self._prober.probe()
            except Exception as e:
                log.exception("Probe raised, recording tool as unavailable")
                self._emit_error(str(e))
                result = ProbeResult(interval=None, tool_available=False)
            snapshot = self._cache.replace(result.interval, result.tool_available)
            model = build_menu(snapshot)
            if self._host is not None:
                self._host.set_title(title_for(snapshot.interval))
                self._host.set_menu(model)
        except Exception as e:
            log.exception("Refresh cycle failed")
            self._emit_error(str(e))
        finally:
            self._guard.release()
        return True

    def show_debug_report(self) -> str:
        report = self._debug_reporter()
        log.info("=== DEBUG INFO ===\n%s==================", report)
        if self._host is not None:
            self._host.show_debug_report(report)
        return report

    def tick(self) -> bool:
        """Periodic trigger. Skips while refreshing or before the first completed cycle."""
        if self.is_refreshing:
            log.debug("Periodic refresh skipped: cycle in flight")
            return False
        if not self._cache.snapshot().has_fetched:
            log.debug("Periodic refresh skipped: startup refresh not finished")
            return False
        return self.refresh()

    def _submit(self, fn: Callable[[], object]) -> Optional[Future]:
        with self._lifecycle_lock:
            pool = self._pool
            if pool is None:
                log.warning("Coordinator not running, ignoring %s", getattr(fn, "__name__", fn))
                return None
            future = pool.submit(fn)
        future.add_done_callback(self._log_task_failure)
        return future

    def _log_task_failure(self, future: Future) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            log.error("Background task failed: %s", exc, exc_info=exc)
            self._emit_error(str(exc))

    def _emit_error(self, msg: str) -> None:
        if self._error_cb:
            self._error_cb(msg)

    def _run(self) -> None:
        while not self._stop_evt.wait(self._interval_s):
            try:
                self.tick()
            except Exception as e:
                log.exception("Refresh loop error")
                self._emit_error(str(e))
