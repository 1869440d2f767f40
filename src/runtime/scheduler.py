"""
Fixed-cadence capture scheduler with a single-flight guard.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, TypeVar

T = TypeVar("T")

TickFn = Callable[[int], None]
ErrorSink = Callable[[Exception], None]


class CaptureScheduler:
    """
    Fires a tick callback every ``interval_s`` seconds.

    At most one tick body runs at a time. A timer firing while the previous
    tick is still in flight is skipped, never queued. Every ``start``/``stop``
    bumps a generation counter; a tick receives the generation it was
    dispatched under, and results must go through ``apply_if_current`` so a
    response arriving after ``stop`` (or after a restart) is discarded.

    Tick failures go to ``on_error`` and never stop the cadence.
    """

    def __init__(self, on_error: Optional[ErrorSink] = None, name: str = "capture"):
        self.name = name
        self._on_error = on_error
        self._lock = threading.Lock()
        # Serializes start/stop so only one timer thread is ever installed
        self._lifecycle_lock = threading.RLock()
        self._generation = 0
        self._running = False
        self._in_flight = False
        self._interval_s: Optional[float] = None
        self._on_tick: Optional[TickFn] = None
        self._stop_event: Optional[threading.Event] = None
        self._timer_thread: Optional[threading.Thread] = None
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"{name}-tick")

        self.ticks_dispatched = 0
        self.ticks_skipped = 0
        self.ticks_failed = 0

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._running

    @property
    def in_flight(self) -> bool:
        with self._lock:
            return self._in_flight

    @property
    def interval_s(self) -> Optional[float]:
        return self._interval_s

    def start(self, interval_s: float, on_tick: TickFn, fire_immediately: bool = False) -> int:
        """Start (or restart) the cadence and return the new generation."""
        if interval_s <= 0:
            raise ValueError("interval_s must be positive")

        with self._lifecycle_lock:
            self.stop()
            with self._lock:
                self._generation += 1
                generation = self._generation
                self._running = True
                self._interval_s = interval_s
                self._on_tick = on_tick
                stop_event = threading.Event()
                self._stop_event = stop_event

                def _run() -> None:
                    logging.info(f"Scheduler {self.name} started (interval {interval_s:.3f}s, generation {generation})")
                    if fire_immediately:
                        self.fire()
                    while not stop_event.wait(interval_s):
                        self.fire()
                    logging.info(f"Scheduler {self.name} stopped (generation {generation})")

                self._timer_thread = threading.Thread(target=_run, name=f"{self.name}-timer", daemon=True)
                self._timer_thread.start()
        return generation

    def fire(self) -> bool:
        """
        Dispatch one tick unless stopped or a tick is already in flight.

        Returns True if a tick was dispatched.
        """
        with self._lock:
            if not self._running or self._on_tick is None:
                return False
            if self._in_flight:
                self.ticks_skipped += 1
                logging.debug(f"Scheduler {self.name}: previous tick still in flight, skipping")
                return False
            self._in_flight = True
            self.ticks_dispatched += 1
            generation = self._generation
            on_tick = self._on_tick
        try:
            self._executor.submit(self._run_tick, on_tick, generation)
        except RuntimeError:
            # Executor already shut down
            with self._lock:
                self._in_flight = False
            return False
        return True

    def _run_tick(self, on_tick: TickFn, generation: int) -> None:
        try:
            on_tick(generation)
        except Exception as e:
            with self._lock:
                current = self._running and generation == self._generation
                if current:
                    self.ticks_failed += 1
            if current:
                logging.warning(f"Scheduler {self.name}: tick failed: {e}")
                self._report(e)
            else:
                logging.debug(f"Scheduler {self.name}: ignoring failure of stale tick (generation {generation}): {e}")
        finally:
            with self._lock:
                self._in_flight = False

    def _report(self, error: Exception) -> None:
        if self._on_error is None:
            return
        try:
            self._on_error(error)
        except Exception as e:
            logging.error(f"Scheduler {self.name}: error sink raised: {e}")

    def is_current(self, generation: int) -> bool:
        with self._lock:
            return self._running and generation == self._generation

    def apply_if_current(self, generation: int, fn: Callable[[], T]) -> bool:
        """
        Run ``fn`` only if ``generation`` is still live.

        Holds the scheduler lock while ``fn`` runs, so ``stop`` either happens
        before the check or after ``fn`` has completed. ``fn`` must be short.
        """
        with self._lock:
            if not self._running or generation != self._generation:
                return False
            fn()
            return True

    def stop(self) -> None:
        """Cancel the timer. Safe to call at any time, including mid-tick."""
        with self._lifecycle_lock:
            with self._lock:
                if not self._running:
                    return
                self._running = False
                self._generation += 1
                stop_event = self._stop_event
                thread = self._timer_thread
                self._stop_event = None
                self._timer_thread = None
            if stop_event is not None:
                stop_event.set()
            if thread is not None and thread is not threading.current_thread():
                thread.join(timeout=1.0)

    def shutdown(self, wait: bool = False) -> None:
        self.stop()
        self._executor.shutdown(wait=wait)
