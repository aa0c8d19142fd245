"""Quiescence-based scheduling: the one debounce primitive used everywhere.

A Debouncer wraps a callback and a delay. Every call schedules the callback
to run once the delay has elapsed without another call; earlier pending
calls are cancelled, so the most recent arguments always win and at most one
execution is pending at a time.

Timers come from a factory with the ``threading.Timer`` signature
``factory(interval, function, args=...)`` returning an object with
``start()`` and ``cancel()``.
"""

import functools
import logging
import threading
from typing import Any, Callable

logger = logging.getLogger(__name__)

TimerFactory = Callable[..., Any]


class Debouncer:
    """Coalesce bursts of calls into one deferred callback execution.

    Attributes:
        callback: Function run after the quiescence window
        delay_ms: Quiescence window in milliseconds
    """

    def __init__(
        self,
        callback: Callable[..., Any],
        delay_ms: float,
        timer_factory: TimerFactory = threading.Timer,
    ):
        if delay_ms < 0:
            raise ValueError("delay_ms must be >= 0")
        self.callback = callback
        self.delay_ms = delay_ms
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._timer = None
        self._pending: tuple[tuple, dict] | None = None
        self._generation = 0
        self._closed = False

    def __call__(self, *args, **kwargs) -> None:
        with self._lock:
            if self._closed:
                logger.debug(f"Ignoring call on closed debouncer for {self.callback!r}")
                return
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            self._pending = (args, kwargs)
            timer = self._timer_factory(
                self.delay_ms / 1000, self._fire, args=(self._generation,)
            )
            timer.daemon = True
            self._timer = timer
        timer.start()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    @property
    def pending(self) -> bool:
        return self._pending is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def _take(self, generation: int | None = None) -> tuple[tuple, dict] | None:
        with self._lock:
            if generation is not None and generation != self._generation:
                return None
            pending, self._pending = self._pending, None
            self._timer = None
            return pending

    def _fire(self, generation: int) -> None:
        pending = self._take(generation)
        if pending is None:
            return
        args, kwargs = pending
        self.callback(*args, **kwargs)

    def flush(self) -> bool:
        """Run the pending call now. Returns False if nothing was pending."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
        pending = self._take()
        if pending is None:
            return False
        args, kwargs = pending
        self.callback(*args, **kwargs)
        return True

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._pending = None
            self._generation += 1

    def close(self) -> None:
        """Cancel the pending call and refuse further scheduling."""
        self.cancel()
        self._closed = True


def debounce(
    delay_ms: float, timer_factory: TimerFactory = threading.Timer
) -> Callable[[Callable[..., Any]], Debouncer]:
    """Decorator form of Debouncer.

    Example:
        @debounce(300)
        def save(markup):
            ...
    """

    def decorator(func: Callable[..., Any]) -> Debouncer:
        debouncer = Debouncer(func, delay_ms, timer_factory=timer_factory)
        functools.update_wrapper(debouncer, func)
        return debouncer

    return decorator


class DebounceScope:
    """Owner of the debouncers belonging to one view.

    Closing the scope (the view is torn down) cancels every pending timer so
    no stale update reaches a view that no longer exists.
    """

    def __init__(self, timer_factory: TimerFactory = threading.Timer):
        self._timer_factory = timer_factory
        self._debouncers: list[Debouncer] = []
        self._closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    @property
    def closed(self) -> bool:
        return self._closed

    def debounce(self, callback: Callable[..., Any], delay_ms: float) -> Debouncer:
        """Create a Debouncer owned by this scope.

        Raises:
            RuntimeError: If the scope is already closed
        """
        if self._closed:
            raise RuntimeError("scope is closed")
        debouncer = Debouncer(callback, delay_ms, timer_factory=self._timer_factory)
        self._debouncers.append(debouncer)
        return debouncer

    def cancel_all(self) -> None:
        for debouncer in self._debouncers:
            debouncer.cancel()

    def close(self) -> None:
        for debouncer in self._debouncers:
            debouncer.close()
        self._closed = True
