"""Debounce: fire once per burst of calls."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from calmo.config import DebounceConfig, LeadingPolicy
from calmo.strategies.base import BaseLimiter

if TYPE_CHECKING:
    from collections.abc import Callable

    from calmo.scheduler import Clock

logger = logging.getLogger(__name__)


class Debouncer(BaseLimiter):
    """Invoke the target at most once per burst of calls.

    How it works (trailing mode, the default):
        - Every call replaces the latest arguments and re-arms the timer.
        - When ``delay`` passes without a call, fire with the latest
          arguments.
        - ``max_wait`` caps how long a continuous stream can defer the
          invocation.

    Example::

        delay=0.5

        t=0.0 search("h")      -> arm (0.5)
        t=0.1 search("he")     -> re-arm (0.5)
        t=0.3 search("hello")  -> re-arm (0.5)
        t=0.8 timer expires    -> target("hello")

    Leading mode fires synchronously on the first call of a burst and opens
    a suppression window that every further call extends. When the window
    closes, :class:`LeadingPolicy` decides whether the latest suppressed
    call is replayed.

    Complexity:
        Time:   O(1) per call
        Memory: O(1), only the latest arguments are kept
    """

    def __init__(
        self,
        func: Callable[..., Any],
        config: DebounceConfig | None = None,
        clock: Clock | None = None,
    ) -> None:
        super().__init__(func, clock)
        self._config = config or DebounceConfig()
        self._deadline: float | None = None

    @property
    def config(self) -> DebounceConfig:
        return self._config

    @property
    def delay(self) -> float:
        return self._config.delay

    @property
    def pending(self) -> bool:
        return self._scheduler.pending

    def _on_call(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        if self._config.leading:
            self._on_leading_call(args, kwargs)
        else:
            self._on_trailing_call(args, kwargs)

    def _on_trailing_call(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        self._latest = (args, kwargs)
        delay = self._config.delay

        if self._config.max_wait is not None:
            now = self._scheduler.clock.time()
            if self._deadline is None:
                self._deadline = now + self._config.max_wait
            delay = max(0.0, min(delay, self._deadline - now))

        self._scheduler.arm(self._fire_trailing, delay)

    def _on_leading_call(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        burst_start = not self._scheduler.pending
        if not burst_start:
            self._latest = (args, kwargs)

        # Open the window before invoking so a raising target cannot leave
        # the burst half-started.
        self._scheduler.arm(self._close_window, self._config.delay)

        if burst_start:
            logger.debug("leading fire of %r", self._func)
            self._invoke(args, kwargs)

    def _fire_trailing(self) -> None:
        latest, self._latest = self._latest, None
        self._deadline = None
        try:
            if latest is not None:
                self._invoke(*latest)
        finally:
            self._notify_idle()

    def _close_window(self) -> None:
        latest, self._latest = self._latest, None
        try:
            if latest is None:
                return
            if self._config.leading_policy is LeadingPolicy.REPLAY:
                self._invoke(*latest)
            else:
                logger.debug("suppressed trailing call of %r", self._func)
        finally:
            self._notify_idle()

    def _rebind(self, func: Callable[..., Any]) -> Debouncer:
        return Debouncer(func, self._config, self._scheduler.clock)

    def cancel(self) -> None:
        """Discard the pending invocation for the current burst."""
        self._scheduler.cancel()
        self._latest = None
        self._deadline = None

    def flush(self) -> None:
        """Fire the pending invocation now, or close the leading window."""
        self._scheduler.fire()
