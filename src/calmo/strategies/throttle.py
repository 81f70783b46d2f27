"""Throttle: fire at most once per interval."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from calmo.config import ThrottleConfig
from calmo.strategies.base import BaseLimiter

if TYPE_CHECKING:
    from collections.abc import Callable

    from calmo.scheduler import Clock

logger = logging.getLogger(__name__)


class Throttler(BaseLimiter):
    """Invoke the target on the leading edge, then cool down.

    How it works:
        - A call outside a cooldown fires the target immediately and opens
          a cooldown of ``interval`` seconds.
        - Calls inside the cooldown are dropped, or with ``trailing=True``
          their arguments overwrite a single buffered slot.
        - When the cooldown closes with buffered arguments, the target fires
          once more and a new cooldown opens from that fire.

    Example::

        interval=1.0, trailing=True

        t=0.0 scroll(0)    -> target(0), cooldown until 1.0
        t=0.2 scroll(10)   -> buffered
        t=0.5 scroll(25)   -> buffered, replaces 10
        t=1.0 cooldown end -> target(25), cooldown until 2.0
        t=2.0 cooldown end -> nothing buffered, idle

    Complexity:
        Time:   O(1) per call
        Memory: O(1)
    """

    def __init__(
        self,
        func: Callable[..., Any],
        config: ThrottleConfig | None = None,
        clock: Clock | None = None,
    ) -> None:
        super().__init__(func, clock)
        self._config = config or ThrottleConfig()

    @property
    def config(self) -> ThrottleConfig:
        return self._config

    @property
    def interval(self) -> float:
        return self._config.interval

    @property
    def pending(self) -> bool:
        """Whether a trailing invocation is buffered."""
        return self._latest is not None

    @property
    def cooling_down(self) -> bool:
        return self._scheduler.pending

    def _on_call(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        if self._scheduler.pending:
            if self._config.trailing:
                self._latest = (args, kwargs)
            else:
                logger.debug("dropped call of %r during cooldown", self._func)
            return

        self._fire(args, kwargs)

    def _fire(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        # The cooldown is opened first so a raising target still throttles.
        self._scheduler.arm(self._close_window, self._config.interval)
        self._invoke(args, kwargs)

    def _close_window(self) -> None:
        latest, self._latest = self._latest, None
        if latest is None:
            logger.debug("cooldown of %r ended", self._func)
            self._notify_idle()
            return
        self._fire(*latest)

    def _rebind(self, func: Callable[..., Any]) -> Throttler:
        return Throttler(func, self._config, self._scheduler.clock)

    def cancel(self) -> None:
        """Clear the cooldown and any buffered trailing call."""
        self._scheduler.cancel()
        self._latest = None

    def flush(self) -> None:
        """Fire the buffered trailing call now and restart the cooldown."""
        latest, self._latest = self._latest, None
        if latest is not None:
            self._fire(*latest)
