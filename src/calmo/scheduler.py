"""Cancelable deferred invocation on top of a pluggable clock."""

from __future__ import annotations

import logging
from asyncio import AbstractEventLoop, get_running_loop
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Clock(Protocol):
    """Minimal scheduling interface the limiters depend on.

    ``asyncio`` event loops satisfy it directly; :class:`AsyncioClock`
    defers the loop lookup until the first call.
    """

    def call_later(self, delay: float, callback: Callable[[], object]) -> Cancellable:
        """Run *callback* after *delay* seconds."""
        ...

    def time(self) -> float:
        """Return the current monotonic time in seconds."""
        ...


class AsyncioClock:
    """Clock backed by an ``asyncio`` event loop.

    The loop is resolved lazily with :func:`asyncio.get_running_loop`, so a
    limiter can be created at import time and used later inside a loop. A
    closed loop is replaced by the running one, so separate
    ``asyncio.run`` calls can share a limiter.
    """

    __slots__ = ("_loop",)

    def __init__(self, loop: AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def _get_loop(self) -> AbstractEventLoop:
        if self._loop is None or self._loop.is_closed():
            self._loop = get_running_loop()
        return self._loop

    def call_later(self, delay: float, callback: Callable[[], object]) -> Cancellable:
        return self._get_loop().call_later(delay, callback)

    def time(self) -> float:
        return self._get_loop().time()


class PendingCall:
    """Handle to one armed action.

    ``cancelled`` is checked right before the action runs, so a timer the
    clock has already queued still becomes a no-op once canceled.
    """

    __slots__ = ("action", "cancelled", "handle")

    def __init__(self, action: Callable[[], object]) -> None:
        self.action = action
        self.cancelled = False
        self.handle: Cancellable | None = None

    def cancel(self) -> None:
        self.cancelled = True
        if self.handle is not None:
            self.handle.cancel()
            self.handle = None

    def __repr__(self) -> str:
        return f"PendingCall(action={self.action!r}, cancelled={self.cancelled})"


class DeferredScheduler:
    """Owns at most one pending deferred action.

    How it works:
        - ``arm`` cancels whatever is pending and schedules the new action.
        - ``cancel`` marks the pending call canceled and drops it.
        - When the clock fires, the call runs only if it is still the
          current, non-canceled one. State is cleared before the action
          runs, so the action may re-arm and exceptions leave no stale
          pending call behind.

    Complexity:
        Time:   O(1) per operation
        Memory: O(1)
    """

    __slots__ = ("_clock", "_current")

    def __init__(self, clock: Clock) -> None:
        self._clock = clock
        self._current: PendingCall | None = None

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def pending(self) -> bool:
        """Whether an action is currently armed."""
        return self._current is not None

    def arm(self, action: Callable[[], object], delay: float) -> PendingCall:
        """Schedule *action* after *delay* seconds, replacing any pending one."""
        self.cancel()
        call = PendingCall(action)
        call.handle = self._clock.call_later(delay, lambda: self._run(call))
        self._current = call
        logger.debug("armed %r for %.3fs", action, delay)
        return call

    def cancel(self) -> None:
        """Cancel the pending action, if any."""
        call, self._current = self._current, None
        if call is not None:
            call.cancel()
            logger.debug("canceled %r", call.action)

    def fire(self) -> bool:
        """Run the pending action now. Returns False if nothing was armed."""
        call = self._current
        if call is None:
            return False
        self.cancel()
        logger.debug("firing %r early", call.action)
        call.action()
        return True

    def _run(self, call: PendingCall) -> None:
        if call.cancelled or call is not self._current:
            return
        self._current = None
        call.handle = None
        call.action()

    def __repr__(self) -> str:
        return f"DeferredScheduler(pending={self.pending})"
