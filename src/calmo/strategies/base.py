"""Abstract base class that all limiters must implement."""

from __future__ import annotations

import asyncio
import inspect
import logging
from abc import ABC, abstractmethod
from functools import update_wrapper
from types import MethodType
from typing import TYPE_CHECKING, Any

from calmo.scheduler import AsyncioClock, DeferredScheduler

if TYPE_CHECKING:
    from collections.abc import Callable

    from calmo.scheduler import Clock

logger = logging.getLogger(__name__)


class BaseLimiter(ABC):
    """Base class for debouncers and throttlers.

    A limiter wraps a target callable. Calling the limiter records the
    arguments and lets the subclass decide whether the target runs now,
    later, or not at all. The target is only ever invoked with the
    arguments of one recorded call; it is never copied or mutated.

    If the target returns an awaitable, it is scheduled as a task on the
    running loop and a reference is kept until it finishes.

    A limiter used as a class attribute (``@debounce`` on a method) binds
    like a function: each instance gets its own limiter, stored in the
    instance ``__dict__`` on first access.

    ``on_idle``, when set, is called with the limiter each time it runs out
    of deferred work after a firing.

    Subclasses must implement :meth:`_on_call`, :meth:`_rebind`,
    :meth:`cancel`, :meth:`flush`, and :attr:`pending`.

    Args:
        func: The target operation.
        clock: Scheduling backend. Defaults to an :class:`AsyncioClock`.
    """

    def __init__(self, func: Callable[..., Any], clock: Clock | None = None) -> None:
        if not callable(func):
            raise TypeError(f"func must be callable, got {func!r}")
        self._func = func
        self._scheduler = DeferredScheduler(clock if clock is not None else AsyncioClock())
        self._latest: tuple[tuple[Any, ...], dict[str, Any]] | None = None
        self._tasks: set[asyncio.Future[Any]] = set()
        self._closed = False
        self._attrname: str | None = None
        self.on_idle: Callable[[BaseLimiter], object] | None = None
        update_wrapper(self, func, updated=())

    @property
    def func(self) -> Callable[..., Any]:
        return self._func

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def active(self) -> bool:
        """Whether a timer (pending call, window or cooldown) is armed."""
        return self._scheduler.pending

    @property
    @abstractmethod
    def pending(self) -> bool:
        """Whether deferred work capable of invoking the target is queued."""

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        self._ensure_open()
        self._on_call(args, kwargs)

    def __set_name__(self, owner: type, name: str) -> None:
        self._attrname = name

    def __get__(self, instance: object, owner: type | None = None) -> BaseLimiter:
        if instance is None:
            return self
        if self._attrname is None:
            raise TypeError(f"{type(self).__name__} must be assigned in a class body to bind")
        try:
            cache = instance.__dict__
        except AttributeError:
            raise TypeError(
                f"No '__dict__' on {type(instance).__name__!r} to hold the bound "
                f"{type(self).__name__} for {self._attrname!r}"
            ) from None
        bound = cache.get(self._attrname)
        if bound is None:
            bound = self._rebind(MethodType(self._func, instance))
            cache[self._attrname] = bound
        return bound

    @abstractmethod
    def _on_call(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        """Apply the limiting policy to one call."""

    @abstractmethod
    def _rebind(self, func: Callable[..., Any]) -> BaseLimiter:
        """Return a fresh limiter with the same settings wrapping *func*."""

    @abstractmethod
    def cancel(self) -> None:
        """Drop pending work. The next call starts a fresh burst."""

    @abstractmethod
    def flush(self) -> None:
        """Run pending work now, if any."""

    def close(self) -> None:
        """Cancel pending work and refuse further calls."""
        if self._closed:
            return
        self.cancel()
        self._closed = True

    def _invoke(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        result = self._func(*args, **kwargs)
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    def _notify_idle(self) -> None:
        if self.on_idle is not None and not self.active:
            self.on_idle(self)

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError(f"{type(self).__name__} is closed")

    def __enter__(self) -> BaseLimiter:
        return self

    def __exit__(self, *_: Any) -> None:
        self.close()

    async def __aenter__(self) -> BaseLimiter:
        return self

    async def __aexit__(self, *_: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        name = getattr(self._func, "__qualname__", repr(self._func))
        return f"{type(self).__name__}({name}, pending={self.pending}, closed={self._closed})"
