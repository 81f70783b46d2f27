"""Per-key limiting: one independent limiter for each key."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from calmo.strategies.registry import build_limiter

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Iterator

    from calmo.scheduler import Clock
    from calmo.strategies.base import BaseLimiter
    from calmo.strategies.registry import LimiterConfig

logger = logging.getLogger(__name__)


class KeyedLimiter:
    """Manages independent limiter state per key.

    Each key (document URI, chat id, sensor name...) gets its own limiter
    built from the same config, created on first use. A limiter is dropped
    as soon as it goes idle (fired and out of its window or cooldown), or
    when its key is canceled, so only keys with live timers are held. The
    key is not passed to the target; include it in the arguments if the
    target needs it.

    Args:
        func: The target operation shared by every key.
        config: A :class:`DebounceConfig` or :class:`ThrottleConfig`.
        clock: Scheduling backend shared by every key.

    Example::

        validate = KeyedLimiter(run_diagnostics, DebounceConfig(delay=0.4))

        validate("file:///a.py", "file:///a.py")
        validate("file:///b.py", "file:///b.py")
        # run_diagnostics fires once per document

        validate.close()
    """

    __slots__ = ("_clock", "_closed", "_config", "_func", "_limiters")

    def __init__(
        self,
        func: Callable[..., Any],
        config: LimiterConfig,
        clock: Clock | None = None,
    ) -> None:
        self._func = func
        self._config = config
        self._clock = clock
        self._limiters: dict[Hashable, BaseLimiter] = {}
        self._closed = False

    @property
    def config(self) -> LimiterConfig:
        return self._config

    @property
    def closed(self) -> bool:
        return self._closed

    def __call__(self, key: Hashable, *args: Any, **kwargs: Any) -> None:
        self._ensure_open()
        self._get_or_create(key)(*args, **kwargs)

    def get(self, key: Hashable) -> BaseLimiter | None:
        """Return the live limiter for *key*, or None if it has none."""
        return self._limiters.get(key)

    def cancel(self, key: Hashable) -> None:
        """Drop pending work for *key*."""
        self.discard(key)

    def flush(self, key: Hashable) -> None:
        limiter = self._limiters.get(key)
        if limiter is not None:
            limiter.flush()

    def cancel_all(self) -> None:
        limiters = list(self._limiters.values())
        self._limiters.clear()
        for limiter in limiters:
            limiter.close()

    def discard(self, key: Hashable) -> None:
        """Cancel and forget the limiter for *key*."""
        limiter = self._limiters.pop(key, None)
        if limiter is not None:
            limiter.close()
            logger.debug("discarded limiter for key %r", key)

    def close(self) -> None:
        """Close every limiter and refuse further calls."""
        if self._closed:
            return
        self._closed = True
        for limiter in self._limiters.values():
            limiter.close()
        self._limiters.clear()

    def keys(self) -> Iterator[Hashable]:
        return iter(list(self._limiters))

    def _get_or_create(self, key: Hashable) -> BaseLimiter:
        limiter = self._limiters.get(key)
        if limiter is None:
            limiter = build_limiter(self._func, self._config, self._clock)
            limiter.on_idle = lambda idle, key=key: self._reap(key, idle)
            self._limiters[key] = limiter
        return limiter

    def _reap(self, key: Hashable, limiter: BaseLimiter) -> None:
        if self._limiters.get(key) is limiter:
            del self._limiters[key]
            limiter.close()
            logger.debug("reaped idle limiter for key %r", key)

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("KeyedLimiter is closed")

    def __contains__(self, key: object) -> bool:
        return key in self._limiters

    def __len__(self) -> int:
        return len(self._limiters)

    def __enter__(self) -> KeyedLimiter:
        return self

    def __exit__(self, *_: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"KeyedLimiter(kind={self._config.kind.value}, keys={len(self)}, closed={self._closed})"
