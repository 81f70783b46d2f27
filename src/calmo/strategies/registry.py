"""Maps each ``Kind`` enum member to a callable that builds a ``BaseLimiter``.

When you add a new limiter:

1. Add a variant to the ``Kind`` enum in ``config.py`` and a config class
   whose ``kind`` attribute names it.
2. Add an entry to ``REGISTRY`` pointing to a factory function or lambda
   that constructs the concrete limiter from the target, config and clock.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from calmo.config import DebounceConfig, Kind, ThrottleConfig
from calmo.scheduler import Clock
from calmo.strategies.base import BaseLimiter
from calmo.strategies.debounce import Debouncer
from calmo.strategies.throttle import Throttler

LimiterConfig = DebounceConfig | ThrottleConfig
LimiterFactory = Callable[[Callable[..., Any], Any, Clock | None], BaseLimiter]

REGISTRY: dict[Kind, LimiterFactory] = {
    Kind.DEBOUNCE: lambda func, cfg, clock: Debouncer(func, cfg, clock),
    Kind.THROTTLE: lambda func, cfg, clock: Throttler(func, cfg, clock),
}


def build_limiter(
    func: Callable[..., Any],
    config: LimiterConfig,
    clock: Clock | None = None,
) -> BaseLimiter:
    """Resolve *config.kind* to a concrete ``BaseLimiter`` wrapping *func*."""
    kind = getattr(config, "kind", None)
    factory = REGISTRY.get(kind)  # type: ignore[arg-type]
    if not factory:
        raise ValueError(
            f"Unknown limiter kind: {kind!r}. Registered: {', '.join(k.value for k in REGISTRY)}"
        )
    return factory(func, config, clock)
