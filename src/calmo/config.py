"""Configuration types for the calmo library."""

import math
from dataclasses import dataclass
from enum import StrEnum
from numbers import Real


class Kind(StrEnum):
    """Available limiter kinds.

    DEBOUNCE: Fire once per burst, after a quiet period.
    THROTTLE: Fire at most once per interval, on the leading edge.
    """

    DEBOUNCE = "debounce"
    THROTTLE = "throttle"


class LeadingPolicy(StrEnum):
    """What a leading-edge debouncer does when its suppression window closes.

    SUPPRESS: Calls made inside the window are dropped.
    REPLAY:   If any call arrived after the leading one, fire once more
              with the latest arguments when the window closes.
    """

    SUPPRESS = "suppress"
    REPLAY = "replay"


def _check_duration(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise TypeError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"{name} must be non-negative and finite, got {value}")


@dataclass(frozen=True, slots=True)
class DebounceConfig:
    """Configuration for a Debouncer.

    Attributes:
        delay: Quiet-period delay in seconds. The debouncer fires this long
               after the last call of a burst. Zero still defers the call
               to the next loop iteration.
        leading: Fire immediately on the first call of a burst instead of
                 at its end.
        leading_policy: Window-end behaviour in leading mode.
        max_wait: Maximum time in seconds a trailing invocation can be
                  deferred while calls keep arriving. None means no cap.
                  Only valid when ``leading`` is False.
    """

    delay: float = 0.3
    leading: bool = False
    leading_policy: LeadingPolicy = LeadingPolicy.SUPPRESS
    max_wait: float | None = None

    kind = Kind.DEBOUNCE

    def __post_init__(self) -> None:
        _check_duration("delay", self.delay)
        object.__setattr__(self, "leading_policy", LeadingPolicy(self.leading_policy))

        if self.leading_policy is not LeadingPolicy.SUPPRESS and not self.leading:
            raise ValueError(
                f"leading_policy={self.leading_policy.value!r} requires leading=True"
            )

        if self.max_wait is not None:
            _check_duration("max_wait", self.max_wait)
            if self.leading:
                raise ValueError("max_wait cannot be combined with leading=True")
            if self.max_wait < self.delay:
                raise ValueError(f"max_wait ({self.max_wait}) must be >= delay ({self.delay})")


@dataclass(frozen=True, slots=True)
class ThrottleConfig:
    """Configuration for a Throttler.

    Attributes:
        interval: Cooldown length in seconds after each invocation.
        trailing: Replay the latest call made during a cooldown once the
                  cooldown closes.
    """

    interval: float = 0.1
    trailing: bool = False

    kind = Kind.THROTTLE

    def __post_init__(self) -> None:
        _check_duration("interval", self.interval)
