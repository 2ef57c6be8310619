"""
Condition polling.

`wait_for` re-evaluates a predicate at a fixed interval until it returns a truthy
value or the time budget runs out. It is the single waiting primitive behind every
map-state wait (zoom reached, tiles loaded, animation settled).

Rules:
- the predicate may be sync or async; awaitable results are awaited
- the predicate is evaluated at least once, even with `timeout_ms=0`
- an exception from one evaluation is logged and treated as "not yet"; it never
  aborts the wait and it does not reset the clock
- the only terminal failures are `PollTimeoutError` and, when a cancel event is
  supplied and set, `PollCancelledError`
- sleeping is cooperative (`asyncio.sleep` by default), so many waits can run
  interleaved on one event loop without sharing state

Clock, sleep and logger are injectable so tests can drive time deterministically.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, TypeVar, Union

from gischeck.core.errors import PollCancelledError, PollConfigError, PollTimeoutError

T = TypeVar("T")

Predicate = Callable[[], Union[bool, Awaitable[bool]]]
Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[Any]]

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class PollOptions:
    """Per-wait configuration (milliseconds)."""

    timeout_ms: int = 5000
    interval_ms: int = 100
    description: str = "condition"

    def validate(self) -> None:
        if self.interval_ms <= 0:
            raise PollConfigError(f"poll interval must be > 0 ms (got {self.interval_ms}) for {self.description}")
        if self.timeout_ms < 0:
            raise PollConfigError(f"poll timeout must be >= 0 ms (got {self.timeout_ms}) for {self.description}")


@dataclass(frozen=True)
class PollResult:
    """Outcome of a satisfied wait."""

    attempts: int
    elapsed_ms: float
    errors: int = 0


async def _evaluate(predicate: Callable[[], Any]) -> Any:
    result = predicate()
    if inspect.isawaitable(result):
        result = await result
    return result


async def wait_for(
    predicate: Predicate,
    options: PollOptions | None = None,
    *,
    cancel: asyncio.Event | None = None,
    clock: Clock = time.monotonic,
    sleep: Sleep = asyncio.sleep,
    logger: logging.Logger | None = None,
) -> PollResult:
    """Wait until `predicate()` is truthy.

    Raises:
        PollConfigError: If `options` has a non-positive interval or a negative timeout.
        PollTimeoutError: If the predicate never held within `options.timeout_ms`.
        PollCancelledError: If `cancel` was set before the predicate held.
    """
    opts = options or PollOptions()
    opts.validate()
    log = logger or _log

    timeout_s = opts.timeout_ms / 1000.0
    interval_s = opts.interval_ms / 1000.0
    start = clock()
    attempts = 0
    errors = 0
    last_error: Exception | None = None

    log.debug("Waiting for %s (timeout=%sms interval=%sms)", opts.description, opts.timeout_ms, opts.interval_ms)

    while True:
        if cancel is not None and cancel.is_set():
            log.debug("Wait for %s cancelled after %d attempts", opts.description, attempts)
            raise PollCancelledError(opts.description, attempts=attempts)

        attempts += 1
        try:
            satisfied = bool(await _evaluate(predicate))
        except Exception as exc:
            errors += 1
            last_error = exc
            satisfied = False
            log.debug("Error checking %s (attempt %d): %r", opts.description, attempts, exc)

        elapsed = clock() - start
        if satisfied:
            log.debug("%s met after %d attempts (%.0fms)", opts.description, attempts, elapsed * 1000)
            return PollResult(attempts=attempts, elapsed_ms=elapsed * 1000, errors=errors)

        if elapsed >= timeout_s:
            log.debug("Timed out waiting for %s after %d attempts", opts.description, attempts)
            raise PollTimeoutError(opts.description, opts.timeout_ms, attempts=attempts, last_error=last_error)

        await sleep(min(interval_s, timeout_s - elapsed))


async def wait_for_value(
    getter: Callable[[], Union[T, Awaitable[T]]],
    check: Callable[[T], bool],
    options: PollOptions | None = None,
    **kwargs: Any,
) -> T:
    """Poll `getter()` until `check(value)` holds and return that value.

    Errors from either `getter` or `check` count as "not yet", like in `wait_for`.
    Keyword arguments are passed through to `wait_for`.
    """
    box: list[T] = []

    async def _predicate() -> bool:
        value = await _evaluate(getter)
        if check(value):
            box.append(value)
            return True
        return False

    await wait_for(_predicate, options, **kwargs)
    return box[-1]
