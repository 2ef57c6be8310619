"""
Logging configuration + call instrumentation.

We use a YAML logging config (`src/gischeck/config/logging.yaml`) and then apply
runtime overrides from settings (e.g., `GISCHECK_LOG_LEVEL`).

`log_call` wraps an operation so each call logs start/finish timing at DEBUG and
failures at ERROR, without touching the wrapped function itself.
"""

from __future__ import annotations

import functools
import inspect
import logging
import logging.config
import time
from typing import Any, Callable, TypeVar

from gischeck.config.settings import get_logging_config, get_settings

F = TypeVar("F", bound=Callable[..., Any])


def configure_logging() -> None:
    """Configure the Python logging system based on packaged YAML config + settings."""
    settings = get_settings()
    config = get_logging_config()

    level = settings.app.log_level.upper()
    config.setdefault("root", {})["level"] = level
    for handler in config.get("handlers", {}).values():
        if isinstance(handler, dict) and "level" in handler:
            handler["level"] = level

    logging.config.dictConfig(config)


def log_call(operation: str, func: F, *, logger: logging.Logger | None = None) -> F:
    """Return `func` instrumented with start/completion/failure logging.

    Works for plain and `async def` functions; exceptions are logged and re-raised.
    """
    log = logger or logging.getLogger(getattr(func, "__module__", None) or __name__)
    name = getattr(func, "__qualname__", repr(func))

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def _async_wrapper(*args: Any, **kwargs: Any) -> Any:
            start = time.monotonic()
            log.debug("Starting: %s (%s)", operation, name)
            try:
                result = await func(*args, **kwargs)
            except Exception:
                log.exception("Failed: %s (%.0fms)", operation, (time.monotonic() - start) * 1000)
                raise
            log.debug("Completed: %s (%.0fms)", operation, (time.monotonic() - start) * 1000)
            return result

        return _async_wrapper  # type: ignore[return-value]

    @functools.wraps(func)
    def _wrapper(*args: Any, **kwargs: Any) -> Any:
        start = time.monotonic()
        log.debug("Starting: %s (%s)", operation, name)
        try:
            result = func(*args, **kwargs)
        except Exception:
            log.exception("Failed: %s (%.0fms)", operation, (time.monotonic() - start) * 1000)
            raise
        log.debug("Completed: %s (%.0fms)", operation, (time.monotonic() - start) * 1000)
        return result

    return _wrapper  # type: ignore[return-value]
