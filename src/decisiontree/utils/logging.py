from __future__ import annotations
import logging
import time
from functools import wraps
from typing import Any, Callable

from rich.logging import RichHandler

logging.getLogger("decisiontree").addHandler(logging.NullHandler())


def configure_logging(verbose: bool = False) -> None:
    """Route ``decisiontree`` log records through a rich handler."""
    logger = logging.getLogger("decisiontree")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(show_path=False, markup=False)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)


def log_calls(logger_name: str | None = None) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator logging each call, its outcome and its duration at DEBUG level.

    Failures are logged as a one-line DEBUG record and re-raised unchanged;
    reporting them is left to the caller.
    """

    def _decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        logger = logging.getLogger(logger_name or func.__module__)

        @wraps(func)
        def _wrapper(*args: Any, **kwargs: Any) -> Any:
            logger.debug("Calling %s args=%s kwargs=%s", func.__name__, args, kwargs)
            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                elapsed = time.perf_counter() - started
                logger.debug("%s failed after %.3fs: %s: %s", func.__name__, elapsed, type(e).__name__, e)
                raise
            logger.debug("%s returned %r in %.3fs", func.__name__, result, time.perf_counter() - started)
            return result

        return _wrapper

    return _decorator
