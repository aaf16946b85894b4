"""
Fail-safe wrapping for pipeline steps.

Chunking must never raise on caller input. Each step is wrapped so an
internal fault is logged and the step's input is handed to the next
stage untouched.
"""

import functools
from collections.abc import Callable
from typing import Any, TypeVar

from chunkline_logging import get_logger


logger = get_logger("chunkline")

T = TypeVar("T")


def _describe(value: Any) -> dict[str, Any]:
    if isinstance(value, str):
        return {"text_length": len(value)}
    if isinstance(value, list):
        return {"chunk_count": len(value)}
    return {"input_type": type(value).__name__}


def fail_safe(step: str) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Return the first positional argument unchanged if the step raises.

    Usage:
        @fail_safe("tables")
        def format_tables_for_discord(text): ...
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(value: Any, *args: Any, **kwargs: Any) -> Any:
            try:
                return func(value, *args, **kwargs)
            except Exception:
                logger.with_context(step=step).exception(
                    "Chunking step failed, passing input through", **_describe(value)
                )
                return value

        return wrapper

    return decorator
