"""Resolve ``module:attribute`` references to callables."""

from __future__ import annotations

import importlib
from typing import Any, Callable


def import_callable(reference: str) -> Callable[..., Any]:
    """
    Import a callable from a ``package.module:attribute`` reference.

    Dotted attributes after the colon are followed, so ``pkg.mod:Class.method``
    works too.

    Raises:
        ValueError: the reference is malformed or does not name a callable
        ImportError: the module cannot be imported
    """
    module_name, sep, attr_path = reference.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError(f"Expected 'module:attribute', got {reference!r}")
    target: Any = importlib.import_module(module_name)
    for attr in attr_path.split("."):
        try:
            target = getattr(target, attr)
        except AttributeError:
            raise ValueError(f"{module_name!r} has no attribute {attr_path!r}") from None
    if not callable(target):
        raise ValueError(f"{reference!r} is not callable")
    return target


__all__ = ["import_callable"]
