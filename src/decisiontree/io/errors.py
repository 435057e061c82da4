from __future__ import annotations

"""Job file loader errors.

Validation failures are reported against the job file's own structure, so an
entry such as ``("batches", 1, 0, 2)`` reads ``batch 2, path 1, action 3``
(positions are 1-based, as a user counts them in the YAML file).
"""

import os
from typing import Any, List, Optional, Sequence, Tuple

from pydantic import ValidationError

_BATCH_LEVELS = ("batch", "path", "action")

# Entries listed in the message; the rest are summarized as a count
_MAX_LISTED = 5


def describe_location(loc: Sequence[Any]) -> str:
    """Render a pydantic error location in job file terms."""
    if not loc:
        return "<root>"
    if loc[0] == "batches" and len(loc) > 1 and all(isinstance(p, int) for p in loc[1:]):
        return ", ".join(f"{level} {index + 1}" for level, index in zip(_BATCH_LEVELS, loc[1:]))
    return ".".join(str(part) for part in loc)


def _display_path(path: str) -> str:
    try:
        return os.path.relpath(path)
    except ValueError:  # pragma: no cover - different drive on Windows
        return path


class LoaderError(RuntimeError):
    """A job file that cannot be turned into a runnable job.

    Attributes:
        file_path: the job file as given to the loader
        message: short description of what went wrong
        cause: the underlying exception, if any
        entries: ``(location, message)`` pairs for invalid entries of the file
        reward_reference: the ``module:attribute`` text that failed to resolve
    """

    def __init__(
        self,
        file_path: str,
        message: str,
        *,
        cause: Exception | None = None,
        reward_reference: Optional[str] = None,
    ):
        self.file_path = file_path
        self.message = message
        self.cause = cause
        self.reward_reference = reward_reference
        self.entries: List[Tuple[str, str]] = []
        if isinstance(cause, ValidationError):
            self.entries = [
                (describe_location(err.get("loc", ())), err.get("msg") or err.get("type") or "invalid value")
                for err in cause.errors()
            ]
        super().__init__(self._build_message())

    @property
    def location(self) -> Optional[str]:
        """Location of the first invalid entry, if the file failed validation."""
        return self.entries[0][0] if self.entries else None

    def _build_message(self) -> str:
        head = self.message
        if self.reward_reference is not None:
            head = f"{head} '{self.reward_reference}'"
        head = f"{head} ({_display_path(self.file_path)})"
        if self.entries:
            listed = [f"{where}: {what}" for where, what in self.entries[:_MAX_LISTED]]
            hidden = len(self.entries) - len(listed)
            if hidden:
                listed.append(f"and {hidden} more")
            return f"{head}: {'; '.join(listed)}"
        if self.cause is not None:
            return f"{head}: {self.cause}"
        return head

    def __str__(self) -> str:
        return self._build_message()


__all__ = ["LoaderError", "describe_location"]
