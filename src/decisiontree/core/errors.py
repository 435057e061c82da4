"""Faults raised by the decision tree core."""

from __future__ import annotations

from typing import Any, Sequence


def format_path(path: Sequence[int]) -> str:
    """Format a path for messages, e.g. ``[1, 2, 3]`` or ``[] (root)``."""
    items = list(path)
    if not items:
        return "[] (root)"
    return "[" + ", ".join(str(a) for a in items) + "]"


class DecisionTreeError(RuntimeError):
    """Base class for all decision tree faults."""


class PayloadSchemaMismatch(DecisionTreeError, TypeError):
    """A payload does not match the schema fixed for the tree."""

    def __init__(self, expected: Any, actual: Any):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Payload schema mismatch: expected {expected!r}, got {actual!r}")


class PathNotFound(DecisionTreeError, KeyError):
    """No node is reachable through the given path."""

    def __init__(self, path: Sequence[int]):
        self.path = tuple(path)
        super().__init__(f"Path not found: {format_path(self.path)}")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class RewardNotComputed(DecisionTreeError, LookupError):
    """The node exists but has no populated reward."""

    def __init__(self, path: Sequence[int], reward_index: int = 0):
        self.path = tuple(path)
        self.reward_index = reward_index
        state = "unset" if reward_index == 0 else f"pending (slot {reward_index})"
        super().__init__(f"Reward for {format_path(self.path)} is not available: {state}")


class DuplicateSiblingAction(DecisionTreeError, ValueError):
    """A child with the same action already exists under the parent."""

    def __init__(self, action: int):
        self.action = action
        super().__init__(f"Duplicate sibling action: {action}")


class WorkerPoolError(DecisionTreeError):
    """The worker pool broke the ordered map contract."""

    def __init__(self, expected: int, received: int):
        self.expected = expected
        self.received = received
        super().__init__(f"Worker pool returned {received} result(s) for {expected} work item(s)")


__all__ = [
    "DecisionTreeError",
    "PayloadSchemaMismatch",
    "PathNotFound",
    "RewardNotComputed",
    "DuplicateSiblingAction",
    "WorkerPoolError",
    "format_path",
]
