"""Payload factories, reward functions and pools shared by the core tests."""

from typing import Any, Callable, Dict, List, Sequence


def make_info() -> Dict[str, Any]:
    return {"a": 3, "b": "info", "c": [0.25, 0.75]}


def make_other_info() -> Dict[str, Any]:
    """Same keys as make_info but ``b`` is an int."""
    return {"a": 3, "b": 7, "c": [0.25, 0.75]}


def spread(path: Sequence[int]) -> int:
    """Index of the largest action minus index of the smallest one."""
    if not path:
        return 0
    items = list(path)
    return items.index(max(items)) - items.index(min(items))


class CountingReward:
    """Reward function that records every path it is called with."""

    def __init__(self, fn: Callable[[Sequence[int]], Any] = spread):
        self.fn = fn
        self.calls: List[tuple] = []

    def __call__(self, path: Sequence[int]) -> Any:
        self.calls.append(tuple(path))
        return self.fn(path)


class RecordingPool:
    """Serial pool that records every map call."""

    def __init__(self):
        self.calls: List[List[tuple]] = []

    def map(self, fn, items):
        items = list(items)
        self.calls.append(items)
        return [fn(item) for item in items]
