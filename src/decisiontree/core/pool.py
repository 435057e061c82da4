"""
Worker pools for batched reward computation.

The tree only needs an ordered parallel map: given a function and a sequence
of work items, return one result per item in the same order. Anything with a
matching ``map`` method can be passed to DecisionTree.get_or_create_batch;
the classes here cover the common cases on top of concurrent.futures.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from typing import Any, Callable, Iterable, List, Literal, Optional, Protocol, Sequence, TypeVar, runtime_checkable

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

PoolKind = Literal["serial", "thread", "process"]


@runtime_checkable
class WorkerPool(Protocol):
    """Ordered parallel map."""

    def map(self, fn: Callable[[T], R], items: Sequence[T]) -> Iterable[R]: ...


class SerialPool:
    """Runs every item in the calling thread. The default single-worker pool."""

    workers = 1

    def map(self, fn: Callable[[T], R], items: Sequence[T]) -> List[R]:
        return [fn(item) for item in items]

    def __enter__(self) -> SerialPool:
        return self

    def __exit__(self, *exc: Any) -> None:
        return None

    def __repr__(self) -> str:
        return "SerialPool()"


class ExecutorPool:
    """
    Ordered map over a concurrent.futures executor.

    Use as a context manager to shut the executor down on exit. Results are
    gathered with Executor.map, so they come back in submission order and the
    first failing item re-raises its exception in the caller.
    """

    def __init__(self, executor: Executor, workers: Optional[int] = None, *, owned: bool = True):
        self.executor = executor
        self.workers = workers
        self.owned = owned

    @classmethod
    def threads(cls, max_workers: Optional[int] = None) -> ExecutorPool:
        return cls(ThreadPoolExecutor(max_workers=max_workers), max_workers)

    @classmethod
    def processes(cls, max_workers: Optional[int] = None) -> ExecutorPool:
        return cls(ProcessPoolExecutor(max_workers=max_workers), max_workers)

    def map(self, fn: Callable[[T], R], items: Sequence[T]) -> List[R]:
        if not items:
            return []
        logger.debug("Dispatching %d item(s) to %s", len(items), type(self.executor).__name__)
        return list(self.executor.map(fn, items))

    def shutdown(self, wait: bool = True) -> None:
        if self.owned:
            self.executor.shutdown(wait=wait)

    def __enter__(self) -> ExecutorPool:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.shutdown()

    def __repr__(self) -> str:
        return f"ExecutorPool({type(self.executor).__name__}, workers={self.workers})"


class PoolConfig(BaseModel):
    """Pool selection as written in job files."""

    kind: PoolKind = "serial"
    max_workers: Optional[int] = Field(default=None, ge=1)


def make_pool(config: Optional[PoolConfig] = None) -> SerialPool | ExecutorPool:
    """Build a pool from a PoolConfig (serial when omitted)."""
    config = config or PoolConfig()
    if config.kind == "thread":
        return ExecutorPool.threads(config.max_workers)
    if config.kind == "process":
        return ExecutorPool.processes(config.max_workers)
    return SerialPool()


__all__ = ["WorkerPool", "SerialPool", "ExecutorPool", "PoolConfig", "PoolKind", "make_pool"]
