"""
Decision tree with memoized rewards.

DecisionTree wraps a root DecisionNode and a reward function. Every path that
is requested through the tree gets its reward computed once and stored in an
append-only rewards table; the terminal node of the path keeps a 1-based index
into that table:

    rewards = [r1, r2, r3]
    root
    └── 1           reward_index=1  -> r1
        └── 2       reward_index=2  -> r2
            ├── 3   reward_index=3  -> r3
            └── 4   reward_index=0  (no reward yet)

Slots are reserved before the reward is known. Since the table only grows by
appends and slots are handed out in the same order as the appends happen,
each value lands on the slot reserved for its path.

Batched insertion reserves slots and creates nodes sequentially, then sends
only the genuinely new paths to a worker pool in a single ordered map call.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, Hashable, Iterator, List, Optional, Sequence, Set, Tuple, TypeVar

from decisiontree.core.errors import PathNotFound, RewardNotComputed, WorkerPoolError
from decisiontree.core.node import DecisionNode, Path, as_path
from decisiontree.core.payload import produce_payload
from decisiontree.core.pool import SerialPool, WorkerPool

logger = logging.getLogger(__name__)

P = TypeVar("P")
V = TypeVar("V")


class DecisionTree(Generic[P, V]):
    """Decision tree whose paths carry expensive, computed-once rewards."""

    def __init__(self, root: DecisionNode[P], reward_fn: Callable[[Path], V], verbose: bool = False):
        stamped = [path for path, node in root.iter_paths() if node.has_reward]
        if stamped:
            raise ValueError(f"Root subtree already carries reward slots at {[list(p) for p in stamped]}")
        self.root = root
        self.reward_fn = reward_fn
        self.verbose = verbose
        self._rewards: List[V] = []

    @classmethod
    def from_payload(
        cls, payload: P, reward_fn: Callable[[Path], V], *, action: int = 0, **kwargs: Any
    ) -> DecisionTree[P, V]:
        """Create a tree with a fresh root carrying ``payload``."""
        return cls(DecisionNode(action=action, payload=payload), reward_fn, **kwargs)

    # =========================================================================
    # Lookup
    # =========================================================================

    def contains(self, path: Sequence[int]) -> bool:
        return self.root.contains(path)

    def __contains__(self, path: Sequence[int]) -> bool:
        return self.root.contains(path)

    def resolve(self, path: Sequence[int]) -> Optional[DecisionNode[P]]:
        return self.root.resolve(path)

    def reward_of(self, path: Sequence[int]) -> V:
        """
        Return the cached reward of ``path``.

        Raises:
            PathNotFound: no node is reachable through ``path``
            RewardNotComputed: the node has no populated reward slot
        """
        node = self.root.resolve(path)
        if node is None:
            raise PathNotFound(path)
        return self._read(path, node)

    def _read(self, path: Sequence[int], node: DecisionNode[P]) -> V:
        index = node.reward_index
        if index == 0 or index > len(self._rewards):
            raise RewardNotComputed(path, index)
        return self._rewards[index - 1]

    @property
    def rewards(self) -> Tuple[V, ...]:
        """Snapshot of the rewards table (slot ``i`` is ``rewards[i - 1]``)."""
        return tuple(self._rewards)

    @property
    def reward_count(self) -> int:
        return len(self._rewards)

    def items(self) -> Iterator[Tuple[Path, V]]:
        """Yield ``(path, reward)`` for every node with a populated reward, in pre-order."""
        for path, node in self.root.iter_paths():
            if node.has_reward and node.reward_index <= len(self._rewards):
                yield path, self._rewards[node.reward_index - 1]

    def __len__(self) -> int:
        return len(self.root)

    def __repr__(self) -> str:
        return f"DecisionTree(nodes={len(self)}, rewards={len(self._rewards)})"

    # =========================================================================
    # Single insertion
    # =========================================================================

    def get_or_create(self, path: Sequence[int], payload_factory: Callable[[], P]) -> V:
        """
        Return the reward of ``path``, creating nodes and computing it if needed.

        Missing nodes along the path are created with one payload from
        ``payload_factory``; only the terminal node gets a reward slot. A node
        that already exists without a reward (created as an intermediate node
        of a longer path) gets a slot now, without calling the factory.
        """
        steps = as_path(path)
        node = self.root.resolve(steps)
        if node is not None and node.has_reward:
            return self._read(steps, node)

        slot = len(self._rewards) + 1
        if node is None:
            payload = produce_payload(payload_factory, self.root.payload_schema)
            node = self.root.extend_path(steps, payload, reward_index=slot)
        else:
            node.reward_index = slot
        logger.debug("Reserved slot %d for %s", slot, list(steps))

        try:
            value = self.reward_fn(steps)
        except BaseException:
            node.reward_index = 0
            raise
        self._rewards.append(value)
        if self.verbose:
            logger.info("Computed reward for %s: %r", list(steps), value)
        return value

    # =========================================================================
    # Batched insertion
    # =========================================================================

    def get_or_create_batch(
        self,
        paths: Sequence[Sequence[int]],
        payload_factory: Callable[[], P],
        pool: Optional[WorkerPool] = None,
    ) -> List[V]:
        """
        Return one reward per path, in input order.

        Paths already carrying a reward reuse it. For every other path a slot
        is reserved (in input order) and missing nodes are created; the rewards
        of those paths are then computed with a single ``pool.map`` call and
        appended in the same order. A path repeated within the batch is
        computed once.

        All payloads are produced and checked before the tree is touched. If
        the reward computation fails, the slots reserved by this call are
        released and nothing is appended; nodes created by the call stay.
        """
        plan = self._plan_batch([as_path(p) for p in paths], payload_factory)

        offset = len(self._rewards)
        slots: List[int] = []
        new_paths: List[Path] = []
        reserved: List[DecisionNode[P]] = []
        for steps, payload in plan:
            node = self.root.resolve(steps)
            if node is not None and node.has_reward:
                slots.append(node.reward_index)
                continue
            offset += 1
            if node is None:
                node = self.root.extend_path(steps, payload, reward_index=offset)
            else:
                node.reward_index = offset
            reserved.append(node)
            new_paths.append(steps)
            slots.append(offset)

        if new_paths:
            first_slot = offset - len(new_paths) + 1
            logger.debug("Dispatching %d new path(s) of %d, slots %d-%d", len(new_paths), len(plan), first_slot, offset)
            values = self._compute(new_paths, pool or SerialPool(), reserved)
            self._rewards.extend(values)
        if self.verbose:
            logger.info("Batch of %d path(s): %d new, %d cached", len(plan), len(new_paths), len(plan) - len(new_paths))

        return [self._rewards[slot - 1] for slot in slots]

    def _plan_batch(self, paths: List[Path], payload_factory: Callable[[], P]) -> List[Tuple[Path, Optional[P]]]:
        """Pair every path with the payload its creation needs (None if no node is created)."""
        schema: Hashable = self.root.payload_schema
        planned: Set[Path] = set()
        created: Set[Path] = set()
        plan: List[Tuple[Path, Optional[P]]] = []
        for steps in paths:
            if steps in planned or steps in created or self.root.contains(steps):
                plan.append((steps, None))
            else:
                plan.append((steps, produce_payload(payload_factory, schema)))
                created.update(steps[:depth] for depth in range(len(steps) + 1))
            planned.add(steps)
        return plan

    def _compute(self, new_paths: List[Path], pool: WorkerPool, reserved: List[DecisionNode[P]]) -> List[V]:
        try:
            values = list(pool.map(self.reward_fn, new_paths))
            if len(values) != len(new_paths):
                raise WorkerPoolError(len(new_paths), len(values))
        except BaseException:
            for node in reserved:
                node.reward_index = 0
            raise
        return values


__all__ = ["DecisionTree"]
