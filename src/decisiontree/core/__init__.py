"""
Decision tree core.

Components:
- DecisionNode: node with an integer action, owned children and a payload
- DecisionTree: root node plus a reward function and a memoized rewards table
- SerialPool / ExecutorPool: ordered maps used for batched reward computation

Example:
    from decisiontree.core import DecisionTree, ExecutorPool

    tree = DecisionTree.from_payload({"visits": 0}, reward_fn=sum)
    tree.get_or_create([1, 2], lambda: {"visits": 0})
    with ExecutorPool.threads(4) as pool:
        tree.get_or_create_batch([[1, 2, 3], [1, 2, 4]], lambda: {"visits": 0}, pool)
"""

from decisiontree.core.errors import (
    DecisionTreeError,
    DuplicateSiblingAction,
    PathNotFound,
    PayloadSchemaMismatch,
    RewardNotComputed,
    WorkerPoolError,
)
from decisiontree.core.node import DecisionNode, Path
from decisiontree.core.pool import ExecutorPool, PoolConfig, SerialPool, WorkerPool, make_pool
from decisiontree.core.tree import DecisionTree

__all__ = [
    "DecisionNode",
    "DecisionTree",
    "Path",
    "WorkerPool",
    "SerialPool",
    "ExecutorPool",
    "PoolConfig",
    "make_pool",
    "DecisionTreeError",
    "PayloadSchemaMismatch",
    "PathNotFound",
    "RewardNotComputed",
    "DuplicateSiblingAction",
    "WorkerPoolError",
]
