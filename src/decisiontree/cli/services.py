from __future__ import annotations

"""Higher-level helpers used by CLI commands."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from decisiontree.core.node import Path, as_path
from decisiontree.core.pool import WorkerPool, make_pool
from decisiontree.core.tree import DecisionTree
from decisiontree.io.job_loader import Job


@dataclass
class BatchOutcome:
    """Rewards of one batch, with which paths were already cached beforehand."""

    paths: List[Path]
    rewards: List[Any]
    cached: List[bool]

    @property
    def new_count(self) -> int:
        """Number of distinct paths whose reward was computed by this batch."""
        return len({path for path, cached in zip(self.paths, self.cached) if not cached})


@dataclass
class JobOutcome:
    tree: DecisionTree[Dict[str, Any], Any]
    batches: List[BatchOutcome] = field(default_factory=list)


def build_tree(job: Job, verbose: bool = False) -> DecisionTree[Dict[str, Any], Any]:
    """Create an empty tree for a job."""
    return DecisionTree.from_payload(
        job.spec.make_payload(), job.reward_fn, action=job.spec.root_action, verbose=verbose
    )


def run_job(job: Job, pool: Optional[WorkerPool] = None, verbose: bool = False) -> JobOutcome:
    """Insert every batch of the job into a fresh tree.

    The pool configured in the job file is used (and shut down afterwards)
    unless ``pool`` is given.
    """
    outcome = JobOutcome(tree=build_tree(job, verbose=verbose))
    if pool is not None:
        _run_batches(job, outcome, pool)
    else:
        with make_pool(job.spec.pool) as owned:
            _run_batches(job, outcome, owned)
    return outcome


def _run_batches(job: Job, outcome: JobOutcome, pool: WorkerPool) -> None:
    tree = outcome.tree
    for batch in job.spec.batches:
        paths = [as_path(p) for p in batch]
        cached = [_has_reward(tree, p) for p in paths]
        rewards = tree.get_or_create_batch(paths, job.spec.make_payload, pool)
        outcome.batches.append(BatchOutcome(paths=paths, rewards=rewards, cached=cached))


def _has_reward(tree: DecisionTree, path: Path) -> bool:
    node = tree.resolve(path)
    return node is not None and node.has_reward


__all__ = ["BatchOutcome", "JobOutcome", "build_tree", "run_job"]
