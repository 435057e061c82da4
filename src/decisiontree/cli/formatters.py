"""Formatting helpers for CLI presentation."""

from __future__ import annotations

from typing import Any, List, Sequence

from rich.table import Table
from rich.tree import Tree

from decisiontree.cli.services import BatchOutcome, JobOutcome
from decisiontree.core.errors import format_path
from decisiontree.core.node import DecisionNode
from decisiontree.core.tree import DecisionTree
from decisiontree.io.file_spec import JobFileSpec


def format_reward(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:.6g}"
    return str(value)


def build_job_summary_table(spec: JobFileSpec) -> Table:
    table = Table(title="Job", show_header=True, header_style="bold blue")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("reward", spec.reward)
    table.add_row("payload", ", ".join(f"{k}={v!r}" for k, v in spec.payload.items()) or "<empty>")
    workers = spec.pool.max_workers if spec.pool.max_workers is not None else "default"
    table.add_row("pool", f"{spec.pool.kind} (workers: {workers})")
    table.add_row("batches", str(len(spec.batches)))
    table.add_row("paths", str(spec.path_count))
    return table


def build_batch_table(index: int, batch: BatchOutcome) -> Table:
    table = Table(title=f"Batch {index} ({batch.new_count} new / {len(batch.paths)})")
    table.add_column("#", style="dim")
    table.add_column("Path", style="cyan")
    table.add_column("Reward", style="green")
    table.add_column("Source")
    for i, (path, reward, cached) in enumerate(zip(batch.paths, batch.rewards, batch.cached), start=1):
        source = "[dim]cached[/dim]" if cached else "[bold]computed[/bold]"
        table.add_row(str(i), format_path(path), format_reward(reward), source)
    return table


def build_summary_lines(outcome: JobOutcome) -> List[str]:
    tree = outcome.tree
    computed = sum(b.new_count for b in outcome.batches)
    requested = sum(len(b.paths) for b in outcome.batches)
    return [
        f"Nodes: {len(tree)} (height {tree.root.height()}, {tree.root.breadth()} leaves)",
        f"Rewards computed: {tree.reward_count}",
        f"Paths requested: {requested} ({requested - computed} served from cache)",
    ]


def build_rich_tree(tree: DecisionTree) -> Tree:
    """Render the node structure with each node's reward, if any."""
    rewards = tree.rewards
    rendered = Tree(f"[bold]root[/bold] (action {tree.root.action}){_reward_suffix(rewards, tree.root)}")
    stack = [(rendered, tree.root)]
    while stack:
        branch, node = stack.pop()
        for child in node.children:
            sub = branch.add(f"{child.action}{_reward_suffix(rewards, child)}")
            stack.append((sub, child))
    return rendered


def _reward_suffix(rewards: Sequence[Any], node: DecisionNode) -> str:
    if not node.has_reward or node.reward_index > len(rewards):
        return ""
    return f"  [green]{format_reward(rewards[node.reward_index - 1])}[/green]"


__all__ = [
    "format_reward",
    "build_job_summary_table",
    "build_batch_table",
    "build_summary_lines",
    "build_rich_tree",
]
