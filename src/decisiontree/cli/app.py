"""
decisiontree CLI: validate job files and grow decision trees from them.

A job file names a reward function, a node payload, a worker pool and a list
of batches of paths. Each batch goes through one batched insertion, so paths
that already carry a reward are served from the cache and only new paths are
sent to the pool.
"""

from __future__ import annotations

import typer
from rich.console import Console

from decisiontree.cli.formatters import (
    build_batch_table,
    build_job_summary_table,
    build_rich_tree,
    build_summary_lines,
)
from decisiontree.cli.load_helpers import load_or_exit
from decisiontree.cli.services import JobOutcome, run_job
from decisiontree.core.errors import DecisionTreeError
from decisiontree.io import Job
from decisiontree.utils.logging import configure_logging

app = typer.Typer(help="decisiontree CLI: validate job files and grow decision trees with memoized rewards.")
console = Console()


def _run_or_exit(job: Job, verbose: bool) -> JobOutcome:
    try:
        return run_job(job, verbose=verbose)
    except DecisionTreeError as err:
        console.print(f"[red]Tree error:[/red] {err}")
        raise typer.Exit(code=2)


@app.command()
def validate(
    job_file: str = typer.Argument(..., help="Path to a job YAML file"),
    verbose: bool = typer.Option(False, "--verbose-load", help="Display full validation trace on loader errors"),
) -> None:
    """Validate a job file."""
    job = load_or_exit(job_file, console=console, verbose_errors=verbose)
    console.print(build_job_summary_table(job.spec))
    console.print("[green]Job file is valid[/green]")


@app.command()
def run(
    job_file: str = typer.Argument(..., help="Path to a job YAML file"),
    show_tree: bool = typer.Option(False, "--show-tree", help="Print the resulting tree"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log slot reservations and dispatches"),
) -> None:
    """Run every batch of a job and print the rewards."""
    if verbose:
        configure_logging(verbose=True)
    job = load_or_exit(job_file, console=console, verbose_errors=verbose)
    outcome = _run_or_exit(job, verbose)

    for index, batch in enumerate(outcome.batches, start=1):
        console.print(build_batch_table(index, batch))

    console.print("\n[bold]Summary:[/bold]")
    for line in build_summary_lines(outcome):
        console.print(f"  {line}")

    if show_tree:
        console.print()
        console.print(build_rich_tree(outcome.tree))


@app.command()
def show(
    job_file: str = typer.Argument(..., help="Path to a job YAML file"),
) -> None:
    """Run a job and print only the resulting tree."""
    job = load_or_exit(job_file, console=console)
    outcome = _run_or_exit(job, verbose=False)
    console.print(build_rich_tree(outcome.tree))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
