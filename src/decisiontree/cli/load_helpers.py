from __future__ import annotations

"""Shared helpers for loading job files with CLI-friendly errors."""

import typer
from rich.console import Console

from decisiontree.io import Job, LoaderError, load_job


def load_or_exit(path: str, *, console: Console, verbose_errors: bool = False) -> Job:
    try:
        return load_job(path)
    except LoaderError as err:
        if verbose_errors and err.cause:
            label = err.message if err.reward_reference is None else f"{err.message} '{err.reward_reference}'"
            console.print(f"[red]Failed to load job:[/red] {label}\n{err.cause}")
        else:
            console.print(f"[red]Failed to load job:[/red] {err}")
        raise typer.Exit(code=1)


__all__ = ["load_or_exit"]
