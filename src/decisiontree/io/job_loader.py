from __future__ import annotations

"""Load job files into runnable jobs."""

import os
from dataclasses import dataclass
from typing import Any, Callable, Dict

import yaml
from pydantic import ValidationError

from decisiontree.core.node import Path
from decisiontree.io.errors import LoaderError
from decisiontree.io.file_spec import JobFileSpec
from decisiontree.utils.imports import import_callable
from decisiontree.utils.logging import log_calls


@dataclass
class Job:
    """A validated job file with its reward function resolved."""

    file_path: str
    spec: JobFileSpec
    reward_fn: Callable[[Path], Any]


def _read_yaml_file(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


@log_calls()
def load_job(path: str) -> Job:
    """Read, validate and resolve a job YAML file.

    Raises:
        LoaderError: the file is missing, is not valid YAML, does not match
            JobFileSpec, or names a reward function that cannot be imported
    """
    if not os.path.isfile(path):
        raise LoaderError(path, "Job file not found")
    try:
        data = _read_yaml_file(path)
    except yaml.YAMLError as exc:
        raise LoaderError(path, "Invalid YAML", cause=exc) from exc
    if not isinstance(data, dict):
        raise LoaderError(path, f"Expected a mapping at the top level, got {type(data).__name__}")
    try:
        spec = JobFileSpec.model_validate(data)
    except ValidationError as exc:
        raise LoaderError(path, "Invalid job definition", cause=exc) from exc
    try:
        reward_fn = import_callable(spec.reward)
    except (ImportError, ValueError) as exc:
        raise LoaderError(
            path, "Cannot resolve reward function", cause=exc, reward_reference=spec.reward
        ) from exc
    return Job(file_path=path, spec=spec, reward_fn=reward_fn)


__all__ = ["Job", "load_job"]
