"""
Test fixtures for the stepwise test suite.

Provides a fresh pipeline, an observer that records its calls, and a factory
for writing pipeline YAML files.
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import yaml

from stepwise import Pipeline
from tests.helpers import reset_calls


@pytest.fixture(autouse=True)
def clear_step_calls():
    """Reset the shared step call log before and after each test."""
    reset_calls()
    yield
    reset_calls()


@pytest.fixture
def pipeline() -> Pipeline:
    return Pipeline()


class Recorder:
    """Observer callback that remembers every value it receives."""

    def __init__(self) -> None:
        self.values: list[Any] = []

    def __call__(self, value: Any) -> None:
        self.values.append(value)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def write_pipeline_file(tmp_path: Path) -> Callable[..., Path]:
    """
    Factory fixture writing a pipeline definition to a YAML file.

    Usage:
        def test_something(write_pipeline_file):
            path = write_pipeline_file({"steps": ["tests.helpers.steps:Greet"]})
    """

    def _write(data: Any, name: str = "pipeline.yaml") -> Path:
        path = tmp_path / name
        with open(path, "w", encoding="utf-8") as f:
            if isinstance(data, str):
                f.write(data)
            else:
                yaml.safe_dump(data, f)
        return path

    return _write
