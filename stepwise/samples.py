"""
Sample steps
------------
A three-step pipeline: a step without a result, a producer, and a consumer
of the producer's result.
"""

from dataclasses import dataclass

from rich.console import Console

from .kernel.pipeline import Pipeline
from .kernel.step_base import StepBase


console = Console()


class Pipe(StepBase):
    def execute(self) -> None:
        console.print("Empty")


@dataclass(frozen=True)
class Pipe1Result:
    message: str


class Pipe1(StepBase):
    def execute(self) -> Pipe1Result:
        return Pipe1Result("Pipe1")


@dataclass(frozen=True)
class Pipe2Result:
    message: str


class Pipe2(StepBase):
    def __init__(self, pipe1_result: Pipe1Result) -> None:
        self._pipe1_result = pipe1_result

    def execute(self) -> Pipe2Result:
        return Pipe2Result(f"Pipe1 + {self._pipe1_result.message}")


def print_message(result: Pipe1Result | Pipe2Result) -> None:
    """Observer printing a sample result's message."""
    console.print(result.message)


def sample_pipeline() -> Pipeline:
    """The sample pipeline with an observer on Pipe1Result."""
    pipeline = Pipeline()
    pipeline.add(Pipe).add(Pipe1).add(Pipe2)
    pipeline.on_step_executed(Pipe1Result, print_message)
    return pipeline
