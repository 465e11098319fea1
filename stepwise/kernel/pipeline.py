"""
Pipeline
========

Type-keyed step executor.

Steps are registered in order and executed strictly in that order. Each step's
constructor parameters are resolved from the results of earlier steps, keyed
by the exact result type. Every non-None result is handed to the observer
registered for its type and then cached, replacing any earlier value of the
same type.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

from ..errors import (
    DuplicateObserverError,
    MalformedStepError,
    MissingDependencyError,
    OutOfOrderRegistrationError,
    type_name,
)
from .result_cache import ResultCache
from .step_descriptor import ENTRY_POINT, Dependency, StepDescriptor, entry_point_problem


logger = logging.getLogger(__name__)


class PipelineState(Enum):
    """Lifecycle state of a pipeline run."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class Pipeline:
    """
    Ordered registry of steps plus the result cache and observers they feed.

    Usage:
        pipeline = Pipeline()
        pipeline.add(LoadDocument).add(Summarize)
        pipeline.on_step_executed(Summary, lambda s: print(s.text))
        pipeline.execute()

    A Pipeline is not thread-safe; concurrent add() or execute() calls on the
    same instance need external locking.
    """

    def __init__(self) -> None:
        self._steps: list[StepDescriptor] = []
        self._results = ResultCache()
        self._observers: dict[type, Callable[[Any], Any]] = {}
        self._state = PipelineState.IDLE
        self._current_step: int | None = None
        self._runs = 0

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def add(self, step_type: type) -> Pipeline:
        """
        Append a step class to the registry.

        Dependencies are not checked here; an unsatisfiable step fails when
        the pipeline executes.

        Returns:
            The pipeline itself, for chaining
        """
        descriptor = StepDescriptor.from_step(step_type)
        self._steps.append(descriptor)
        logger.debug(
            "Registered step %s (depends on %s, produces %s)",
            descriptor.name,
            [d.to_dict()["type"] for d in descriptor.dependencies],
            type_name(descriptor.result_type) if descriptor.result_type else None,
        )
        return self

    def on_step_executed(self, result_type: type, callback: Callable[[Any], Any]) -> Pipeline:
        """
        Call callback with every result of exactly result_type.

        Raises:
            DuplicateObserverError: If result_type already has an observer
            TypeError: If callback is not callable
        """
        if not callable(callback):
            raise TypeError(f"Observer for {type_name(result_type)} must be callable")
        if result_type in self._observers:
            raise DuplicateObserverError(result_type)

        self._observers[result_type] = callback
        logger.debug("Registered observer for %s", type_name(result_type))
        return self

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    def execute(self) -> None:
        """
        Run every registered step in registration order.

        Each call starts again from the first step; results cached by an
        earlier call are available for resolution but never cause a step to
        be skipped.

        Raises:
            MissingDependencyError: No registered step produces a dependency
            OutOfOrderRegistrationError: The producer has not run yet
            MalformedStepError: A step cannot be built or invoked
            Exception: Anything raised by a step or observer, unchanged
        """
        self._runs += 1
        self._set_state(PipelineState.RUNNING)
        logger.info("Executing pipeline run %d with %d steps", self._runs, len(self._steps))

        for index, descriptor in enumerate(self._steps):
            self._current_step = index
            try:
                self._execute_step(descriptor)
            except BaseException as e:
                self._set_state(PipelineState.FAILED)
                logger.error(
                    "Pipeline aborted at step %d (%s): %s",
                    index,
                    descriptor.name,
                    e,
                )
                raise

        self._current_step = None
        self._set_state(PipelineState.COMPLETED)
        logger.info("Pipeline run %d completed", self._runs)

    def _execute_step(self, descriptor: StepDescriptor) -> None:
        step_type = descriptor.step_type
        if descriptor.error:
            raise MalformedStepError(step_type, descriptor.error)

        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for dep in descriptor.dependencies:
            value = self._resolve(descriptor, dep)
            if dep.keyword_only:
                kwargs[dep.name] = value
            else:
                args.append(value)

        step = self._create_step_instance(descriptor, args, kwargs)
        result = self._invoke(step)

        if result is None:
            logger.debug("Step %s produced no result", descriptor.name)
            return

        result_type = type(result)
        observer = self._observers.get(result_type)
        if observer is not None:
            observer(result)
        self._results.put(result_type, result)
        logger.debug("Step %s produced %s", descriptor.name, type_name(result_type))

    def _resolve(self, descriptor: StepDescriptor, dependency: Dependency) -> Any:
        """Find the cached value for one constructor dependency."""
        step_type = descriptor.step_type
        if not dependency.annotated:
            raise MalformedStepError(
                step_type,
                f"constructor parameter '{dependency.name}' has no type annotation",
            )
        if isinstance(dependency.type, str):
            raise MalformedStepError(
                step_type,
                f"constructor parameter '{dependency.name}' annotation "
                f"'{dependency.type}' could not be resolved",
            )
        if not dependency.resolvable:
            raise MalformedStepError(
                step_type,
                f"constructor parameter '{dependency.name}' is annotated with "
                f"{dependency.type!r}, which is not a class",
            )

        value, found = self._results.get(dependency.type)
        if found:
            return value

        producer_index = self._producer_index(dependency.type)
        if producer_index is None:
            raise MissingDependencyError(dependency.type, step_type)

        # An earlier producer that returned None or a subclass also lands here
        subtypes = [
            t for t in self._results.types() if t is not dependency.type and issubclass(t, dependency.type)
        ]
        raise OutOfOrderRegistrationError(
            self._steps[producer_index].step_type,
            step_type,
            dependency.type,
            already_ran=producer_index < (self._current_step or 0),
            cached_subtypes=subtypes,
        )

    def _create_step_instance(
        self,
        descriptor: StepDescriptor,
        args: list[Any],
        kwargs: dict[str, Any],
    ) -> Any:
        step_type = descriptor.step_type
        problem = entry_point_problem(step_type)
        if problem:
            raise MalformedStepError(step_type, problem)

        try:
            inspect.signature(step_type).bind(*args, **kwargs)
        except TypeError as e:
            raise MalformedStepError(step_type, f"cannot construct with resolved arguments: {e}") from e

        return step_type(*args, **kwargs)

    def _invoke(self, step: Any) -> Any:
        entry = getattr(step, ENTRY_POINT)
        try:
            signature = inspect.signature(entry)
        except (TypeError, ValueError):
            signature = None

        if signature is not None:
            required = [
                p.name
                for p in signature.parameters.values()
                if p.default is inspect.Parameter.empty
                and p.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
            ]
            if required:
                raise MalformedStepError(
                    type(step),
                    f"{ENTRY_POINT}() must take no arguments, got {', '.join(required)}",
                )

        return entry()

    def find_producer(self, result_type: Any) -> StepDescriptor | None:
        """First registered step that announces exactly result_type, if any."""
        index = self._producer_index(result_type)
        return None if index is None else self._steps[index]

    def _producer_index(self, result_type: Any) -> int | None:
        for index, descriptor in enumerate(self._steps):
            if descriptor.produces(result_type):
                return index
        return None

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    @property
    def steps(self) -> tuple[StepDescriptor, ...]:
        return tuple(self._steps)

    @property
    def results(self) -> ResultCache:
        return self._results

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def current_step(self) -> int | None:
        """Index of the running step, or of the failed step after a failure."""
        return self._current_step

    def observed_types(self) -> list[type]:
        return list(self._observers.keys())

    def get_status(self) -> dict[str, Any]:
        return {
            "state": self._state.value,
            "current_step": self._current_step,
            "runs": self._runs,
            "steps": [d.name for d in self._steps],
            "cached_results": [type_name(t) for t in self._results.types()],
            "observed_types": [type_name(t) for t in self._observers],
        }

    def _set_state(self, state: PipelineState) -> None:
        old_state = self._state
        self._state = state
        logger.debug("Pipeline state: %s -> %s", old_state.value, state.value)

    def __len__(self) -> int:
        return len(self._steps)

    def __repr__(self) -> str:
        return f"<Pipeline(steps={len(self._steps)}, state={self._state.value})>"
