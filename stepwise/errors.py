"""
Pipeline Errors
===============

Exception hierarchy raised by the step executor and its configuration layer.
Every error is a configuration or programming mistake; none is retried.
"""

from __future__ import annotations

from typing import Any


def type_name(tp: Any) -> str:
    """Readable name for a type (qualified by module unless builtin)."""
    if not isinstance(tp, type):
        return repr(tp)
    module = tp.__module__
    if module == "builtins":
        return tp.__qualname__
    return f"{module}.{tp.__qualname__}"


class PipelineError(Exception):
    """Base class for all step executor errors"""

    pass


class MissingDependencyError(PipelineError):
    """A step depends on a type that no registered step produces."""

    def __init__(self, dependency_type: Any, step_type: type) -> None:
        self.dependency_type = dependency_type
        self.step_type = step_type
        super().__init__(
            f"Dependency {type_name(dependency_type)} for {step_type.__name__} "
            f"was not found for any registered step.",
        )


class OutOfOrderRegistrationError(PipelineError):
    """The producer of a dependency exists but has not produced its result yet."""

    def __init__(
        self,
        producer_type: type,
        step_type: type,
        dependency_type: Any,
        already_ran: bool = False,
        cached_subtypes: list[type] | None = None,
    ) -> None:
        self.producer_type = producer_type
        self.step_type = step_type
        self.dependency_type = dependency_type
        self.already_ran = already_ran
        self.cached_subtypes = list(cached_subtypes or [])

        if already_ran:
            message = (
                f"Step {producer_type.__name__} ran before step {step_type.__name__} but "
                f"produced no value of exactly {type_name(dependency_type)}."
            )
        else:
            message = (
                f"Please register step {producer_type.__name__} before step {step_type.__name__} "
                f"(it produces {type_name(dependency_type)})."
            )
        if self.cached_subtypes:
            cached = ", ".join(type_name(t) for t in self.cached_subtypes)
            message += f" Cached subclasses do not match: {cached}."
        super().__init__(message)


class MalformedStepError(PipelineError):
    """A step cannot be constructed or lacks a usable execute() entry point."""

    def __init__(self, step_type: Any, reason: str) -> None:
        self.step_type = step_type
        self.reason = reason
        name = getattr(step_type, "__name__", repr(step_type))
        super().__init__(f"Step {name} is malformed: {reason}")


class DuplicateObserverError(PipelineError, ValueError):
    """An observer is already registered for this result type."""

    def __init__(self, result_type: Any) -> None:
        self.result_type = result_type
        super().__init__(
            f"An observer for {type_name(result_type)} is already registered.",
        )


class PipelineConfigError(PipelineError):
    """Raised when loading or building a pipeline from configuration fails"""

    pass
