"""
Step Descriptor
===============

Introspects a step class once, at registration time, and records what the
executor needs to run it: the constructor dependencies (in declaration order)
and the result type announced by ``execute()``.

Introspection never raises. Problems are recorded on the descriptor and
reported when the pipeline executes (or when it is linted).
"""

from __future__ import annotations

import inspect
import logging
import types
import typing
from dataclasses import dataclass, field
from typing import Any


logger = logging.getLogger(__name__)

ENTRY_POINT = "execute"

_SKIPPED_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


@dataclass(frozen=True)
class Dependency:
    """One constructor parameter, resolved from the result cache by type."""

    name: str
    type: Any = inspect.Parameter.empty
    keyword_only: bool = False

    @property
    def annotated(self) -> bool:
        return self.type is not inspect.Parameter.empty

    @property
    def resolvable(self) -> bool:
        """Only concrete classes can key the result cache."""
        return isinstance(self.type, type) and not isinstance(self.type, types.GenericAlias)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "type": _describe(self.type)}


@dataclass(frozen=True)
class StepDescriptor:
    """
    Immutable description of a registered step class.

    Attributes:
        step_type: The step class itself
        dependencies: Constructor parameters in declaration order
        result_type: Class returned by execute(), None for steps without a result
        error: Why the constructor could not be introspected, if it could not
    """

    step_type: Any
    dependencies: tuple[Dependency, ...] = ()
    result_type: type | None = None
    error: str | None = field(default=None, compare=False)

    @property
    def name(self) -> str:
        return getattr(self.step_type, "__name__", repr(self.step_type))

    def produces(self, result_type: Any) -> bool:
        """True if this step announces exactly result_type as its result."""
        return self.result_type is not None and self.result_type is result_type

    def to_dict(self) -> dict[str, Any]:
        return {
            "step": self.name,
            "dependencies": [d.to_dict() for d in self.dependencies],
            "result_type": _describe(self.result_type) if self.result_type else None,
            "error": self.error,
        }

    @classmethod
    def from_step(cls, step_type: Any) -> StepDescriptor:
        """Build a descriptor by inspecting step_type's constructor and execute()."""
        if not inspect.isclass(step_type):
            return cls(step_type=step_type, error="steps must be classes")

        try:
            signature = inspect.signature(step_type)
        except (TypeError, ValueError) as e:
            logger.debug("Cannot read constructor of %s: %s", step_type.__name__, e)
            return cls(
                step_type=step_type,
                result_type=_result_type(step_type),
                error=f"constructor signature unavailable: {e}",
            )

        hints = _type_hints(step_type.__init__)
        dependencies = tuple(
            Dependency(
                name=p.name,
                type=hints.get(p.name, p.annotation),
                keyword_only=p.kind is inspect.Parameter.KEYWORD_ONLY,
            )
            for p in signature.parameters.values()
            if p.kind not in _SKIPPED_KINDS
        )

        return cls(
            step_type=step_type,
            dependencies=dependencies,
            result_type=_result_type(step_type),
        )


def entry_point_problem(step_type: Any) -> str | None:
    """Describe why step_type has no usable execute() entry point, or None."""
    if inspect.isabstract(step_type):
        missing = ", ".join(sorted(step_type.__abstractmethods__))
        return f"abstract methods not implemented: {missing}"
    entry = getattr(step_type, ENTRY_POINT, None)
    if entry is None:
        return f"no {ENTRY_POINT}() method defined"
    if not callable(entry):
        return f"{ENTRY_POINT} is not callable"
    if inspect.iscoroutinefunction(entry):
        return f"{ENTRY_POINT}() must be synchronous"
    return None


def _type_hints(func: Any) -> dict[str, Any]:
    try:
        return typing.get_type_hints(func)
    except (NameError, TypeError):
        pass

    # Resolve one annotation at a time so a single bad forward reference
    # leaves only its own parameter as an unresolved string
    globalns = getattr(func, "__globals__", None)
    hints = {}
    for name, annotation in (getattr(func, "__annotations__", None) or {}).items():
        holder = types.SimpleNamespace(__annotations__={name: annotation})
        try:
            hints[name] = typing.get_type_hints(holder, globalns)[name]
        except (NameError, TypeError):
            hints[name] = annotation
    return hints


def _result_type(step_type: type) -> type | None:
    entry = getattr(step_type, ENTRY_POINT, None)
    if entry is None or not callable(entry):
        return None

    returned = _type_hints(entry).get("return")
    if returned is None or returned is type(None):
        return None

    # Optional[X] still announces X
    args = [a for a in typing.get_args(returned) if a is not type(None)]
    if typing.get_origin(returned) in (typing.Union, types.UnionType) and len(args) == 1:
        returned = args[0]

    if isinstance(returned, type) and not isinstance(returned, types.GenericAlias):
        return returned
    return None


def _describe(tp: Any) -> str:
    if tp is inspect.Parameter.empty:
        return "<unannotated>"
    if isinstance(tp, type):
        return tp.__name__
    return str(tp)
