"""
stepwise
Type-keyed step executor with constructor dependency resolution
"""

__version__ = "0.1.0"

from .errors import (
    DuplicateObserverError,
    MalformedStepError,
    MissingDependencyError,
    OutOfOrderRegistrationError,
    PipelineConfigError,
    PipelineError,
)
from .kernel import Pipeline, PipelineState, ResultCache, StepBase, StepDescriptor


__all__ = [
    "Pipeline",
    "PipelineState",
    "ResultCache",
    "StepBase",
    "StepDescriptor",
    "PipelineError",
    "MissingDependencyError",
    "OutOfOrderRegistrationError",
    "MalformedStepError",
    "DuplicateObserverError",
    "PipelineConfigError",
]
