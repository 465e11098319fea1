"""
Step executor kernel: result cache, step introspection and the pipeline.
"""

from .pipeline import Pipeline, PipelineState
from .result_cache import ResultCache
from .step_base import StepBase
from .step_descriptor import Dependency, StepDescriptor


__all__ = [
    "Pipeline",
    "PipelineState",
    "ResultCache",
    "StepBase",
    "StepDescriptor",
    "Dependency",
]
