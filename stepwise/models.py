"""
Pydantic models for pipeline configuration files
"""

from pydantic import BaseModel, ConfigDict, Field


class ObserverConfig(BaseModel):
    """Observer binding: call `callback` with every `result_type` result"""

    model_config = ConfigDict(extra="forbid")

    result_type: str = Field(description="Reference to the result class, 'module:Class'")
    callback: str = Field(description="Reference to the callable, 'module:function'")


class PipelineConfig(BaseModel):
    """A pipeline declared in YAML"""

    model_config = ConfigDict(extra="forbid")

    name: str = "pipeline"
    description: str = ""
    steps: list[str] = Field(
        default_factory=list,
        description="Step class references in execution order",
    )
    observers: list[ObserverConfig] = Field(default_factory=list)
