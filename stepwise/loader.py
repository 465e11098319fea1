"""
Pipeline loader with YAML parsing and JSON Schema validation
"""

import importlib
import json
import logging
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError as JSONValidationError
from jsonschema import validate
from pydantic import ValidationError as PydanticValidationError

from .errors import PipelineConfigError, type_name
from .kernel.pipeline import Pipeline
from .kernel.step_descriptor import entry_point_problem
from .models import PipelineConfig


logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_PATH = Path(__file__).parent / "schema" / "pipeline.schema.json"


def load_pipeline_config(
    path: str | Path,
    schema_path: str | Path | None = None,
) -> PipelineConfig:
    """
    Load and validate a pipeline YAML file

    Args:
        path: Path to the pipeline file
        schema_path: Optional path to JSON schema (defaults to bundled schema)

    Returns:
        Validated PipelineConfig

    Raises:
        PipelineConfigError: If loading or validation fails
    """
    path = Path(path)

    if not path.exists():
        raise PipelineConfigError(f"Pipeline file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise PipelineConfigError(f"YAML parsing failed: {e}") from e
    except OSError as e:
        raise PipelineConfigError(f"Failed to read file: {e}") from e

    if data is None:
        raise PipelineConfigError(f"Pipeline file is empty: {path}")

    if schema_path is None:
        schema_path = DEFAULT_SCHEMA_PATH

    try:
        with open(schema_path, encoding="utf-8") as f:
            schema = json.load(f)

        validate(instance=data, schema=schema)
    except JSONValidationError as e:
        path_str = ".".join(str(p) for p in e.absolute_path)
        raise PipelineConfigError(
            f"Schema validation failed at '{path_str}': {e.message}",
        ) from e
    except FileNotFoundError as e:
        raise PipelineConfigError(f"Schema file not found: {schema_path}") from e

    try:
        config = PipelineConfig(**data)
    except PydanticValidationError as e:
        raise PipelineConfigError(f"Pydantic parsing failed: {e}") from e

    logger.debug("Loaded pipeline %r from %s (%d steps)", config.name, path, len(config.steps))
    return config


def import_object(reference: str) -> Any:
    """
    Import an object from a 'package.module:attr' reference

    The 'package.module.attr' form is accepted as well; the last dotted
    segment is then taken as the attribute. Nested attributes are allowed
    after the colon ('module:Outer.Inner').

    Raises:
        PipelineConfigError: If the module or attribute cannot be found
    """
    if ":" in reference:
        module_name, _, attr_path = reference.partition(":")
    else:
        module_name, _, attr_path = reference.rpartition(".")

    if not module_name or not attr_path:
        raise PipelineConfigError(f"Invalid reference {reference!r}; expected 'module:attr'")

    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise PipelineConfigError(f"Failed to import {module_name}: {e}") from e

    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError as e:
            raise PipelineConfigError(
                f"{attr_path} not found in {module_name}",
            ) from e
    return obj


def build_pipeline(config: PipelineConfig) -> Pipeline:
    """
    Build a Pipeline from a validated config

    Steps are added in file order, then observers are registered.

    Raises:
        PipelineConfigError: If a reference cannot be imported or has the wrong kind
        DuplicateObserverError: If two observers target the same result type
    """
    pipeline = Pipeline()

    for reference in config.steps:
        step_type = import_object(reference)
        if not isinstance(step_type, type):
            raise PipelineConfigError(f"Step {reference!r} is not a class")
        pipeline.add(step_type)

    for observer in config.observers:
        result_type = import_object(observer.result_type)
        if not isinstance(result_type, type):
            raise PipelineConfigError(f"Result type {observer.result_type!r} is not a class")
        callback = import_object(observer.callback)
        if not callable(callback):
            raise PipelineConfigError(f"Observer {observer.callback!r} is not callable")
        pipeline.on_step_executed(result_type, callback)

    logger.info("Built pipeline %r with %d steps", config.name, len(pipeline))
    return pipeline


def lint_pipeline(pipeline: Pipeline) -> list[str]:
    """
    Check a pipeline's wiring without executing it and return warnings

    Only announced result types (execute() return annotations) are known
    statically, so a step that returns None at runtime can still fail a
    pipeline that lints clean.

    Returns:
        List of warning messages
    """
    warnings = []
    produced: set[type] = set()

    for index, descriptor in enumerate(pipeline.steps):
        label = f"step {index} ({descriptor.name})"

        if descriptor.error:
            warnings.append(f"{label}: {descriptor.error}")
            continue

        problem = entry_point_problem(descriptor.step_type)
        if problem:
            warnings.append(f"{label}: {problem}")

        for dep in descriptor.dependencies:
            if not dep.annotated:
                warnings.append(f"{label}: parameter '{dep.name}' has no type annotation")
                continue
            if not dep.resolvable:
                warnings.append(f"{label}: parameter '{dep.name}' is not annotated with a class")
                continue
            if dep.type in produced:
                continue

            producer = pipeline.find_producer(dep.type)
            if producer is None:
                warnings.append(
                    f"{label}: no registered step produces {type_name(dep.type)}",
                )
            else:
                warnings.append(
                    f"{label}: register {producer.name} before {descriptor.name} "
                    f"(it produces {type_name(dep.type)})",
                )

        if descriptor.result_type is not None:
            produced.add(descriptor.result_type)

    return warnings
