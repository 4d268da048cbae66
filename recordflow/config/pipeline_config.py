"""
Pipeline configuration management.

Loads pipeline definitions (source, transforms, sink) from YAML files and
builds runnable Pipeline instances from them.
"""

from pathlib import Path
from typing import Any, Callable, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from recordflow.core.errors import PipelineError
from recordflow.core.models import Schema
from recordflow.pipeline import Pipeline
from recordflow.sinks import BaseSink, CsvSink, JsonLinesSink
from recordflow.sources import BaseSource, CsvSource, JsonLinesSource
from recordflow.transforms import (
    BaseTransform,
    CastFieldsTransform,
    FilterTransform,
    RenameFieldsTransform,
    SelectFieldsTransform,
    ValidateSchemaTransform,
    field_equals,
)


class AdapterConfig(BaseModel):
    """
    Source or sink definition.

    Attributes:
        type: Adapter format ("csv" or "jsonl")
        path: File path; relative paths resolve against the config file's directory
        options: Adapter options (delimiter, has_header, headers)
    """

    type: Literal["csv", "jsonl"]
    path: str = Field(..., min_length=1)
    options: dict[str, Any] = Field(default_factory=dict)


class TransformConfig(BaseModel):
    """
    Transform definition.

    Attributes:
        type: Transform type (validate, rename, select, cast, filter)
        params: Transform-specific parameters
    """

    type: str = Field(..., min_length=1)
    params: dict[str, Any] = Field(default_factory=dict)


class PipelineConfig(BaseModel):
    """
    Complete pipeline definition.

    Attributes:
        name: Pipeline name for logs and metrics
        source: Source definition
        transforms: Transform definitions, applied in order
        sink: Sink definition
    """

    name: str = Field("pipeline", min_length=1)
    source: AdapterConfig
    transforms: list[TransformConfig] = Field(default_factory=list)
    sink: AdapterConfig

    class Config:
        json_schema_extra = {
            "example": {
                "name": "orders",
                "source": {"type": "csv", "path": "orders.csv", "options": {"delimiter": ";"}},
                "transforms": [
                    {"type": "rename", "params": {"mapping": {"amt": "amount"}}},
                    {"type": "cast", "params": {"types": {"amount": "float"}}},
                ],
                "sink": {"type": "jsonl", "path": "orders.jsonl"},
            }
        }


def _config_error(context: str, error: ValidationError) -> PipelineError:
    details = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in error.errors()
    )
    return PipelineError.config(f"{context}: {details}", error)


class PipelineConfigLoader:
    """
    Loads a pipeline definition from a YAML configuration file.

    Expected YAML format:
    ```yaml
    name: orders
    source:
      type: csv
      path: orders.csv
      options:
        delimiter: ";"
        has_header: true
    transforms:
      - type: rename
        params:
          mapping: {amt: amount}
      - type: cast
        params:
          types: {amount: float}
      - type: validate
        params:
          schema:
            fields:
              - {name: amount, data_type: float, nullable: false}
    sink:
      type: jsonl
      path: orders.jsonl
    ```
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the pipeline config loader.

        Args:
            config_path: Path to the YAML configuration file

        Raises:
            PipelineError: kind CONFIG if the file does not exist
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise PipelineError.config(f"Pipeline configuration file not found: {config_path}")

    def load(self) -> PipelineConfig:
        """
        Load and validate the pipeline definition.

        Returns:
            Validated PipelineConfig

        Raises:
            PipelineError: kind CONFIG if the YAML is malformed or incomplete
        """
        try:
            with open(self.config_path, encoding="utf-8") as f:
                raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise PipelineError.config(f"Invalid YAML in {self.config_path}: {e}", e) from e
        except OSError as e:
            raise PipelineError.from_os_error(e, str(self.config_path)) from e

        if not isinstance(raw, dict):
            raise PipelineError.config(f"{self.config_path} must contain a mapping")

        for section in ("source", "sink"):
            if section not in raw:
                raise PipelineError.config(f"Configuration file must contain '{section}' section")

        try:
            return PipelineConfig(**raw)
        except ValidationError as e:
            raise _config_error(f"Invalid pipeline configuration in {self.config_path}", e) from e

    def build(self) -> Pipeline:
        """Load the definition and build a pipeline relative to the file's directory."""
        return build_pipeline(self.load(), base_dir=self.config_path.parent)


class PipelineConfigBuilder:
    """
    Programmatically build pipeline configurations (for testing or dynamic pipelines).
    """

    def __init__(self, name: str = "pipeline"):
        self.name = name
        self.source: dict[str, Any] | None = None
        self.sink: dict[str, Any] | None = None
        self.transforms: list[dict[str, Any]] = []

    def with_source(self, source_type: str, path: str, **options) -> "PipelineConfigBuilder":
        self.source = {"type": source_type, "path": path, "options": options}
        return self

    def with_sink(self, sink_type: str, path: str, **options) -> "PipelineConfigBuilder":
        self.sink = {"type": sink_type, "path": path, "options": options}
        return self

    def add_transform(self, transform_type: str, **params) -> "PipelineConfigBuilder":
        self.transforms.append({"type": transform_type, "params": params})
        return self

    def build(self) -> PipelineConfig:
        """
        Build the validated configuration.

        Raises:
            PipelineError: kind CONFIG if source or sink is missing or invalid
        """
        if self.source is None or self.sink is None:
            raise PipelineError.config("Pipeline configuration needs both a source and a sink")
        try:
            return PipelineConfig(
                name=self.name,
                source=self.source,
                transforms=self.transforms,
                sink=self.sink,
            )
        except ValidationError as e:
            raise _config_error("Invalid pipeline configuration", e) from e


# =======================
# FACTORIES
# =======================

def _build_validate(params: dict[str, Any]) -> BaseTransform:
    if "schema" not in params:
        raise PipelineError.config("validate transform requires a 'schema' parameter")
    try:
        schema = Schema(**params["schema"])
    except ValidationError as e:
        raise _config_error("Invalid schema for validate transform", e) from e
    return ValidateSchemaTransform(schema)


def _build_filter(params: dict[str, Any]) -> BaseTransform:
    if "field" not in params or "equals" not in params:
        raise PipelineError.config("filter transform requires 'field' and 'equals' parameters")
    field, expected = params["field"], params["equals"]
    return FilterTransform(field_equals(field, expected), description=f"{field} == {expected!r}")


TRANSFORM_REGISTRY: dict[str, Callable[[dict[str, Any]], BaseTransform]] = {
    "validate": _build_validate,
    "rename": lambda params: RenameFieldsTransform(**params),
    "select": lambda params: SelectFieldsTransform(**params),
    "cast": lambda params: CastFieldsTransform(**params),
    "filter": _build_filter,
}

SOURCE_REGISTRY: dict[str, type[BaseSource]] = {
    "csv": CsvSource,
    "jsonl": JsonLinesSource,
}

SINK_REGISTRY: dict[str, type[BaseSink]] = {
    "csv": CsvSink,
    "jsonl": JsonLinesSink,
}


def _resolve(path: str, base_dir: Path | None) -> str:
    candidate = Path(path).expanduser()
    if base_dir is not None and not candidate.is_absolute():
        candidate = base_dir / candidate
    return str(candidate)


def _build_adapter(registry: dict[str, type], role: str, config: AdapterConfig, base_dir: Path | None):
    adapter_class = registry.get(config.type)
    if adapter_class is None:
        raise PipelineError.config(f"Unknown {role} type: {config.type}")
    try:
        return adapter_class(_resolve(config.path, base_dir), **config.options)
    except TypeError as e:
        raise PipelineError.config(f"Invalid options for {config.type} {role}: {e}", e) from e


def build_source(config: AdapterConfig, base_dir: str | Path | None = None) -> BaseSource:
    """Instantiate a source; relative paths resolve against base_dir."""
    return _build_adapter(SOURCE_REGISTRY, "source", config, Path(base_dir) if base_dir else None)


def build_sink(config: AdapterConfig, base_dir: str | Path | None = None) -> BaseSink:
    """Instantiate a sink; relative paths resolve against base_dir."""
    return _build_adapter(SINK_REGISTRY, "sink", config, Path(base_dir) if base_dir else None)


def build_transform(config: TransformConfig) -> BaseTransform:
    """
    Instantiate one transform from its definition.

    Raises:
        PipelineError: kind CONFIG for unknown types or bad parameters
    """
    factory = TRANSFORM_REGISTRY.get(config.type)
    if factory is None:
        raise PipelineError.config(
            f"Unknown transform type: {config.type}. Supported: {', '.join(sorted(TRANSFORM_REGISTRY))}"
        )
    try:
        return factory(config.params)
    except TypeError as e:
        raise PipelineError.config(f"Invalid parameters for {config.type} transform: {e}", e) from e


def build_pipeline(config: PipelineConfig, base_dir: str | Path | None = None) -> Pipeline:
    """
    Factory function to create a Pipeline from a configuration.

    Args:
        config: Validated pipeline configuration
        base_dir: Directory relative adapter paths resolve against (cwd if None)

    Returns:
        Pipeline ready to run

    Example:
        >>> config = (
        ...     PipelineConfigBuilder("orders")
        ...     .with_source("csv", "orders.csv", delimiter=";")
        ...     .with_sink("jsonl", "orders.jsonl")
        ...     .build()
        ... )
        >>> pipeline = build_pipeline(config)  # doctest: +SKIP
    """
    source = build_source(config.source, base_dir)
    transforms = [build_transform(t) for t in config.transforms]
    sink = build_sink(config.sink, base_dir)
    return Pipeline(source, transforms, sink, name=config.name)
