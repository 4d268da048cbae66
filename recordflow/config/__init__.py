"""
Pipeline configuration loading and building.
"""

from .pipeline_config import (
    AdapterConfig,
    PipelineConfig,
    PipelineConfigBuilder,
    PipelineConfigLoader,
    TransformConfig,
    build_pipeline,
    build_sink,
    build_source,
    build_transform,
)

__all__ = [
    "AdapterConfig",
    "PipelineConfig",
    "PipelineConfigBuilder",
    "PipelineConfigLoader",
    "TransformConfig",
    "build_pipeline",
    "build_sink",
    "build_source",
    "build_transform",
]
