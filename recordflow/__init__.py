"""
recordflow - a minimal record-oriented streaming data pipeline.

Reads records from a source, threads them through transforms, and writes
them to a sink, one record at a time.
"""

from recordflow.core import (
    DataType,
    ErrorKind,
    Field,
    PipelineError,
    Record,
    Schema,
    SchemaViolation,
)
from recordflow.core.models import PipelineResult, PipelineState
from recordflow.pipeline import Pipeline

__version__ = "0.1.0"

__all__ = [
    "DataType",
    "ErrorKind",
    "Field",
    "PipelineError",
    "Record",
    "Schema",
    "SchemaViolation",
    "Pipeline",
    "PipelineResult",
    "PipelineState",
]
