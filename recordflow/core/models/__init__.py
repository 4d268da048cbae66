"""
Core data models for the record pipeline.

All models use Pydantic for runtime validation and type safety.
"""

from .adapter_options import CsvOptions, build_csv_options
from .pipeline_result import PipelineResult, PipelineState
from .record import Record
from .schema import DataType, Field, Schema

__all__ = [
    "DataType",
    "Field",
    "Schema",
    "Record",
    "CsvOptions",
    "build_csv_options",
    "PipelineResult",
    "PipelineState",
]
