"""
Core data model, validation, and error taxonomy.
"""

from .errors import ErrorKind, PipelineError, SchemaViolation
from .models import DataType, Field, Record, Schema

__all__ = [
    "ErrorKind",
    "PipelineError",
    "SchemaViolation",
    "DataType",
    "Field",
    "Record",
    "Schema",
]
