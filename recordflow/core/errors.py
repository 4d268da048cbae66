"""
Error taxonomy for the record pipeline.

Every component reports failures as a PipelineError tagged with one
ErrorKind from a closed set, so callers can match on the kind instead of
on a class hierarchy.
"""

import json
from enum import Enum


class ErrorKind(str, Enum):
    """Where a failure originated."""

    SOURCE = "source"
    SINK = "sink"
    TRANSFORM = "transform"
    SCHEMA = "schema"
    CONFIG = "config"
    IO = "io"
    SERIALIZATION = "serialization"

    @property
    def label(self) -> str:
        if self is ErrorKind.IO:
            return "IO"
        return self.value.capitalize()


class SchemaViolation(str, Enum):
    """Specific reason a record failed schema validation."""

    MISSING_REQUIRED_FIELD = "missing_required_field"
    INCOMPATIBLE_FIELD_TYPE = "incompatible_field_type"


class PipelineError(Exception):
    """
    Raised (or yielded as a stream item) by every pipeline component.

    Attributes:
        kind: ErrorKind naming the failing component class
        message: Human-readable description
        cause: Underlying exception, if any (also set as __cause__)
        violation: SchemaViolation for kind SCHEMA validation failures
        field_name: Offending field for schema violations
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        cause: BaseException | None = None,
        violation: SchemaViolation | None = None,
        field_name: str | None = None,
    ):
        self.kind = kind
        self.message = message
        self.cause = cause
        self.violation = violation
        self.field_name = field_name
        super().__init__(f"{kind.label} error: {message}")
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        return f"PipelineError(kind={self.kind.value!r}, message={self.message!r})"

    @classmethod
    def source(cls, message: str, cause: BaseException | None = None) -> "PipelineError":
        return cls(ErrorKind.SOURCE, message, cause)

    @classmethod
    def sink(cls, message: str, cause: BaseException | None = None) -> "PipelineError":
        return cls(ErrorKind.SINK, message, cause)

    @classmethod
    def transform(cls, message: str, cause: BaseException | None = None) -> "PipelineError":
        return cls(ErrorKind.TRANSFORM, message, cause)

    @classmethod
    def schema(cls, message: str, cause: BaseException | None = None) -> "PipelineError":
        return cls(ErrorKind.SCHEMA, message, cause)

    @classmethod
    def config(cls, message: str, cause: BaseException | None = None) -> "PipelineError":
        return cls(ErrorKind.CONFIG, message, cause)

    @classmethod
    def io(cls, message: str, cause: BaseException | None = None) -> "PipelineError":
        return cls(ErrorKind.IO, message, cause)

    @classmethod
    def serialization(cls, message: str, cause: BaseException | None = None) -> "PipelineError":
        return cls(ErrorKind.SERIALIZATION, message, cause)

    @classmethod
    def missing_required_field(cls, field_name: str) -> "PipelineError":
        return cls(
            ErrorKind.SCHEMA,
            f"Required field '{field_name}' is missing",
            violation=SchemaViolation.MISSING_REQUIRED_FIELD,
            field_name=field_name,
        )

    @classmethod
    def incompatible_field_type(cls, field_name: str) -> "PipelineError":
        return cls(
            ErrorKind.SCHEMA,
            f"Field '{field_name}' has incompatible type",
            violation=SchemaViolation.INCOMPATIBLE_FIELD_TYPE,
            field_name=field_name,
        )

    @classmethod
    def from_os_error(cls, error: OSError, path: str | None = None) -> "PipelineError":
        """Wrap a low-level file failure as kind IO."""
        detail = error.strerror or str(error)
        message = f"{detail}: {path}" if path else detail
        return cls(ErrorKind.IO, message, error)

    @classmethod
    def from_json_error(cls, error: json.JSONDecodeError | TypeError | ValueError) -> "PipelineError":
        """Wrap a JSON encode/decode failure as kind SERIALIZATION."""
        return cls(ErrorKind.SERIALIZATION, str(error), error)
