"""
Adapter option models (delimiter, header handling) for file adapters.
"""

from pydantic import BaseModel, ValidationError, field_validator

from recordflow.core.errors import PipelineError


class CsvOptions(BaseModel):
    """
    Options shared by the CSV source and sink.

    Attributes:
        delimiter: Single character separating fields
        has_header: Whether the first line is a header row rather than data
        headers: Explicit field name list overriding header/inferred names
    """

    delimiter: str = ","
    has_header: bool = True
    headers: list[str] | None = None

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "delimiter": ";",
                "has_header": True,
                "headers": ["order_id", "amount", "paid"],
            }
        }

    @field_validator("delimiter")
    @classmethod
    def check_delimiter(cls, v):
        if len(v) != 1:
            raise ValueError("delimiter must be exactly one character")
        if v in ("\n", "\r", '"'):
            raise ValueError("delimiter cannot be a newline or quote character")
        return v

    @field_validator("headers")
    @classmethod
    def check_headers(cls, v):
        if v is None:
            return v
        if any(not name.strip() for name in v):
            raise ValueError("header names must not be empty")
        if len(set(v)) != len(v):
            raise ValueError("header names must be unique")
        return v

    def updated(self, **changes) -> "CsvOptions":
        """Return validated options with the given changes applied."""
        return build_csv_options(**{**self.model_dump(), **changes})


def build_csv_options(**options) -> CsvOptions:
    """
    Validate CSV options, reporting failures as configuration errors.

    Raises:
        PipelineError: kind CONFIG if an option is invalid
    """
    try:
        return CsvOptions(**options)
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise PipelineError.config(f"Invalid CSV options: {details}", e) from e
