"""
Schema model: an ordered, named set of typed field declarations.
"""

from enum import Enum

from pydantic import BaseModel, field_validator


class DataType(str, Enum):
    """Closed set of declared field types."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATETIME = "datetime"
    JSON = "json"
    BYTES = "bytes"


class Field(BaseModel):
    """
    One field declaration.

    Attributes:
        name: Field name, unique within its Schema
        data_type: Declared DataType
        nullable: Whether the field may be absent from a record
        description: Optional free-text description
    """

    name: str
    data_type: DataType
    nullable: bool = True
    description: str | None = None

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "name": "amount",
                "data_type": "float",
                "nullable": False,
                "description": "Order total",
            }
        }

    @field_validator("name")
    @classmethod
    def check_name_not_empty(cls, v):
        """Reject empty field names."""
        if not v:
            raise ValueError("field name must not be empty")
        return v


class Schema(BaseModel):
    """
    Ordered field declarations plus free-form string metadata.

    Field order is declaration order. Schemas are immutable; use
    with_metadata() to derive a copy carrying different metadata.

    Attributes:
        fields: Field declarations in declaration order
        metadata: String-to-string metadata
    """

    fields: list[Field]
    metadata: dict[str, str] = {}

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "fields": [
                    {"name": "order_id", "data_type": "string", "nullable": False},
                    {"name": "amount", "data_type": "float", "nullable": False},
                    {"name": "note", "data_type": "string", "nullable": True},
                ],
                "metadata": {"source": "orders.csv"},
            }
        }

    @field_validator("fields")
    @classmethod
    def check_unique_names(cls, v):
        """Validate that field names are unique."""
        seen = set()
        for field in v:
            if field.name in seen:
                raise ValueError(f"duplicate field name '{field.name}'")
            seen.add(field.name)
        return v

    def with_metadata(self, metadata: dict[str, str]) -> "Schema":
        """Return a copy of this schema with the given metadata."""
        return self.model_copy(update={"metadata": dict(metadata)})

    def get_field(self, name: str) -> Field | None:
        for field in self.fields:
            if field.name == name:
                return field
        return None

    def field_names(self) -> list[str]:
        return [field.name for field in self.fields]
