"""
Record model representing a single unit of data flowing through a pipeline.
"""

from typing import Any

from pydantic import BaseModel


class Record(BaseModel):
    """
    A single unit of structured data (ephemeral, not persisted).

    Records are values: the pipeline copies them between stages, so a
    transform never observes another stage's mutations.

    Attributes:
        data: Field name to value (str, int, float, bool, None or nested JSON)
        metadata: Side-channel string metadata
    """

    data: dict[str, Any] = {}
    metadata: dict[str, str] = {}

    class Config:
        json_schema_extra = {
            "example": {
                "data": {"order_id": "A-1001", "amount": 99.99, "paid": True},
                "metadata": {"line": "2"},
            }
        }

    @classmethod
    def with_data(cls, data: dict[str, Any]) -> "Record":
        return cls(data=data)

    def set_field(self, name: str, value: Any) -> None:
        self.data[name] = value

    def get_field(self, name: str) -> Any:
        return self.data.get(name)

    def set_metadata(self, key: str, value: str) -> None:
        self.metadata[key] = value

    def get_metadata(self, key: str) -> str | None:
        return self.metadata.get(key)

    def copy_record(self) -> "Record":
        """Deep copy, so nested JSON values are not shared."""
        return self.model_copy(deep=True)

    def validate_against_schema(self, schema) -> None:
        """
        Validate this record against a schema.

        Raises:
            PipelineError: kind SCHEMA on the first violation in field order
        """
        # Imported here to keep models free of a validators import cycle
        from recordflow.core.validators import validate_record

        validate_record(self, schema)
