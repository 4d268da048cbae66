"""
Field-level transforms: rename, select, cast, filter, and schema validation.
"""

from typing import Any, Callable

from recordflow.core.errors import PipelineError
from recordflow.core.models import DataType, Field, Record, Schema
from recordflow.core.validators import SchemaValidator, coerce_value

from .base_transform import BaseTransform


class ValidateSchemaTransform(BaseTransform):
    """
    Passes records through unchanged after validating them.

    Raises kind SCHEMA on the first violating field (declaration order).
    """

    def __init__(self, schema: Schema):
        self.schema = schema
        self.validator = SchemaValidator(schema)

    async def transform(self, record: Record) -> list[Record]:
        self.validator.validate(record)
        return [record]

    async def get_output_schema(self, input_schema: Schema) -> Schema:
        return self.schema

    def __repr__(self) -> str:
        return f"ValidateSchemaTransform(fields={self.schema.field_names()})"


class RenameFieldsTransform(BaseTransform):
    """
    Renames keys per mapping, keeping each key's position.

    Renaming onto a key the record already holds raises kind TRANSFORM.
    """

    def __init__(self, mapping: dict[str, str]):
        targets = list(mapping.values())
        if len(set(targets)) != len(targets):
            raise PipelineError.config("Rename targets must be unique")
        self.mapping = dict(mapping)

    async def transform(self, record: Record) -> list[Record]:
        renamed: dict[str, Any] = {}
        for key, value in record.data.items():
            target = self.mapping.get(key, key)
            if target in renamed:
                raise PipelineError.transform(
                    f"Renaming fields onto '{target}' would overwrite an existing value"
                )
            renamed[target] = value
        record.data = renamed
        return [record]

    async def get_output_schema(self, input_schema: Schema) -> Schema:
        fields = [
            field.model_copy(update={"name": self.mapping.get(field.name, field.name)})
            for field in input_schema.fields
        ]
        try:
            return Schema(fields=fields, metadata=input_schema.metadata)
        except ValueError as e:
            raise PipelineError.schema(f"Rename produces an invalid schema: {e}", e) from e

    def __repr__(self) -> str:
        return f"RenameFieldsTransform(mapping={self.mapping})"


class SelectFieldsTransform(BaseTransform):
    """Projects records onto the listed fields, in the listed order."""

    def __init__(self, field_names: list[str]):
        if not field_names:
            raise PipelineError.config("SelectFieldsTransform needs at least one field")
        self.field_names = list(field_names)

    async def transform(self, record: Record) -> list[Record]:
        record.data = {name: record.data[name] for name in self.field_names if name in record.data}
        return [record]

    async def get_output_schema(self, input_schema: Schema) -> Schema:
        fields = []
        for name in self.field_names:
            field = input_schema.get_field(name)
            if field is None:
                raise PipelineError.schema(f"Selected field '{name}' is not in the input schema")
            fields.append(field)
        return Schema(fields=fields, metadata=input_schema.metadata)

    def __repr__(self) -> str:
        return f"SelectFieldsTransform(fields={self.field_names})"


class CastFieldsTransform(BaseTransform):
    """
    Coerces string values to declared types.

    Supports INTEGER, FLOAT and BOOLEAN targets (booleans accept
    true/1/yes and false/0/no, case-insensitive). Non-string values, absent
    fields and other targets pass through untouched.
    """

    def __init__(self, types: dict[str, DataType | str]):
        try:
            self.types = {name: DataType(data_type) for name, data_type in types.items()}
        except ValueError as e:
            raise PipelineError.config(f"Unknown data type in cast mapping: {e}", e) from e

    async def transform(self, record: Record) -> list[Record]:
        for name, data_type in self.types.items():
            if name not in record.data:
                continue
            value = record.data[name]
            try:
                record.data[name] = coerce_value(value, data_type)
            except (ValueError, TypeError) as e:
                raise PipelineError.transform(
                    f"Cannot coerce field '{name}' value {value!r} to {data_type.value}: {e}", e
                ) from e
        return [record]

    async def get_output_schema(self, input_schema: Schema) -> Schema:
        fields: list[Field] = []
        for field in input_schema.fields:
            if field.name in self.types:
                field = field.model_copy(update={"data_type": self.types[field.name]})
            fields.append(field)
        return Schema(fields=fields, metadata=input_schema.metadata)

    def __repr__(self) -> str:
        types = {name: data_type.value for name, data_type in self.types.items()}
        return f"CastFieldsTransform(types={types})"


class FilterTransform(BaseTransform):
    """
    Keeps records matching a predicate; returns no output otherwise.

    Note that the pipeline driver carries the input record forward when a
    transform returns nothing, so filtering only takes effect for callers
    that honour empty outputs.
    """

    def __init__(self, predicate: Callable[[Record], bool], description: str = "predicate"):
        self.predicate = predicate
        self.description = description

    async def transform(self, record: Record) -> list[Record]:
        try:
            keep = self.predicate(record)
        except Exception as e:
            raise PipelineError.transform(f"Filter {self.description} failed: {e}", e) from e
        return [record] if keep else []

    async def get_output_schema(self, input_schema: Schema) -> Schema:
        return input_schema

    def __repr__(self) -> str:
        return f"FilterTransform({self.description})"


def field_equals(field_name: str, expected: Any) -> Callable[[Record], bool]:
    """Predicate factory: record's field equals the expected value."""

    def predicate(record: Record) -> bool:
        return record.get_field(field_name) == expected

    return predicate
