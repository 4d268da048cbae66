"""
Unit tests for field-level transforms.
"""

import asyncio

import pytest

from recordflow.core.errors import ErrorKind, PipelineError, SchemaViolation
from recordflow.core.models import DataType, Field, Record, Schema
from recordflow.transforms import (
    CastFieldsTransform,
    FilterTransform,
    RenameFieldsTransform,
    SelectFieldsTransform,
    ValidateSchemaTransform,
    field_equals,
)


@pytest.fixture
def string_schema() -> Schema:
    return Schema(
        fields=[
            Field(name="id", data_type=DataType.STRING),
            Field(name="amt", data_type=DataType.STRING),
            Field(name="paid", data_type=DataType.STRING),
        ],
        metadata={"format": "csv"},
    )


def run_transform(transform, data: dict) -> list[Record]:
    return asyncio.run(transform.transform(Record.with_data(data)))


@pytest.mark.unit
class TestValidateSchemaTransform:
    """Tests for ValidateSchemaTransform"""

    def test_valid_record_passes_through(self, order_schema):
        data = {"order_id": "A-1", "amount": 1.5}
        outputs = run_transform(ValidateSchemaTransform(order_schema), data)
        assert [r.data for r in outputs] == [data]

    def test_invalid_record_raises_schema_error(self, order_schema):
        with pytest.raises(PipelineError) as exc_info:
            run_transform(ValidateSchemaTransform(order_schema), {"order_id": "A-1", "amount": "1.5"})

        assert exc_info.value.kind is ErrorKind.SCHEMA
        assert exc_info.value.violation is SchemaViolation.INCOMPATIBLE_FIELD_TYPE

    def test_output_schema_is_declared_schema(self, order_schema, string_schema):
        transform = ValidateSchemaTransform(order_schema)
        assert asyncio.run(transform.get_output_schema(string_schema)) == order_schema


@pytest.mark.unit
class TestRenameFieldsTransform:
    """Tests for RenameFieldsTransform"""

    def test_rename_keeps_position(self):
        outputs = run_transform(RenameFieldsTransform({"amt": "amount"}), {"id": "1", "amt": "2", "paid": "x"})
        assert list(outputs[0].data.items()) == [("id", "1"), ("amount", "2"), ("paid", "x")]

    def test_output_schema(self, string_schema):
        schema = asyncio.run(RenameFieldsTransform({"amt": "amount"}).get_output_schema(string_schema))
        assert schema.field_names() == ["id", "amount", "paid"]
        assert schema.metadata == {"format": "csv"}

    def test_duplicate_targets_rejected(self):
        with pytest.raises(PipelineError) as exc_info:
            RenameFieldsTransform({"a": "x", "b": "x"})
        assert exc_info.value.kind is ErrorKind.CONFIG

    def test_collision_with_existing_key_is_transform_error(self):
        """Test renaming onto a key the record already holds never drops a value"""
        with pytest.raises(PipelineError) as exc_info:
            run_transform(RenameFieldsTransform({"a": "b"}), {"a": 1, "b": 2})

        assert exc_info.value.kind is ErrorKind.TRANSFORM
        assert "'b'" in exc_info.value.message

    def test_collision_in_either_key_order(self):
        with pytest.raises(PipelineError):
            run_transform(RenameFieldsTransform({"a": "b"}), {"b": 2, "a": 1})

    def test_swap_is_allowed(self):
        outputs = run_transform(RenameFieldsTransform({"a": "b", "b": "a"}), {"a": 1, "b": 2})
        assert outputs[0].data == {"b": 1, "a": 2}

    def test_collision_with_existing_field_is_schema_error(self, string_schema):
        with pytest.raises(PipelineError) as exc_info:
            asyncio.run(RenameFieldsTransform({"amt": "id"}).get_output_schema(string_schema))
        assert exc_info.value.kind is ErrorKind.SCHEMA


@pytest.mark.unit
class TestSelectFieldsTransform:
    """Tests for SelectFieldsTransform"""

    def test_projection_in_listed_order(self):
        outputs = run_transform(SelectFieldsTransform(["paid", "id"]), {"id": "1", "amt": "2", "paid": "x"})
        assert list(outputs[0].data) == ["paid", "id"]

    def test_absent_fields_skipped(self):
        outputs = run_transform(SelectFieldsTransform(["id", "other"]), {"id": "1"})
        assert outputs[0].data == {"id": "1"}

    def test_output_schema(self, string_schema):
        schema = asyncio.run(SelectFieldsTransform(["amt"]).get_output_schema(string_schema))
        assert schema.field_names() == ["amt"]

    def test_unknown_field_in_schema(self, string_schema):
        with pytest.raises(PipelineError) as exc_info:
            asyncio.run(SelectFieldsTransform(["nope"]).get_output_schema(string_schema))
        assert exc_info.value.kind is ErrorKind.SCHEMA

    def test_empty_selection_rejected(self):
        with pytest.raises(PipelineError) as exc_info:
            SelectFieldsTransform([])
        assert exc_info.value.kind is ErrorKind.CONFIG


@pytest.mark.unit
class TestCastFieldsTransform:
    """Tests for CastFieldsTransform"""

    def test_casts_strings(self):
        transform = CastFieldsTransform({"amt": "float", "paid": DataType.BOOLEAN, "n": "integer"})
        outputs = run_transform(transform, {"amt": "2.50", "paid": "Yes", "n": "3", "id": "7"})
        assert outputs[0].data == {"amt": 2.5, "paid": True, "n": 3, "id": "7"}

    def test_non_strings_and_absent_fields_untouched(self):
        transform = CastFieldsTransform({"amt": "float", "missing": "integer"})
        outputs = run_transform(transform, {"amt": 2})
        assert outputs[0].data == {"amt": 2}

    def test_failed_coercion_is_transform_error(self):
        with pytest.raises(PipelineError) as exc_info:
            run_transform(CastFieldsTransform({"amt": "integer"}), {"amt": "abc"})

        assert exc_info.value.kind is ErrorKind.TRANSFORM
        assert "amt" in exc_info.value.message

    def test_unknown_type_is_config_error(self):
        with pytest.raises(PipelineError) as exc_info:
            CastFieldsTransform({"amt": "decimal"})
        assert exc_info.value.kind is ErrorKind.CONFIG

    def test_output_schema_updates_types(self, string_schema):
        schema = asyncio.run(CastFieldsTransform({"amt": "float"}).get_output_schema(string_schema))
        assert schema.get_field("amt").data_type is DataType.FLOAT
        assert schema.get_field("id").data_type is DataType.STRING


@pytest.mark.unit
class TestFilterTransform:
    """Tests for FilterTransform"""

    def test_matching_record_kept(self):
        transform = FilterTransform(field_equals("paid", "true"), "paid == 'true'")
        assert len(run_transform(transform, {"paid": "true"})) == 1

    def test_non_matching_record_produces_nothing(self):
        transform = FilterTransform(field_equals("paid", "true"))
        assert run_transform(transform, {"paid": "false"}) == []

    def test_predicate_failure_is_transform_error(self):
        def explode(record):
            raise KeyError("boom")

        with pytest.raises(PipelineError) as exc_info:
            run_transform(FilterTransform(explode, "explode"), {"a": 1})
        assert exc_info.value.kind is ErrorKind.TRANSFORM

    def test_output_schema_unchanged(self, string_schema):
        transform = FilterTransform(field_equals("id", "1"))
        assert asyncio.run(transform.get_output_schema(string_schema)) == string_schema

    def test_name_defaults_to_class_name(self):
        assert FilterTransform(field_equals("id", "1")).name == "FilterTransform"
