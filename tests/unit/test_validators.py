"""
Unit tests for schema validation.

Includes property-based testing with hypothesis for the type compatibility matrix.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from recordflow.core.errors import ErrorKind, PipelineError, SchemaViolation
from recordflow.core.models import DataType, Field, Record, Schema
from recordflow.core.validators import (
    RequiredFieldValidator,
    SchemaValidator,
    TypeValidator,
    coerce_value,
    is_compatible,
    validate_record,
    value_kind,
)

NON_JSON_TYPES = [t for t in DataType if t is not DataType.JSON]


def single_field_schema(data_type: DataType, nullable: bool = True) -> Schema:
    return Schema(fields=[Field(name="f", data_type=data_type, nullable=nullable)])


@pytest.mark.unit
class TestRequiredFieldValidator:
    """Tests for RequiredFieldValidator"""

    def test_present_field_passes(self):
        validator = RequiredFieldValidator("name")
        record = {"name": "Ada"}
        validator.validate(record["name"], record)  # Should not raise

    def test_missing_field_raises_error(self):
        """Test validation fails for missing field"""
        validator = RequiredFieldValidator("name")

        with pytest.raises(PipelineError) as exc_info:
            validator.validate(None, {"age": 30})

        assert exc_info.value.violation is SchemaViolation.MISSING_REQUIRED_FIELD
        assert exc_info.value.field_name == "name"

    def test_present_null_passes_by_default(self):
        """Test a present null counts as present; its type is checked separately"""
        validator = RequiredFieldValidator("name")
        validator.validate(None, {"name": None})  # Should not raise

    def test_null_rejected_when_configured(self):
        validator = RequiredFieldValidator("payload", reject_null=True)

        with pytest.raises(PipelineError) as exc_info:
            validator.validate(None, {"payload": None})

        assert exc_info.value.violation is SchemaViolation.MISSING_REQUIRED_FIELD

    def test_empty_string_passes(self):
        """Test only absence counts, not emptiness"""
        validator = RequiredFieldValidator("name")
        validator.validate("", {"name": ""})  # Should not raise

    def test_rule_type(self):
        assert RequiredFieldValidator("x").rule_type == "required_field"


@pytest.mark.unit
class TestTypeValidator:
    """Tests for TypeValidator"""

    @pytest.mark.parametrize(
        "value,data_type",
        [
            ("text", DataType.STRING),
            ("2024-01-01T00:00:00", DataType.DATETIME),
            ("aGVsbG8=", DataType.BYTES),
            (42, DataType.INTEGER),
            (4.2, DataType.FLOAT),
            (True, DataType.BOOLEAN),
            ({"nested": [1, 2]}, DataType.JSON),
            ([1, 2], DataType.JSON),
        ],
    )
    def test_compatible_values_pass(self, value, data_type):
        validator = TypeValidator("f", data_type)
        validator.validate(value, {"f": value})  # Should not raise

    @pytest.mark.parametrize(
        "value,data_type",
        [
            (42, DataType.FLOAT),
            (1.0, DataType.INTEGER),
            (True, DataType.INTEGER),
            (False, DataType.FLOAT),
            ("42", DataType.INTEGER),
            ("true", DataType.BOOLEAN),
            (1, DataType.BOOLEAN),
            ([1], DataType.STRING),
            ({"a": 1}, DataType.DATETIME),
        ],
    )
    def test_incompatible_values_fail(self, value, data_type):
        """Test the check is on shape, not convertibility"""
        validator = TypeValidator("f", data_type)

        with pytest.raises(PipelineError) as exc_info:
            validator.validate(value, {"f": value})

        assert exc_info.value.violation is SchemaViolation.INCOMPATIBLE_FIELD_TYPE
        assert exc_info.value.field_name == "f"

    def test_absent_field_skipped(self):
        validator = TypeValidator("f", DataType.INTEGER)
        validator.validate(None, {})  # Should not raise

    @pytest.mark.parametrize("data_type", NON_JSON_TYPES)
    def test_present_null_only_fits_json(self, data_type):
        """Test a null value is incompatible with every type but JSON"""
        with pytest.raises(PipelineError) as exc_info:
            TypeValidator("f", data_type).validate(None, {"f": None})
        assert exc_info.value.violation is SchemaViolation.INCOMPATIBLE_FIELD_TYPE

        TypeValidator("f", DataType.JSON).validate(None, {"f": None})  # Should not raise

    def test_value_kind_bool_before_int(self):
        assert value_kind(True) == "boolean"
        assert value_kind(1) == "integer"
        assert value_kind(1.0) == "float"
        assert value_kind(None) == "other"

    @given(st.integers())
    def test_property_integers_only_integer_or_json(self, value):
        """Property test: ints satisfy exactly INTEGER and JSON"""
        allowed = {t for t in DataType if is_compatible(value, t)}
        assert allowed == {DataType.INTEGER, DataType.JSON}

    @given(st.floats(allow_nan=False))
    def test_property_floats_never_integer(self, value):
        """Property test: even integral floats never satisfy INTEGER"""
        assert not is_compatible(value, DataType.INTEGER)
        assert is_compatible(value, DataType.FLOAT)

    @given(
        st.one_of(
            st.none(),
            st.booleans(),
            st.integers(),
            st.floats(allow_nan=False),
            st.text(),
            st.lists(st.integers()),
            st.dictionaries(st.text(), st.integers()),
        )
    )
    def test_property_json_accepts_everything(self, value):
        """Property test: any value satisfies a JSON field"""
        validate_record(Record.with_data({"f": value}), single_field_schema(DataType.JSON))


@pytest.mark.unit
class TestSchemaValidator:
    """Tests for validate_record / SchemaValidator"""

    def test_valid_record(self, order_schema, sample_record):
        validate_record(sample_record, order_schema)  # Should not raise

    def test_extra_fields_allowed(self, order_schema):
        record = Record.with_data({"order_id": "A-1", "amount": 1.0, "unexpected": [1]})
        validate_record(record, order_schema)  # Should not raise

    def test_missing_required_field(self, order_schema):
        with pytest.raises(PipelineError) as exc_info:
            validate_record(Record.with_data({"order_id": "A-1"}), order_schema)

        error = exc_info.value
        assert error.kind is ErrorKind.SCHEMA
        assert error.violation is SchemaViolation.MISSING_REQUIRED_FIELD
        assert error.field_name == "amount"

    def test_missing_nullable_field_allowed(self, order_schema):
        validate_record(Record.with_data({"order_id": "A-1", "amount": 2.5}), order_schema)

    def test_null_on_nullable_string_field_is_incompatible(self, order_schema):
        """Test nullable means the key may be absent, not that null fits any type"""
        record = Record.with_data({"order_id": "A-1", "amount": 2.5, "note": None})

        with pytest.raises(PipelineError) as exc_info:
            validate_record(record, order_schema)

        assert exc_info.value.violation is SchemaViolation.INCOMPATIBLE_FIELD_TYPE
        assert exc_info.value.field_name == "note"

    def test_null_on_required_integer_field_is_incompatible(self):
        schema = single_field_schema(DataType.INTEGER, nullable=False)

        with pytest.raises(PipelineError) as exc_info:
            validate_record(Record.with_data({"f": None}), schema)

        assert exc_info.value.violation is SchemaViolation.INCOMPATIBLE_FIELD_TYPE
        assert exc_info.value.field_name == "f"

    def test_null_on_nullable_json_field_allowed(self):
        validate_record(Record.with_data({"f": None}), single_field_schema(DataType.JSON))

    def test_null_on_required_json_field_is_missing(self):
        """Test a required JSON field still needs a non-null value"""
        schema = single_field_schema(DataType.JSON, nullable=False)

        with pytest.raises(PipelineError) as exc_info:
            validate_record(Record.with_data({"f": None}), schema)

        assert exc_info.value.violation is SchemaViolation.MISSING_REQUIRED_FIELD
        assert exc_info.value.field_name == "f"

    def test_first_violation_in_declaration_order_wins(self, order_schema):
        """Test the earliest declared violating field is reported"""
        # order_id has the wrong type, amount is missing: order_id comes first
        record = Record.with_data({"order_id": 7})

        with pytest.raises(PipelineError) as exc_info:
            validate_record(record, order_schema)

        assert exc_info.value.field_name == "order_id"
        assert exc_info.value.violation is SchemaViolation.INCOMPATIBLE_FIELD_TYPE

    def test_validation_does_not_mutate(self, order_schema):
        record = Record.with_data({"order_id": "A-1", "amount": 2.5})
        before = record.model_dump()
        validate_record(record, order_schema)
        assert record.model_dump() == before

    def test_validators_built_in_field_order(self, order_schema):
        validator = SchemaValidator(order_schema)
        assert [(v.field_name, v.rule_type) for v in validator.validators] == [
            ("order_id", "required_field"),
            ("order_id", "type_check"),
            ("amount", "required_field"),
            ("amount", "type_check"),
            ("note", "type_check"),
        ]

    @given(st.text())
    def test_property_strings_rejected_for_numeric_types(self, value):
        """Property test: any string fails INTEGER, FLOAT and BOOLEAN fields"""
        for data_type in (DataType.INTEGER, DataType.FLOAT, DataType.BOOLEAN):
            with pytest.raises(PipelineError):
                validate_record(Record.with_data({"f": value}), single_field_schema(data_type))

    @pytest.mark.parametrize("data_type", NON_JSON_TYPES)
    def test_nested_values_only_fit_json(self, data_type):
        with pytest.raises(PipelineError):
            validate_record(Record.with_data({"f": {"a": 1}}), single_field_schema(data_type))


@pytest.mark.unit
class TestCoerceValue:
    """Tests for string coercion used by the cast transform"""

    @pytest.mark.parametrize(
        "value,data_type,expected",
        [
            ("42", DataType.INTEGER, 42),
            (" 7 ", DataType.INTEGER, 7),
            ("3.5", DataType.FLOAT, 3.5),
            ("TRUE", DataType.BOOLEAN, True),
            ("yes", DataType.BOOLEAN, True),
            ("0", DataType.BOOLEAN, False),
            ("No", DataType.BOOLEAN, False),
            ("text", DataType.STRING, "text"),
            (5, DataType.FLOAT, 5),
        ],
    )
    def test_coercion(self, value, data_type, expected):
        result = coerce_value(value, data_type)
        assert result == expected
        assert type(result) is type(expected)

    @pytest.mark.parametrize(
        "value,data_type",
        [("abc", DataType.INTEGER), ("1.5", DataType.INTEGER), ("x", DataType.FLOAT), ("maybe", DataType.BOOLEAN)],
    )
    def test_invalid_strings_raise(self, value, data_type):
        with pytest.raises(ValueError):
            coerce_value(value, data_type)
