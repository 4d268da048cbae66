"""
Schema validator orchestrating field validators over a record.
"""

from recordflow.core.models import DataType, Record, Schema

from .base_validator import BaseValidator
from .required_field_validator import RequiredFieldValidator
from .type_validator import TypeValidator


class SchemaValidator:
    """
    Validates records against a schema.

    Validators are built once per schema in field declaration order and
    applied in that order, stopping at the first violation.
    """

    def __init__(self, schema: Schema):
        self.schema = schema
        self.validators: list[BaseValidator] = []
        self._build_validators()

    def _build_validators(self) -> None:
        for field in self.schema.fields:
            if not field.nullable:
                self.validators.append(
                    RequiredFieldValidator(field.name, reject_null=field.data_type is DataType.JSON)
                )
            self.validators.append(TypeValidator(field.name, field.data_type))

    def validate(self, record: Record) -> None:
        """
        Validate a record; read-only.

        Raises:
            PipelineError: kind SCHEMA for the first violating field
        """
        data = record.data
        for validator in self.validators:
            validator.validate(data.get(validator.field_name), data)


def validate_record(record: Record, schema: Schema) -> None:
    """Validate a record against a schema, raising on the first violation."""
    SchemaValidator(schema).validate(record)
