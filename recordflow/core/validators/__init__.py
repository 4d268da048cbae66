"""
Field validators and schema validation.
"""

from .base_validator import BaseValidator
from .required_field_validator import RequiredFieldValidator
from .schema_validator import SchemaValidator, validate_record
from .type_validator import TypeValidator, coerce_value, is_compatible, value_kind

__all__ = [
    "BaseValidator",
    "RequiredFieldValidator",
    "TypeValidator",
    "SchemaValidator",
    "validate_record",
    "coerce_value",
    "is_compatible",
    "value_kind",
]
