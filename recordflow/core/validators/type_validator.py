"""
TypeValidator - checks a value's intrinsic kind against a declared DataType.
"""

from typing import Any

from recordflow.core.errors import PipelineError
from recordflow.core.models import DataType

from .base_validator import BaseValidator

# Value kind -> DataTypes it satisfies. JSON accepts every kind.
COMPATIBILITY_MATRIX: dict[str, frozenset[DataType]] = {
    "string": frozenset({DataType.STRING, DataType.DATETIME, DataType.BYTES, DataType.JSON}),
    "integer": frozenset({DataType.INTEGER, DataType.JSON}),
    "float": frozenset({DataType.FLOAT, DataType.JSON}),
    "boolean": frozenset({DataType.BOOLEAN, DataType.JSON}),
    "other": frozenset({DataType.JSON}),
}

TRUE_STRINGS = ("true", "1", "yes")
FALSE_STRINGS = ("false", "0", "no")


def value_kind(value: Any) -> str:
    """
    Classify a dynamically-typed value by its intrinsic shape.

    bool is checked before int because bool subclasses int; an integral
    float such as 1.0 is still "float".
    """
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "string"
    return "other"


def is_compatible(value: Any, data_type: DataType) -> bool:
    return data_type in COMPATIBILITY_MATRIX[value_kind(value)]


def coerce_value(value: Any, data_type: DataType) -> Any:
    """
    Attempt to coerce a string value to the given DataType.

    Only INTEGER, FLOAT and BOOLEAN targets are coerced; every other
    target, and every non-string value, is returned unchanged.

    Raises:
        ValueError: If the string cannot be parsed as the target type
    """
    if not isinstance(value, str):
        return value

    text = value.strip()
    if data_type is DataType.INTEGER:
        return int(text)
    if data_type is DataType.FLOAT:
        return float(text)
    if data_type is DataType.BOOLEAN:
        # Special handling for bool (avoid "False" -> True)
        lowered = text.lower()
        if lowered in TRUE_STRINGS:
            return True
        if lowered in FALSE_STRINGS:
            return False
        raise ValueError(f"Cannot parse '{value}' as boolean")
    return value


class TypeValidator(BaseValidator):
    """
    Validates that a present value is compatible with the declared type.

    The check is on the value's shape, not on convertibility: an int
    never satisfies FLOAT and a float never satisfies INTEGER.
    """

    def __init__(self, field_name: str, data_type: DataType):
        super().__init__(field_name)
        self.data_type = data_type

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        # Absence is handled by RequiredFieldValidator; a present null is
        # kind "other" and only satisfies JSON
        if self.field_name not in record:
            return

        if not is_compatible(value, self.data_type):
            raise PipelineError.incompatible_field_type(self.field_name)

    @property
    def rule_type(self) -> str:
        return "type_check"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(field={self.field_name}, data_type={self.data_type.value})"
