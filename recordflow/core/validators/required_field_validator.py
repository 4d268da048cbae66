"""
RequiredFieldValidator - ensures a non-nullable field is present.
"""

from typing import Any

from recordflow.core.errors import PipelineError

from .base_validator import BaseValidator


class RequiredFieldValidator(BaseValidator):
    """
    Validates that a required field is present in the record.

    Fails if:
    - Field is missing from the record
    - Field value is None, when reject_null is set

    A present null is otherwise left to TypeValidator, where it only
    satisfies JSON. Setting reject_null closes that gap for non-nullable
    JSON fields.
    """

    def __init__(self, field_name: str, reject_null: bool = False):
        super().__init__(field_name)
        self.reject_null = reject_null

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if self.field_name not in record:
            raise PipelineError.missing_required_field(self.field_name)
        if self.reject_null and value is None:
            raise PipelineError.missing_required_field(self.field_name)

    @property
    def rule_type(self) -> str:
        return "required_field"
