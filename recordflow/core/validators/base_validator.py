"""
Base validator interface for field-level schema checks.

All validators must inherit from BaseValidator and implement the validate() method.
"""

from abc import ABC, abstractmethod
from typing import Any


class BaseValidator(ABC):
    """
    Abstract base class for field validators.

    Each validator checks one aspect (presence, type) of a single
    declared field against a record's data map.
    """

    def __init__(self, field_name: str):
        """
        Initialize validator.

        Args:
            field_name: Name of the field to validate
        """
        self.field_name = field_name

    @abstractmethod
    def validate(self, value: Any, record: dict[str, Any]) -> None:
        """
        Validate a value for this validator's field.

        Args:
            value: The field value (None when absent)
            record: The entire record data map (for presence checks)

        Raises:
            PipelineError: kind SCHEMA if validation fails
        """
        pass

    @property
    @abstractmethod
    def rule_type(self) -> str:
        """Return the rule type identifier."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(field={self.field_name})"
