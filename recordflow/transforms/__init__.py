"""
Record transforms: the abstract contract and field-level implementations.
"""

from .base_transform import BaseTransform
from .field_transforms import (
    CastFieldsTransform,
    FilterTransform,
    RenameFieldsTransform,
    SelectFieldsTransform,
    ValidateSchemaTransform,
    field_equals,
)

__all__ = [
    "BaseTransform",
    "CastFieldsTransform",
    "FilterTransform",
    "RenameFieldsTransform",
    "SelectFieldsTransform",
    "ValidateSchemaTransform",
    "field_equals",
]
