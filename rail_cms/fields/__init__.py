"""
Field types available to list configs.
"""

from .base import Implementation
from .relationship import RelationshipImplementation
from .scalars import (
    AutoIncrementImplementation,
    CheckboxImplementation,
    FloatImplementation,
    IntegerImplementation,
    TextImplementation,
)
from .types import (
    FIELD_TYPES,
    NATIVE_TYPES,
    AutoIncrement,
    Checkbox,
    FieldType,
    Float,
    Integer,
    Relationship,
    Text,
    resolve_field_type,
)

__all__ = [
    "FIELD_TYPES",
    "NATIVE_TYPES",
    "AutoIncrement",
    "AutoIncrementImplementation",
    "Checkbox",
    "CheckboxImplementation",
    "FieldType",
    "Float",
    "FloatImplementation",
    "Implementation",
    "Integer",
    "IntegerImplementation",
    "Relationship",
    "RelationshipImplementation",
    "Text",
    "TextImplementation",
    "resolve_field_type",
]
