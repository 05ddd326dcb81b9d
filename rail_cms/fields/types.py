"""
Field type registry.

Each field type is a ``FieldType`` record tying an implementation class to
the storage field adapter it uses per adapter name, and to the admin views
rendering it. Lists resolve types through ``FIELD_TYPES`` or by passing a
``FieldType`` directly in a field config.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from ..adapters.memory import (
    MemoryCheckboxFieldAdapter,
    MemoryIdFieldAdapter,
    MemoryOrderedFieldAdapter,
    MemoryRelationshipFieldAdapter,
    MemoryTextFieldAdapter,
)
from .base import Implementation
from .relationship import RelationshipImplementation
from .scalars import (
    AutoIncrementImplementation,
    CheckboxImplementation,
    FloatImplementation,
    IntegerImplementation,
    TextImplementation,
)


@dataclass(frozen=True, eq=False)
class FieldType:
    type: str
    implementation: type[Implementation]
    adapters: Mapping[str, type] = field(default_factory=dict)
    views: Mapping[str, str] = field(default_factory=dict)

    def __repr__(self) -> str:
        return f"<FieldType {self.type}>"


def _views(name: str) -> dict[str, str]:
    return {
        "Controller": f"rail-cms/fields/{name}/Controller",
        "Field": f"rail-cms/fields/{name}/Field",
        "Filter": f"rail-cms/fields/{name}/Filter",
        "Cell": f"rail-cms/fields/{name}/Cell",
    }


AutoIncrement = FieldType(
    type="AutoIncrement",
    implementation=AutoIncrementImplementation,
    adapters={"memory": MemoryIdFieldAdapter},
    views=_views("AutoIncrement"),
)
Text = FieldType(
    type="Text",
    implementation=TextImplementation,
    adapters={"memory": MemoryTextFieldAdapter},
    views=_views("Text"),
)
Integer = FieldType(
    type="Integer",
    implementation=IntegerImplementation,
    adapters={"memory": MemoryOrderedFieldAdapter},
    views=_views("Integer"),
)
Float = FieldType(
    type="Float",
    implementation=FloatImplementation,
    adapters={"memory": MemoryOrderedFieldAdapter},
    views=_views("Float"),
)
Checkbox = FieldType(
    type="Checkbox",
    implementation=CheckboxImplementation,
    adapters={"memory": MemoryCheckboxFieldAdapter},
    views=_views("Checkbox"),
)
Relationship = FieldType(
    type="Relationship",
    implementation=RelationshipImplementation,
    adapters={"memory": MemoryRelationshipFieldAdapter},
    views=_views("Relationship"),
)

FIELD_TYPES: dict[str, FieldType] = {
    field_type.type: field_type
    for field_type in (AutoIncrement, Text, Integer, Float, Checkbox, Relationship)
}

# Python builtins accepted as a shorthand for a field type.
NATIVE_TYPES: dict[type, FieldType] = {
    bool: Checkbox,
    str: Text,
    int: Integer,
    float: Float,
}


def resolve_field_type(value: Any) -> Optional[Any]:
    """Look up a registered type by name, returning other values unchanged."""
    if isinstance(value, str):
        return FIELD_TYPES.get(value)
    return value
