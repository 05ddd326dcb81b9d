"""
Storage adapters.
"""

from .base import BaseAdapter, BaseFieldAdapter, BaseListAdapter
from .memory import (
    MemoryAdapter,
    MemoryCheckboxFieldAdapter,
    MemoryFieldAdapter,
    MemoryIdFieldAdapter,
    MemoryListAdapter,
    MemoryOrderedFieldAdapter,
    MemoryRelationshipFieldAdapter,
    MemoryTextFieldAdapter,
)

__all__ = [
    "BaseAdapter",
    "BaseFieldAdapter",
    "BaseListAdapter",
    "MemoryAdapter",
    "MemoryCheckboxFieldAdapter",
    "MemoryFieldAdapter",
    "MemoryIdFieldAdapter",
    "MemoryListAdapter",
    "MemoryOrderedFieldAdapter",
    "MemoryRelationshipFieldAdapter",
    "MemoryTextFieldAdapter",
]
