"""
Relationship field type and backlink resolution.
"""

from .backlinks import BacklinkEntry, enqueue_backlink_operations, resolve_backlinks
from .implementation import RelationshipImplementation

__all__ = [
    "BacklinkEntry",
    "RelationshipImplementation",
    "enqueue_backlink_operations",
    "resolve_backlinks",
]
