"""
Lists: configured entity types and their request-time operations.
"""

from .base import List
from .state import MutationState

__all__ = ["List", "MutationState"]
