"""
rail-cms: a list engine for headless CMS backends.

Lists (entity types with typed fields, access rules and hooks) are turned
into a GraphQL schema, access-controlled resolvers and a multi-phase
mutation pipeline.
"""

from .core.context import RequestContext
from .core.exceptions import (
    AccessDeniedError,
    LimitsExceededError,
    ListConfigurationError,
    ValidationFailureError,
)
from .core.registry import ListRegistry
from .core.settings import ListEngineSettings
from .core.utils import UNSET
from .defaults import LIBRARY_VERSION as __version__
from .fields import AutoIncrement, Checkbox, Float, Integer, Relationship, Text
from .lists import List, MutationState

__all__ = [
    "AccessDeniedError",
    "AutoIncrement",
    "Checkbox",
    "Float",
    "Integer",
    "LimitsExceededError",
    "List",
    "ListConfigurationError",
    "ListEngineSettings",
    "ListRegistry",
    "MutationState",
    "Relationship",
    "RequestContext",
    "Text",
    "UNSET",
    "ValidationFailureError",
]
