"""
ListEngineSettings implementation.

Settings are resolved from the library defaults merged with the ``RAIL_CMS``
dictionary of the Django settings module, when one is configured.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Optional

from django.conf import settings as django_settings

from ..defaults import LIBRARY_DEFAULTS, merge_settings


def _get_global_settings() -> dict[str, Any]:
    """Get the ``RAIL_CMS`` block from Django settings, if any."""
    if not django_settings.configured:
        return {}
    rail_settings = getattr(django_settings, "RAIL_CMS", None) or {}
    if not isinstance(rail_settings, dict):
        return {}
    return rail_settings


def _limit_or_infinity(value: Optional[float]) -> float:
    return math.inf if value is None else value


@dataclass
class ListEngineSettings:
    """Settings for list construction, access defaults and query limits."""

    schema_names: list[str] = field(default_factory=lambda: ["public"])
    default_schema: str = "public"
    adapter: str = "rail_cms.adapters.memory.MemoryAdapter"
    default_access: dict[str, Any] = field(
        default_factory=lambda: {"list": True, "field": True, "custom": True}
    )
    query_limits: dict[str, Any] = field(default_factory=lambda: {"max_results": None})
    max_total_results: Optional[int] = None
    admin_config: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def load(cls, **overrides: Any) -> "ListEngineSettings":
        merged = merge_settings(LIBRARY_DEFAULTS, _get_global_settings())
        merged = merge_settings(merged, overrides)
        valid_fields = set(cls.__dataclass_fields__.keys())
        return cls(**{k: v for k, v in merged.items() if k in valid_fields})

    @property
    def request_max_total_results(self) -> float:
        return _limit_or_infinity(self.max_total_results)
