"""
Default configuration for the rail-cms library.

The goal of this module is to expose a single source of truth for every
setting that the list engine actually consumes. Projects override any of
these through the ``RAIL_CMS`` dictionary in their Django settings.
"""

from __future__ import annotations

from typing import Any

LIBRARY_VERSION = "0.1.0"


# --------------------------------------------------------------------------- #
# Library-wide defaults
# --------------------------------------------------------------------------- #
LIBRARY_DEFAULTS: dict[str, Any] = {
    # Every list is exposed once per schema variant.
    "schema_names": ["public"],
    "default_schema": "public",
    # Dotted path to the storage adapter class used when none is given.
    "adapter": "rail_cms.adapters.memory.MemoryAdapter",
    # Access applied when a list or field declares no ``access`` config.
    "default_access": {
        "list": True,
        "field": True,
        "custom": True,
    },
    # Per-list limits. ``None`` means unlimited.
    "query_limits": {
        "max_results": None,
    },
    # Request-wide ceiling across every list query of one request.
    "max_total_results": None,
    "admin_config": {
        "default_page_size": 50,
        "maximum_page_size": 1000,
    },
}


def merge_settings(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    result = dict(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_settings(result[key], value)
        else:
            result[key] = value
    return result
