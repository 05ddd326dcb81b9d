"""
Public test utilities for rail-cms.
"""

from .harness import (
    RailCMSTestClient,
    build_context,
    build_registry,
    build_request,
    override_rail_cms_settings,
)

__all__ = [
    "RailCMSTestClient",
    "build_context",
    "build_registry",
    "build_request",
    "override_rail_cms_settings",
]
