"""Core module of the rail-cms list engine.

This package contains settings, naming, request context, error types and the
registry assembling lists into an executable GraphQL schema. Import the
registry from ``rail_cms.core.registry``; this module stays free of imports
so the lower layers can depend on it without cycles.
"""
