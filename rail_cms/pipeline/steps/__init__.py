"""
Pipeline steps for mutation processing.

Each step handles one phase of a single-item mutation:
- Default values
- Nested relationships and backlink registration
- Input transforms
- Validation
- Before hooks
- Execution
"""

from .defaults import ResolveDefaultsStep
from .execution import CreateExecutionStep, DeleteExecutionStep, UpdateExecutionStep
from .hooks import BeforeChangeStep, BeforeDeleteStep, ResolveInputStep
from .relationships import RegisterBacklinksStep, ResolveRelationshipsStep, apply_nested_operations
from .validation import ValidateDeleteStep, ValidateInputStep

__all__ = [
    # Input processing
    "ResolveDefaultsStep",
    "ResolveRelationshipsStep",
    "RegisterBacklinksStep",
    "ResolveInputStep",
    "apply_nested_operations",
    # Validation
    "ValidateInputStep",
    "ValidateDeleteStep",
    # Hooks
    "BeforeChangeStep",
    "BeforeDeleteStep",
    # Execution
    "CreateExecutionStep",
    "UpdateExecutionStep",
    "DeleteExecutionStep",
]
