"""
Mutation pipeline.

A single-item create, update or delete runs as an ordered list of async
steps sharing a ``MutationContext``.
"""

from .base import ConditionalStep, MutationPipeline, MutationStep, OperationFilteredStep
from .builder import PipelineBuilder
from .context import MutationContext

__all__ = [
    "ConditionalStep",
    "MutationContext",
    "MutationPipeline",
    "MutationStep",
    "OperationFilteredStep",
    "PipelineBuilder",
]
