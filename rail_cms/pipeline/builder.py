"""
Pipeline Builder - Builds mutation pipelines with configurable steps.

Provides a fluent interface for constructing the create, update and delete
pipelines of a list.
"""

from typing import List

from .base import MutationPipeline, MutationStep
from .steps import (
    BeforeChangeStep,
    BeforeDeleteStep,
    CreateExecutionStep,
    DeleteExecutionStep,
    RegisterBacklinksStep,
    ResolveDefaultsStep,
    ResolveInputStep,
    ResolveRelationshipsStep,
    UpdateExecutionStep,
    ValidateDeleteStep,
    ValidateInputStep,
)


class PipelineBuilder:
    """
    Builds mutation pipelines with configurable steps.

    Steps can be added or skipped by name before the pipelines are built.

    Example:
        builder = PipelineBuilder()
        builder.add_step(MyCustomStep())

        pipeline = builder.build_create_pipeline()
        ctx = await pipeline.execute(MutationContext(...))
    """

    def __init__(self):
        self._custom_steps: List[MutationStep] = []
        self._skip_steps: List[str] = []

    def add_step(self, step: MutationStep) -> "PipelineBuilder":
        """
        Add a custom step to every pipeline.

        Args:
            step: MutationStep instance to add

        Returns:
            Self for method chaining
        """
        self._custom_steps.append(step)
        return self

    def skip_step(self, step_name: str) -> "PipelineBuilder":
        """
        Skip a step by name.

        Args:
            step_name: Name of the step to skip

        Returns:
            Self for method chaining
        """
        self._skip_steps.append(step_name)
        return self

    def _filter_steps(self, steps: List[MutationStep]) -> List[MutationStep]:
        if not self._skip_steps:
            return steps
        return [s for s in steps if s.name not in self._skip_steps]

    def build_create_pipeline(self) -> MutationPipeline:
        steps = [
            ResolveDefaultsStep(),
            ResolveRelationshipsStep(),
            ResolveInputStep(),
            ValidateInputStep(),
            BeforeChangeStep(),
            CreateExecutionStep(),
            *self._custom_steps,
        ]
        return MutationPipeline(self._filter_steps(steps))

    def build_update_pipeline(self) -> MutationPipeline:
        steps = [
            ResolveRelationshipsStep(),
            ResolveInputStep(),
            ValidateInputStep(),
            BeforeChangeStep(),
            UpdateExecutionStep(),
            *self._custom_steps,
        ]
        return MutationPipeline(self._filter_steps(steps))

    def build_delete_pipeline(self) -> MutationPipeline:
        steps = [
            RegisterBacklinksStep(),
            ValidateDeleteStep(),
            BeforeDeleteStep(),
            DeleteExecutionStep(),
            *self._custom_steps,
        ]
        return MutationPipeline(self._filter_steps(steps))

    def build_pipelines(self) -> dict[str, MutationPipeline]:
        return {
            "create": self.build_create_pipeline(),
            "update": self.build_update_pipeline(),
            "delete": self.build_delete_pipeline(),
        }
