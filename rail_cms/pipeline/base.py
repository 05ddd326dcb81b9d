"""
Base classes for the mutation pipeline.

Provides MutationStep abstract base class and MutationPipeline orchestrator.
"""

from abc import ABC, abstractmethod
from typing import Callable, List

from .context import MutationContext


class MutationStep(ABC):
    """
    Base class for mutation pipeline steps.

    Each step performs one phase of a single-item mutation: resolving
    defaults, nested relationships, input hooks, validation, before hooks or
    persistence. A failing step raises, which ends the mutation.

    Attributes:
        order: Integer determining step execution order (lower = earlier)
        name: String identifier for debugging and logging

    Example:
        class StampStep(MutationStep):
            order = 55
            name = "stamp"

            async def execute(self, ctx: MutationContext) -> MutationContext:
                ctx.resolved_data["stamped"] = True
                return ctx
    """

    # Step ordering (lower = earlier in pipeline)
    order: int = 100

    # Step identifier for debugging/logging
    name: str = "base"

    @abstractmethod
    async def execute(self, ctx: MutationContext) -> MutationContext:
        """
        Execute this step.

        Args:
            ctx: Current mutation context

        Returns:
            Modified context (can be same instance)
        """

    def should_run(self, ctx: MutationContext) -> bool:
        """Override to conditionally skip steps."""
        return True

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} order={self.order} name={self.name}>"


class MutationPipeline:
    """
    Executes an ordered sequence of mutation steps.

    The pipeline sorts steps by their order attribute and awaits them one
    after another; a step never starts before the previous one has finished.

    Example:
        pipeline = MutationPipeline([
            ResolveInputStep(),
            ValidateInputStep(),
            CreateExecutionStep(),
        ])
        result_ctx = await pipeline.execute(initial_ctx)
    """

    def __init__(self, steps: List[MutationStep]):
        """
        Initialize pipeline with steps.

        Args:
            steps: List of MutationStep instances (will be sorted by order)
        """
        self.steps = sorted(steps, key=lambda s: s.order)

    async def execute(self, ctx: MutationContext) -> MutationContext:
        """
        Execute all steps in order.

        Args:
            ctx: Initial mutation context

        Returns:
            Final mutation context after all steps
        """
        for step in self.steps:
            if step.should_run(ctx):
                ctx = await step.execute(ctx)
        return ctx

    def get_step_names(self) -> List[str]:
        return [s.name for s in self.steps]

    def __repr__(self) -> str:
        step_names = self.get_step_names()
        return f"<MutationPipeline steps={step_names}>"


class ConditionalStep(MutationStep):
    """
    Wraps a step with a custom condition function.

    Example:
        step = ConditionalStep(
            AuditStep(),
            condition=lambda ctx: ctx.list.key == "Post",
        )
    """

    def __init__(
        self,
        step: MutationStep,
        condition: Callable[[MutationContext], bool],
    ):
        self._step = step
        self._condition = condition
        self.order = step.order
        self.name = f"conditional:{step.name}"

    def should_run(self, ctx: MutationContext) -> bool:
        return self._step.should_run(ctx) and self._condition(ctx)

    async def execute(self, ctx: MutationContext) -> MutationContext:
        return await self._step.execute(ctx)


class OperationFilteredStep(MutationStep):
    """
    A step that only runs for specific operations.

    Example:
        class CreateOnlyStep(OperationFilteredStep):
            allowed_operations = ("create",)
            name = "create_only"

            async def execute(self, ctx):
                return ctx
    """

    allowed_operations: tuple = ("create", "update", "delete")

    def should_run(self, ctx: MutationContext) -> bool:
        """Check operation is in allowed list."""
        return super().should_run(ctx) and ctx.operation in self.allowed_operations
