"""
Execution pipeline steps.

Handles the actual create, update, and delete operations and prepares the
after hook the mutation queues on the shared mutation state.
"""

from ..base import OperationFilteredStep
from ..context import MutationContext
from ..utils import run_side_effect_hook


class CreateExecutionStep(OperationFilteredStep):
    """
    Persist a new item.

    The ``created`` deferred is settled right after the adapter call returns
    or raises, before this step yields, so nested relationship work waiting
    on it observes the outcome before the mutation moves on.
    """

    order = 60
    name = "create_execution"
    allowed_operations = ("create",)

    async def execute(self, ctx: MutationContext) -> MutationContext:
        try:
            new_item = await ctx.list.adapter.create(ctx.resolved_data)
        except Exception as exc:
            if ctx.created is not None:
                ctx.created.reject(exc)
            raise
        if ctx.created is not None:
            ctx.created.resolve(new_item)

        ctx.result = new_item
        args = ctx.hook_args(updated_item=new_item)
        ctx.after_hook = lambda: run_side_effect_hook(ctx, args, new_item, "after_change")
        return ctx


class UpdateExecutionStep(OperationFilteredStep):
    order = 60
    name = "update_execution"
    allowed_operations = ("update",)

    async def execute(self, ctx: MutationContext) -> MutationContext:
        new_item = await ctx.list.adapter.update(ctx.item_id, ctx.resolved_data)

        ctx.result = new_item
        args = ctx.hook_args(updated_item=new_item)
        ctx.after_hook = lambda: run_side_effect_hook(ctx, args, new_item, "after_change")
        return ctx


class DeleteExecutionStep(OperationFilteredStep):
    order = 60
    name = "delete_execution"
    allowed_operations = ("delete",)

    async def execute(self, ctx: MutationContext) -> MutationContext:
        existing_item = ctx.existing_item
        await ctx.list.adapter.delete(existing_item["id"])

        ctx.result = existing_item
        args = ctx.hook_args()
        ctx.after_hook = lambda: run_side_effect_hook(ctx, args, existing_item, "after_delete")
        return ctx
