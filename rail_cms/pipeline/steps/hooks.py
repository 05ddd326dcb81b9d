"""
Hook pipeline steps: input transforms and before hooks.

Within a phase the built-in field hooks run first, then custom field hooks,
then the list hook. Fields of one phase run concurrently.
"""

from collections.abc import Mapping

from ...core.utils import call_hook, merge_resolved_data, omit_unset
from ..base import OperationFilteredStep
from ..context import MutationContext
from ..utils import map_to_fields, run_side_effect_hook


class ResolveInputStep(OperationFilteredStep):
    """
    Let fields and the list transform the data before validation.

    ``UNSET`` results are dropped at every stage, so a hook returning
    ``UNSET`` for a key leaves it as it was; ``None`` sets it to null.
    """

    order = 30
    name = "resolve_input"
    allowed_operations = ("create", "update")

    async def execute(self, ctx: MutationContext) -> MutationContext:
        lst = ctx.list
        args = ctx.hook_args()

        # Built-in resolvers run for every field, provided or not.
        resolved = omit_unset(
            await map_to_fields(lst.fields, lambda field: field.resolve_input(**args))
        )

        field_hook_results = await map_to_fields(
            [field for field in lst.fields if field.hooks.get("resolve_input")],
            lambda field: call_hook(
                field.hooks["resolve_input"], **{**args, "resolved_data": resolved}
            ),
        )
        resolved = merge_resolved_data(resolved, field_hook_results)

        list_hook = lst.hooks.get("resolve_input")
        if list_hook:
            result = await call_hook(list_hook, **{**args, "resolved_data": resolved})
            if not isinstance(result, Mapping):
                raise TypeError(
                    f"Expected {lst.key}.hooks.resolve_input() to return a mapping, "
                    f"but got a {type(result).__name__}: {result!r}"
                )
            resolved = omit_unset(result)

        ctx.resolved_data = resolved
        return ctx


class BeforeChangeStep(OperationFilteredStep):
    order = 50
    name = "before_change"
    allowed_operations = ("create", "update")

    async def execute(self, ctx: MutationContext) -> MutationContext:
        await run_side_effect_hook(ctx, ctx.hook_args(), ctx.resolved_data, "before_change")
        return ctx


class BeforeDeleteStep(OperationFilteredStep):
    order = 50
    name = "before_delete"
    allowed_operations = ("delete",)

    async def execute(self, ctx: MutationContext) -> MutationContext:
        await run_side_effect_hook(ctx, ctx.hook_args(), ctx.existing_item, "before_delete")
        return ctx
