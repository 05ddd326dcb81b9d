"""
Default value pipeline step.
"""

from ...core.utils import UNSET, omit_unset
from ..base import OperationFilteredStep
from ..context import MutationContext
from ..utils import map_to_fields


class ResolveDefaultsStep(OperationFilteredStep):
    """
    Fill in default values for fields absent from the create input.

    An explicit ``None`` in the input is a value, so it is never replaced by
    a default.
    """

    order = 10
    name = "resolve_defaults"
    allowed_operations = ("create",)

    async def execute(self, ctx: MutationContext) -> MutationContext:
        original_input = ctx.original_input
        missing = [
            field
            for field in ctx.list.fields
            if original_input.get(field.path, UNSET) is UNSET
        ]
        defaults = await map_to_fields(
            missing,
            lambda field: field.get_default_value(
                existing_item=ctx.existing_item,
                context=ctx.context,
                original_input=original_input,
                actions=ctx.actions,
            ),
        )
        ctx.resolved_data = {**omit_unset(defaults), **omit_unset(original_input)}
        return ctx
