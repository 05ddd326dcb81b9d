"""
Relationship pipeline steps.

Nested relationship input is turned into stored ids before any hook sees the
data; deletes stage the cleanup of the other side of two-sided links.
"""

from typing import Any

from ..base import OperationFilteredStep
from ..context import MutationContext
from ..utils import fields_from_object, map_to_fields


def apply_nested_operations(field: Any, operations: dict[str, Any]) -> Any:
    """
    Compute the new stored value of a relationship field.

    The order is fixed: disconnect all, disconnect, create, connect. To-many
    values keep the current ids minus the disconnected ones, then append the
    connected and created ids. To-one values take the created item, else the
    connected one, else ``None`` when disconnected, else the current value.
    """
    create = operations["create"]
    connect = operations["connect"]
    disconnect = operations["disconnect"]
    current_value = operations["current_value"]
    if field.many:
        kept = [item_id for item_id in current_value or [] if item_id not in disconnect]
        return [item_id for item_id in [*kept, *connect, *create] if item_id]
    if create:
        return create[0]
    if connect:
        return connect[0]
    if disconnect:
        return None
    return current_value


class ResolveRelationshipsStep(OperationFilteredStep):
    order = 20
    name = "resolve_relationships"
    allowed_operations = ("create", "update")

    async def execute(self, ctx: MutationContext) -> MutationContext:
        data = ctx.resolved_data if ctx.operation == "create" else ctx.original_input
        fields = [field for field in fields_from_object(ctx.list, data) if field.is_relationship]

        async def resolve(field: Any) -> Any:
            operations = await field.resolve_nested_operations(
                data[field.path],
                ctx.existing_item,
                ctx.context,
                ctx.created,
                ctx.mutation_state,
            )
            return apply_nested_operations(field, operations)

        resolved_relationships = await map_to_fields(fields, resolve)
        ctx.resolved_data = {**data, **resolved_relationships}
        return ctx


class RegisterBacklinksStep(OperationFilteredStep):
    order = 20
    name = "register_backlinks"
    allowed_operations = ("delete",)

    async def execute(self, ctx: MutationContext) -> MutationContext:
        existing_item = ctx.existing_item
        await map_to_fields(
            [field for field in ctx.list.fields if field.is_relationship],
            lambda field: field.register_backlink(
                existing_item.get(field.path), existing_item, ctx.mutation_state
            ),
        )
        return ctx
