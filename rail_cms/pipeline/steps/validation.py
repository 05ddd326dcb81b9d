"""
Validation pipeline steps.

Required fields are checked first and fail fast; custom validators only run
once every required field has a value.
"""

from ..base import OperationFilteredStep
from ..context import MutationContext
from ..utils import fields_from_object, run_validation_hook, throw_validation_failure


class ValidateInputStep(OperationFilteredStep):
    order = 40
    name = "validate_input"
    allowed_operations = ("create", "update")

    def _is_missing(self, ctx: MutationContext, path: str) -> bool:
        resolved_data = ctx.resolved_data
        if ctx.operation == "create":
            return resolved_data.get(path) is None
        # Updates only fail when the required field is explicitly nulled.
        return path in resolved_data and resolved_data[path] is None

    async def execute(self, ctx: MutationContext) -> MutationContext:
        required_errors = [
            {
                "msg": f'Required field "{field.path}" is null or undefined.',
                "data": {"path": field.path, "operation": ctx.operation},
                "internal_data": {},
            }
            for field in ctx.list.fields
            if field.is_required and not field.is_relationship and self._is_missing(ctx, field.path)
        ]
        if required_errors:
            throw_validation_failure(ctx, required_errors)

        await run_validation_hook(
            ctx,
            ctx.hook_args(),
            fields_from_object(ctx.list, ctx.resolved_data),
            "validate_input",
        )
        return ctx


class ValidateDeleteStep(OperationFilteredStep):
    order = 40
    name = "validate_delete"
    allowed_operations = ("delete",)

    async def execute(self, ctx: MutationContext) -> MutationContext:
        await run_validation_hook(ctx, ctx.hook_args(), ctx.list.fields, "validate_delete")
        return ctx
