"""
Helpers shared by pipeline steps.
"""

from typing import Any, Awaitable, Callable, Iterable, Mapping

from ..core.exceptions import ValidationFailureError
from ..core.utils import call_hook, resolve_all_keys
from .context import MutationContext


async def map_to_fields(fields: Iterable[Any], action: Callable[[Any], Awaitable[Any]]) -> dict[str, Any]:
    """Run ``action`` for every field concurrently, keyed by field path."""
    return await resolve_all_keys({field.path: action(field) for field in fields})


def fields_from_object(lst: Any, obj: Mapping[str, Any]) -> list[Any]:
    """Fields of ``lst`` whose path is a key of ``obj``."""
    return [lst.fields_by_path[path] for path in obj if path in lst.fields_by_path]


def throw_validation_failure(
    ctx: MutationContext, errors: list[dict[str, Any]]
) -> None:
    raise ValidationFailureError(
        data={
            "messages": [error["msg"] for error in errors],
            "errors": [error["data"] for error in errors],
            "listKey": ctx.list.key,
            "operation": ctx.operation,
        },
        internal_data={
            "errors": [error["internal_data"] for error in errors],
            "data": ctx.original_input,
        },
    )


def _error_collector(errors: list[dict[str, Any]], path: Any = None) -> Callable[..., None]:
    def add_error(msg: str, data: Any = None, internal_data: Any = None) -> None:
        error_data = dict(data or {})
        if path is not None:
            error_data.setdefault("path", path)
        errors.append({"msg": msg, "data": error_data, "internal_data": dict(internal_data or {})})

    return add_error


async def run_validation_hook(
    ctx: MutationContext, args: dict[str, Any], fields: list[Any], hook_name: str
) -> None:
    """
    Run field validators, then the list validator.

    Field-level errors are collected across every field and raised together;
    list-level errors are only collected when every field passed.
    """
    field_errors: list[dict[str, Any]] = []
    await map_to_fields(
        fields,
        lambda field: getattr(field, hook_name)(
            **args, add_field_validation_error=_error_collector(field_errors, field.path)
        ),
    )
    await map_to_fields(
        [field for field in fields if field.hooks.get(hook_name)],
        lambda field: call_hook(
            field.hooks[hook_name],
            **args,
            add_field_validation_error=_error_collector(field_errors, field.path),
        ),
    )
    if field_errors:
        throw_validation_failure(ctx, field_errors)

    list_hook = ctx.list.hooks.get(hook_name)
    if list_hook:
        list_errors: list[dict[str, Any]] = []
        await call_hook(list_hook, **args, add_validation_error=_error_collector(list_errors))
        if list_errors:
            throw_validation_failure(ctx, list_errors)


async def run_side_effect_hook(
    ctx: MutationContext, args: dict[str, Any], field_object: Mapping[str, Any], hook_name: str
) -> None:
    """Run a hook that only produces side effects: built-in, field, then list."""
    fields = fields_from_object(ctx.list, field_object)
    await map_to_fields(fields, lambda field: getattr(field, hook_name)(**args))
    await map_to_fields(
        [field for field in fields if field.hooks.get(hook_name)],
        lambda field: call_hook(field.hooks[hook_name], **args),
    )
    list_hook = ctx.list.hooks.get(hook_name)
    if list_hook:
        await call_hook(list_hook, **args)
