"""
Construction-time parsing of declarative ``access`` config.

List and field access may be given as a shorthand (``True``/``False`` or a
callable), as a per-operation mapping, or as a mapping keyed by schema name.
The result is always a complete ``{schema_name: {operation: rule}}`` table
whose per-schema tables are read-only.
"""

from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, Optional

from ..core.exceptions import ListConfigurationError

LIST_ACCESS_TYPES = ("create", "read", "update", "delete", "auth")
FIELD_ACCESS_TYPES = ("create", "read", "update")


def describe_type(value: Any) -> str:
    if isinstance(value, bool):
        return "Boolean"
    if callable(value):
        return "Function"
    if isinstance(value, dict):
        return "Object"
    if value is None:
        return "None"
    return type(value).__name__


def is_rule_enabled(rule: Any) -> bool:
    """
    Whether an operation is exposed at all.

    Callables and declarative filters are resolved per request, so only a
    static ``False`` disables the operation.
    """
    return rule is True or callable(rule) or isinstance(rule, dict)


def _parse_access_core(
    *,
    access_types: tuple[str, ...],
    access: Any,
    default_access: Any,
    on_granular_parse_error: Callable[[], None],
    validate_granular_type: Callable[[str, str], Optional[str]],
) -> dict[str, Any]:
    access_kind = describe_type(access)
    if access_kind in ("Boolean", "Function"):
        return {access_type: access for access_type in access_types}

    if access_kind == "Object":
        if any(key not in access_types for key in access):
            on_granular_parse_error()
        errors = [
            error
            for error in (
                validate_granular_type(describe_type(rule), access_type)
                for access_type, rule in access.items()
            )
            if error
        ]
        if errors:
            raise ListConfigurationError("\n".join(errors))
        return {
            access_type: access[access_type] if access_type in access else default_access
            for access_type in access_types
        }

    raise ListConfigurationError(
        "Shorthand access must be specified as either a boolean or a function, "
        f"received {access_kind}."
    )


def _parse_per_schema(
    *,
    schema_names: Iterable[str],
    access: Any,
    parse_and_validate: Callable[[Any], dict[str, Any]],
    default_access: Any,
) -> dict[str, Mapping[str, Any]]:
    schema_names = list(schema_names)
    if isinstance(access, dict):
        schema_keys = [key for key in access if key in schema_names]
        if len(schema_keys) == len(access):
            return {
                schema_name: MappingProxyType(
                    parse_and_validate(access[schema_name])
                    if schema_name in access
                    else parse_and_validate(default_access)
                )
                for schema_name in schema_names
            }
        if schema_keys:
            invalid = [key for key in access if key not in schema_names]
            raise ListConfigurationError(
                f"Invalid schema names: {', '.join(invalid)}. "
                f"Expected a subset of: {', '.join(schema_names)}"
            )

    parsed = parse_and_validate(access)
    return {schema_name: MappingProxyType(dict(parsed)) for schema_name in schema_names}


def parse_list_access(
    *,
    list_key: str,
    access: Any = None,
    default_access: Any = True,
    schema_names: Iterable[str] = ("public",),
) -> dict[str, Mapping[str, Any]]:
    """
    Build the per-schema ``{create, read, update, delete, auth}`` table.

    Declarative (mapping) rules are accepted for every operation except
    ``create``, which cannot be expressed as an item filter.
    """
    if access is None:
        access = default_access

    def on_granular_parse_error() -> None:
        raise ListConfigurationError(
            f"Must specify only these keys for {list_key}.access: "
            f"{', '.join(LIST_ACCESS_TYPES)}. A declarative filter cannot be "
            "used as a shorthand access config.",
            list_key=list_key,
        )

    def validate_granular_type(kind: str, access_type: str) -> Optional[str]:
        if access_type == "create":
            if kind not in ("Boolean", "Function"):
                return (
                    f"Expected a Boolean or Function for {list_key}.access.create, "
                    f"but got {kind}. (NOTE: 'create' cannot have a Declarative "
                    "access control config)"
                )
        elif kind not in ("Object", "Boolean", "Function"):
            return (
                f"Expected a Boolean, Object, or Function for "
                f"{list_key}.access.{access_type}, but got {kind}"
            )
        return None

    def parse_and_validate(value: Any) -> dict[str, Any]:
        return _parse_access_core(
            access_types=LIST_ACCESS_TYPES,
            access=value,
            default_access=default_access,
            on_granular_parse_error=on_granular_parse_error,
            validate_granular_type=validate_granular_type,
        )

    return _parse_per_schema(
        schema_names=schema_names,
        access=access,
        parse_and_validate=parse_and_validate,
        default_access=default_access,
    )


def parse_field_access(
    *,
    list_key: str,
    field_path: str,
    access: Any = None,
    default_access: Any = True,
    schema_names: Iterable[str] = ("public",),
) -> dict[str, Mapping[str, Any]]:
    """Build the per-schema ``{create, read, update}`` table of a field."""
    if access is None:
        access = default_access

    def on_granular_parse_error() -> None:
        raise ListConfigurationError(
            f"Must specify only these keys for {list_key}.{field_path}.access: "
            f"{', '.join(FIELD_ACCESS_TYPES)}",
            list_key=list_key,
        )

    def validate_granular_type(kind: str, access_type: str) -> Optional[str]:
        if kind not in ("Boolean", "Function"):
            return (
                f"Expected a Boolean or Function for "
                f"{list_key}.{field_path}.access.{access_type}, but got {kind}"
            )
        return None

    def parse_and_validate(value: Any) -> dict[str, Any]:
        return _parse_access_core(
            access_types=FIELD_ACCESS_TYPES,
            access=value,
            default_access=default_access,
            on_granular_parse_error=on_granular_parse_error,
            validate_granular_type=validate_granular_type,
        )

    return _parse_per_schema(
        schema_names=schema_names,
        access=access,
        parse_and_validate=parse_and_validate,
        default_access=default_access,
    )
