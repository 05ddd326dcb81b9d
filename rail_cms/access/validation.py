"""
Request-time evaluation of parsed access rules.

Static rules are returned as is; callables are invoked (sync or async) with
keyword arguments describing the request. List rules resolve to a boolean or
a declarative filter mapping, field rules to a boolean.
"""

from typing import Any, Mapping, Optional

from ..core.utils import call_hook
from .parsing import describe_type


def _authentication_or_empty(authentication: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    authentication = authentication or {}
    return dict(authentication) if authentication.get("item") else {}


async def validate_list_access_control(
    *,
    access: Mapping[str, Any],
    list_key: str,
    operation: str,
    authentication: Optional[Mapping[str, Any]] = None,
    original_input: Any = None,
    gql_name: Optional[str] = None,
    item_id: Any = None,
    item_ids: Any = None,
    context: Any = None,
) -> Any:
    rule = access[operation]
    if callable(rule):
        result = await call_hook(
            rule,
            authentication=_authentication_or_empty(authentication),
            list_key=list_key,
            operation=operation,
            original_input=original_input,
            gql_name=gql_name,
            item_id=item_id,
            item_ids=item_ids,
            context=context,
        )
    else:
        result = rule

    kind = describe_type(result)
    if kind not in ("Object", "Boolean"):
        raise TypeError(
            "Must return an Object or Boolean from Imperative or Declarative "
            f"access control function. Got {kind}"
        )
    if operation == "create" and kind == "Object":
        raise TypeError(
            f"Expected a Boolean for {list_key}.access.create(), but got Object. "
            "(NOTE: 'create' cannot have a Declarative access control config)"
        )
    return result


async def validate_field_access_control(
    *,
    access: Mapping[str, Any],
    list_key: str,
    field_key: str,
    operation: str,
    authentication: Optional[Mapping[str, Any]] = None,
    original_input: Any = None,
    existing_item: Any = None,
    gql_name: Optional[str] = None,
    item_id: Any = None,
    item_ids: Any = None,
    context: Any = None,
) -> bool:
    rule = access[operation]
    if callable(rule):
        result = await call_hook(
            rule,
            authentication=_authentication_or_empty(authentication),
            list_key=list_key,
            field_key=field_key,
            original_input=original_input,
            existing_item=existing_item,
            operation=operation,
            gql_name=gql_name,
            item_id=item_id,
            item_ids=item_ids,
            context=context,
        )
    else:
        result = rule

    if not isinstance(result, bool):
        raise TypeError(
            "Must return a Boolean from Imperative access control function. "
            f"Got {describe_type(result)}"
        )
    return result


async def validate_auth_access_control(
    *,
    access: Mapping[str, Any],
    list_key: str,
    authentication: Optional[Mapping[str, Any]] = None,
    gql_name: Optional[str] = None,
    context: Any = None,
) -> Any:
    operation = "auth"
    rule = access[operation]
    if callable(rule):
        result = await call_hook(
            rule,
            authentication=_authentication_or_empty(authentication),
            list_key=list_key,
            operation=operation,
            gql_name=gql_name,
            context=context,
        )
    else:
        result = rule

    kind = describe_type(result)
    if kind not in ("Object", "Boolean"):
        raise TypeError(
            "Must return an Object or Boolean from Imperative or Declarative "
            f"access control function. Got {kind}"
        )
    return result
