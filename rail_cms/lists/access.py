"""
List access mixin.

Request-time enforcement of the parsed access tables: list-level checks,
aggregated field-level checks and item lookups under a declarative
identity filter (``id``, ``id_not``, ``id_in``, ``id_not_in``).
"""

import asyncio
import logging
from typing import Any, Iterable, Optional

from ..access import is_rule_enabled
from ..core.exceptions import throw_access_denied
from ..core.utils import intersection, omit, unique

logger = logging.getLogger(__name__)

OPERATION_TYPES = {
    "read": "query",
    "create": "mutation",
    "update": "mutation",
    "delete": "mutation",
    "auth": "mutation",
}

IDENTITY_FILTER_KEYS = ("id", "id_not", "id_in", "id_not_in")


def _ids(*values: Any) -> list[str]:
    """Flatten single ids and id lists into unique strings, dropping empties."""
    flat: list[Any] = []
    for value in values:
        if isinstance(value, (list, tuple, set)):
            flat.extend(value)
        else:
            flat.append(value)
    return unique(str(value) for value in flat if value)


def is_id_excluded(item_id: Any, access: Any) -> bool:
    """Whether a declarative identity filter rules ``item_id`` out."""
    if not isinstance(access, dict):
        return False
    item_id = str(item_id)
    if access.get("id") and str(access["id"]) != item_id:
        return True
    if access.get("id_not") and str(access["id_not"]) == item_id:
        return True
    if access.get("id_in") is not None and item_id not in _ids(access["id_in"]):
        return True
    if access.get("id_not_in") and item_id in _ids(access["id_not_in"]):
        return True
    return False


class ListAccessMixin:
    """Access checks of a List."""

    def can(self, schema_name: str, operation: str) -> bool:
        """Whether ``operation`` is not statically denied in ``schema_name``."""
        return is_rule_enabled(self.access[schema_name][operation])

    def has_any_access(self, schema_name: str) -> bool:
        return any(is_rule_enabled(rule) for rule in self.access[schema_name].values())

    async def check_list_access(
        self,
        context: Any,
        original_input: Any,
        operation: str,
        *,
        gql_name: Optional[str] = None,
        item_id: Any = None,
        item_ids: Any = None,
    ) -> Any:
        """
        Evaluate the list rule for the acting user.

        Returns ``True`` or a declarative filter; raises AccessDeniedError
        when the rule evaluates to ``False``.
        """
        access = await context.get_list_access_control_for_user(
            self.key,
            original_input,
            operation,
            gql_name=gql_name,
            item_id=item_id,
            item_ids=item_ids,
        )
        if access is False:
            extra_internal_data = {}
            if item_id is not None:
                extra_internal_data["itemId"] = item_id
            if item_ids is not None:
                extra_internal_data["itemIds"] = item_ids
            logger.debug(
                "Access statically or implicitly denied",
                extra={
                    "list_key": self.key,
                    "operation": operation,
                    "access": access,
                    "gql_name": gql_name,
                    **extra_internal_data,
                },
            )
            logger.info(
                "Access Denied",
                extra={"list_key": self.key, "operation": operation, "gql_name": gql_name},
            )
            throw_access_denied(OPERATION_TYPES[operation], context, gql_name, extra_internal_data)
        return access

    async def check_field_access(
        self,
        operation: str,
        items_to_update: Iterable[dict[str, Any]],
        context: Any,
        *,
        gql_name: Optional[str] = None,
        extra_data: Optional[dict[str, Any]] = None,
    ) -> None:
        """
        Check field access for every field present in every item's data.

        Each entry of ``items_to_update`` holds ``existing_item`` and ``data``.
        Every restricted path of every item is collected before a single
        AccessDeniedError is raised.
        """
        checks = []
        for entry in items_to_update:
            data = entry.get("data") or {}
            existing_item = entry.get("existing_item")
            for field in self.fields:
                if field.path not in data:
                    continue
                checks.append(
                    (
                        field.path,
                        context.get_field_access_control_for_user(
                            self.key,
                            field.path,
                            data,
                            existing_item,
                            operation,
                            gql_name=gql_name,
                        ),
                    )
                )

        results = await asyncio.gather(*(check for _, check in checks))
        restricted_fields = [path for (path, _), allowed in zip(checks, results) if not allowed]
        if restricted_fields:
            logger.info(
                "Access Denied",
                extra={
                    "list_key": self.key,
                    "operation": operation,
                    "gql_name": gql_name,
                    "restricted_fields": restricted_fields,
                },
            )
            throw_access_denied(
                OPERATION_TYPES[operation],
                context,
                gql_name,
                extra_data,
                {"restrictedFields": restricted_fields},
            )

    async def get_access_controlled_item(
        self,
        item_id: Any,
        access: Any,
        *,
        context: Any,
        operation: str,
        gql_name: Optional[str] = None,
        info: Any = None,
    ) -> dict[str, Any]:
        """
        Load one item under the access filter.

        A missing item is reported as access denied so a caller cannot tell
        an item it may not see from one that does not exist.
        """

        def deny(reason: str) -> None:
            logger.debug(
                reason,
                extra={
                    "list_key": self.key,
                    "item_id": item_id,
                    "operation": operation,
                    "access": access,
                    "gql_name": gql_name,
                },
            )
            logger.info(
                "Access Denied",
                extra={"list_key": self.key, "item_id": item_id, "operation": operation, "gql_name": gql_name},
            )
            throw_access_denied(OPERATION_TYPES[operation], context, gql_name, {"itemId": item_id})

        if is_id_excluded(item_id, access):
            deny("Item excluded this id from filters")

        where = {**access, "id": str(item_id)} if isinstance(access, dict) else {"id": str(item_id)}
        items = await self._items_query({"first": 1, "where": where}, context=context, info=info)
        if not items:
            deny("Zero items found")
        return items[0]

    async def get_access_controlled_items(
        self,
        ids: Iterable[Any],
        access: Any,
        *,
        context: Any = None,
        info: Any = None,
    ) -> list[dict[str, Any]]:
        """
        Load several items under the access filter.

        Ids outside the filter are silently left out. When the filter cannot
        match any requested id no query is issued and ``[]`` is returned.
        """
        unique_ids = _ids(list(ids))
        if not unique_ids:
            return []

        if not isinstance(access, dict):
            return await self._items_query({"where": {"id_in": unique_ids}}, context=context, info=info)

        id_filters: dict[str, list[str]] = {}
        if access.get("id") or access.get("id_in") is not None:
            allowed = _ids(access.get("id"), access.get("id_in") or [])
            id_filters["id_in"] = intersection(allowed, unique_ids)
        else:
            id_filters["id_in"] = unique_ids

        if access.get("id_not") or access.get("id_not_in"):
            disallowed = _ids(access.get("id_not"), access.get("id_not_in") or [])
            id_filters["id_not_in"] = intersection(disallowed, unique_ids)

        if not id_filters["id_in"] or len(id_filters.get("id_not_in", [])) == len(unique_ids):
            return []

        remaining_access = omit(access, IDENTITY_FILTER_KEYS)
        return await self._items_query(
            {"where": {**remaining_access, **id_filters}}, context=context, info=info
        )
