"""
List query mixin.

Reads go through ``_items_query``, which enforces the list's ``max_results``
limit, the request-wide ``max_total_results`` ceiling and cache hints. It
does not check access; the public query methods do that first.
"""

import logging
import math
from collections.abc import Mapping
from typing import Any, Optional

from ..core.exceptions import LimitsExceededError
from ..core.utils import call_hook, merge_where_clause
from .access import OPERATION_TYPES

logger = logging.getLogger(__name__)


def _operation_name(info: Any) -> Optional[str]:
    operation = getattr(info, "operation", None)
    name = getattr(operation, "name", None)
    return getattr(name, "value", None)


class ListQueryMixin:
    """Read operations of a List."""

    def _throw_limits_exceeded(self, limit_type: str, limit: Any) -> None:
        raise LimitsExceededError(data={"list": self.key, "type": limit_type, "limit": limit})

    async def _items_query(
        self,
        args: dict[str, Any],
        *,
        meta: bool = False,
        context: Any = None,
        info: Any = None,
    ) -> Any:
        max_results = self.query_limits["max_results"]
        args = dict(args)

        first = args.get("first")
        if first is None:
            first = math.inf
        # An explicit ``first`` above the limit fails before querying.
        if first < math.inf and first > max_results:
            self._throw_limits_exceeded("maxResults", max_results)

        if not meta:
            # One extra row detects a query without ``first`` that would
            # return more than the limit. Counts stay exact.
            results_limit = min(max_results + 1, first)
            if results_limit < math.inf:
                args["first"] = results_limit

        results = await self.adapter.items_query(args, meta=meta, context=context, info=info)

        if not meta:
            if len(results) > max_results:
                self._throw_limits_exceeded("maxResults", max_results)
            if context is not None:
                context.total_results += len(results)
                if context.total_results > context.max_total_results:
                    self._throw_limits_exceeded("maxTotalResults", context.max_total_results)

        if context is not None and self.cache_hint is not None:
            if isinstance(self.cache_hint, Mapping) or not callable(self.cache_hint):
                context.cache_control.set_cache_hint(self.cache_hint)
            else:
                hint = await call_hook(
                    self.cache_hint,
                    results=results,
                    operation_name=_operation_name(info),
                    meta=meta,
                )
                context.cache_control.set_cache_hint(hint)

        return results

    async def list_query(
        self,
        args: dict[str, Any],
        context: Any,
        *,
        gql_name: Optional[str] = None,
        info: Any = None,
    ) -> list[dict[str, Any]]:
        access = await self.check_list_access(context, None, "read", gql_name=gql_name)
        return await self._items_query(merge_where_clause(args, access), context=context, info=info)

    async def list_query_meta(
        self,
        args: dict[str, Any],
        context: Any,
        *,
        gql_name: Optional[str] = None,
        info: Any = None,
    ) -> dict[str, Any]:
        """Meta result whose count is only computed when requested."""

        async def get_count() -> int:
            access = await self.check_list_access(context, None, "read", gql_name=gql_name)
            result = await self._items_query(
                merge_where_clause(args, access), meta=True, context=context, info=info
            )
            return result["count"]

        return {"get_count": get_count}

    def list_meta(self, context: Any) -> dict[str, Any]:
        """
        Metadata about the list itself.

        Access getters may return a boolean or a declarative filter and are
        only evaluated when the field is selected.
        """

        def access_getter(operation: str):
            return lambda: context.get_list_access_control_for_user(self.key, None, operation)

        def get_access() -> dict[str, Any]:
            return {
                "get_create": access_getter("create"),
                "get_read": access_getter("read"),
                "get_update": access_getter("update"),
                "get_delete": access_getter("delete"),
                "get_auth": lambda: context.get_auth_access_control_for_user(self.key),
            }

        def get_schema() -> dict[str, Any]:
            return {
                "type": self.gql_names.output_type_name,
                "queries": [
                    self.gql_names.item_query_name,
                    self.gql_names.list_query_name,
                    self.gql_names.list_query_meta_name,
                ],
                "key": self.key,
            }

        return {"name": self.key, "get_access": get_access, "get_schema": get_schema}

    async def item_query(
        self,
        args: dict[str, Any],
        context: Any,
        *,
        gql_name: Optional[str] = None,
        info: Any = None,
    ) -> dict[str, Any]:
        item_id = (args.get("where") or {}).get("id")
        operation = "read"
        log_extra = {
            "list_key": self.key,
            "item_id": item_id,
            "operation": operation,
            "type": OPERATION_TYPES[operation],
            "gql_name": gql_name,
        }
        logger.debug("Start query", extra=log_extra)

        access = await self.check_list_access(
            context, None, operation, gql_name=gql_name, item_id=item_id
        )
        result = await self.get_access_controlled_item(
            item_id, access, context=context, operation=operation, gql_name=gql_name, info=info
        )

        logger.debug("End query", extra=log_extra)
        return result

    def get_graphql_filter_fragment(self) -> list[str]:
        return [
            f"where: {self.gql_names.where_input_name}",
            "search: String",
            "orderBy: String",
            "first: Int",
            "skip: Int",
        ]
