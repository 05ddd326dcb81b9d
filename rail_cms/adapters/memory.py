"""
In-memory storage adapter.

Items live in a per-list dictionary keyed by sequential string ids. Filters
are evaluated in Python from the conditions each field adapter exposes, so
the adapter supports the same ``where`` inputs the schema emits.
"""

import logging
from typing import Any, Optional

from .base import BaseAdapter, BaseFieldAdapter, BaseListAdapter, Item, QueryCondition

logger = logging.getLogger(__name__)


def _sort_key(value: Any) -> tuple[bool, Any]:
    return (value is None, value)


class MemoryListAdapter(BaseListAdapter):
    def __init__(self, key: str, parent_adapter: BaseAdapter, config: dict[str, Any]):
        super().__init__(key, parent_adapter, config)
        self._items: dict[str, Item] = {}
        self._next_id = 1
        self._conditions: Optional[dict[str, QueryCondition]] = None

    def _generate_id(self) -> str:
        item_id = str(self._next_id)
        self._next_id += 1
        return item_id

    @property
    def conditions(self) -> dict[str, QueryCondition]:
        if self._conditions is None:
            conditions: dict[str, QueryCondition] = {}
            for field_adapter in self.field_adapters:
                conditions.update(field_adapter.get_query_conditions())
            self._conditions = conditions
        return self._conditions

    def find_by_id(self, item_id: Any) -> Optional[Item]:
        if item_id is None:
            return None
        return self._items.get(str(item_id))

    def matches(self, item: Item, where: Optional[dict[str, Any]]) -> bool:
        for key, value in (where or {}).items():
            if key == "AND":
                if not all(self.matches(item, clause) for clause in value or []):
                    return False
                continue
            if key == "OR":
                if not any(self.matches(item, clause) for clause in value or []):
                    return False
                continue
            condition = self.conditions.get(key)
            if condition is None:
                raise ValueError(f"Unsupported filter '{key}' on list {self.key}")
            if not condition(value)(item):
                return False
        return True

    def _matches_search(self, item: Item, search: str) -> bool:
        needle = search.lower()
        for field_adapter in self.field_adapters:
            if not field_adapter.searchable:
                continue
            value = item.get(field_adapter.path)
            if isinstance(value, str) and needle in value.lower():
                return True
        return False

    async def items_query(
        self,
        args: dict[str, Any],
        *,
        meta: bool = False,
        context: Any = None,
        info: Any = None,
    ) -> Any:
        items = [item for item in self._items.values() if self.matches(item, args.get("where"))]

        search = args.get("search")
        if search:
            items = [item for item in items if self._matches_search(item, search)]

        order_by = args.get("order_by")
        if order_by:
            path, _, direction = order_by.rpartition("_")
            items.sort(
                key=lambda item: _sort_key(item.get(path)),
                reverse=direction.upper() == "DESC",
            )

        skip = args.get("skip") or 0
        if skip:
            items = items[int(skip):]
        first = args.get("first")
        if first is not None and first != float("inf"):
            items = items[: int(first)]

        if meta:
            return {"count": len(items)}
        return [dict(item) for item in items]

    async def create(self, data: dict[str, Any]) -> Item:
        item_id = data.get("id") or self._generate_id()
        item = {**data, "id": str(item_id)}
        self._items[item["id"]] = item
        logger.debug("Created item", extra={"list_key": self.key, "item_id": item["id"]})
        return dict(item)

    async def update(self, item_id: Any, data: dict[str, Any]) -> Item:
        item = self._items[str(item_id)]
        item.update({key: value for key, value in data.items() if key != "id"})
        return dict(item)

    async def delete(self, item_id: Any) -> Optional[Item]:
        return self._items.pop(str(item_id), None)


class MemoryAdapter(BaseAdapter):
    name = "memory"
    list_adapter_class = MemoryListAdapter

    def get_default_primary_key_config(self) -> dict[str, Any]:
        from ..fields import AutoIncrement

        return {"type": AutoIncrement}


# --------------------------------------------------------------------------- #
# Field adapters
# --------------------------------------------------------------------------- #
class MemoryFieldAdapter(BaseFieldAdapter):
    """Equality and membership filters."""

    def _value(self, item: Item) -> Any:
        return item.get(self.path)

    def equality_conditions(self) -> dict[str, QueryCondition]:
        path = self.path
        return {
            path: lambda value: lambda item: self._value(item) == value,
            f"{path}_not": lambda value: lambda item: self._value(item) != value,
        }

    def in_conditions(self) -> dict[str, QueryCondition]:
        path = self.path
        return {
            f"{path}_in": lambda values: lambda item: self._value(item) in (values or []),
            f"{path}_not_in": lambda values: lambda item: self._value(item) not in (values or []),
        }

    def get_query_conditions(self) -> dict[str, QueryCondition]:
        return {**self.equality_conditions(), **self.in_conditions()}


class MemoryCheckboxFieldAdapter(MemoryFieldAdapter):
    def get_query_conditions(self) -> dict[str, QueryCondition]:
        return self.equality_conditions()


class MemoryOrderedFieldAdapter(MemoryFieldAdapter):
    """Numbers: equality, membership and range filters."""

    def _compare(self, operator: str) -> QueryCondition:
        def build(value: Any):
            def predicate(item: Item) -> bool:
                current = self._value(item)
                if current is None or value is None:
                    return False
                if operator == "lt":
                    return current < value
                if operator == "lte":
                    return current <= value
                if operator == "gt":
                    return current > value
                return current >= value

            return predicate

        return build

    def get_query_conditions(self) -> dict[str, QueryCondition]:
        conditions = super().get_query_conditions()
        for operator in ("lt", "lte", "gt", "gte"):
            conditions[f"{self.path}_{operator}"] = self._compare(operator)
        return conditions


class MemoryTextFieldAdapter(MemoryFieldAdapter):
    searchable = True

    def _text(self, item: Item) -> str:
        value = self._value(item)
        return value if isinstance(value, str) else ""

    def get_query_conditions(self) -> dict[str, QueryCondition]:
        path = self.path
        return {
            **super().get_query_conditions(),
            f"{path}_contains": lambda value: lambda item: value in self._text(item),
            f"{path}_not_contains": lambda value: lambda item: value not in self._text(item),
            f"{path}_starts_with": lambda value: lambda item: self._text(item).startswith(value),
            f"{path}_ends_with": lambda value: lambda item: self._text(item).endswith(value),
        }


class MemoryIdFieldAdapter(MemoryFieldAdapter):
    """Identity filters: ``id``, ``id_not``, ``id_in``, ``id_not_in``."""

    def _value(self, item: Item) -> Any:
        value = item.get(self.path)
        return None if value is None else str(value)

    def get_query_conditions(self) -> dict[str, QueryCondition]:
        path = self.path
        return {
            path: lambda value: lambda item: self._value(item) == str(value),
            f"{path}_not": lambda value: lambda item: self._value(item) != str(value),
            f"{path}_in": lambda values: lambda item: self._value(item)
            in {str(value) for value in values or []},
            f"{path}_not_in": lambda values: lambda item: self._value(item)
            not in {str(value) for value in values or []},
        }


class MemoryRelationshipFieldAdapter(BaseFieldAdapter):
    """Filters on related items, evaluated against the referenced list's store."""

    @property
    def ref_list_adapter(self) -> MemoryListAdapter:
        return self.get_list_by_key(self.field.ref_list_key).adapter

    def _related_matches(self, item_id: Any, where: Optional[dict[str, Any]]) -> bool:
        related = self.ref_list_adapter.find_by_id(item_id)
        return related is not None and self.ref_list_adapter.matches(related, where)

    def get_query_conditions(self) -> dict[str, QueryCondition]:
        path = self.path
        if self.field.many:
            def ids(item: Item) -> list[Any]:
                return list(item.get(path) or [])

            return {
                f"{path}_every": lambda where: lambda item: all(
                    self._related_matches(item_id, where) for item_id in ids(item)
                ),
                f"{path}_some": lambda where: lambda item: any(
                    self._related_matches(item_id, where) for item_id in ids(item)
                ),
                f"{path}_none": lambda where: lambda item: not any(
                    self._related_matches(item_id, where) for item_id in ids(item)
                ),
            }
        return {
            path: lambda where: lambda item: self._related_matches(item.get(path), where),
            f"{path}_is_null": lambda is_null: lambda item: (item.get(path) is None) == bool(is_null),
        }
