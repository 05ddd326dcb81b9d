"""
Storage adapter contract used by the list engine.

An adapter owns one list adapter per list; each list adapter owns one field
adapter per field. The engine only talks to list adapters through
``items_query``, ``create``, ``update`` and ``delete``.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

Item = dict[str, Any]
QueryCondition = Callable[[Any], Callable[[Item], bool]]


class BaseAdapter(ABC):
    """
    Entry point of a storage backend.

    Subclasses set ``name`` (matched against the ``adapters`` table of every
    field type) and ``list_adapter_class``. Backends able to generate primary
    keys also implement ``get_default_primary_key_config()``.
    """

    name: str = "base"
    list_adapter_class: type["BaseListAdapter"]

    def __init__(self, config: Optional[dict[str, Any]] = None):
        self.config = dict(config or {})
        self.list_adapters: dict[str, "BaseListAdapter"] = {}

    def new_list_adapter(
        self, key: str, adapter_config: Optional[dict[str, Any]] = None
    ) -> "BaseListAdapter":
        list_adapter = self.list_adapter_class(key, self, adapter_config or {})
        self.list_adapters[key] = list_adapter
        return list_adapter

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name} lists={list(self.list_adapters)}>"


class BaseListAdapter(ABC):
    """Item storage for one list."""

    def __init__(self, key: str, parent_adapter: BaseAdapter, config: dict[str, Any]):
        self.key = key
        self.parent_adapter = parent_adapter
        self.config = config
        self.field_adapters: list["BaseFieldAdapter"] = []

    def new_field_adapter(
        self,
        field_adapter_class: type["BaseFieldAdapter"],
        field_name: str,
        path: str,
        field: Any,
        get_list_by_key: Callable[[str], Any],
        config: dict[str, Any],
    ) -> "BaseFieldAdapter":
        adapter = field_adapter_class(field_name, path, field, self, get_list_by_key, config)
        self.field_adapters.append(adapter)
        return adapter

    @abstractmethod
    async def items_query(
        self,
        args: dict[str, Any],
        *,
        meta: bool = False,
        context: Any = None,
        info: Any = None,
    ) -> Any:
        """
        Return matching items, or ``{"count": n}`` when ``meta`` is set.

        ``args`` may hold ``where``, ``search``, ``order_by``, ``skip`` and
        ``first``.
        """

    @abstractmethod
    async def create(self, data: dict[str, Any]) -> Item:
        pass

    @abstractmethod
    async def update(self, item_id: Any, data: dict[str, Any]) -> Item:
        pass

    @abstractmethod
    async def delete(self, item_id: Any) -> Optional[Item]:
        pass


class BaseFieldAdapter:
    """Storage binding of a single field."""

    #: Text-like fields take part in ``search`` queries.
    searchable: bool = False

    def __init__(
        self,
        field_name: str,
        path: str,
        field: Any,
        list_adapter: BaseListAdapter,
        get_list_by_key: Callable[[str], Any],
        config: dict[str, Any],
    ):
        self.field_name = field_name
        self.path = path
        self.field = field
        self.list_adapter = list_adapter
        self.get_list_by_key = get_list_by_key
        self.config = config

    def get_query_conditions(self) -> dict[str, QueryCondition]:
        """Map of where-input keys to ``value -> item predicate`` builders."""
        return {}
