"""
List implementation.

A ``List`` is a configured entity type: named fields, access rules, hooks,
query limits and the GraphQL names derived from its key. The class is
composed from mixins, one per concern (access, queries, schema fragments,
mutations).
"""

import logging
import math
from collections.abc import Mapping
from typing import Any, Callable, Iterable, Optional

from ..access import LIST_ACCESS_TYPES, is_rule_enabled, parse_list_access
from ..core.cache import CacheHint
from ..core.exceptions import ListConfigurationError
from ..core.naming import derive_list_names
from ..fields.types import NATIVE_TYPES, resolve_field_type
from ..pipeline import PipelineBuilder
from .access import ListAccessMixin
from .mutations import ListMutationMixin
from .queries import ListQueryMixin
from .schema import ListSchemaMixin

logger = logging.getLogger(__name__)

LIST_CONFIG_KEYS = frozenset(
    {
        "fields",
        "hooks",
        "schema_doc",
        "label_resolver",
        "label_field",
        "access",
        "admin_config",
        "item_query_name",
        "list_query_name",
        "label",
        "singular",
        "plural",
        "path",
        "adapter_config",
        "query_limits",
        "cache_hint",
        "pipeline_builder",
    }
)


def default_label_resolver(label_field: Optional[str]) -> Callable[[dict[str, Any]], Any]:
    def resolve(item: dict[str, Any]) -> Any:
        value = item.get(label_field or "name")
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value or item.get("id")

    return resolve


def _map_native_type(field_type: Any, list_key: str, path: str) -> Any:
    if not isinstance(field_type, type) or field_type not in NATIVE_TYPES:
        return field_type
    mapped = NATIVE_TYPES[field_type]
    logger.warning(
        "Mapped field %s.%s from native Python type '%s' to '%s'.",
        list_key,
        path,
        field_type.__name__,
        mapped.type,
        extra={"list_key": list_key, "field_path": path, "native_type": field_type.__name__},
    )
    return mapped


class List(ListAccessMixin, ListQueryMixin, ListSchemaMixin, ListMutationMixin):
    """
    A configured list.

    Args:
        key: Unique list key, also the GraphQL output type name
        config: List config (``fields``, ``access``, ``hooks``, ...)
        get_list_by_key: Lookup of other lists of the same registry
        query_helper: ``context -> async query(...)`` exposed to hooks
        adapter: Storage adapter creating this list's list adapter
        default_access: ``{"list": ..., "field": ...}`` used when no access is set
        register_type: Callback recording every field type in use
        create_aux_list: Callback creating auxiliary lists
        schema_names: Schema variants the list is exposed in
        is_aux_list: Auxiliary lists may use underscore-prefixed field paths
        settings: Engine settings supplying limit and admin defaults
    """

    def __init__(
        self,
        key: str,
        config: Mapping[str, Any],
        *,
        get_list_by_key: Callable[[str], Any],
        query_helper: Callable[[Any], Any],
        adapter: Any,
        default_access: Mapping[str, Any],
        register_type: Callable[[Any], None],
        create_aux_list: Callable[[str, dict[str, Any]], Any],
        schema_names: Iterable[str],
        is_aux_list: bool = False,
        settings: Any = None,
    ):
        unknown = set(config) - LIST_CONFIG_KEYS
        if unknown:
            raise ListConfigurationError(
                f"Unknown config keys for list {key}: {', '.join(sorted(unknown))}",
                list_key=key,
            )

        self.key = key
        self._fields: dict[str, Any] = dict(config.get("fields") or {})
        self.hooks: dict[str, Callable[..., Any]] = dict(config.get("hooks") or {})
        self.schema_doc: Optional[str] = config.get("schema_doc")
        self.label_resolver = config.get("label_resolver") or default_label_resolver(
            config.get("label_field")
        )
        self.is_aux_list = is_aux_list
        self.get_list_by_key = get_list_by_key
        self.default_access = dict(default_access)
        self.schema_names = list(schema_names)
        self.fields_initialised = False
        self.fields: list[Any] = []
        self.fields_by_path: dict[str, Any] = {}
        self.views: dict[str, dict[str, str]] = {}

        admin_defaults = dict(getattr(settings, "admin_config", None) or {})
        non_id_paths = [path for path in self._fields if path != "id"]
        self.admin_config = {
            "default_page_size": admin_defaults.get("default_page_size", 50),
            "default_columns": ",".join(non_id_paths[:2]) if non_id_paths else "id",
            "default_sort": non_id_paths[0] if non_id_paths else "",
            "maximum_page_size": admin_defaults.get("maximum_page_size", 1000),
            **dict(config.get("admin_config") or {}),
        }

        self.admin_ui_labels, self.gql_names = derive_list_names(
            key,
            label=config.get("label"),
            singular=config.get("singular"),
            plural=config.get("plural"),
            path=config.get("path"),
            item_query_name=config.get("item_query_name"),
            list_query_name=config.get("list_query_name"),
        )

        self.adapter_name = adapter.name
        self.adapter = adapter.new_list_adapter(key, config.get("adapter_config") or {})

        self.access = parse_list_access(
            list_key=key,
            access=config.get("access"),
            default_access=self.default_access.get("list", True),
            schema_names=self.schema_names,
        )

        limit_defaults = dict(getattr(settings, "query_limits", None) or {})
        query_limits = {**limit_defaults, **dict(config.get("query_limits") or {})}
        max_results = query_limits.get("max_results")
        query_limits["max_results"] = math.inf if max_results is None else max_results
        if query_limits["max_results"] < 1:
            raise ListConfigurationError(
                f"List {key}'s query_limits.max_results can't be < 1", list_key=key
            )
        self.query_limits = query_limits

        cache_hint = config.get("cache_hint")
        if cache_hint is not None and not (
            isinstance(cache_hint, (Mapping, CacheHint)) or callable(cache_hint)
        ):
            raise ListConfigurationError(
                f"List {key}'s cache_hint must be a mapping or a function", list_key=key
            )
        self.cache_hint = cache_hint

        self.hooks_actions: dict[str, Callable[[Any], Any]] = {"query": query_helper}

        for field_config in self._fields.values():
            field_type = field_config.get("type") if isinstance(field_config, Mapping) else field_config
            register_type(resolve_field_type(field_type))

        self._create_aux_list = create_aux_list
        pipeline_builder = config.get("pipeline_builder") or PipelineBuilder()
        self.pipelines = pipeline_builder.build_pipelines()

    def __repr__(self) -> str:
        return f"<List {self.key}>"

    def create_aux_list(self, aux_key: str, aux_config: dict[str, Any]) -> Any:
        """Create an auxiliary list whose access mirrors this list's, reduced to booleans."""
        access = {
            schema_name: {operation: is_rule_enabled(rule) for operation, rule in schema_access.items()}
            for schema_name, schema_access in self.access.items()
        }
        return self._create_aux_list(aux_key, {"access": access, **aux_config})

    # ------------------------------------------------------------------ #
    # Field registry
    # ------------------------------------------------------------------ #
    def init_fields(self) -> None:
        """Bind every field config to its implementation. Runs once."""
        if self.fields_initialised:
            return
        self.fields_initialised = True

        fields_config: dict[str, dict[str, Any]] = {}
        for path, field_config in self._fields.items():
            if not isinstance(field_config, Mapping):
                field_config = {"type": field_config}
            field_type = _map_native_type(resolve_field_type(field_config.get("type")), self.key, path)
            fields_config[path] = {**field_config, "type": field_type}

        if "id" not in fields_config:
            get_default_primary_key_config = getattr(
                self.adapter.parent_adapter, "get_default_primary_key_config", None
            )
            if not callable(get_default_primary_key_config):
                raise ListConfigurationError(
                    f"No 'id' field given for the '{self.key}' list and the list adapter "
                    f"in use ({self.adapter_name}) doesn't supply a default primary key "
                    "config (no 'get_default_primary_key_config()' method)",
                    list_key=self.key,
                )
            fields_config = {"id": get_default_primary_key_config(), **fields_config}

        for path, field_config in fields_config.items():
            if not self.is_aux_list and path.startswith("_"):
                raise ListConfigurationError(
                    f'Invalid field name "{path}". Field names cannot start with an underscore.',
                    list_key=self.key,
                )
            field_type = field_config.get("type")
            if field_type is None:
                raise ListConfigurationError(
                    f"The '{self.key}.{path}' field doesn't specify a valid type. "
                    f"({self.key}.{path}.type is undefined)",
                    list_key=self.key,
                )
            if not getattr(field_type, "adapters", None):
                raise ListConfigurationError(
                    f"The type given for the '{self.key}.{path}' field doesn't define any adapters.",
                    list_key=self.key,
                )

        for field_config in fields_config.values():
            field_type = field_config["type"]
            if self.adapter_name not in field_type.adapters:
                raise ListConfigurationError(
                    f'Adapter type "{self.adapter_name}" does not support field type "{field_type.type}"',
                    list_key=self.key,
                )

        self.fields_by_path = {}
        for path, field_config in fields_config.items():
            field_type = field_config["type"]
            options = {key: value for key, value in field_config.items() if key != "type"}
            self.fields_by_path[path] = field_type.implementation(
                path,
                options,
                get_list_by_key=self.get_list_by_key,
                list_key=self.key,
                list_adapter=self.adapter,
                field_adapter_class=field_type.adapters[self.adapter_name],
                default_access=self.default_access.get("field", True),
                create_aux_list=self.create_aux_list,
                schema_names=self.schema_names,
            )
        self.fields = list(self.fields_by_path.values())
        self.views = {
            path: self.fields_by_path[path].extend_admin_views(dict(field_config["type"].views))
            for path, field_config in fields_config.items()
        }

    def get_field_by_path(self, path: str) -> Optional[Any]:
        return self.fields_by_path.get(path)

    def get_primary_key(self) -> Any:
        return self.fields_by_path.get("id")

    # ------------------------------------------------------------------ #
    # Admin metadata
    # ------------------------------------------------------------------ #
    def get_admin_meta(self, schema_name: str) -> dict[str, Any]:
        schema_access = self.access[schema_name]
        admin_config = dict(self.admin_config)
        default_page_size = admin_config.pop("default_page_size")
        maximum_page_size = admin_config.pop("maximum_page_size")
        default_columns = admin_config.pop("default_columns")
        default_sort = admin_config.pop("default_sort")
        return {
            "key": self.key,
            "access": {
                operation: is_rule_enabled(schema_access[operation])
                for operation in LIST_ACCESS_TYPES
            },
            "label": self.admin_ui_labels["label"],
            "singular": self.admin_ui_labels["singular"],
            "plural": self.admin_ui_labels["plural"],
            "path": self.admin_ui_labels["path"],
            "gqlNames": self.gql_names.as_dict(),
            "fields": [
                field.get_admin_meta(schema_name)
                for field in self.fields
                if is_rule_enabled(field.access[schema_name]["read"])
            ],
            "views": self.views,
            "adminConfig": {
                "defaultPageSize": default_page_size,
                "defaultColumns": "".join(default_columns.split()),
                "defaultSort": default_sort,
                "maximumPageSize": max(default_page_size, maximum_page_size),
                **admin_config,
            },
        }
