"""
Implementation - base class of every field type implementation.

A field implementation is bound to one list and one storage field adapter.
It contributes GraphQL fragments (output fields, where inputs, create/update
inputs, auxiliary types) and takes part in each mutation phase through the
hook methods below. Every hook receives keyword arguments only.
"""

from typing import Any, Callable, Optional

from django.utils.text import capfirst

from ..access import is_rule_enabled, parse_field_access
from ..core.utils import UNSET, call_hook


class Implementation:
    """
    Capability interface shared by all field types.

    Attributes:
        path: Field key within its list
        list_key: Key of the owning list
        is_required: Whether create/update must provide a non-null value
        is_relationship: Relationship fields take part in nested mutations
        access: Parsed ``{schema: {create, read, update}}`` table
        hooks: Custom field-level hooks from the field config
        adapter: Storage field adapter bound to this field
    """

    is_relationship = False
    is_orderable = False
    gql_type: Optional[str] = None

    def __init__(
        self,
        path: str,
        config: dict[str, Any],
        *,
        get_list_by_key: Callable[[str], Any],
        list_key: str,
        list_adapter: Any,
        field_adapter_class: type,
        default_access: Any,
        create_aux_list: Callable[..., Any],
        schema_names: list[str],
    ):
        config = dict(config)
        self.path = path
        self.is_primary_key = path == "id"
        self.hooks: dict[str, Callable[..., Any]] = dict(config.pop("hooks", None) or {})
        self.is_required = bool(config.pop("is_required", False))
        self.default_value = config.pop("default_value", UNSET)
        self.schema_doc: Optional[str] = config.pop("schema_doc", None)
        self.label: str = config.pop("label", None) or capfirst(path.replace("_", " "))
        access = config.pop("access", None)
        self.config = config

        self.get_list_by_key = get_list_by_key
        self.list_key = list_key
        self.create_aux_list = create_aux_list
        self.schema_names = list(schema_names)

        self.adapter = list_adapter.new_field_adapter(
            field_adapter_class,
            self.__class__.__name__,
            path,
            self,
            get_list_by_key,
            config,
        )
        self.access = parse_field_access(
            list_key=list_key,
            field_path=path,
            access=access,
            default_access=default_access,
            schema_names=self.schema_names,
        )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.list_key}.{self.path}>"

    # ------------------------------------------------------------------ #
    # GraphQL fragments
    # ------------------------------------------------------------------ #
    def gql_output_fields(self, schema_name: str) -> list[str]:
        return []

    def gql_output_field_resolvers(self, schema_name: str) -> dict[str, Callable[..., Any]]:
        return {}

    def gql_query_input_fields(self, schema_name: str) -> list[str]:
        return []

    def gql_create_input_fields(self, schema_name: str) -> list[str]:
        return []

    def gql_update_input_fields(self, schema_name: str) -> list[str]:
        return []

    def get_gql_aux_types(self, schema_name: str) -> list[str]:
        return []

    def gql_aux_field_resolvers(self, schema_name: str) -> dict[str, Any]:
        return {}

    def get_gql_aux_queries(self) -> list[str]:
        return []

    def gql_aux_query_resolvers(self) -> dict[str, Callable[..., Any]]:
        return {}

    def get_gql_aux_mutations(self) -> list[str]:
        return []

    def gql_aux_mutation_resolvers(self) -> dict[str, Callable[..., Any]]:
        return {}

    def equality_input_fields(self, gql_type: str) -> list[str]:
        return [f"{self.path}: {gql_type}", f"{self.path}_not: {gql_type}"]

    def in_input_fields(self, gql_type: str) -> list[str]:
        return [f"{self.path}_in: [{gql_type}]", f"{self.path}_not_in: [{gql_type}]"]

    def ordering_input_fields(self, gql_type: str) -> list[str]:
        return [f"{self.path}_{operator}: {gql_type}" for operator in ("lt", "lte", "gt", "gte")]

    def string_input_fields(self, gql_type: str) -> list[str]:
        return [
            f"{self.path}_{operator}: {gql_type}"
            for operator in ("contains", "not_contains", "starts_with", "ends_with")
        ]

    # ------------------------------------------------------------------ #
    # Mutation phases
    # ------------------------------------------------------------------ #
    async def get_default_value(self, *, context: Any = None, original_input: Any = None, **kwargs: Any) -> Any:
        if self.default_value is UNSET:
            return UNSET
        if callable(self.default_value):
            return await call_hook(
                self.default_value, context=context, original_input=original_input
            )
        return self.default_value

    async def resolve_input(self, *, resolved_data: dict[str, Any], **kwargs: Any) -> Any:
        return resolved_data.get(self.path, UNSET)

    async def validate_input(self, **kwargs: Any) -> None:
        pass

    async def validate_delete(self, **kwargs: Any) -> None:
        pass

    async def before_change(self, **kwargs: Any) -> None:
        pass

    async def after_change(self, **kwargs: Any) -> None:
        pass

    async def before_delete(self, **kwargs: Any) -> None:
        pass

    async def after_delete(self, **kwargs: Any) -> None:
        pass

    # ------------------------------------------------------------------ #
    # Admin metadata
    # ------------------------------------------------------------------ #
    def get_admin_meta(self, schema_name: str) -> dict[str, Any]:
        schema_access = self.access[schema_name]
        return self.extend_admin_meta(
            {
                "label": self.label,
                "path": self.path,
                "type": self.__class__.__name__,
                "isRequired": self.is_required,
                "isOrderable": self.is_orderable,
                "defaultValue": None
                if self.default_value is UNSET or callable(self.default_value)
                else self.default_value,
                "access": {
                    operation: is_rule_enabled(schema_access[operation])
                    for operation in ("create", "read", "update")
                },
            }
        )

    def extend_admin_meta(self, meta: dict[str, Any]) -> dict[str, Any]:
        return meta

    def extend_admin_views(self, views: dict[str, str]) -> dict[str, str]:
        return views
