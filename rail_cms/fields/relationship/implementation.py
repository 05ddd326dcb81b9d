"""
Relationship field.

``ref="User"`` links to another list; ``ref="User.posts"`` links two-sided,
keeping ``User.posts`` in sync through backlinks. ``many=True`` stores a list
of ids instead of a single id.
"""

from typing import Any, Callable, Optional

from ...core.exceptions import ListConfigurationError
from ...core.utils import LazyDeferred, query_args_from_graphql
from ..base import Implementation
from .backlinks import enqueue_backlink_operations
from .nested import resolve_nested_many, resolve_nested_single


class RelationshipImplementation(Implementation):
    is_relationship = True

    def __init__(self, path: str, config: dict[str, Any], **kwargs: Any):
        super().__init__(path, config, **kwargs)
        ref = self.config.get("ref")
        if not ref or not isinstance(ref, str):
            raise ListConfigurationError(
                f"The '{self.list_key}.{path}' relationship must set 'ref' to a list key.",
                list_key=self.list_key,
            )
        ref_list_key, _, ref_field_path = ref.partition(".")
        self.ref_list_key = ref_list_key
        self.ref_field_path: Optional[str] = ref_field_path or None
        self.many = bool(self.config.get("many", False))
        self.with_meta = bool(self.config.get("with_meta", True))

    def try_resolve_ref_list(self) -> tuple[Any, Any]:
        ref_list = self.get_list_by_key(self.ref_list_key)
        if ref_list is None:
            raise ListConfigurationError(
                f"Unable to resolve related list '{self.ref_list_key}' from "
                f"{self.list_key}.{self.path}",
                list_key=self.list_key,
            )
        ref_field = None
        if self.ref_field_path:
            ref_field = ref_list.get_field_by_path(self.ref_field_path)
            if ref_field is None:
                raise ListConfigurationError(
                    f"Unable to resolve two way relationship field "
                    f"'{self.ref_list_key}.{self.ref_field_path}' from {self.list_key}.{self.path}",
                    list_key=self.list_key,
                )
        return ref_list, ref_field

    # ------------------------------------------------------------------ #
    # GraphQL fragments
    # ------------------------------------------------------------------ #
    def gql_output_fields(self, schema_name: str) -> list[str]:
        ref_list, _ = self.try_resolve_ref_list()
        if not ref_list.can(schema_name, "read"):
            return []
        type_name = ref_list.gql_names.output_type_name
        if self.many:
            filter_args = ", ".join(ref_list.get_graphql_filter_fragment())
            fields = [f"{self.path}({filter_args}): [{type_name}!]!"]
            if self.with_meta:
                fields.append(f"_{self.path}Meta({filter_args}): _QueryMeta")
            return fields
        return [f"{self.path}: {type_name}"]

    def gql_output_field_resolvers(self, schema_name: str) -> dict[str, Callable[..., Any]]:
        ref_list, _ = self.try_resolve_ref_list()
        if not ref_list.can(schema_name, "read"):
            return {}
        path = self.path

        if not self.many:

            async def resolve_one(item, info, **args):
                ref_id = item.get(path)
                if not ref_id:
                    return None
                items = await ref_list.list_query(
                    {"where": {"id": str(ref_id)}},
                    info.context,
                    gql_name=ref_list.gql_names.list_query_name,
                    info=info,
                )
                return items[0] if items else None

            return {path: resolve_one}

        def many_query_args(item, args):
            query_args = query_args_from_graphql(args)
            ids = [str(value) for value in item.get(path) or [] if value]
            where = query_args.get("where")
            query_args["where"] = {"AND": [where, {"id_in": ids}]} if where else {"id_in": ids}
            return query_args

        async def resolve_many(item, info, **args):
            return await ref_list.list_query(
                many_query_args(item, args),
                info.context,
                gql_name=ref_list.gql_names.list_query_name,
                info=info,
            )

        resolvers = {path: resolve_many}
        if self.with_meta:

            async def resolve_many_meta(item, info, **args):
                return await ref_list.list_query_meta(
                    many_query_args(item, args),
                    info.context,
                    gql_name=ref_list.gql_names.list_query_meta_name,
                    info=info,
                )

            resolvers[f"_{path}Meta"] = resolve_many_meta
        return resolvers

    def gql_query_input_fields(self, schema_name: str) -> list[str]:
        ref_list, _ = self.try_resolve_ref_list()
        if not ref_list.can(schema_name, "read"):
            return []
        where_input = ref_list.gql_names.where_input_name
        if self.many:
            return [
                f'""" condition must be true for all nodes """ {self.path}_every: {where_input}',
                f'""" condition must be true for at least 1 node """ {self.path}_some: {where_input}',
                f'""" condition must be false for all nodes """ {self.path}_none: {where_input}',
            ]
        return [f"{self.path}: {where_input}", f"{self.path}_is_null: Boolean"]

    def _relate_input_fields(self, schema_name: str) -> list[str]:
        ref_list, _ = self.try_resolve_ref_list()
        if not ref_list.has_any_access(schema_name):
            return []
        names = ref_list.gql_names
        input_name = names.relate_to_many_input_name if self.many else names.relate_to_one_input_name
        return [f"{self.path}: {input_name}"]

    def gql_create_input_fields(self, schema_name: str) -> list[str]:
        return self._relate_input_fields(schema_name)

    def gql_update_input_fields(self, schema_name: str) -> list[str]:
        return self._relate_input_fields(schema_name)

    def get_gql_aux_types(self, schema_name: str) -> list[str]:
        ref_list, _ = self.try_resolve_ref_list()
        if not ref_list.has_any_access(schema_name):
            return []
        names = ref_list.gql_names
        accepts_create = ref_list.exposes_create(schema_name)
        to_many = [f"input {names.relate_to_many_input_name} {{"]
        to_one = [f"input {names.relate_to_one_input_name} {{"]
        if accepts_create:
            to_many.append(f"  create: [{names.create_input_name}]")
            to_one.append(f"  create: {names.create_input_name}")
        to_many += [
            f"  connect: [{names.where_unique_input_name}]",
            f"  disconnect: [{names.where_unique_input_name}]",
            "  disconnectAll: Boolean",
            "}",
        ]
        to_one += [
            f"  connect: {names.where_unique_input_name}",
            f"  disconnect: {names.where_unique_input_name}",
            "  disconnectAll: Boolean",
            "}",
        ]
        return ["\n".join(to_many), "\n".join(to_one)]

    def extend_admin_meta(self, meta: dict[str, Any]) -> dict[str, Any]:
        ref_list, _ = self.try_resolve_ref_list()
        return {
            **meta,
            "ref": ref_list.key,
            "refListKey": ref_list.key,
            "refFieldPath": self.ref_field_path,
            "many": self.many,
        }

    # ------------------------------------------------------------------ #
    # Nested mutations and backlinks
    # ------------------------------------------------------------------ #
    async def resolve_nested_operations(
        self,
        input: Optional[dict[str, Any]],
        item: Optional[dict[str, Any]],
        context: Any,
        get_item: Optional[LazyDeferred],
        mutation_state: Any,
    ) -> dict[str, Any]:
        """
        Run the nested operations of ``input`` and return the ids involved.

        ``get_item`` settles with the local item once it is persisted; on
        update it is ``None`` and the existing item is used instead.
        """
        ref_list, ref_field = self.try_resolve_ref_list()
        current_value = item.get(self.path) if item else None
        resolve = resolve_nested_many if self.many else resolve_nested_single
        operations = await resolve(
            input=input or {},
            current_value=current_value,
            ref_list=ref_list,
            context=context,
            mutation_state=mutation_state,
        )

        if ref_field is not None:
            if self.many:
                backlinks = {
                    "connect": operations["connect"] + operations["create"],
                    "disconnect": operations["disconnect"],
                }
            else:
                new_value = (operations["create"] or operations["connect"] or [None])[0]
                disconnect = list(operations["disconnect"])
                replaced = operations["current_value"]
                if new_value and replaced and replaced != new_value and replaced not in disconnect:
                    disconnect.append(replaced)
                backlinks = {"connect": [new_value] if new_value else [], "disconnect": disconnect}
            enqueue_backlink_operations(
                mutation_state,
                backlinks,
                get_item if get_item is not None else LazyDeferred.resolved(item),
                local_list_key=self.list_key,
                local_path=self.path,
                foreign_list_key=ref_list.key,
                foreign_path=ref_field.path,
            )
        return operations

    async def register_backlink(self, value: Any, item: dict[str, Any], mutation_state: Any) -> None:
        """Stage the removal of ``item`` from the other side before it is deleted."""
        if not value or not self.ref_field_path:
            return
        ref_list, ref_field = self.try_resolve_ref_list()
        ids = list(value) if self.many else [value]
        enqueue_backlink_operations(
            mutation_state,
            {"disconnect": ids},
            LazyDeferred.resolved(item),
            local_list_key=self.list_key,
            local_path=self.path,
            foreign_list_key=ref_list.key,
            foreign_path=ref_field.path,
        )
