"""
List schema mixin.

Builds the SDL fragments and resolver maps a list contributes to one schema
variant. Operations whose access is statically ``False`` are left out of the
schema entirely. Output only depends on the list configuration, so the same
configuration always yields the same fragments.
"""

from typing import Any, Callable

from ..access import is_rule_enabled
from ..core.exceptions import throw_access_denied
from ..core.utils import flatten, maybe_await, obj_merge, query_args_from_graphql
from .access import OPERATION_TYPES


class ListSchemaMixin:
    """GraphQL fragments of a List."""

    def get_fields_with_access(self, schema_name: str, access: str) -> list[Any]:
        """Non-primary-key fields whose ``access`` rule is not statically denied."""
        return [
            field
            for field in self.fields
            if field.path != "id" and is_rule_enabled(field.access[schema_name][access])
        ]

    def get_fields_related_to(self, list_key: str) -> list[Any]:
        return [
            field
            for field in self.fields
            if field.is_relationship and field.ref_list_key == list_key
        ]

    def _create_input_lines(self, schema_name: str) -> list[str]:
        return flatten(
            field.gql_create_input_fields(schema_name)
            for field in self.get_fields_with_access(schema_name, "create")
        )

    def _update_input_lines(self, schema_name: str) -> list[str]:
        return flatten(
            field.gql_update_input_fields(schema_name)
            for field in self.get_fields_with_access(schema_name, "update")
        )

    def exposes_create(self, schema_name: str) -> bool:
        """Whether create inputs and mutations are part of ``schema_name``."""
        return self.can(schema_name, "create") and bool(self._create_input_lines(schema_name))

    def exposes_update(self, schema_name: str) -> bool:
        return self.can(schema_name, "update") and bool(self._update_input_lines(schema_name))

    # ------------------------------------------------------------------ #
    # SDL fragments
    # ------------------------------------------------------------------ #
    def get_gql_types(self, schema_name: str) -> list[str]:
        names = self.gql_names
        types: list[str] = []

        if self.has_any_access(schema_name):
            readable = [
                field for field in self.fields if is_rule_enabled(field.access[schema_name]["read"])
            ]
            output_lines = []
            for field in readable:
                for line in field.gql_output_fields(schema_name):
                    if field.schema_doc:
                        line = f'""" {field.schema_doc} """ {line}'
                    output_lines.append(line)
            where_lines = flatten(field.gql_query_input_fields(schema_name) for field in readable)

            types.extend(flatten(field.get_gql_aux_types(schema_name) for field in self.fields))
            types.append(
                "\n".join(
                    [
                        f'""" {self.schema_doc or "A list item"} """',
                        f"type {names.output_type_name} {{",
                        '  """ The label of the item, from the label resolver, label field, name or id. """',
                        "  _label_: String",
                        *(f"  {line}" for line in output_lines),
                        "}",
                    ]
                )
            )
            types.append(
                "\n".join(
                    [
                        f"input {names.where_input_name} {{",
                        f"  AND: [{names.where_input_name}]",
                        f"  OR: [{names.where_input_name}]",
                        *(f"  {line}" for line in where_lines),
                        "}",
                    ]
                )
            )
            types.append(f"input {names.where_unique_input_name} {{\n  id: ID!\n}}")

        update_lines = self._update_input_lines(schema_name)
        if self.can(schema_name, "update") and update_lines:
            types.append(
                "\n".join(
                    [f"input {names.update_input_name} {{", *(f"  {line}" for line in update_lines), "}"]
                )
            )
            types.append(
                f"input {names.update_many_input_name} {{\n"
                f"  id: ID!\n"
                f"  data: {names.update_input_name}\n"
                "}"
            )

        create_lines = self._create_input_lines(schema_name)
        if self.can(schema_name, "create") and create_lines:
            types.append(
                "\n".join(
                    [f"input {names.create_input_name} {{", *(f"  {line}" for line in create_lines), "}"]
                )
            )
            types.append(
                f"input {names.create_many_input_name} {{\n"
                f"  data: {names.create_input_name}\n"
                "}"
            )

        return types

    def get_gql_queries(self, schema_name: str) -> list[str]:
        names = self.gql_names
        queries = flatten(field.get_gql_aux_queries() for field in self.fields)
        if self.can(schema_name, "read"):
            filter_args = ", ".join(self.get_graphql_filter_fragment())
            output = names.output_type_name
            queries.extend(
                [
                    f'""" Search for all {output} items which match the where clause. """\n'
                    f"{names.list_query_name}({filter_args}): [{output}]",
                    f'""" Search for the {output} item with the matching ID. """\n'
                    f"{names.item_query_name}(where: {names.where_unique_input_name}!): {output}",
                    f'""" Perform a meta-query on all {output} items which match the where clause. """\n'
                    f"{names.list_query_meta_name}({filter_args}): _QueryMeta",
                    f'""" Retrieve the meta-data for the {names.item_query_name} list. """\n'
                    f"{names.list_meta_name}: _ListMeta",
                ]
            )
        return queries

    def get_gql_mutations(self, schema_name: str) -> list[str]:
        names = self.gql_names
        output = names.output_type_name
        mutations = flatten(field.get_gql_aux_mutations() for field in self.fields)

        if self.exposes_create(schema_name):
            mutations.extend(
                [
                    f'""" Create a single {output} item. """\n'
                    f"{names.create_mutation_name}(data: {names.create_input_name}): {output}",
                    f'""" Create multiple {output} items. """\n'
                    f"{names.create_many_mutation_name}(data: [{names.create_many_input_name}]): [{output}]",
                ]
            )

        if self.exposes_update(schema_name):
            mutations.extend(
                [
                    f'""" Update a single {output} item by ID. """\n'
                    f"{names.update_mutation_name}(id: ID!, data: {names.update_input_name}): {output}",
                    f'""" Update multiple {output} items by ID. """\n'
                    f"{names.update_many_mutation_name}(data: [{names.update_many_input_name}]): [{output}]",
                ]
            )

        if self.can(schema_name, "delete"):
            mutations.extend(
                [
                    f'""" Delete a single {output} item by ID. """\n'
                    f"{names.delete_mutation_name}(id: ID!): {output}",
                    f'""" Delete multiple {output} items by ID. """\n'
                    f"{names.delete_many_mutation_name}(ids: [ID!]): [{output}]",
                ]
            )

        return mutations

    # ------------------------------------------------------------------ #
    # Resolvers
    # ------------------------------------------------------------------ #
    def _wrap_field_resolver(self, field: Any, inner_resolver: Callable[..., Any]) -> Callable[..., Any]:
        """Check field read access and apply the field's static cache hint."""
        list_key = self.key

        async def resolve(item, info, **args):
            context = info.context
            operation = "read"
            allowed = await context.get_field_access_control_for_user(
                list_key, field.path, None, item, operation
            )
            if not allowed:
                throw_access_denied(
                    OPERATION_TYPES[operation],
                    context,
                    field.path,
                    {"itemId": item.get("id") if item else None},
                )
            cache_hint = field.config.get("cache_hint")
            if cache_hint:
                context.cache_control.set_cache_hint(cache_hint)
            return await maybe_await(inner_resolver(item, info, **args))

        return resolve

    def gql_field_resolvers(self, schema_name: str) -> dict[str, dict[str, Callable[..., Any]]]:
        if not self.can(schema_name, "read"):
            return {}
        resolvers: dict[str, Callable[..., Any]] = {
            "_label_": lambda item, info: self.label_resolver(item),
        }
        for field in self.fields:
            if not is_rule_enabled(field.access[schema_name]["read"]):
                continue
            for name, inner_resolver in field.gql_output_field_resolvers(schema_name).items():
                resolvers[name] = self._wrap_field_resolver(field, inner_resolver)
        return {self.gql_names.output_type_name: resolvers}

    def gql_aux_field_resolvers(self, schema_name: str) -> dict[str, Any]:
        if not self.has_any_access(schema_name):
            return {}
        return obj_merge(field.gql_aux_field_resolvers(schema_name) for field in self.fields)

    def gql_aux_query_resolvers(self) -> dict[str, Callable[..., Any]]:
        return obj_merge(field.gql_aux_query_resolvers() for field in self.fields)

    def gql_aux_mutation_resolvers(self) -> dict[str, Callable[..., Any]]:
        return obj_merge(field.gql_aux_mutation_resolvers() for field in self.fields)

    def gql_query_resolvers(self, schema_name: str) -> dict[str, Callable[..., Any]]:
        if not self.can(schema_name, "read"):
            return {}
        names = self.gql_names
        return {
            names.list_query_name: lambda _, info, **args: self.list_query(
                query_args_from_graphql(args),
                info.context,
                gql_name=names.list_query_name,
                info=info,
            ),
            names.list_query_meta_name: lambda _, info, **args: self.list_query_meta(
                query_args_from_graphql(args),
                info.context,
                gql_name=names.list_query_meta_name,
                info=info,
            ),
            names.list_meta_name: lambda _, info: self.list_meta(info.context),
            names.item_query_name: lambda _, info, **args: self.item_query(
                args, info.context, gql_name=names.item_query_name, info=info
            ),
        }

    def gql_mutation_resolvers(self, schema_name: str) -> dict[str, Callable[..., Any]]:
        names = self.gql_names
        resolvers: dict[str, Callable[..., Any]] = {}

        if self.exposes_create(schema_name):
            resolvers[names.create_mutation_name] = lambda _, info, data=None: self.create_mutation(
                data or {}, info.context
            )
            resolvers[names.create_many_mutation_name] = lambda _, info, data=None: self.create_many_mutation(
                data or [], info.context
            )

        if self.exposes_update(schema_name):
            resolvers[names.update_mutation_name] = lambda _, info, id, data=None: self.update_mutation(
                id, data or {}, info.context
            )
            resolvers[names.update_many_mutation_name] = lambda _, info, data=None: self.update_many_mutation(
                data or [], info.context
            )

        if self.can(schema_name, "delete"):
            resolvers[names.delete_mutation_name] = lambda _, info, id: self.delete_mutation(
                id, info.context
            )
            resolvers[names.delete_many_mutation_name] = lambda _, info, ids=None: self.delete_many_mutation(
                ids or [], info.context
            )

        return resolvers
