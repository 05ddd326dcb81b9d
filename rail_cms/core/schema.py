"""
SchemaBuilder - assembles the executable schema of one schema variant.

Type definitions contributed by every list are de-duplicated and joined with
the shared meta types, built with ``graphql.build_schema`` and bound to the
resolver maps the lists return.
"""

import logging
from typing import TYPE_CHECKING, Any, Callable, Optional

from graphql import GraphQLObjectType, GraphQLSchema, build_schema, print_schema, value_from_ast_untyped

from .utils import flatten, unique

if TYPE_CHECKING:
    from .registry import ListRegistry

logger = logging.getLogger(__name__)

COMMON_TYPE_DEFS = [
    '""" Arbitrary JSON value, used for declarative access results. """\nscalar JSON',
    "type _QueryMeta {\n  count: Int\n}",
    "type _ListAccess {\n"
    "  create: JSON\n"
    "  read: JSON\n"
    "  update: JSON\n"
    "  delete: JSON\n"
    "  auth: JSON\n"
    "}",
    "input _ListSchemaFieldsInput {\n  type: String\n}",
    "type _ListSchemaRelatedFields {\n  type: String\n  fields: [String]\n}",
    "type _ListSchema {\n"
    "  type: String\n"
    "  queries: [String]\n"
    "  relatedFields(where: _ListSchemaFieldsInput): [_ListSchemaRelatedFields]\n"
    "}",
    "type _ListMeta {\n"
    "  key: String\n"
    "  name: String\n"
    "  access: _ListAccess\n"
    "  schema: _ListSchema\n"
    "}",
    "input _ksListsMetaInput {\n  key: String\n  auxiliary: Boolean\n}",
]


def _operation_block(type_name: str, definitions: list[str]) -> str:
    body = "\n".join("  " + line for definition in definitions for line in definition.splitlines())
    return f"type {type_name} {{\n{body}\n}}"


class SchemaBuilder:
    """
    Builds type definitions and resolvers for ``schema_name``.

    Args:
        registry: Registry owning the lists
        schema_name: Schema variant to build
    """

    def __init__(self, registry: "ListRegistry", schema_name: str):
        self.registry = registry
        self.schema_name = schema_name

    @property
    def lists(self) -> list[Any]:
        return list(self.registry.lists.values())

    # ------------------------------------------------------------------ #
    # Type definitions
    # ------------------------------------------------------------------ #
    def get_type_defs(self) -> str:
        schema_name = self.schema_name
        types = unique(
            [
                *COMMON_TYPE_DEFS,
                *flatten(lst.get_gql_types(schema_name) for lst in self.lists),
            ]
        )
        queries = unique(
            [
                '""" Retrieve the meta-data for all lists. """\n'
                "_ksListsMeta(where: _ksListsMetaInput): [_ListMeta]",
                *flatten(lst.get_gql_queries(schema_name) for lst in self.lists),
            ]
        )
        mutations = unique(flatten(lst.get_gql_mutations(schema_name) for lst in self.lists))

        blocks = [*types, _operation_block("Query", queries)]
        if mutations:
            blocks.append(_operation_block("Mutation", mutations))
        return "\n\n".join(blocks) + "\n"

    # ------------------------------------------------------------------ #
    # Resolvers
    # ------------------------------------------------------------------ #
    def get_query_resolvers(self) -> dict[str, Callable[..., Any]]:
        resolvers: dict[str, Callable[..., Any]] = {"_ksListsMeta": self.resolve_lists_meta}
        for lst in self.lists:
            resolvers.update(lst.gql_aux_query_resolvers())
            resolvers.update(lst.gql_query_resolvers(self.schema_name))
        return resolvers

    def get_mutation_resolvers(self) -> dict[str, Callable[..., Any]]:
        resolvers: dict[str, Callable[..., Any]] = {}
        for lst in self.lists:
            resolvers.update(lst.gql_aux_mutation_resolvers())
            resolvers.update(lst.gql_mutation_resolvers(self.schema_name))
        return resolvers

    def get_type_resolvers(self) -> dict[str, dict[str, Callable[..., Any]]]:
        resolvers: dict[str, dict[str, Callable[..., Any]]] = {
            "_QueryMeta": {"count": lambda meta, info: meta["get_count"]()},
            "_ListMeta": {
                "key": lambda meta, info: meta["name"],
                "name": lambda meta, info: meta["name"],
                "access": lambda meta, info: meta["get_access"](),
                "schema": lambda meta, info: meta["get_schema"](),
            },
            "_ListAccess": {
                operation: (lambda getter: lambda access, info: access[getter]())(f"get_{operation}")
                for operation in ("create", "read", "update", "delete", "auth")
            },
            "_ListSchema": {"relatedFields": self.resolve_related_fields},
        }
        for lst in self.lists:
            for type_name, fields in {
                **lst.gql_aux_field_resolvers(self.schema_name),
                **lst.gql_field_resolvers(self.schema_name),
            }.items():
                resolvers.setdefault(type_name, {}).update(fields)
        return resolvers

    def resolve_lists_meta(
        self, _: Any, info: Any, where: Optional[dict[str, Any]] = None
    ) -> list[dict[str, Any]]:
        where = where or {}
        key = where.get("key")
        auxiliary = where.get("auxiliary")
        return [
            lst.list_meta(info.context)
            for lst in self.lists
            if lst.has_any_access(self.schema_name)
            and (key is None or lst.key == key)
            and (auxiliary is None or lst.is_aux_list == auxiliary)
        ]

    def resolve_related_fields(
        self, schema: dict[str, Any], info: Any, where: Optional[dict[str, Any]] = None
    ) -> list[dict[str, Any]]:
        type_name = (where or {}).get("type")
        related = []
        for lst in self.lists:
            if type_name and lst.gql_names.output_type_name != type_name:
                continue
            fields = flatten(
                field.gql_output_field_resolvers(self.schema_name)
                for field in lst.get_fields_related_to(schema["key"])
            )
            if fields:
                related.append({"type": lst.gql_names.output_type_name, "fields": list(fields)})
        return related

    # ------------------------------------------------------------------ #
    # Schema
    # ------------------------------------------------------------------ #
    def build(self) -> GraphQLSchema:
        schema = build_schema(self.get_type_defs())
        self._bind_json_scalar(schema)
        self._bind_fields(schema.query_type, self.get_query_resolvers())
        if schema.mutation_type is not None:
            self._bind_fields(schema.mutation_type, self.get_mutation_resolvers())
        for type_name, resolvers in self.get_type_resolvers().items():
            graphql_type = schema.type_map.get(type_name)
            if isinstance(graphql_type, GraphQLObjectType):
                self._bind_fields(graphql_type, resolvers)
        logger.debug(
            "Schema assembled",
            extra={"schema_name": self.schema_name, "type_count": len(schema.type_map)},
        )
        return schema

    def print_schema(self) -> str:
        return print_schema(self.build())

    @staticmethod
    def _bind_fields(graphql_type: GraphQLObjectType, resolvers: dict[str, Callable[..., Any]]) -> None:
        for field_name, resolver in resolvers.items():
            field = graphql_type.fields.get(field_name)
            if field is not None:
                field.resolve = resolver

    @staticmethod
    def _bind_json_scalar(schema: GraphQLSchema) -> None:
        json_type = schema.type_map["JSON"]
        json_type.serialize = lambda value: value
        json_type.parse_value = lambda value: value
        json_type.parse_literal = lambda node, variables=None: value_from_ast_untyped(node, variables)
