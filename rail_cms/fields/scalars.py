"""
Scalar field types: primary key, text, numbers and booleans.
"""

from typing import Any, Callable

from .base import Implementation


class ScalarImplementation(Implementation):
    """Reads and writes a single scalar value stored under ``path``."""

    gql_type = "String"

    def gql_output_fields(self, schema_name: str) -> list[str]:
        return [f"{self.path}: {self.gql_type}"]

    def gql_output_field_resolvers(self, schema_name: str) -> dict[str, Callable[..., Any]]:
        path = self.path
        return {path: lambda item, info, **args: item.get(path)}

    def gql_query_input_fields(self, schema_name: str) -> list[str]:
        return [
            *self.equality_input_fields(self.gql_type),
            *self.in_input_fields(self.gql_type),
        ]

    def gql_create_input_fields(self, schema_name: str) -> list[str]:
        return [f"{self.path}: {self.gql_type}"]

    def gql_update_input_fields(self, schema_name: str) -> list[str]:
        return [f"{self.path}: {self.gql_type}"]


class AutoIncrementImplementation(ScalarImplementation):
    """Primary key generated by the storage adapter; never writable."""

    gql_type = "ID"
    is_orderable = True

    def gql_create_input_fields(self, schema_name: str) -> list[str]:
        return []

    def gql_update_input_fields(self, schema_name: str) -> list[str]:
        return []


class TextImplementation(ScalarImplementation):
    gql_type = "String"
    is_orderable = True

    def gql_query_input_fields(self, schema_name: str) -> list[str]:
        return [
            *self.equality_input_fields(self.gql_type),
            *self.string_input_fields(self.gql_type),
            *self.in_input_fields(self.gql_type),
        ]


class IntegerImplementation(ScalarImplementation):
    gql_type = "Int"
    is_orderable = True

    def gql_query_input_fields(self, schema_name: str) -> list[str]:
        return [
            *self.equality_input_fields(self.gql_type),
            *self.ordering_input_fields(self.gql_type),
            *self.in_input_fields(self.gql_type),
        ]


class FloatImplementation(IntegerImplementation):
    gql_type = "Float"


class CheckboxImplementation(ScalarImplementation):
    gql_type = "Boolean"

    def gql_query_input_fields(self, schema_name: str) -> list[str]:
        return self.equality_input_fields(self.gql_type)
