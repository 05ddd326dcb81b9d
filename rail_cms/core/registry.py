"""
ListRegistry implementation.

The registry owns every list of a project, the storage adapter they share and
one executable GraphQL schema per schema variant.
"""

import logging
import threading
from dataclasses import replace
from typing import Any, Callable, Mapping, Optional

from django.utils.module_loading import import_string
from graphql import ExecutionResult, GraphQLSchema, graphql

from ..lists import List
from .context import RequestContext
from .exceptions import ListConfigurationError
from .schema import SchemaBuilder
from .settings import ListEngineSettings

logger = logging.getLogger(__name__)


class ListRegistry:
    """
    Central registry of lists.

    Example:
        registry = ListRegistry()
        registry.create_list("User", {"fields": {"name": {"type": Text}}})
        context = registry.create_context()
        result = await registry.execute("{ allUsers { id name } }", context=context)
    """

    def __init__(
        self,
        settings: Optional[ListEngineSettings] = None,
        adapter: Any = None,
    ):
        self.settings = settings or ListEngineSettings.load()
        self.adapter = adapter if adapter is not None else import_string(self.settings.adapter)()
        self.lists: dict[str, List] = {}
        self.aux_lists: dict[str, List] = {}
        self.registered_types: set[Any] = set()
        self._schema_cache: dict[str, GraphQLSchema] = {}
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"<ListRegistry lists={list(self.lists)}>"

    # ------------------------------------------------------------------ #
    # Lists
    # ------------------------------------------------------------------ #
    def create_list(
        self, key: str, config: Mapping[str, Any], *, is_aux_list: bool = False
    ) -> List:
        """Create and register a list. Configuration errors are raised here."""
        if key in self.lists:
            raise ListConfigurationError(f"Invalid list name '{key}': list already exists", list_key=key)

        lst = List(
            key,
            config,
            get_list_by_key=self.get_list_by_key,
            query_helper=self.query_helper,
            adapter=self.adapter,
            default_access=self.settings.default_access,
            register_type=self.register_type,
            create_aux_list=self.create_aux_list,
            schema_names=self.settings.schema_names,
            is_aux_list=is_aux_list,
            settings=self.settings,
        )
        with self._lock:
            self.lists[key] = lst
            self._schema_cache.clear()
        logger.info(f"Registered list: {key}")
        return lst

    def create_aux_list(self, key: str, config: Mapping[str, Any]) -> List:
        """Create an auxiliary list, or return the one already registered under ``key``."""
        if key in self.aux_lists:
            return self.aux_lists[key]
        lst = self.create_list(key, config, is_aux_list=True)
        self.aux_lists[key] = lst
        return lst

    def get_list_by_key(self, key: str) -> Optional[List]:
        return self.lists.get(key)

    def register_type(self, field_type: Any) -> None:
        if field_type is not None:
            self.registered_types.add(field_type)

    def init_lists(self) -> list[List]:
        """Initialise the fields of every list, including aux lists created on the way."""
        initialised: set[str] = set()
        while len(initialised) < len(self.lists):
            for key, lst in list(self.lists.items()):
                if key in initialised:
                    continue
                lst.init_fields()
                initialised.add(key)
        return list(self.lists.values())

    # ------------------------------------------------------------------ #
    # Requests
    # ------------------------------------------------------------------ #
    def create_context(
        self,
        *,
        schema_name: Optional[str] = None,
        authentication: Optional[dict[str, Any]] = None,
        skip_access_control: bool = False,
        request: Any = None,
    ) -> RequestContext:
        schema_name = schema_name or self.settings.default_schema
        if schema_name not in self.settings.schema_names:
            raise ValueError(f"Unknown schema name '{schema_name}'")
        return RequestContext(
            registry=self,
            schema_name=schema_name,
            authentication=dict(authentication or {}),
            skip_access_control=skip_access_control,
            max_total_results=self.settings.request_max_total_results,
            request=request,
        )

    def get_schema(self, schema_name: Optional[str] = None) -> GraphQLSchema:
        """Executable schema of one variant, built on first use."""
        schema_name = schema_name or self.settings.default_schema
        with self._lock:
            schema = self._schema_cache.get(schema_name)
        if schema is not None:
            return schema

        self.init_lists()
        schema = SchemaBuilder(self, schema_name).build()
        with self._lock:
            self._schema_cache[schema_name] = schema
        logger.info(f"Built schema: {schema_name}")
        return schema

    def get_type_defs(self, schema_name: Optional[str] = None) -> str:
        self.init_lists()
        return SchemaBuilder(self, schema_name or self.settings.default_schema).get_type_defs()

    async def execute(
        self,
        query: str,
        *,
        context: Optional[RequestContext] = None,
        variables: Optional[dict[str, Any]] = None,
        operation_name: Optional[str] = None,
    ) -> ExecutionResult:
        context = context or self.create_context()
        return await graphql(
            self.get_schema(context.schema_name),
            query,
            context_value=context,
            variable_values=variables,
            operation_name=operation_name,
        )

    def query_helper(self, context: RequestContext) -> Callable[..., Any]:
        """
        Build the ``actions["query"]`` helper handed to hooks.

        The helper runs a GraphQL operation for the same user, optionally
        bypassing access control.
        """

        async def query(
            query_string: str,
            *,
            variables: Optional[dict[str, Any]] = None,
            skip_access_control: bool = False,
            schema_name: Optional[str] = None,
        ) -> ExecutionResult:
            query_context = context.create_sudo() if skip_access_control else context
            if schema_name and schema_name != query_context.schema_name:
                query_context = replace(query_context, schema_name=schema_name)
            return await self.execute(query_string, context=query_context, variables=variables)

        return query
