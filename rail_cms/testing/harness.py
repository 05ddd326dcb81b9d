"""
Testing helpers for rail-cms.

This module provides small helpers for building registries, request
contexts and GraphQL test clients in unit/integration tests.
"""

from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Any, Mapping, Optional

from django.conf import settings as django_settings
from django.contrib.auth.models import AnonymousUser
from django.test import RequestFactory
from django.test.utils import override_settings
from graphql import ExecutionResult

from rail_cms.core.context import RequestContext
from rail_cms.core.registry import ListRegistry
from rail_cms.core.settings import ListEngineSettings
from rail_cms.defaults import merge_settings


def _normalize_headers(headers: Optional[Mapping[str, str]]) -> dict[str, str]:
    if not headers:
        return {}
    normalized: dict[str, str] = {}
    for key, value in headers.items():
        if not key:
            continue
        name = key.replace("-", "_").upper()
        if name not in {"CONTENT_TYPE", "CONTENT_LENGTH"} and not name.startswith("HTTP_"):
            name = f"HTTP_{name}"
        normalized[name] = value
    return normalized


def build_request(
    path: str = "/graphql/",
    *,
    user: Any = None,
    headers: Optional[Mapping[str, str]] = None,
    data: Optional[dict[str, Any]] = None,
    schema_name: str = "public",
):
    request = RequestFactory().generic(
        "POST",
        path,
        data=json.dumps(data or {}),
        content_type="application/json",
        **_normalize_headers(headers),
    )
    request.user = user or AnonymousUser()
    request.schema_name = schema_name
    return request


def build_registry(
    lists: Optional[Mapping[str, Mapping[str, Any]]] = None,
    *,
    settings: Optional[ListEngineSettings] = None,
    **overrides: Any,
) -> ListRegistry:
    """Registry with ``lists`` created in order; ``overrides`` patch the settings."""
    registry = ListRegistry(settings=settings or ListEngineSettings.load(**overrides))
    for key, config in (lists or {}).items():
        registry.create_list(key, config)
    return registry


def build_context(
    registry: ListRegistry,
    *,
    user_item: Optional[dict[str, Any]] = None,
    list_key: Optional[str] = None,
    schema_name: Optional[str] = None,
    skip_access_control: bool = False,
    request: Any = None,
) -> RequestContext:
    authentication = {"item": user_item, "list_key": list_key} if user_item else {}
    return registry.create_context(
        schema_name=schema_name,
        authentication=authentication,
        skip_access_control=skip_access_control,
        request=request,
    )


class RailCMSTestClient:
    def __init__(
        self,
        registry: ListRegistry,
        *,
        schema_name: Optional[str] = None,
        user_item: Optional[dict[str, Any]] = None,
        list_key: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
    ):
        self.registry = registry
        self.schema_name = schema_name or registry.settings.default_schema
        self.user_item = user_item
        self.list_key = list_key
        self.headers = dict(headers or {})
        self.last_context: Optional[RequestContext] = None

    async def execute(
        self,
        query: str,
        *,
        variables: Optional[dict[str, Any]] = None,
        user_item: Optional[dict[str, Any]] = None,
        skip_access_control: bool = False,
        operation_name: Optional[str] = None,
    ) -> ExecutionResult:
        request = build_request(
            headers=self.headers,
            data={"query": query, "variables": variables or {}},
            schema_name=self.schema_name,
        )
        context = build_context(
            self.registry,
            user_item=user_item or self.user_item,
            list_key=self.list_key,
            schema_name=self.schema_name,
            skip_access_control=skip_access_control,
            request=request,
        )
        self.last_context = context
        return await self.registry.execute(
            query, context=context, variables=variables, operation_name=operation_name
        )


@contextmanager
def override_rail_cms_settings(**overrides: Any):
    """Override ``settings.RAIL_CMS`` keys for the duration of the block."""
    current = getattr(django_settings, "RAIL_CMS", None) or {}
    with override_settings(RAIL_CMS=merge_settings(dict(current), overrides)):
        yield
