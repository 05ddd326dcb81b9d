"""
RequestContext - per-request state shared by every resolver of a request.

The context carries the acting user, the schema variant being served, the
request-wide result counter used by query limits and the cache-control
collector. Access getters evaluate the parsed rules of a list or field for
the acting user.
"""

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Optional

from ..access import (
    validate_auth_access_control,
    validate_field_access_control,
    validate_list_access_control,
)
from .cache import CacheControl

if TYPE_CHECKING:
    from ..lists import List
    from .registry import ListRegistry


@dataclass
class RequestContext:
    """
    Attributes:
        registry: Registry owning every list of the schema
        schema_name: Schema variant the request is served from
        authentication: ``{"item": ..., "list_key": ...}`` for the acting user
        skip_access_control: When set, every access getter returns ``True``
        total_results: Items returned so far by list queries of this request
        max_total_results: Ceiling for ``total_results``
        cache_control: Collector for cache hints set during the request
        request: Optional transport request object
    """

    registry: "ListRegistry"
    schema_name: str = "public"
    authentication: dict[str, Any] = field(default_factory=dict)
    skip_access_control: bool = False
    total_results: int = 0
    max_total_results: float = float("inf")
    cache_control: CacheControl = field(default_factory=CacheControl)
    request: Any = None

    def get_list_by_key(self, key: str) -> Optional["List"]:
        return self.registry.get_list_by_key(key)

    async def get_list_access_control_for_user(
        self,
        list_key: str,
        original_input: Any,
        operation: str,
        *,
        gql_name: Optional[str] = None,
        item_id: Any = None,
        item_ids: Any = None,
    ) -> Any:
        if self.skip_access_control:
            return True
        lst = self.registry.get_list_by_key(list_key)
        return await validate_list_access_control(
            access=lst.access[self.schema_name],
            list_key=list_key,
            operation=operation,
            authentication=self.authentication,
            original_input=original_input,
            gql_name=gql_name,
            item_id=item_id,
            item_ids=item_ids,
            context=self,
        )

    async def get_field_access_control_for_user(
        self,
        list_key: str,
        field_key: str,
        original_input: Any,
        existing_item: Any,
        operation: str,
        *,
        gql_name: Optional[str] = None,
        item_id: Any = None,
        item_ids: Any = None,
    ) -> bool:
        if self.skip_access_control:
            return True
        lst = self.registry.get_list_by_key(list_key)
        return await validate_field_access_control(
            access=lst.fields_by_path[field_key].access[self.schema_name],
            list_key=list_key,
            field_key=field_key,
            operation=operation,
            authentication=self.authentication,
            original_input=original_input,
            existing_item=existing_item,
            gql_name=gql_name,
            item_id=item_id,
            item_ids=item_ids,
            context=self,
        )

    async def get_auth_access_control_for_user(
        self, list_key: str, *, gql_name: Optional[str] = None
    ) -> Any:
        if self.skip_access_control:
            return True
        lst = self.registry.get_list_by_key(list_key)
        return await validate_auth_access_control(
            access=lst.access[self.schema_name],
            list_key=list_key,
            authentication=self.authentication,
            gql_name=gql_name,
            context=self,
        )

    def create_sudo(self) -> "RequestContext":
        """A context for the same user that bypasses every access check."""
        return replace(
            self,
            skip_access_control=True,
            total_results=0,
            cache_control=CacheControl(),
        )
