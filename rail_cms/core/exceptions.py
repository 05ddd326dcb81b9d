"""
Custom exceptions for the list engine.

Request-time failures are GraphQL errors so they surface in the ``errors``
array of a response with a stable ``code`` extension. Configuration problems
are raised while lists are built and are fatal to startup.
"""

from typing import Any, Optional

from django.core.exceptions import ImproperlyConfigured
from graphql import GraphQLError


class ListConfigurationError(ImproperlyConfigured):
    """Raised when a list or one of its fields is misconfigured."""

    def __init__(self, message: str, list_key: Optional[str] = None):
        self.list_key = list_key
        super().__init__(message)


class RailCMSGraphQLError(GraphQLError):
    """
    Base class for request-time errors.

    Attributes:
        data: Structured payload exposed to clients through ``extensions``
        internal_data: Diagnostic payload that is never sent to clients
    """

    code = "INTERNAL"
    default_message = "An unexpected error occurred."

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        data: Optional[dict[str, Any]] = None,
        internal_data: Optional[dict[str, Any]] = None,
    ):
        self.data = dict(data or {})
        self.internal_data = dict(internal_data or {})
        super().__init__(
            message or self.default_message,
            extensions={"code": self.code, "data": self.data},
        )


class AccessDeniedError(RailCMSGraphQLError):
    """Raised when list or field access is denied for the current user."""

    code = "ACCESS_DENIED"
    default_message = "You do not have access to this resource"

    @property
    def restricted_fields(self) -> list[str]:
        return list(self.data.get("restrictedFields", []))


class ValidationFailureError(RailCMSGraphQLError):
    """Raised once per failed validation phase with every collected message."""

    code = "VALIDATION_FAILURE"
    default_message = "You attempted to perform an invalid mutation"

    @property
    def messages(self) -> list[str]:
        return list(self.data.get("messages", []))

    @property
    def errors(self) -> list[dict[str, Any]]:
        return list(self.data.get("errors", []))


class LimitsExceededError(RailCMSGraphQLError):
    """Raised when a query exceeds ``maxResults`` or ``maxTotalResults``."""

    code = "LIMITS_EXCEEDED"
    default_message = "Your request exceeded server limits"

    @property
    def limit_type(self) -> Optional[str]:
        return self.data.get("type")

    @property
    def limit(self) -> Any:
        return self.data.get("limit")


def throw_access_denied(
    type: str,
    context: Any,
    target: Optional[str],
    internal_data: Optional[dict[str, Any]] = None,
    data: Optional[dict[str, Any]] = None,
) -> None:
    """
    Raise an AccessDeniedError.

    ``type`` is ``"query"`` or ``"mutation"``. Item ids go into
    ``internal_data`` so a denial never reveals whether an item exists.
    """
    authentication = getattr(context, "authentication", None) or {}
    authed_item = authentication.get("item")
    raise AccessDeniedError(
        data={"type": type, "target": target, **(data or {})},
        internal_data={
            "authedId": authed_item.get("id") if isinstance(authed_item, dict) else None,
            "authedListKey": authentication.get("list_key"),
            **(internal_data or {}),
        },
    )
