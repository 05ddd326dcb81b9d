"""
Cache hint collection for a single request.

Lists and fields contribute hints while they resolve; the request keeps the
most restrictive combination (lowest ``max_age``, ``PRIVATE`` over
``PUBLIC``), which a transport layer can turn into a Cache-Control header.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Union


class CacheScope(str, Enum):
    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"


@dataclass(frozen=True)
class CacheHint:
    max_age: Optional[int] = None
    scope: Optional[CacheScope] = None

    @classmethod
    def coerce(cls, value: Union["CacheHint", Mapping[str, Any], None]) -> Optional["CacheHint"]:
        """Accept a CacheHint or a ``{"max_age"/"maxAge", "scope"}`` mapping."""
        if value is None or isinstance(value, CacheHint):
            return value
        if not isinstance(value, Mapping):
            raise TypeError(f"Cache hints must be a mapping or CacheHint, got {type(value).__name__}")
        max_age = value.get("max_age", value.get("maxAge"))
        scope = value.get("scope")
        return cls(max_age=max_age, scope=CacheScope(scope) if scope else None)


class CacheControl:
    """Accumulates the hints set during one request."""

    def __init__(self, default_max_age: Optional[int] = None):
        self.default_max_age = default_max_age
        self.hints: list[CacheHint] = []

    def set_cache_hint(self, hint: Union[CacheHint, Mapping[str, Any], None]) -> None:
        hint = CacheHint.coerce(hint)
        if hint is not None:
            self.hints.append(hint)

    @property
    def overall_policy(self) -> CacheHint:
        max_ages = [hint.max_age for hint in self.hints if hint.max_age is not None]
        if self.default_max_age is not None:
            max_ages.append(self.default_max_age)
        scopes = {hint.scope for hint in self.hints if hint.scope is not None}
        scope = CacheScope.PRIVATE if CacheScope.PRIVATE in scopes else (
            CacheScope.PUBLIC if scopes else None
        )
        return CacheHint(max_age=min(max_ages) if max_ages else None, scope=scope)

    def header_value(self) -> Optional[str]:
        policy = self.overall_policy
        if not policy.max_age:
            return None
        scope = (policy.scope or CacheScope.PUBLIC).value.lower()
        return f"max-age={policy.max_age}, {scope}"
