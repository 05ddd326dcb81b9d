"""
Access control for lists and fields.

Parsing happens once per list when it is created; validation happens per
request through the ``RequestContext`` access getters.
"""

from .parsing import (
    FIELD_ACCESS_TYPES,
    LIST_ACCESS_TYPES,
    is_rule_enabled,
    parse_field_access,
    parse_list_access,
)
from .validation import (
    validate_auth_access_control,
    validate_field_access_control,
    validate_list_access_control,
)

__all__ = [
    "FIELD_ACCESS_TYPES",
    "LIST_ACCESS_TYPES",
    "is_rule_enabled",
    "parse_field_access",
    "parse_list_access",
    "validate_auth_access_control",
    "validate_field_access_control",
    "validate_list_access_control",
]
