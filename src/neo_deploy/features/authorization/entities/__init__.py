"""Authorization entities."""

from .attributes import AttributesRecord, READ_ONLY_VERBS
from .decision import (
    ADMIN_ALLOW,
    ANONYMOUS_USER,
    INTERNAL_ERROR,
    MEMBER_NOT_EXIST,
    NOT_CHECKED,
    RESOURCE_FORMAT_ERR,
    ROLE_NOT_EXIST,
    API,
    AuthorizationDecision,
    ReviewResult,
    allowed_by_rule_reason,
    denied_reason,
)
from .request_info import RequestInfo

__all__ = [
    "AttributesRecord",
    "READ_ONLY_VERBS",
    "ADMIN_ALLOW",
    "ANONYMOUS_USER",
    "INTERNAL_ERROR",
    "MEMBER_NOT_EXIST",
    "NOT_CHECKED",
    "RESOURCE_FORMAT_ERR",
    "ROLE_NOT_EXIST",
    "API",
    "AuthorizationDecision",
    "ReviewResult",
    "allowed_by_rule_reason",
    "denied_reason",
    "RequestInfo",
]
