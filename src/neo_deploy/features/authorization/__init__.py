"""Authorization feature.

Evaluates a caller's effective role against an attribute-described action,
and reviews batches of url and method pairs.
"""

from .entities import (
    API,
    AttributesRecord,
    AuthorizationDecision,
    RequestInfo,
    ReviewResult,
    ADMIN_ALLOW,
    ANONYMOUS_USER,
    INTERNAL_ERROR,
    MEMBER_NOT_EXIST,
    NOT_CHECKED,
    RESOURCE_FORMAT_ERR,
    ROLE_NOT_EXIST,
)
from .services import (
    AccessReviewService,
    Authorizer,
    MethodAndPathSkipper,
    RequestInfoFactory,
    build_skippers,
    rule_allows,
)

__all__ = [
    # Entities
    "API",
    "AttributesRecord",
    "AuthorizationDecision",
    "RequestInfo",
    "ReviewResult",

    # Reasons
    "ADMIN_ALLOW",
    "ANONYMOUS_USER",
    "INTERNAL_ERROR",
    "MEMBER_NOT_EXIST",
    "NOT_CHECKED",
    "RESOURCE_FORMAT_ERR",
    "ROLE_NOT_EXIST",

    # Services
    "AccessReviewService",
    "Authorizer",
    "MethodAndPathSkipper",
    "RequestInfoFactory",
    "build_skippers",
    "rule_allows",
]
