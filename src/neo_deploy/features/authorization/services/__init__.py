"""Authorization services."""

from .rule_matching import (
    api_group_matches,
    non_resource_url_matches,
    resource_matches,
    rule_allows,
    scope_matches,
    verb_matches,
)
from .request_info_factory import RequestInfoFactory
from .skipper import MethodAndPathSkipper, build_skippers
from .authorizer import Authorizer, parse_resource_id, visit_rules
from .access_review_service import AccessReviewService

__all__ = [
    "api_group_matches",
    "non_resource_url_matches",
    "resource_matches",
    "rule_allows",
    "scope_matches",
    "verb_matches",
    "RequestInfoFactory",
    "MethodAndPathSkipper",
    "build_skippers",
    "Authorizer",
    "parse_resource_id",
    "visit_rules",
    "AccessReviewService",
]
