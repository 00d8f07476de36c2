"""Constants and enums for neo-deploy.

Resource type names double as the API resource segment parsed from request
URLs, so their values must stay in sync with the gateway routes.
"""

from enum import Enum
from typing import Final, FrozenSet, Tuple


# Tree sentinels
ROOT_GROUP_ID: Final[int] = 0
TRAVERSAL_IDS_SEPARATOR: Final[str] = ","


class ResourceType(str, Enum):
    """Resource types addressable by the authorizer."""

    GROUPS = "groups"
    APPLICATIONS = "applications"
    CLUSTERS = "clusters"
    TEMPLATES = "templates"
    PIPELINERUNS = "pipelineruns"
    MEMBERS = "members"

    def __str__(self) -> str:
        return self.value


class ChildType(str, Enum):
    """Kinds of nodes returned by tree listings."""

    GROUP = "group"
    APPLICATION = "application"
    CLUSTER = "cluster"


class VisibilityLevel(str, Enum):
    """Group visibility levels."""

    PRIVATE = "private"
    INTERNAL = "internal"
    PUBLIC = "public"


class DefaultRoles:
    """Role names referenced by the control plane itself."""

    OWNER: Final[str] = "owner"
    MAINTAINER: Final[str] = "maintainer"


# Authorization defaults
DEFAULT_NOT_CHECKED_RESOURCES: Final[FrozenSet[str]] = frozenset(
    {ResourceType.MEMBERS.value, ResourceType.PIPELINERUNS.value}
)
DEFAULT_API_PREFIXES: Final[Tuple[str, ...]] = ("apis",)
DEFAULT_SKIP_PATTERN: Final[str] = (
    r"(^/apis/front/.*)|(^/health)|(^/metrics)|(^/apis/login)"
    r"|(^/apis/core/v1/roles)|(^/apis/internal/.*)"
    r"|(^/login/oauth/authorize)|(^/login/oauth/access_token)"
    r"|(^/apis/core/v1/templates$)"
)
ANY_METHOD: Final[str] = "*"
DEFAULT_SKIP_RULES: Final[Tuple[Tuple[str, str], ...]] = (
    (ANY_METHOD, DEFAULT_SKIP_PATTERN),
    ("GET", r"^/apis/core/v1/idps/endpoints"),
    ("GET", r"^/apis/core/v1/login/callback"),
    ("POST", r"^/apis/core/v1/logout"),
    ("POST", r"^/apis/core/v1/users/self"),
)

# Pagination defaults
DEFAULT_PAGE_NUMBER: Final[int] = 1
DEFAULT_PAGE_SIZE: Final[int] = 20
MAX_PAGE_SIZE: Final[int] = 100
