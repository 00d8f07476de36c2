"""neo-deploy - resource tree, role bindings and authorization.

Groups organise applications, clusters, templates and pipeline runs in a
tree; role bindings on tree nodes are inherited downwards; the authorizer
evaluates a caller's closest binding against the role's policy rules.
"""

# Initialize logging configuration on import
from .config.logging_config import setup_logging
setup_logging()

from .__version__ import __version__

from .config import DeploySettings, get_settings, ResourceType

from .core.exceptions import (
    NeoDeployError,
    ConfigurationError,
    LoadCheckError,
    InvalidRequestError,
    ResourceNotFoundError,
    TreeError,
    MembershipError,
    get_http_status_code,
    create_error_response,
)
from .core.shared import CurrentUser

from .features.groups import Group, NewGroup, UpdateGroup, GroupService
from .features.roles import Role, PolicyRule, RoleCatalog
from .features.members import Member, MemberType, PostMember, MemberService
from .features.authorization import (
    API,
    AttributesRecord,
    AuthorizationDecision,
    ReviewResult,
    Authorizer,
    AccessReviewService,
    RequestInfoFactory,
)

from .bootstrap import Services, create_services, create_memory_services, create_postgres_services, load_role_catalog

__all__ = [
    "__version__",

    # Configuration
    "DeploySettings",
    "get_settings",
    "ResourceType",

    # Exceptions
    "NeoDeployError",
    "ConfigurationError",
    "LoadCheckError",
    "InvalidRequestError",
    "ResourceNotFoundError",
    "TreeError",
    "MembershipError",
    "get_http_status_code",
    "create_error_response",

    # Identity
    "CurrentUser",

    # Resource tree
    "Group",
    "NewGroup",
    "UpdateGroup",
    "GroupService",

    # Roles
    "Role",
    "PolicyRule",
    "RoleCatalog",

    # Membership
    "Member",
    "MemberType",
    "PostMember",
    "MemberService",

    # Authorization
    "API",
    "AttributesRecord",
    "AuthorizationDecision",
    "ReviewResult",
    "Authorizer",
    "AccessReviewService",
    "RequestInfoFactory",

    # Wiring
    "Services",
    "create_services",
    "create_memory_services",
    "create_postgres_services",
    "load_role_catalog",
]
