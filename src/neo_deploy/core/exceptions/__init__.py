"""Exception hierarchy for neo-deploy."""

from .base import NeoDeployError, create_error_response, get_http_status_code
from .database import DatabaseError, QueryError, TransactionError
from .domain import (
    ConfigurationError,
    LoadCheckError,
    SettingsError,
    InvalidRequestError,
    UnsupportedResourceTypeError,
    ResourceNotFoundError,
    GroupNotFoundError,
    RoleNotFoundError,
    TreeError,
    NameConflictError,
    PathConflictError,
    GroupConflictWithApplicationError,
    HasChildrenError,
    InvalidTransferError,
    InvalidTraversalIdsError,
    MembershipError,
    MemberExistError,
    MemberNotExistError,
    NotPermittedError,
    GrantHigherRoleError,
    RemoveHigherRoleError,
)
from .http_mapping import HTTP_STATUS_MAP

__all__ = [
    # Base
    "NeoDeployError",
    "create_error_response",
    "get_http_status_code",
    "HTTP_STATUS_MAP",

    # Database
    "DatabaseError",
    "QueryError",
    "TransactionError",

    # Configuration
    "ConfigurationError",
    "LoadCheckError",
    "SettingsError",

    # Requests
    "InvalidRequestError",
    "UnsupportedResourceTypeError",

    # Lookups
    "ResourceNotFoundError",
    "GroupNotFoundError",
    "RoleNotFoundError",

    # Tree
    "TreeError",
    "NameConflictError",
    "PathConflictError",
    "GroupConflictWithApplicationError",
    "HasChildrenError",
    "InvalidTransferError",
    "InvalidTraversalIdsError",

    # Membership
    "MembershipError",
    "MemberExistError",
    "MemberNotExistError",
    "NotPermittedError",
    "GrantHigherRoleError",
    "RemoveHigherRoleError",
]
