"""HTTP status code mapping for exceptions.

The control plane owns no transport, but the gateway that consumes it
renders errors through this mapping.
"""

from typing import Dict, Type

from .base import NeoDeployError
from .database import DatabaseError, QueryError, TransactionError
from .domain import (
    ConfigurationError,
    GrantHigherRoleError,
    GroupConflictWithApplicationError,
    GroupNotFoundError,
    HasChildrenError,
    InvalidRequestError,
    InvalidTransferError,
    InvalidTraversalIdsError,
    LoadCheckError,
    MemberExistError,
    MemberNotExistError,
    MembershipError,
    NameConflictError,
    NotPermittedError,
    PathConflictError,
    RemoveHigherRoleError,
    ResourceNotFoundError,
    RoleNotFoundError,
    SettingsError,
    TreeError,
    UnsupportedResourceTypeError,
)


HTTP_STATUS_MAP: Dict[Type[Exception], int] = {
    # 400 Bad Request
    InvalidRequestError: 400,
    UnsupportedResourceTypeError: 400,
    InvalidTransferError: 400,
    InvalidTraversalIdsError: 400,

    # 403 Forbidden
    MembershipError: 403,
    NotPermittedError: 403,
    GrantHigherRoleError: 403,
    RemoveHigherRoleError: 403,

    # 404 Not Found
    ResourceNotFoundError: 404,
    GroupNotFoundError: 404,
    RoleNotFoundError: 404,
    MemberNotExistError: 404,

    # 409 Conflict
    TreeError: 409,
    NameConflictError: 409,
    PathConflictError: 409,
    GroupConflictWithApplicationError: 409,
    HasChildrenError: 409,
    MemberExistError: 409,

    # 500 Internal Server Error
    ConfigurationError: 500,
    LoadCheckError: 500,
    SettingsError: 500,
    DatabaseError: 500,
    QueryError: 500,
    TransactionError: 500,
    NeoDeployError: 500,
}


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for exception.

    Walks the exception's MRO so the most specific mapping wins.

    Args:
        exception: The exception instance

    Returns:
        HTTP status code, 500 when the exception is not mapped
    """
    for exc_class in type(exception).__mro__:
        if exc_class in HTTP_STATUS_MAP:
            return HTTP_STATUS_MAP[exc_class]
    return 500
