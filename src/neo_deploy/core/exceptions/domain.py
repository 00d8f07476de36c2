"""Domain-specific exceptions for neo-deploy.

Groups the error kinds raised by the resource tree, the role catalog,
the membership resolver and the request parsing helpers.
"""

from typing import Any, Optional

from .base import NeoDeployError


# Configuration Errors
class ConfigurationError(NeoDeployError):
    """Raised when there's a configuration issue."""
    pass


class LoadCheckError(ConfigurationError):
    """Raised when the role definition document is inconsistent."""
    pass


class SettingsError(ConfigurationError):
    """Raised when runtime settings are invalid."""
    pass


# Request Errors
class InvalidRequestError(NeoDeployError):
    """Raised when an incoming request or payload is malformed."""
    pass


class UnsupportedResourceTypeError(InvalidRequestError):
    """Raised when a resource type has no membership resolution strategy."""

    def __init__(self, resource_type: Any, **kwargs):
        super().__init__(
            f"Unsupported resource type: {resource_type}",
            details={"resource_type": str(resource_type)},
            **kwargs
        )


# Lookup Errors
class ResourceNotFoundError(NeoDeployError):
    """Raised when a requested resource does not exist."""

    def __init__(self, resource_type: str, identifier: Any, message: Optional[str] = None, **kwargs):
        super().__init__(
            message or f"{resource_type} not found: {identifier}",
            details={"resource_type": resource_type, "identifier": str(identifier)},
            **kwargs
        )
        self.resource_type = resource_type
        self.identifier = identifier


class GroupNotFoundError(ResourceNotFoundError):
    """Raised when a group does not exist."""

    def __init__(self, group_id: Any, **kwargs):
        super().__init__("group", group_id, **kwargs)


class RoleNotFoundError(NeoDeployError):
    """Raised when a role name is not defined in the role catalog."""

    def __init__(self, role: str, **kwargs):
        super().__init__(f"role not found: {role}", details={"role": role}, **kwargs)
        self.role = role


# Tree Errors
class TreeError(NeoDeployError):
    """Base class for resource tree mutation conflicts."""
    pass


class NameConflictError(TreeError):
    """Raised when a sibling group already uses the same name."""

    def __init__(self, parent_id: int, name: str, **kwargs):
        super().__init__(
            f"name '{name}' already exists under parent {parent_id}",
            details={"parent_id": parent_id, "name": name},
            **kwargs
        )


class PathConflictError(TreeError):
    """Raised when a sibling group already uses the same path."""

    def __init__(self, parent_id: int, path: str, **kwargs):
        super().__init__(
            f"path '{path}' already exists under parent {parent_id}",
            details={"parent_id": parent_id, "path": path},
            **kwargs
        )


class GroupConflictWithApplicationError(TreeError):
    """Raised when a group name or path collides with a sibling application."""

    def __init__(self, parent_id: int, name: str, **kwargs):
        super().__init__(
            f"an application named '{name}' already exists under group {parent_id}",
            details={"parent_id": parent_id, "name": name},
            **kwargs
        )


class HasChildrenError(TreeError):
    """Raised when deleting a group that still has children."""

    def __init__(self, group_id: int, **kwargs):
        super().__init__(
            f"group {group_id} has children and cannot be deleted",
            details={"group_id": group_id},
            **kwargs
        )


class InvalidTransferError(TreeError):
    """Raised when a group would be moved under itself or its descendant."""

    def __init__(self, group_id: int, new_parent_id: int, **kwargs):
        super().__init__(
            f"group {group_id} cannot be transferred under {new_parent_id}",
            details={"group_id": group_id, "new_parent_id": new_parent_id},
            **kwargs
        )


class InvalidTraversalIdsError(TreeError):
    """Raised when a stored traversal id string cannot be decoded."""

    def __init__(self, traversal_ids: str, **kwargs):
        super().__init__(
            f"invalid traversal ids: '{traversal_ids}'",
            details={"traversal_ids": traversal_ids},
            **kwargs
        )


# Membership Errors
class MembershipError(NeoDeployError):
    """Base class for membership authorization conflicts."""
    pass


class MemberExistError(MembershipError):
    """Raised when a binding for the same identity already exists."""
    pass


class MemberNotExistError(MembershipError):
    """Raised when the targeted binding does not exist."""

    def __init__(self, member_id: Any, **kwargs):
        super().__init__(
            f"member not exist: {member_id}",
            details={"member_id": str(member_id)},
            **kwargs
        )


class NotPermittedError(MembershipError):
    """Raised when the caller has no effective binding on the resource."""
    pass


class GrantHigherRoleError(MembershipError):
    """Raised when the caller grants a role ranked above their own."""
    pass


class RemoveHigherRoleError(MembershipError):
    """Raised when the caller removes a binding ranked above their own."""
    pass
