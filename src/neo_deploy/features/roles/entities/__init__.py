"""Role catalog entities."""

from .role import PolicyRule, Role, RoleCompareResult
from .definition import PolicyRuleDefinition, RoleDefinition, RoleSpec

__all__ = [
    "PolicyRule",
    "Role",
    "RoleCompareResult",
    "PolicyRuleDefinition",
    "RoleDefinition",
    "RoleSpec",
]
