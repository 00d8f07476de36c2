"""Role catalog feature.

A static, load-once table of named roles, each an ordered list of policy
rules, ranked by an explicit priority list.
"""

from .entities import (
    PolicyRule,
    Role,
    RoleCompareResult,
    PolicyRuleDefinition,
    RoleDefinition,
    RoleSpec,
)
from .services import RoleCatalog

__all__ = [
    "PolicyRule",
    "Role",
    "RoleCompareResult",
    "PolicyRuleDefinition",
    "RoleDefinition",
    "RoleSpec",
    "RoleCatalog",
]
