"""Resource tree services."""

from .group_service import GroupService, build_children_with_level_struct, build_full_from_groups

__all__ = [
    "GroupService",
    "build_children_with_level_struct",
    "build_full_from_groups",
]
