"""Resource tree repositories: in-memory and asyncpg implementations."""

from .memory_group_repository import MemoryGroupRepository
from .memory_resource_repository import MemoryResourceRepository
from .group_repository import AsyncPGGroupRepository, build_group_from_row
from .resource_repository import AsyncPGResourceRepository

__all__ = [
    "MemoryGroupRepository",
    "MemoryResourceRepository",
    "AsyncPGGroupRepository",
    "AsyncPGResourceRepository",
    "build_group_from_row",
]
