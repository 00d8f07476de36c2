"""Resource tree feature.

Groups form a tree addressed by materialized paths; applications, clusters,
templates and pipeline runs hang off it as leaves.
"""

from .entities import (
    Group,
    NewGroup,
    UpdateGroup,
    Application,
    Cluster,
    Template,
    PipelineRun,
    Child,
    Full,
    SearchParams,
    GroupRepository,
    ResourceRepository,
    child_traversal_ids,
    format_traversal_ids,
    parse_traversal_ids,
    is_root,
)
from .repositories import (
    MemoryGroupRepository,
    MemoryResourceRepository,
    AsyncPGGroupRepository,
    AsyncPGResourceRepository,
)
from .services import GroupService

__all__ = [
    # Entities
    "Group",
    "NewGroup",
    "UpdateGroup",
    "Application",
    "Cluster",
    "Template",
    "PipelineRun",
    "Child",
    "Full",
    "SearchParams",
    "child_traversal_ids",
    "format_traversal_ids",
    "parse_traversal_ids",
    "is_root",

    # Protocols
    "GroupRepository",
    "ResourceRepository",

    # Repositories
    "MemoryGroupRepository",
    "MemoryResourceRepository",
    "AsyncPGGroupRepository",
    "AsyncPGResourceRepository",

    # Services
    "GroupService",
]
