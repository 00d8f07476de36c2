"""Resource tree entities."""

from .group import (
    Group,
    NewGroup,
    UpdateGroup,
    child_traversal_ids,
    format_traversal_ids,
    is_root,
    parse_traversal_ids,
)
from .resources import Application, Cluster, Template, PipelineRun
from .child import Child, Full, SearchParams
from .protocols import GroupRepository, ResourceRepository

__all__ = [
    "Group",
    "NewGroup",
    "UpdateGroup",
    "child_traversal_ids",
    "format_traversal_ids",
    "is_root",
    "parse_traversal_ids",
    "Application",
    "Cluster",
    "Template",
    "PipelineRun",
    "Child",
    "Full",
    "SearchParams",
    "GroupRepository",
    "ResourceRepository",
]
