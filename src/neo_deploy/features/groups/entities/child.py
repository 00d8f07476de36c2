"""Read models returned by tree listings and path resolution."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from ....config.constants import ChildType, ROOT_GROUP_ID
from .group import Group
from .resources import Application, Cluster


@dataclass(frozen=True)
class Full:
    """Human-readable full name (``a/b``) and URL path (``/a/b``) of a node."""

    full_name: str = ""
    full_path: str = ""

    def join(self, name: str, path: str) -> "Full":
        """Full of a direct child of this node."""
        if not self.full_path:
            return Full(full_name=name, full_path=f"/{path}")
        return Full(full_name=f"{self.full_name}/{name}", full_path=f"{self.full_path}/{path}")


@dataclass
class Child:
    """A group, application or cluster seen as a node of the tree."""

    id: int
    name: str
    path: str
    type: str
    parent_id: int = ROOT_GROUP_ID
    traversal_ids: str = ""
    description: str = ""
    visibility_level: str = ""
    full_name: str = ""
    full_path: str = ""
    children_count: int = 0
    children: List["Child"] = field(default_factory=list)
    updated_at: Optional[datetime] = None

    @classmethod
    def from_group(cls, group: Group, full: Optional[Full] = None) -> "Child":
        full = full or Full()
        return cls(
            id=group.id,
            name=group.name,
            path=group.path,
            type=ChildType.GROUP.value,
            parent_id=group.parent_id,
            traversal_ids=group.traversal_ids,
            description=group.description,
            visibility_level=group.visibility_level,
            full_name=full.full_name,
            full_path=full.full_path,
            updated_at=group.updated_at,
        )

    @classmethod
    def from_application(cls, application: Application, full: Optional[Full] = None) -> "Child":
        full = full or Full()
        return cls(
            id=application.id,
            name=application.name,
            path=application.name,
            type=ChildType.APPLICATION.value,
            parent_id=application.group_id,
            description=application.description,
            full_name=full.full_name,
            full_path=full.full_path,
            updated_at=application.updated_at,
        )

    @classmethod
    def from_cluster(cls, cluster: Cluster, full: Optional[Full] = None) -> "Child":
        full = full or Full()
        return cls(
            id=cluster.id,
            name=cluster.name,
            path=cluster.name,
            type=ChildType.CLUSTER.value,
            parent_id=cluster.application_id,
            full_name=full.full_name,
            full_path=full.full_path,
            updated_at=cluster.updated_at,
        )

    @property
    def is_group(self) -> bool:
        return self.type == ChildType.GROUP.value


@dataclass
class SearchParams:
    """Parameters for searching the children of a group."""

    group_id: int = ROOT_GROUP_ID
    filter: str = ""
    page_number: int = 1
    page_size: int = 0
