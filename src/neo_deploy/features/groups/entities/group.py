"""Group domain entity.

Groups form the resource tree. Each group stores its materialized path as a
comma-joined list of ids from the root down to itself (``traversal_ids``),
which lets ancestors be listed without walking parent pointers.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import List, Optional, Sequence

from ....config.constants import ROOT_GROUP_ID, TRAVERSAL_IDS_SEPARATOR, VisibilityLevel
from ....core.exceptions import InvalidRequestError, InvalidTraversalIdsError


def format_traversal_ids(ids: Sequence[int]) -> str:
    """Encode an ordered id chain as ``"1,2,3"``."""
    return TRAVERSAL_IDS_SEPARATOR.join(str(i) for i in ids)


def parse_traversal_ids(traversal_ids: str) -> List[int]:
    """Decode ``"1,2,3"`` into ``[1, 2, 3]``.

    Raises:
        InvalidTraversalIdsError: if any segment is not a positive integer
    """
    if not traversal_ids:
        return []
    ids = []
    for part in traversal_ids.split(TRAVERSAL_IDS_SEPARATOR):
        part = part.strip()
        if not part.isdecimal() or int(part) == ROOT_GROUP_ID:
            raise InvalidTraversalIdsError(traversal_ids)
        ids.append(int(part))
    return ids


def child_traversal_ids(parent_traversal_ids: str, child_id: int) -> str:
    """Traversal ids of a child given its parent's (empty for the root)."""
    if not parent_traversal_ids:
        return str(child_id)
    return f"{parent_traversal_ids}{TRAVERSAL_IDS_SEPARATOR}{child_id}"


def is_root(group_id: int) -> bool:
    """The root sentinel is never a stored group."""
    return group_id == ROOT_GROUP_ID


@dataclass
class Group:
    """A node of the resource tree."""

    id: int
    name: str
    path: str
    parent_id: int = ROOT_GROUP_ID
    traversal_ids: str = ""
    description: str = ""
    visibility_level: str = VisibilityLevel.PRIVATE.value
    created_by: int = 0
    updated_by: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def traversal_id_list(self) -> List[int]:
        """Ids from the root down to this group."""
        return parse_traversal_ids(self.traversal_ids)

    @property
    def ancestor_ids(self) -> List[int]:
        """Ids of strict ancestors, root first."""
        return self.traversal_id_list[:-1]

    @property
    def depth(self) -> int:
        return len(self.traversal_id_list)

    def is_descendant_of(self, group_id: int) -> bool:
        """Whether ``group_id`` is a strict ancestor of this group."""
        return group_id != self.id and group_id in self.traversal_id_list

    def is_in_subtree_of(self, group_id: int) -> bool:
        """Whether this group is ``group_id`` or one of its descendants."""
        return is_root(group_id) or group_id in self.traversal_id_list


def _validate_name_and_path(name: Optional[str], path: Optional[str]) -> None:
    if name is not None and not name.strip():
        raise InvalidRequestError("Group name cannot be empty")
    if path is not None:
        if not path.strip():
            raise InvalidRequestError("Group path cannot be empty")
        if "/" in path:
            raise InvalidRequestError(f"Group path cannot contain '/': {path}")


@dataclass
class NewGroup:
    """Payload for creating a group."""

    name: str
    path: str
    parent_id: int = ROOT_GROUP_ID
    description: str = ""
    visibility_level: str = VisibilityLevel.PRIVATE.value

    def __post_init__(self):
        _validate_name_and_path(self.name, self.path)
        if self.parent_id < 0:
            raise InvalidRequestError(f"Invalid parent id: {self.parent_id}")


@dataclass
class UpdateGroup:
    """Payload for updating basic group information.

    Fields left as None keep their current value.
    """

    name: Optional[str] = None
    path: Optional[str] = None
    description: Optional[str] = None
    visibility_level: Optional[str] = None

    def __post_init__(self):
        _validate_name_and_path(self.name, self.path)

    def apply_to(self, group: Group) -> Group:
        """Return a copy of ``group`` with the provided fields applied."""
        return replace(
            group,
            name=self.name if self.name is not None else group.name,
            path=self.path if self.path is not None else group.path,
            description=self.description if self.description is not None else group.description,
            visibility_level=(
                self.visibility_level if self.visibility_level is not None
                else group.visibility_level
            ),
        )
