"""Memory group repository.

ONLY in-memory implementation - every mutation runs its checks and writes
while holding the store lock, and computes all rows before touching the
table so a failed check leaves the tree untouched.
"""

import logging
from collections import defaultdict, deque
from dataclasses import replace
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

from ....core.exceptions import (
    GroupConflictWithApplicationError,
    GroupNotFoundError,
    HasChildrenError,
    InvalidTransferError,
    NameConflictError,
    PathConflictError,
)
from ....config.constants import ResourceType
from ....database.memory import MemoryStore, utc_now
from ..entities.child import Child
from ..entities.group import Group, UpdateGroup, child_traversal_ids, is_root

if TYPE_CHECKING:
    from ...members.entities.member import Member

logger = logging.getLogger(__name__)


def _newest_first(items):
    return sorted(items, key=lambda item: (item.updated_at, item.id), reverse=True)


class MemoryGroupRepository:
    """In-memory GroupRepository backed by a shared MemoryStore."""

    def __init__(self, store: MemoryStore):
        self._store = store

    # Checks (caller holds the store lock)

    def _require_group(self, group_id: int) -> Group:
        group = self._store.groups.get(group_id)
        if group is None:
            raise GroupNotFoundError(group_id)
        return group

    def _require_parent(self, parent_id: int) -> Optional[Group]:
        if is_root(parent_id):
            return None
        return self._require_group(parent_id)

    def _check_conflicts(self, parent_id: int, name: str, path: str, exclude_id: Optional[int] = None) -> None:
        for application in self._store.applications.values():
            if application.group_id == parent_id and application.name in (name, path):
                raise GroupConflictWithApplicationError(parent_id, application.name)

        for sibling in self._store.groups.values():
            if sibling.parent_id != parent_id or sibling.id == exclude_id:
                continue
            if sibling.name == name:
                raise NameConflictError(parent_id, name)
            if sibling.path == path:
                raise PathConflictError(parent_id, path)

    def _has_children(self, group_id: int) -> bool:
        return (
            any(g.parent_id == group_id for g in self._store.groups.values())
            or any(a.group_id == group_id for a in self._store.applications.values())
            or any(t.group_id == group_id for t in self._store.templates.values())
        )

    # Commands

    async def create(self, group: Group, owner: Optional["Member"] = None) -> Group:
        async with self._store.lock:
            parent = self._require_parent(group.parent_id)
            self._check_conflicts(group.parent_id, group.name, group.path)

            now = utc_now()
            group_id = self._store.next_id("groups")
            stored = replace(
                group,
                id=group_id,
                traversal_ids=child_traversal_ids(parent.traversal_ids if parent else "", group_id),
                created_at=now,
                updated_at=now,
            )
            if owner is not None:
                self._store.insert_member(replace(owner, resource_id=group_id))
            self._store.groups[group_id] = stored

        logger.debug(f"Stored group {group_id} with traversal ids {stored.traversal_ids}")
        return replace(stored)

    async def update_basic(self, group_id: int, update: UpdateGroup, updated_by: int = 0) -> Group:
        async with self._store.lock:
            existing = self._require_group(group_id)
            group = update.apply_to(existing)
            self._check_conflicts(existing.parent_id, group.name, group.path, exclude_id=group_id)

            stored = replace(group, updated_by=updated_by, updated_at=utc_now())
            self._store.groups[group_id] = stored
        return replace(stored)

    async def delete(self, group_id: int) -> None:
        async with self._store.lock:
            self._require_group(group_id)
            if self._has_children(group_id):
                raise HasChildrenError(group_id)

            del self._store.groups[group_id]
            # Bindings on a deleted group can never be reached again
            stale = [
                m.id for m in self._store.members.values()
                if m.resource_type == ResourceType.GROUPS and m.resource_id == group_id
            ]
            for member_id in stale:
                del self._store.members[member_id]

    async def transfer(self, group_id: int, new_parent_id: int, updated_by: int = 0) -> Group:
        async with self._store.lock:
            group = self._require_group(group_id)
            new_parent = self._require_parent(new_parent_id)
            if new_parent_id == group_id or (
                new_parent is not None and group_id in new_parent.traversal_id_list
            ):
                raise InvalidTransferError(group_id, new_parent_id)
            self._check_conflicts(new_parent_id, group.name, group.path, exclude_id=group_id)

            # Re-derive the subtree's traversal ids from parent pointers
            children_by_parent: Dict[int, List[Group]] = defaultdict(list)
            for candidate in self._store.groups.values():
                children_by_parent[candidate.parent_id].append(candidate)

            new_traversal_ids: Dict[int, str] = {}
            queue = deque([(group_id, child_traversal_ids(new_parent.traversal_ids if new_parent else "", group_id))])
            while queue:
                current_id, traversal_ids = queue.popleft()
                new_traversal_ids[current_id] = traversal_ids
                for child in children_by_parent.get(current_id, []):
                    queue.append((child.id, child_traversal_ids(traversal_ids, child.id)))

            now = utc_now()
            updates = {
                gid: replace(self._store.groups[gid], traversal_ids=traversal_ids)
                for gid, traversal_ids in new_traversal_ids.items()
            }
            updates[group_id] = replace(
                updates[group_id], parent_id=new_parent_id, updated_by=updated_by, updated_at=now
            )
            self._store.groups.update(updates)

        logger.debug(f"Rewrote traversal ids of {len(updates)} groups under {group_id}")
        return replace(updates[group_id])

    # Queries

    async def get_by_id(self, group_id: int) -> Optional[Group]:
        group = self._store.groups.get(group_id)
        return replace(group) if group else None

    async def get_by_ids(self, group_ids: Sequence[int]) -> List[Group]:
        result = []
        seen = set()
        for group_id in group_ids:
            group = self._store.groups.get(group_id)
            if group is not None and group_id not in seen:
                seen.add(group_id)
                result.append(replace(group))
        return result

    async def get_by_paths(self, paths: Sequence[str]) -> List[Group]:
        wanted = set(paths)
        return [replace(g) for g in self._store.groups.values() if g.path in wanted]

    async def get_child_by_path(self, parent_id: int, path: str) -> Optional[Group]:
        for group in self._store.groups.values():
            if group.parent_id == parent_id and group.path == path:
                return replace(group)
        return None

    async def get_by_name_or_path_under_parent(self, parent_id: int, name: str, path: str) -> List[Group]:
        return [
            replace(g) for g in self._store.groups.values()
            if g.parent_id == parent_id and (g.name == name or g.path == path)
        ]

    async def get_by_name_fuzzily(self, name: str) -> List[Group]:
        needle = name.lower()
        return [replace(g) for g in self._store.groups.values() if needle in g.name.lower()]

    async def get_by_id_name_fuzzily(self, group_id: int, name: str) -> List[Group]:
        needle = name.lower()
        return [
            replace(g) for g in self._store.groups.values()
            if g.is_descendant_of(group_id) and needle in g.name.lower()
        ]

    async def get_subgroups_under_parent_ids(self, parent_ids: Sequence[int]) -> List[Group]:
        wanted = set(parent_ids)
        return [replace(g) for g in self._store.groups.values() if g.parent_id in wanted]

    async def count_by_parent_id(self, parent_id: int) -> int:
        return sum(1 for g in self._store.groups.values() if g.parent_id == parent_id)

    async def list_subgroups(self, parent_id: int, offset: int, limit: int) -> Tuple[List[Group], int]:
        subgroups = _newest_first(g for g in self._store.groups.values() if g.parent_id == parent_id)
        return [replace(g) for g in subgroups[offset:offset + limit]], len(subgroups)

    async def list_children(self, parent_id: int, offset: int, limit: int) -> Tuple[List[Child], int]:
        subgroups = _newest_first(g for g in self._store.groups.values() if g.parent_id == parent_id)
        applications = _newest_first(
            a for a in self._store.applications.values() if a.group_id == parent_id
        )
        children = [Child.from_group(g) for g in subgroups]
        children.extend(Child.from_application(a) for a in applications)
        return children[offset:offset + limit], len(children)
