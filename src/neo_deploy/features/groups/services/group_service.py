"""Group service.

Business surface of the resource tree consumed by the application and
cluster controllers. Invariants are enforced by the repository inside its
transactions; this service validates input, decorates read models with full
names and paths, and logs every structural change.
"""

import logging
from collections import Counter, defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

from ....config.constants import (
    DEFAULT_PAGE_NUMBER,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    ROOT_GROUP_ID,
    DefaultRoles,
    ResourceType,
)
from ....core.exceptions import GroupNotFoundError, InvalidRequestError, ResourceNotFoundError
from ....core.shared import CurrentUser
from ...members.entities.member import Member, MemberType
from ...roles.services.role_catalog import RoleCatalog
from ..entities.child import Child, Full, SearchParams
from ..entities.group import Group, NewGroup, UpdateGroup, is_root
from ..entities.protocols import GroupRepository, ResourceRepository
from ..entities.resources import Application

logger = logging.getLogger(__name__)


def build_full_from_groups(groups: Sequence[Group]) -> Full:
    """Full name and path of the last group of a root-first chain."""
    full = Full()
    for group in groups:
        full = full.join(group.name, group.path)
    return full


class GroupService:
    """Service for resource tree operations."""

    def __init__(
        self,
        group_repository: GroupRepository,
        resource_repository: ResourceRepository,
        role_catalog: Optional[RoleCatalog] = None,
        creator_role: Optional[str] = DefaultRoles.OWNER,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int = MAX_PAGE_SIZE,
    ):
        """Initialize with repositories.

        Args:
            group_repository: Persistence for groups
            resource_repository: Lookups for leaf resources
            role_catalog: Used to confirm ``creator_role`` exists
            creator_role: Role granted to the creator of a group, None to disable
            default_page_size: Page size used when none is given
            max_page_size: Upper bound for page sizes
        """
        self._groups = group_repository
        self._resources = resource_repository
        self._role_catalog = role_catalog
        self._creator_role = creator_role
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size

    # Commands

    async def create_group(self, caller: CurrentUser, new_group: NewGroup) -> Group:
        """Create a group and bind its creator."""
        group = Group(
            id=0,
            name=new_group.name,
            path=new_group.path,
            parent_id=new_group.parent_id,
            description=new_group.description,
            visibility_level=new_group.visibility_level,
            created_by=caller.id,
            updated_by=caller.id,
        )
        created = await self._groups.create(group, owner=self._creator_binding(caller))
        logger.info(
            f"User {caller.name} created group {created.id} ({created.path}) "
            f"under parent {created.parent_id}"
        )
        return created

    def _creator_binding(self, caller: CurrentUser) -> Optional[Member]:
        if not self._creator_role:
            return None
        if self._role_catalog is not None and not self._role_catalog.has_role(self._creator_role):
            logger.warning(f"Creator role '{self._creator_role}' is not defined, creator binding skipped")
            return None
        return Member(
            id=0,
            resource_type=ResourceType.GROUPS,
            resource_id=0,
            role=self._creator_role,
            member_type=MemberType.USER,
            member_name_id=caller.id,
            granted_by=caller.id,
            created_by=caller.id,
        )

    async def update_group(self, caller: CurrentUser, group_id: int, update: UpdateGroup) -> Group:
        """Update basic information of a group."""
        updated = await self._groups.update_basic(group_id, update, updated_by=caller.id)
        logger.info(f"User {caller.name} updated group {group_id}")
        return updated

    async def delete_group(self, group_id: int) -> None:
        """Delete a group that has no children."""
        await self._groups.delete(group_id)
        logger.info(f"Deleted group {group_id}")

    async def transfer_group(self, caller: CurrentUser, group_id: int, new_parent_id: int) -> Group:
        """Move a group, with its whole subtree, under another parent."""
        if new_parent_id < 0:
            raise InvalidRequestError(f"Invalid parent id: {new_parent_id}")
        group = await self._groups.transfer(group_id, new_parent_id, updated_by=caller.id)
        logger.info(
            f"User {caller.name} transferred group {group_id} under {new_parent_id}, "
            f"traversal ids now {group.traversal_ids}"
        )
        return group

    # Queries

    async def get_group(self, group_id: int) -> Group:
        group = await self._groups.get_by_id(group_id)
        if group is None:
            raise GroupNotFoundError(group_id)
        return group

    async def get_ancestors(self, group_id: int) -> List[Group]:
        """Ancestor chain of a group, root first, ending with the group itself."""
        group = await self.get_group(group_id)
        ancestors = await self._groups.get_by_ids(group.traversal_id_list)
        if len(ancestors) != len(group.traversal_id_list):
            logger.error(f"Group {group_id} references missing ancestors: {group.traversal_ids}")
            raise GroupNotFoundError(group.traversal_ids)
        return ancestors

    async def get_full(self, group: Group) -> Full:
        """Full name and path of a group."""
        return build_full_from_groups(await self.get_ancestors(group.id))

    async def get_by_name_fuzzy(self, name: str) -> List[Group]:
        return await self._groups.get_by_name_fuzzily(name)

    async def get_by_path(self, full_path: str) -> Child:
        """Resolve ``/a/b/...`` to a group, an application or a cluster."""
        segments = [segment for segment in full_path.strip("/").split("/") if segment]
        if not segments:
            raise InvalidRequestError(f"Invalid path: '{full_path}'")

        candidates = await self._groups.get_by_paths(segments)
        by_parent_and_path = {(g.parent_id, g.path): g for g in candidates}

        group: Optional[Group] = None
        full = Full()
        consumed = 0
        for segment in segments:
            parent_id = group.id if group else ROOT_GROUP_ID
            child = by_parent_and_path.get((parent_id, segment))
            if child is None:
                break
            group = child
            full = full.join(child.name, child.path)
            consumed += 1

        remaining = segments[consumed:]
        if not remaining:
            result = Child.from_group(group, full)
            result.children_count = await self._groups.count_by_parent_id(group.id)
            return result
        if group is None or len(remaining) > 2:
            raise ResourceNotFoundError("path", full_path)

        application = await self._resources.get_application_by_name_under_group(group.id, remaining[0])
        if application is None:
            raise ResourceNotFoundError("path", full_path)
        application_full = full.join(application.name, application.name)
        if len(remaining) == 1:
            return Child.from_application(application, application_full)

        cluster = await self._resources.get_cluster_by_name_under_application(application.id, remaining[1])
        if cluster is None:
            raise ResourceNotFoundError("path", full_path)
        return Child.from_cluster(cluster, application_full.join(cluster.name, cluster.name))

    def _page(self, page_number: int, page_size: int) -> Tuple[int, int]:
        if page_number < 1:
            raise InvalidRequestError(f"Invalid page number: {page_number}")
        if page_size <= 0:
            page_size = self._default_page_size
        page_size = min(page_size, self._max_page_size)
        return (page_number - 1) * page_size, page_size

    async def _parent_full(self, parent_id: int) -> Full:
        if is_root(parent_id):
            return Full()
        return await self.get_full(await self.get_group(parent_id))

    async def _children_counts(self, group_ids: Sequence[int]) -> Dict[int, int]:
        if not group_ids:
            return {}
        subgroups = await self._groups.get_subgroups_under_parent_ids(group_ids)
        return Counter(g.parent_id for g in subgroups)

    async def list_children(
        self,
        parent_id: int,
        page_number: int = DEFAULT_PAGE_NUMBER,
        page_size: int = 0,
    ) -> Tuple[List[Child], int]:
        """Sub-groups then applications of a group, with full names and paths."""
        offset, limit = self._page(page_number, page_size)
        full = await self._parent_full(parent_id)
        children, total = await self._groups.list_children(parent_id, offset, limit)

        counts = await self._children_counts([c.id for c in children if c.is_group])
        for child in children:
            child_full = full.join(child.name, child.path)
            child.full_name = child_full.full_name
            child.full_path = child_full.full_path
            if child.is_group:
                child.children_count = counts.get(child.id, 0)
        return children, total

    async def list_subgroups(
        self,
        parent_id: int,
        page_number: int = DEFAULT_PAGE_NUMBER,
        page_size: int = 0,
    ) -> Tuple[List[Child], int]:
        """Sub-groups of a group, with full names and paths."""
        offset, limit = self._page(page_number, page_size)
        full = await self._parent_full(parent_id)
        subgroups, total = await self._groups.list_subgroups(parent_id, offset, limit)

        counts = await self._children_counts([g.id for g in subgroups])
        children = []
        for group in subgroups:
            child = Child.from_group(group, full.join(group.name, group.path))
            child.children_count = counts.get(group.id, 0)
            children.append(child)
        return children, total

    async def search_children(self, params: SearchParams) -> Tuple[List[Child], int]:
        """Search groups and applications under a group by name.

        Matches are returned nested under their ancestors, starting from the
        direct children of ``params.group_id``.
        """
        if not params.filter:
            return await self.list_children(params.group_id, params.page_number, params.page_size)

        if is_root(params.group_id):
            matched_groups = await self._groups.get_by_name_fuzzily(params.filter)
        else:
            await self.get_group(params.group_id)
            matched_groups = await self._groups.get_by_id_name_fuzzily(params.group_id, params.filter)

        applications = await self._resources.get_applications_by_name_fuzzily(params.filter)
        owners = {g.id: g for g in await self._groups.get_by_ids([a.group_id for a in applications])}
        applications = [
            a for a in applications
            if a.group_id in owners and owners[a.group_id].is_in_subtree_of(params.group_id)
        ]

        ancestor_ids: List[int] = []
        for group in list(matched_groups) + [owners[a.group_id] for a in applications]:
            ancestor_ids.extend(group.traversal_id_list)
        groups = await self._groups.get_by_ids(ancestor_ids)

        children = build_children_with_level_struct(params.group_id, groups, applications)
        children.sort(key=lambda c: c.updated_at, reverse=True)
        return children, len(children)


def build_children_with_level_struct(
    group_id: int, groups: Sequence[Group], applications: Sequence[Application]
) -> List[Child]:
    """Nest groups and applications under their parents.

    ``groups`` must contain every ancestor of each group and application.
    Returns the nodes whose parent is ``group_id``.
    """
    id_to_full: Dict[int, Full] = {}
    for group in sorted(groups, key=lambda g: g.depth):
        id_to_full[group.id] = id_to_full.get(group.parent_id, Full()).join(group.name, group.path)

    parent_to_children: Dict[int, List[Child]] = defaultdict(list)
    first_level: List[Child] = []

    for application in applications:
        parent_full = id_to_full.get(application.group_id)
        if parent_full is None:
            continue
        child = Child.from_application(application, parent_full.join(application.name, application.name))
        parent_to_children[application.group_id].append(child)
        if application.group_id == group_id:
            first_level.append(child)

    # Deepest first so every group's children are complete before it is attached
    for group in sorted(groups, key=lambda g: g.depth, reverse=True):
        child = Child.from_group(group, id_to_full[group.id])
        nested = parent_to_children.get(group.id)
        if nested:
            nested.sort(key=lambda c: 0 if c.is_group else 1)
            child.children = nested
            child.children_count = len(nested)
        parent_to_children[group.parent_id].append(child)
        if group.parent_id == group_id:
            first_level.append(child)

    return first_level
