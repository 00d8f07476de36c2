"""Member service.

Resolves effective role bindings across the resource tree and guards
binding mutations against privilege escalation.

Resolution walks from the queried resource up to the root and keeps the
first binding seen per identity, so the binding closest to the resource
always wins over an inherited one.
"""

import logging
from typing import Awaitable, Callable, Dict, List, Optional, Type

from ....config.constants import ResourceType
from ....core.exceptions import (
    GrantHigherRoleError,
    MembershipError,
    MemberNotExistError,
    NotPermittedError,
    RemoveHigherRoleError,
    ResourceNotFoundError,
    RoleNotFoundError,
    UnsupportedResourceTypeError,
)
from ....core.shared import CurrentUser
from ...groups.entities.group import is_root
from ...groups.entities.protocols import GroupRepository, ResourceRepository
from ...roles.services.role_catalog import RoleCatalog
from ..entities.member import Member, MemberType, PostMember, deduplicate_members
from ..entities.protocols import MemberRepository

logger = logging.getLogger(__name__)

# Resource types that can carry bindings directly
BINDABLE_RESOURCE_TYPES = frozenset({
    ResourceType.GROUPS,
    ResourceType.APPLICATIONS,
    ResourceType.CLUSTERS,
    ResourceType.TEMPLATES,
})


class MemberService:
    """Service for role binding resolution and management."""

    def __init__(
        self,
        member_repository: MemberRepository,
        group_repository: GroupRepository,
        resource_repository: ResourceRepository,
        role_catalog: RoleCatalog,
    ):
        self._members = member_repository
        self._groups = group_repository
        self._resources = resource_repository
        self._roles = role_catalog
        self._strategies: Dict[ResourceType, Callable[[int], Awaitable[List[Member]]]] = {
            ResourceType.GROUPS: self._group_members,
            ResourceType.APPLICATIONS: self._application_members,
            ResourceType.CLUSTERS: self._cluster_members,
            ResourceType.TEMPLATES: self._template_members,
            ResourceType.PIPELINERUNS: self._pipelinerun_members,
        }

    # Resolution strategies, closest bindings first

    async def _group_members(self, group_id: int) -> List[Member]:
        if is_root(group_id):
            return []
        group = await self._groups.get_by_id(group_id)
        if group is None:
            raise ResourceNotFoundError(ResourceType.GROUPS.value, group_id)

        members: List[Member] = []
        for ancestor_id in reversed(group.traversal_id_list):
            members.extend(await self._members.list_direct_by_resource(ResourceType.GROUPS, ancestor_id))
        return members

    async def _application_members(self, application_id: int) -> List[Member]:
        application = await self._resources.get_application(application_id)
        if application is None:
            raise ResourceNotFoundError(ResourceType.APPLICATIONS.value, application_id)
        members = await self._members.list_direct_by_resource(ResourceType.APPLICATIONS, application_id)
        members.extend(await self._group_members(application.group_id))
        return members

    async def _cluster_members(self, cluster_id: int) -> List[Member]:
        cluster = await self._resources.get_cluster(cluster_id)
        if cluster is None:
            raise ResourceNotFoundError(ResourceType.CLUSTERS.value, cluster_id)
        members = await self._members.list_direct_by_resource(ResourceType.CLUSTERS, cluster_id)
        members.extend(await self._application_members(cluster.application_id))
        return members

    async def _template_members(self, template_id: int) -> List[Member]:
        template = await self._resources.get_template(template_id)
        if template is None:
            raise ResourceNotFoundError(ResourceType.TEMPLATES.value, template_id)
        members = await self._members.list_direct_by_resource(ResourceType.TEMPLATES, template_id)
        members.extend(await self._group_members(template.group_id))
        return members

    async def _pipelinerun_members(self, pipelinerun_id: int) -> List[Member]:
        pipelinerun = await self._resources.get_pipelinerun(pipelinerun_id)
        if pipelinerun is None:
            raise ResourceNotFoundError(ResourceType.PIPELINERUNS.value, pipelinerun_id)
        return await self._cluster_members(pipelinerun.cluster_id)

    # Resolution

    def _resource_type(self, resource_type) -> ResourceType:
        try:
            resource_type = ResourceType(resource_type)
        except ValueError:
            raise UnsupportedResourceTypeError(resource_type)
        if resource_type not in self._strategies:
            raise UnsupportedResourceTypeError(resource_type)
        return resource_type

    async def direct_member(
        self,
        resource_type: ResourceType,
        resource_id: int,
        member_name_id: int,
        member_type: MemberType = MemberType.USER,
    ) -> Optional[Member]:
        """Binding recorded exactly on the resource, without walking the tree."""
        return await self._members.get_direct(
            self._resource_type(resource_type), resource_id, member_type, member_name_id
        )

    async def effective_members(self, resource_type: ResourceType, resource_id: int) -> List[Member]:
        """Bindings on the resource and its ancestors, one per identity.

        Raises:
            ResourceNotFoundError: if the resource or one of its owners is missing
            UnsupportedResourceTypeError: if the type cannot carry bindings
        """
        resource_type = self._resource_type(resource_type)
        members = await self._strategies[resource_type](resource_id)
        return deduplicate_members(members)

    async def list_member(self, resource_type: ResourceType, resource_id: int) -> List[Member]:
        return await self.effective_members(resource_type, resource_id)

    async def effective_member_of(
        self,
        resource_type: ResourceType,
        resource_id: int,
        member_name_id: int,
        member_type: MemberType = MemberType.USER,
    ) -> Optional[Member]:
        """The caller's closest binding on the resource, if any."""
        for member in await self.effective_members(resource_type, resource_id):
            if member.member_type == member_type and member.member_name_id == member_name_id:
                return member
        return None

    async def get_member_of_resource(
        self, caller: CurrentUser, resource_type: ResourceType, resource_id: int
    ) -> Optional[Member]:
        return await self.effective_member_of(resource_type, resource_id, caller.id)

    async def get_member(self, member_id: int) -> Member:
        member = await self._members.get_by_id(member_id)
        if member is None:
            raise MemberNotExistError(member_id)
        return member

    # Escalation guard

    async def require_permission_equal_or_higher(
        self,
        caller: CurrentUser,
        role: str,
        resource_type: ResourceType,
        resource_id: int,
        error_class: Type[MembershipError] = GrantHigherRoleError,
    ) -> None:
        """Ensure the caller ranks at least ``role`` on the resource.

        Raises:
            NotPermittedError: if the caller has no effective binding
            error_class: if the caller's role ranks below ``role``
        """
        if caller.is_admin:
            return

        member = await self.effective_member_of(resource_type, resource_id, caller.id)
        if member is None:
            raise NotPermittedError(
                f"user {caller.name} is not a member of {resource_type}/{resource_id}",
                details={"user_id": caller.id},
            )

        result = self._roles.compare(member.role, role)
        if not result.is_bigger_or_equal:
            raise error_class(
                f"user {caller.name} with role '{member.role}' cannot manage role '{role}'",
                details={"user_id": caller.id, "caller_role": member.role, "role": role},
            )

    # Mutations

    async def create_member(self, caller: CurrentUser, post: PostMember) -> Member:
        """Bind an identity to a role, upgrading an existing direct binding in place."""
        resource_type = self._resource_type(post.resource_type)
        if resource_type not in BINDABLE_RESOURCE_TYPES:
            raise UnsupportedResourceTypeError(resource_type)
        if not self._roles.has_role(post.role):
            raise RoleNotFoundError(post.role)

        existing = await self._members.get_direct(
            resource_type, post.resource_id, post.member_type, post.member_name_id
        )
        if existing is not None:
            logger.info(f"Member {existing.base_info()} already exists, updating role to '{post.role}'")
            return await self.update_member(caller, existing.id, post.role)

        await self.require_permission_equal_or_higher(
            caller, post.role, resource_type, post.resource_id, GrantHigherRoleError
        )
        created = await self._members.create(Member(
            id=0,
            resource_type=resource_type,
            resource_id=post.resource_id,
            role=post.role,
            member_type=post.member_type,
            member_name_id=post.member_name_id,
            granted_by=caller.id,
            created_by=caller.id,
        ))
        logger.info(f"User {caller.name} granted '{created.role}' as {created.base_info()}")
        return created

    async def update_member(self, caller: CurrentUser, member_id: int, role: str) -> Member:
        """Change the role of a binding; the caller must outrank both roles."""
        if not self._roles.has_role(role):
            raise RoleNotFoundError(role)
        member = await self.get_member(member_id)

        for checked_role in (member.role, role):
            await self.require_permission_equal_or_higher(
                caller, checked_role, member.resource_type, member.resource_id, GrantHigherRoleError
            )

        if member.role == role:
            return member
        updated = await self._members.update_role(member_id, role, granted_by=caller.id)
        logger.info(f"User {caller.name} changed {updated.base_info()} from '{member.role}' to '{role}'")
        return updated

    async def remove_member(self, caller: CurrentUser, member_id: int) -> None:
        """Remove a binding; the caller must outrank its role."""
        member = await self.get_member(member_id)
        await self.require_permission_equal_or_higher(
            caller, member.role, member.resource_type, member.resource_id, RemoveHigherRoleError
        )
        await self._members.delete(member_id)
        logger.info(f"User {caller.name} removed {member.base_info()}")
