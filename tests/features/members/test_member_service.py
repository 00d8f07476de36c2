"""Tests for the member service."""

import pytest

from neo_deploy.config.constants import ResourceType
from neo_deploy.core.exceptions import (
    GrantHigherRoleError,
    MemberNotExistError,
    NotPermittedError,
    RemoveHigherRoleError,
    ResourceNotFoundError,
    RoleNotFoundError,
    UnsupportedResourceTypeError,
)
from neo_deploy.features.members.entities import MemberType, PostMember


async def _grant(member_service, caller, resource_type, resource_id, user, role):
    return await member_service.create_member(caller, PostMember(
        resource_type=resource_type,
        resource_id=resource_id,
        member_name_id=user.id,
        role=role,
    ))


class TestMemberResolution:
    """Test effective binding resolution across the tree."""

    @pytest.mark.asyncio
    async def test_creator_owns_new_groups(self, member_service, tree, alice):
        member = await member_service.effective_member_of(ResourceType.GROUPS, tree.backend.id, alice.id)

        assert member.role == "owner"
        assert member.resource_id == tree.backend.id

    @pytest.mark.asyncio
    async def test_inherited_binding(self, member_service, tree, alice, bob):
        await _grant(member_service, alice, ResourceType.GROUPS, tree.platform.id, bob, "maintainer")

        member = await member_service.effective_member_of(ResourceType.CLUSTERS, tree.cluster.id, bob.id)

        assert member.role == "maintainer"
        assert member.resource_type is ResourceType.GROUPS
        assert member.resource_id == tree.platform.id

    @pytest.mark.asyncio
    async def test_closest_binding_wins(self, member_service, tree, alice, bob):
        await _grant(member_service, alice, ResourceType.GROUPS, tree.platform.id, bob, "guest")
        await _grant(member_service, alice, ResourceType.APPLICATIONS, tree.application.id, bob, "maintainer")

        on_application = await member_service.effective_member_of(
            ResourceType.APPLICATIONS, tree.application.id, bob.id
        )
        on_backend = await member_service.effective_member_of(ResourceType.GROUPS, tree.backend.id, bob.id)

        assert on_application.role == "maintainer"
        assert on_backend.role == "guest"

    @pytest.mark.asyncio
    async def test_effective_members_are_deduplicated(self, member_service, tree, alice):
        members = await member_service.effective_members(ResourceType.APPLICATIONS, tree.application.id)

        assert len(members) == 1
        assert members[0].resource_id == tree.backend.id

    @pytest.mark.asyncio
    async def test_pipelinerun_resolves_through_cluster(self, member_service, tree, alice, bob):
        await _grant(member_service, alice, ResourceType.CLUSTERS, tree.cluster.id, bob, "pe")

        member = await member_service.effective_member_of(ResourceType.PIPELINERUNS, tree.pipelinerun.id, bob.id)

        assert member.role == "pe"
        assert member.resource_type is ResourceType.CLUSTERS

    @pytest.mark.asyncio
    async def test_template_resolves_through_group(self, member_service, tree, alice):
        member = await member_service.effective_member_of(ResourceType.TEMPLATES, tree.template.id, alice.id)

        assert member.resource_id == tree.platform.id

    @pytest.mark.asyncio
    async def test_root_has_no_members(self, member_service, tree):
        assert await member_service.effective_members(ResourceType.GROUPS, 0) == []

    @pytest.mark.asyncio
    async def test_missing_resource(self, member_service):
        with pytest.raises(ResourceNotFoundError):
            await member_service.effective_members(ResourceType.CLUSTERS, 404)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("resource_type", ["members", "widgets"])
    async def test_unsupported_resource_type(self, member_service, resource_type):
        with pytest.raises(UnsupportedResourceTypeError):
            await member_service.effective_members(resource_type, 1)

    @pytest.mark.asyncio
    async def test_direct_member_ignores_inheritance(self, member_service, tree, alice):
        assert await member_service.direct_member(ResourceType.APPLICATIONS, tree.application.id, alice.id) is None
        assert await member_service.direct_member(ResourceType.GROUPS, tree.backend.id, alice.id) is not None


class TestMemberMutations:
    """Test binding changes and the escalation guard."""

    @pytest.mark.asyncio
    async def test_grant_equal_role(self, member_service, tree, alice, bob, carol):
        await _grant(member_service, alice, ResourceType.GROUPS, tree.platform.id, bob, "maintainer")

        member = await _grant(member_service, bob, ResourceType.GROUPS, tree.backend.id, carol, "maintainer")

        assert member.role == "maintainer"
        assert member.granted_by == bob.id

    @pytest.mark.asyncio
    async def test_grant_higher_role(self, member_service, tree, alice, bob, carol):
        await _grant(member_service, alice, ResourceType.GROUPS, tree.platform.id, bob, "maintainer")

        with pytest.raises(GrantHigherRoleError):
            await _grant(member_service, bob, ResourceType.GROUPS, tree.backend.id, carol, "owner")

    @pytest.mark.asyncio
    async def test_grant_without_binding(self, member_service, tree, bob, carol):
        with pytest.raises(NotPermittedError):
            await _grant(member_service, bob, ResourceType.GROUPS, tree.backend.id, carol, "guest")

    @pytest.mark.asyncio
    async def test_grant_unknown_role(self, member_service, tree, alice, bob):
        with pytest.raises(RoleNotFoundError):
            await _grant(member_service, alice, ResourceType.GROUPS, tree.backend.id, bob, "ghost")

    @pytest.mark.asyncio
    async def test_grant_on_unbindable_type(self, member_service, tree, alice, bob):
        with pytest.raises(UnsupportedResourceTypeError):
            await _grant(member_service, alice, ResourceType.PIPELINERUNS, tree.pipelinerun.id, bob, "guest")

    @pytest.mark.asyncio
    async def test_grant_existing_binding_updates_in_place(self, member_service, tree, alice, bob):
        first = await _grant(member_service, alice, ResourceType.GROUPS, tree.backend.id, bob, "guest")

        second = await _grant(member_service, alice, ResourceType.GROUPS, tree.backend.id, bob, "maintainer")

        assert second.id == first.id
        assert second.role == "maintainer"

    @pytest.mark.asyncio
    async def test_admin_bypasses_guard(self, member_service, tree, admin, bob):
        member = await _grant(member_service, admin, ResourceType.GROUPS, tree.ops.id, bob, "owner")

        assert member.role == "owner"

    @pytest.mark.asyncio
    async def test_update_requires_outranking_current_role(
        self, member_service, member_repository, tree, alice, bob
    ):
        await _grant(member_service, alice, ResourceType.GROUPS, tree.platform.id, bob, "maintainer")
        alice_binding = await member_repository.get_direct(
            ResourceType.GROUPS, tree.backend.id, MemberType.USER, alice.id
        )

        with pytest.raises(GrantHigherRoleError):
            await member_service.update_member(bob, alice_binding.id, "guest")

    @pytest.mark.asyncio
    async def test_update_requires_outranking_new_role(self, member_service, tree, alice, bob, carol):
        await _grant(member_service, alice, ResourceType.GROUPS, tree.platform.id, bob, "maintainer")
        guest = await _grant(member_service, alice, ResourceType.GROUPS, tree.backend.id, carol, "guest")

        with pytest.raises(GrantHigherRoleError):
            await member_service.update_member(bob, guest.id, "owner")

        assert (await member_service.get_member(guest.id)).role == "guest"

    @pytest.mark.asyncio
    async def test_update_within_own_rank(self, member_service, tree, alice, bob, carol):
        await _grant(member_service, alice, ResourceType.GROUPS, tree.platform.id, bob, "maintainer")
        guest = await _grant(member_service, alice, ResourceType.GROUPS, tree.backend.id, carol, "guest")

        updated = await member_service.update_member(bob, guest.id, "maintainer")

        assert updated.role == "maintainer"
        assert updated.granted_by == bob.id

    @pytest.mark.asyncio
    async def test_update_same_role_is_noop(self, member_service, tree, alice, bob):
        member = await _grant(member_service, alice, ResourceType.GROUPS, tree.backend.id, bob, "guest")

        unchanged = await member_service.update_member(alice, member.id, "guest")

        assert unchanged == member

    @pytest.mark.asyncio
    async def test_update_missing_member(self, member_service, alice):
        with pytest.raises(MemberNotExistError):
            await member_service.update_member(alice, 404, "guest")

    @pytest.mark.asyncio
    async def test_remove_higher_role(self, member_service, member_repository, tree, alice, bob):
        await _grant(member_service, alice, ResourceType.GROUPS, tree.platform.id, bob, "maintainer")
        alice_binding = await member_repository.get_direct(
            ResourceType.GROUPS, tree.backend.id, MemberType.USER, alice.id
        )

        with pytest.raises(RemoveHigherRoleError):
            await member_service.remove_member(bob, alice_binding.id)

    @pytest.mark.asyncio
    async def test_remove_member(self, member_service, tree, alice, bob):
        member = await _grant(member_service, alice, ResourceType.GROUPS, tree.backend.id, bob, "maintainer")

        await member_service.remove_member(alice, member.id)

        with pytest.raises(MemberNotExistError):
            await member_service.get_member(member.id)
        inherited = await member_service.effective_member_of(ResourceType.GROUPS, tree.backend.id, bob.id)
        assert inherited is None
