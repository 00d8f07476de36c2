"""Tests for the in-memory resource tree repositories."""

import asyncio

import pytest

from neo_deploy.config.constants import ResourceType
from neo_deploy.core.exceptions import (
    GroupConflictWithApplicationError,
    GroupNotFoundError,
    NameConflictError,
    ResourceNotFoundError,
)
from neo_deploy.features.groups.entities import Application, Cluster, Group, PipelineRun
from neo_deploy.features.members.entities import Member, MemberType


class TestMemoryGroupRepository:
    """Test atomic tree mutations against the memory store."""

    @pytest.mark.asyncio
    async def test_create_commits_owner_binding_with_group(self, group_repository, store):
        owner = Member(
            id=0, resource_type=ResourceType.GROUPS, resource_id=0, role="owner",
            member_type=MemberType.USER, member_name_id=1,
        )

        group = await group_repository.create(Group(id=0, name="Platform", path="platform"), owner=owner)

        assert group.traversal_ids == str(group.id)
        bindings = list(store.members.values())
        assert len(bindings) == 1
        assert bindings[0].resource_id == group.id

    @pytest.mark.asyncio
    async def test_failed_create_leaves_no_binding(self, group_repository, store):
        owner = Member(
            id=0, resource_type=ResourceType.GROUPS, resource_id=0, role="owner",
            member_type=MemberType.USER, member_name_id=1,
        )
        await group_repository.create(Group(id=0, name="Platform", path="platform"), owner=owner)

        with pytest.raises(NameConflictError):
            await group_repository.create(Group(id=0, name="Platform", path="other"), owner=owner)

        assert len(store.groups) == 1
        assert len(store.members) == 1

    @pytest.mark.asyncio
    async def test_concurrent_creates_keep_names_unique(self, group_repository, store):
        results = await asyncio.gather(
            *(group_repository.create(Group(id=0, name="Same", path=f"same-{i}")) for i in range(5)),
            return_exceptions=True,
        )

        created = [r for r in results if isinstance(r, Group)]
        assert len(created) == 1
        assert all(isinstance(r, NameConflictError) for r in results if not isinstance(r, Group))
        assert len(store.groups) == 1

    @pytest.mark.asyncio
    async def test_reads_return_copies(self, group_repository):
        group = await group_repository.create(Group(id=0, name="Platform", path="platform"))

        fetched = await group_repository.get_by_id(group.id)
        fetched.name = "Changed"

        assert (await group_repository.get_by_id(group.id)).name == "Platform"

    @pytest.mark.asyncio
    async def test_get_by_ids_keeps_requested_order(self, group_repository, tree):
        groups = await group_repository.get_by_ids([tree.backend.id, tree.platform.id, 404])

        assert [g.id for g in groups] == [tree.backend.id, tree.platform.id]

    @pytest.mark.asyncio
    async def test_get_by_name_or_path_under_parent(self, group_repository, tree):
        by_name = await group_repository.get_by_name_or_path_under_parent(0, "Ops", "nothing")
        by_path = await group_repository.get_by_name_or_path_under_parent(0, "Nothing", "platform")
        elsewhere = await group_repository.get_by_name_or_path_under_parent(tree.ops.id, "Backend", "backend")

        assert [g.id for g in by_name] == [tree.ops.id]
        assert [g.id for g in by_path] == [tree.platform.id]
        assert elsewhere == []

    @pytest.mark.asyncio
    async def test_fuzzy_search_under_group_excludes_the_group(self, group_repository, tree):
        groups = await group_repository.get_by_id_name_fuzzily(tree.platform.id, "")

        assert [g.id for g in groups] == [tree.backend.id]


class TestMemoryResourceRepository:
    """Test leaf resource registration."""

    @pytest.mark.asyncio
    async def test_application_requires_group(self, resource_repository):
        with pytest.raises(GroupNotFoundError):
            await resource_repository.add_application(Application(id=0, name="web", group_id=42))

    @pytest.mark.asyncio
    async def test_application_conflicts_with_sibling_group(self, resource_repository, tree):
        with pytest.raises(GroupConflictWithApplicationError):
            await resource_repository.add_application(
                Application(id=0, name="backend", group_id=tree.platform.id)
            )

    @pytest.mark.asyncio
    async def test_application_names_are_unique(self, resource_repository, tree):
        with pytest.raises(NameConflictError):
            await resource_repository.add_application(
                Application(id=0, name="payments", group_id=tree.ops.id)
            )

    @pytest.mark.asyncio
    async def test_cluster_requires_application(self, resource_repository):
        with pytest.raises(ResourceNotFoundError):
            await resource_repository.add_cluster(Cluster(id=0, name="c", application_id=9))

    @pytest.mark.asyncio
    async def test_pipelinerun_requires_cluster(self, resource_repository):
        with pytest.raises(ResourceNotFoundError):
            await resource_repository.add_pipelinerun(PipelineRun(id=0, cluster_id=9))

    @pytest.mark.asyncio
    async def test_lookups(self, resource_repository, tree):
        application = await resource_repository.get_application_by_name_under_group(
            tree.backend.id, "payments"
        )
        cluster = await resource_repository.get_cluster_by_name_under_application(
            application.id, "payments-test"
        )

        assert application.id == tree.application.id
        assert cluster.id == tree.cluster.id
        assert await resource_repository.count_applications_by_group(tree.backend.id) == 1
        assert await resource_repository.count_templates_by_group(tree.platform.id) == 1
        assert [a.name for a in await resource_repository.get_applications_by_name_fuzzily("PAY")] == ["payments"]
