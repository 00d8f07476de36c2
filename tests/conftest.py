"""Pytest configuration and fixtures for neo-deploy tests."""

from types import SimpleNamespace

import pytest
import pytest_asyncio

from neo_deploy.core.shared import CurrentUser
from neo_deploy.database.memory import MemoryStore
from neo_deploy.features.authorization.services import (
    AccessReviewService,
    Authorizer,
    RequestInfoFactory,
    build_skippers,
)
from neo_deploy.config.constants import DEFAULT_SKIP_RULES
from neo_deploy.features.groups.entities import Application, Cluster, NewGroup, PipelineRun, Template
from neo_deploy.features.groups.repositories import MemoryGroupRepository, MemoryResourceRepository
from neo_deploy.features.groups.services import GroupService
from neo_deploy.features.members.repositories import MemoryMemberRepository
from neo_deploy.features.members.services import MemberService
from neo_deploy.features.roles.services import RoleCatalog


ROLES_YAML = """
RolePriorityRankDesc:
  - owner
  - maintainer
  - pe
  - guest
DefaultRole: guest
Roles:
  - name: owner
    desc: full access
    rules:
      - verbs: ["*"]
        apiGroups: ["*"]
        resources: ["*"]
        scopes: ["*"]
        nonResourceURLs: ["*"]
  - name: maintainer
    rules:
      - verbs: [get, list, create, update]
        apiGroups: [core]
        resources: [groups, applications, clusters, clusters/status]
        scopes: ["*"]
  - name: pe
    rules:
      - verbs: ["*"]
        apiGroups: [core]
        resources: [clusters, clusters/builddeploy]
        scopes: ["test/*"]
  - name: guest
    rules:
      - verbs: [get, list]
        apiGroups: [core]
        resources: ["*"]
        scopes: ["*"]
      - verbs: [get]
        nonResourceURLs: ["/front/*"]
"""


@pytest.fixture
def role_catalog():
    """Role catalog with owner > maintainer > pe > guest."""
    return RoleCatalog.from_yaml(ROLES_YAML)


@pytest.fixture
def store():
    """Fresh in-memory store."""
    return MemoryStore()


@pytest.fixture
def group_repository(store):
    return MemoryGroupRepository(store)


@pytest.fixture
def resource_repository(store):
    return MemoryResourceRepository(store)


@pytest.fixture
def member_repository(store):
    return MemoryMemberRepository(store)


@pytest.fixture
def group_service(group_repository, resource_repository, role_catalog):
    return GroupService(group_repository, resource_repository, role_catalog=role_catalog)


@pytest.fixture
def member_service(member_repository, group_repository, resource_repository, role_catalog):
    return MemberService(member_repository, group_repository, resource_repository, role_catalog)


@pytest.fixture
def authorizer(member_service, role_catalog):
    return Authorizer(member_service, role_catalog)


@pytest.fixture
def access_review_service(authorizer):
    return AccessReviewService(authorizer, RequestInfoFactory(), build_skippers(DEFAULT_SKIP_RULES))


@pytest.fixture
def alice():
    """Creator of the sample tree."""
    return CurrentUser(id=1, name="alice", email="alice@example.com")


@pytest.fixture
def bob():
    return CurrentUser(id=2, name="bob")


@pytest.fixture
def carol():
    return CurrentUser(id=3, name="carol")


@pytest.fixture
def admin():
    return CurrentUser(id=99, name="root", is_admin=True)


@pytest_asyncio.fixture
async def tree(group_service, resource_repository, alice):
    """Sample tree created by alice.

    platform(1) -> backend(2) -> payments app -> payments-test cluster -> run
    platform(1) -> java template
    ops(3)
    """
    platform = await group_service.create_group(alice, NewGroup(name="Platform", path="platform"))
    backend = await group_service.create_group(
        alice, NewGroup(name="Backend", path="backend", parent_id=platform.id)
    )
    ops = await group_service.create_group(alice, NewGroup(name="Ops", path="ops"))
    application = await resource_repository.add_application(
        Application(id=0, name="payments", group_id=backend.id)
    )
    cluster = await resource_repository.add_cluster(
        Cluster(id=0, name="payments-test", application_id=application.id, environment="test")
    )
    template = await resource_repository.add_template(Template(id=0, name="java", group_id=platform.id))
    pipelinerun = await resource_repository.add_pipelinerun(
        PipelineRun(id=0, cluster_id=cluster.id, title="deploy", action="builddeploy")
    )
    return SimpleNamespace(
        platform=platform,
        backend=backend,
        ops=ops,
        application=application,
        cluster=cluster,
        template=template,
        pipelinerun=pipelinerun,
    )
