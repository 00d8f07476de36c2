"""Service wiring for neo-deploy.

Builds the group, member, authorizer and access review services from
settings over either the in-memory store or a PostgreSQL pool.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .config.settings import DeploySettings, get_settings
from .core.exceptions import SettingsError
from .database.connection import DatabaseManager
from .database.memory import MemoryStore
from .features.authorization.services import (
    AccessReviewService,
    Authorizer,
    RequestInfoFactory,
    build_skippers,
)
from .features.groups.entities.protocols import GroupRepository, ResourceRepository
from .features.groups.repositories import (
    AsyncPGGroupRepository,
    AsyncPGResourceRepository,
    MemoryGroupRepository,
    MemoryResourceRepository,
)
from .features.groups.services import GroupService
from .features.members.entities.protocols import MemberRepository
from .features.members.repositories import AsyncPGMemberRepository, MemoryMemberRepository
from .features.members.services import MemberService
from .features.roles.services import RoleCatalog

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Wired services sharing one role catalog and one storage backend."""

    role_catalog: RoleCatalog
    group_repository: GroupRepository
    resource_repository: ResourceRepository
    member_repository: MemberRepository
    group_service: GroupService
    member_service: MemberService
    authorizer: Authorizer
    access_review_service: AccessReviewService


def load_role_catalog(settings: Optional[DeploySettings] = None) -> RoleCatalog:
    """Load the role catalog named by ``roles_file``.

    Raises:
        SettingsError: if no roles file is configured
        LoadCheckError: if the document is unreadable or inconsistent
    """
    settings = settings or get_settings()
    if not settings.roles_file:
        raise SettingsError("roles_file is not configured")
    return RoleCatalog.from_file(settings.roles_file)


def create_services(
    group_repository: GroupRepository,
    resource_repository: ResourceRepository,
    member_repository: MemberRepository,
    role_catalog: RoleCatalog,
    settings: Optional[DeploySettings] = None,
) -> Services:
    """Wire services over the given repositories."""
    settings = settings or get_settings()

    group_service = GroupService(
        group_repository,
        resource_repository,
        role_catalog=role_catalog,
        creator_role=settings.creator_role,
        default_page_size=settings.default_page_size,
        max_page_size=settings.max_page_size,
    )
    member_service = MemberService(member_repository, group_repository, resource_repository, role_catalog)
    authorizer = Authorizer(
        member_service,
        role_catalog,
        not_checked_resources=settings.not_checked_resources,
        use_default_role=settings.use_default_role,
    )
    access_review_service = AccessReviewService(
        authorizer,
        RequestInfoFactory(settings.api_prefixes),
        build_skippers(settings.parsed_skip_patterns()),
    )

    logger.info(
        f"Services ready for {settings.app_name} ({settings.environment}) "
        f"with {len(role_catalog)} roles"
    )
    return Services(
        role_catalog=role_catalog,
        group_repository=group_repository,
        resource_repository=resource_repository,
        member_repository=member_repository,
        group_service=group_service,
        member_service=member_service,
        authorizer=authorizer,
        access_review_service=access_review_service,
    )


def create_memory_services(
    role_catalog: RoleCatalog,
    settings: Optional[DeploySettings] = None,
    store: Optional[MemoryStore] = None,
) -> Services:
    """Wire services over one in-memory store."""
    store = store or MemoryStore()
    return create_services(
        MemoryGroupRepository(store),
        MemoryResourceRepository(store),
        MemoryMemberRepository(store),
        role_catalog,
        settings,
    )


def create_postgres_services(
    db: DatabaseManager,
    role_catalog: RoleCatalog,
    settings: Optional[DeploySettings] = None,
) -> Services:
    """Wire services over a PostgreSQL pool."""
    settings = settings or get_settings()
    schema = settings.database_schema
    return create_services(
        AsyncPGGroupRepository(db, schema),
        AsyncPGResourceRepository(db, schema),
        AsyncPGMemberRepository(db, schema),
        role_catalog,
        settings,
    )
