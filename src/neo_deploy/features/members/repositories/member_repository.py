"""Member repository implementation using asyncpg."""

import logging
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional

import asyncpg

from ....config.constants import ResourceType
from ....core.exceptions import MemberExistError, MemberNotExistError
from ....database.connection import DatabaseManager, wrap_database_error
from ..entities.member import Member, MemberType
from ..utils.queries import (
    MEMBER_DELETE,
    MEMBER_GET_BY_ID,
    MEMBER_GET_DIRECT,
    MEMBER_INSERT,
    MEMBER_LIST_DIRECT_BY_RESOURCE,
    MEMBER_UPDATE_ROLE,
)

logger = logging.getLogger(__name__)


def build_member_from_row(row: Mapping[str, Any]) -> Member:
    """Map a database row to a Member entity."""
    return Member(
        id=row["id"],
        resource_type=ResourceType(row["resource_type"]),
        resource_id=row["resource_id"],
        role=row["role"],
        member_type=MemberType(row["member_type"]),
        member_name_id=row["member_name_id"],
        granted_by=row.get("granted_by") or 0,
        created_by=row.get("created_by") or 0,
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class AsyncPGMemberRepository:
    """MemberRepository backed by PostgreSQL.

    The members table carries a unique index on
    (resource_type, resource_id, member_type, member_name_id).
    """

    def __init__(self, db: DatabaseManager, schema: str = "public"):
        self._db = db
        self._schema = schema

    def _q(self, query: str) -> str:
        return query.format(schema=self._schema)

    async def create(self, member: Member) -> Member:
        try:
            row = await self._db.fetchrow(
                self._q(MEMBER_INSERT),
                member.resource_type.value, member.resource_id, member.role,
                int(member.member_type), member.member_name_id, member.granted_by,
                member.created_by, datetime.now(timezone.utc),
            )
        except asyncpg.UniqueViolationError as e:
            raise MemberExistError(
                f"member already exists on {member.resource_type.value}/{member.resource_id}",
                details={"member_name_id": member.member_name_id},
            ) from e
        except asyncpg.PostgresError as e:
            raise wrap_database_error("create member", e) from e
        return build_member_from_row(row)

    async def get_by_id(self, member_id: int) -> Optional[Member]:
        try:
            row = await self._db.fetchrow(self._q(MEMBER_GET_BY_ID), member_id)
        except asyncpg.PostgresError as e:
            raise wrap_database_error("get member", e) from e
        return build_member_from_row(row) if row else None

    async def get_direct(
        self,
        resource_type: ResourceType,
        resource_id: int,
        member_type: MemberType,
        member_name_id: int
    ) -> Optional[Member]:
        try:
            row = await self._db.fetchrow(
                self._q(MEMBER_GET_DIRECT),
                ResourceType(resource_type).value, resource_id, int(member_type), member_name_id,
            )
        except asyncpg.PostgresError as e:
            raise wrap_database_error("get member", e) from e
        return build_member_from_row(row) if row else None

    async def update_role(self, member_id: int, role: str, granted_by: int) -> Member:
        try:
            row = await self._db.fetchrow(
                self._q(MEMBER_UPDATE_ROLE), member_id, role, granted_by, datetime.now(timezone.utc)
            )
        except asyncpg.PostgresError as e:
            raise wrap_database_error("update member", e) from e
        if row is None:
            raise MemberNotExistError(member_id)
        return build_member_from_row(row)

    async def delete(self, member_id: int) -> None:
        try:
            status = await self._db.execute(self._q(MEMBER_DELETE), member_id)
        except asyncpg.PostgresError as e:
            raise wrap_database_error("delete member", e) from e
        if status.endswith(" 0"):
            raise MemberNotExistError(member_id)

    async def list_direct_by_resource(self, resource_type: ResourceType, resource_id: int) -> List[Member]:
        try:
            rows = await self._db.fetch(
                self._q(MEMBER_LIST_DIRECT_BY_RESOURCE), ResourceType(resource_type).value, resource_id
            )
        except asyncpg.PostgresError as e:
            raise wrap_database_error("list members", e) from e
        return [build_member_from_row(row) for row in rows]
