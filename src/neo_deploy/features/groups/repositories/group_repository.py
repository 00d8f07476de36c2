"""Group repository implementation using asyncpg.

Every mutation runs inside one serializable transaction: the parent row and
the sibling set are locked, the uniqueness checks run, and only then are
rows written. A transfer re-derives the subtree's traversal ids from parent
pointers in a single recursive UPDATE.
"""

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, List, Mapping, Optional, Sequence, Tuple

import asyncpg

from ....core.exceptions import (
    GroupConflictWithApplicationError,
    GroupNotFoundError,
    HasChildrenError,
    InvalidTransferError,
    NameConflictError,
    PathConflictError,
)
from ....database.connection import DatabaseManager, wrap_database_error
from ..entities.child import Child
from ..entities.group import Group, UpdateGroup, child_traversal_ids, is_root
from ..utils.queries import (
    APPLICATIONS_GET_BY_NAMES_UNDER_GROUP,
    GROUP_COUNT_BY_PARENT_ID,
    GROUP_COUNT_CHILDREN,
    GROUP_DELETE,
    GROUP_GET_BY_ID,
    GROUP_GET_BY_ID_FOR_UPDATE,
    GROUP_GET_BY_ID_NAME_FUZZILY,
    GROUP_GET_BY_IDS,
    GROUP_GET_BY_NAME_FUZZILY,
    GROUP_GET_BY_NAME_OR_PATH_UNDER_PARENT,
    GROUP_GET_BY_PATHS,
    GROUP_GET_CHILD_BY_PATH,
    GROUP_GET_SUBGROUPS_UNDER_PARENT_IDS,
    GROUP_HAS_CHILDREN,
    GROUP_INSERT,
    GROUP_LIST_CHILDREN,
    GROUP_LIST_SUBGROUPS,
    GROUP_MEMBERS_DELETE,
    GROUP_OWNER_INSERT,
    GROUP_REBUILD_SUBTREE_TRAVERSAL_IDS,
    GROUP_SET_TRAVERSAL_IDS,
    GROUP_SIBLINGS_FOR_UPDATE,
    GROUP_UPDATE_BASIC,
    GROUP_UPDATE_PARENT,
)

if TYPE_CHECKING:
    from ...members.entities.member import Member

logger = logging.getLogger(__name__)

SERIALIZABLE = "serializable"


def build_group_from_row(row: Mapping[str, Any]) -> Group:
    """Map a database row to a Group entity."""
    return Group(
        id=row["id"],
        name=row["name"],
        path=row["path"],
        parent_id=row["parent_id"],
        traversal_ids=row["traversal_ids"],
        description=row.get("description") or "",
        visibility_level=row.get("visibility_level") or "private",
        created_by=row.get("created_by") or 0,
        updated_by=row.get("updated_by") or 0,
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class AsyncPGGroupRepository:
    """GroupRepository backed by PostgreSQL."""

    def __init__(self, db: DatabaseManager, schema: str = "public"):
        self._db = db
        self._schema = schema

    def _q(self, query: str) -> str:
        return query.format(schema=self._schema)

    # Checks (run on the transaction's connection)

    async def _lock_group(self, conn, group_id: int) -> Group:
        row = await conn.fetchrow(self._q(GROUP_GET_BY_ID_FOR_UPDATE), group_id)
        if row is None:
            raise GroupNotFoundError(group_id)
        return build_group_from_row(row)

    async def _lock_parent(self, conn, parent_id: int) -> Optional[Group]:
        if is_root(parent_id):
            return None
        return await self._lock_group(conn, parent_id)

    async def _check_conflicts(
        self, conn, parent_id: int, name: str, path: str, exclude_id: Optional[int] = None
    ) -> None:
        applications = await conn.fetch(self._q(APPLICATIONS_GET_BY_NAMES_UNDER_GROUP), parent_id, [name, path])
        if applications:
            raise GroupConflictWithApplicationError(parent_id, applications[0]["name"])

        siblings = await conn.fetch(self._q(GROUP_SIBLINGS_FOR_UPDATE), parent_id)
        for sibling in siblings:
            if sibling["id"] == exclude_id:
                continue
            if sibling["name"] == name:
                raise NameConflictError(parent_id, name)
            if sibling["path"] == path:
                raise PathConflictError(parent_id, path)

    # Commands

    async def create(self, group: Group, owner: Optional["Member"] = None) -> Group:
        now = datetime.now(timezone.utc)
        try:
            async with self._db.transaction(isolation=SERIALIZABLE) as conn:
                parent = await self._lock_parent(conn, group.parent_id)
                await self._check_conflicts(conn, group.parent_id, group.name, group.path)

                group_id = await conn.fetchval(
                    self._q(GROUP_INSERT),
                    group.name, group.path, group.parent_id, group.description,
                    group.visibility_level, group.created_by, group.updated_by, now,
                )
                row = await conn.fetchrow(
                    self._q(GROUP_SET_TRAVERSAL_IDS),
                    group_id,
                    child_traversal_ids(parent.traversal_ids if parent else "", group_id),
                )
                if owner is not None:
                    await conn.execute(
                        self._q(GROUP_OWNER_INSERT),
                        owner.resource_type.value, group_id, owner.role, int(owner.member_type),
                        owner.member_name_id, owner.granted_by, owner.created_by, now,
                    )
        except asyncpg.UniqueViolationError as e:
            raise NameConflictError(group.parent_id, group.name) from e
        except asyncpg.PostgresError as e:
            raise wrap_database_error("create group", e) from e

        logger.debug(f"Stored group {group_id} with traversal ids {row['traversal_ids']}")
        return build_group_from_row(row)

    async def update_basic(self, group_id: int, update: UpdateGroup, updated_by: int = 0) -> Group:
        try:
            async with self._db.transaction(isolation=SERIALIZABLE) as conn:
                group = update.apply_to(await self._lock_group(conn, group_id))
                await self._check_conflicts(
                    conn, group.parent_id, group.name, group.path, exclude_id=group_id
                )
                row = await conn.fetchrow(
                    self._q(GROUP_UPDATE_BASIC),
                    group_id, group.name, group.path, group.description,
                    group.visibility_level, updated_by, datetime.now(timezone.utc),
                )
        except asyncpg.UniqueViolationError as e:
            raise NameConflictError(group.parent_id, group.name) from e
        except asyncpg.PostgresError as e:
            raise wrap_database_error("update group", e) from e
        return build_group_from_row(row)

    async def delete(self, group_id: int) -> None:
        try:
            async with self._db.transaction(isolation=SERIALIZABLE) as conn:
                await self._lock_group(conn, group_id)
                if await conn.fetchval(self._q(GROUP_HAS_CHILDREN), group_id):
                    raise HasChildrenError(group_id)
                await conn.execute(self._q(GROUP_MEMBERS_DELETE), group_id)
                await conn.execute(self._q(GROUP_DELETE), group_id)
        except asyncpg.PostgresError as e:
            raise wrap_database_error("delete group", e) from e

    async def transfer(self, group_id: int, new_parent_id: int, updated_by: int = 0) -> Group:
        try:
            async with self._db.transaction(isolation=SERIALIZABLE) as conn:
                group = await self._lock_group(conn, group_id)
                new_parent = await self._lock_parent(conn, new_parent_id)
                if new_parent_id == group_id or (
                    new_parent is not None and group_id in new_parent.traversal_id_list
                ):
                    raise InvalidTransferError(group_id, new_parent_id)
                await self._check_conflicts(conn, new_parent_id, group.name, group.path, exclude_id=group_id)

                await conn.execute(
                    self._q(GROUP_UPDATE_PARENT),
                    group_id, new_parent_id, updated_by, datetime.now(timezone.utc),
                )
                await conn.execute(
                    self._q(GROUP_REBUILD_SUBTREE_TRAVERSAL_IDS),
                    group_id,
                    child_traversal_ids(new_parent.traversal_ids if new_parent else "", group_id),
                )
                row = await conn.fetchrow(self._q(GROUP_GET_BY_ID), group_id)
        except asyncpg.UniqueViolationError as e:
            raise NameConflictError(new_parent_id, str(group_id)) from e
        except asyncpg.PostgresError as e:
            raise wrap_database_error("transfer group", e) from e
        return build_group_from_row(row)

    # Queries

    async def _fetch_groups(self, query: str, *args) -> List[Group]:
        try:
            rows = await self._db.fetch(self._q(query), *args)
        except asyncpg.PostgresError as e:
            raise wrap_database_error("fetch groups", e) from e
        return [build_group_from_row(row) for row in rows]

    async def _fetch_group(self, query: str, *args) -> Optional[Group]:
        try:
            row = await self._db.fetchrow(self._q(query), *args)
        except asyncpg.PostgresError as e:
            raise wrap_database_error("fetch group", e) from e
        return build_group_from_row(row) if row else None

    async def get_by_id(self, group_id: int) -> Optional[Group]:
        return await self._fetch_group(GROUP_GET_BY_ID, group_id)

    async def get_by_ids(self, group_ids: Sequence[int]) -> List[Group]:
        groups = {g.id: g for g in await self._fetch_groups(GROUP_GET_BY_IDS, list(group_ids))}
        ordered = []
        for group_id in dict.fromkeys(group_ids):
            if group_id in groups:
                ordered.append(groups[group_id])
        return ordered

    async def get_by_paths(self, paths: Sequence[str]) -> List[Group]:
        return await self._fetch_groups(GROUP_GET_BY_PATHS, list(paths))

    async def get_child_by_path(self, parent_id: int, path: str) -> Optional[Group]:
        return await self._fetch_group(GROUP_GET_CHILD_BY_PATH, parent_id, path)

    async def get_by_name_or_path_under_parent(self, parent_id: int, name: str, path: str) -> List[Group]:
        return await self._fetch_groups(GROUP_GET_BY_NAME_OR_PATH_UNDER_PARENT, parent_id, name, path)

    async def get_by_name_fuzzily(self, name: str) -> List[Group]:
        return await self._fetch_groups(GROUP_GET_BY_NAME_FUZZILY, name)

    async def get_by_id_name_fuzzily(self, group_id: int, name: str) -> List[Group]:
        if is_root(group_id):
            return await self.get_by_name_fuzzily(name)
        return await self._fetch_groups(GROUP_GET_BY_ID_NAME_FUZZILY, str(group_id), name)

    async def get_subgroups_under_parent_ids(self, parent_ids: Sequence[int]) -> List[Group]:
        return await self._fetch_groups(GROUP_GET_SUBGROUPS_UNDER_PARENT_IDS, list(parent_ids))

    async def count_by_parent_id(self, parent_id: int) -> int:
        try:
            return await self._db.fetchval(self._q(GROUP_COUNT_BY_PARENT_ID), parent_id)
        except asyncpg.PostgresError as e:
            raise wrap_database_error("count groups", e) from e

    async def list_subgroups(self, parent_id: int, offset: int, limit: int) -> Tuple[List[Group], int]:
        groups = await self._fetch_groups(GROUP_LIST_SUBGROUPS, parent_id, offset, limit)
        return groups, await self.count_by_parent_id(parent_id)

    async def list_children(self, parent_id: int, offset: int, limit: int) -> Tuple[List[Child], int]:
        try:
            rows = await self._db.fetch(self._q(GROUP_LIST_CHILDREN), parent_id, offset, limit)
            total = await self._db.fetchval(self._q(GROUP_COUNT_CHILDREN), parent_id)
        except asyncpg.PostgresError as e:
            raise wrap_database_error("list children", e) from e

        children = [
            Child(
                id=row["id"],
                name=row["name"],
                path=row["path"],
                type=row["type"],
                parent_id=row["parent_id"],
                traversal_ids=row["traversal_ids"],
                description=row["description"] or "",
                visibility_level=row["visibility_level"] or "",
                updated_at=row["updated_at"],
            )
            for row in rows
        ]
        return children, total
