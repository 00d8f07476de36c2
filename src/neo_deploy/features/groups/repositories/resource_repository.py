"""Leaf resource lookups using asyncpg.

Applications, clusters, templates and pipeline runs are written by their own
managers; the control plane only reads them to resolve ownership.
"""

import logging
from typing import Any, Callable, List, Mapping, Optional, Sequence, TypeVar

import asyncpg

from ....database.connection import DatabaseManager, wrap_database_error
from ..entities.resources import Application, Cluster, PipelineRun, Template
from ..utils.queries import (
    APPLICATION_GET_BY_ID,
    APPLICATION_GET_BY_NAME_UNDER_GROUP,
    APPLICATIONS_COUNT_BY_GROUP,
    APPLICATIONS_GET_BY_NAME_FUZZILY,
    APPLICATIONS_GET_BY_NAMES_UNDER_GROUP,
    CLUSTER_GET_BY_ID,
    CLUSTER_GET_BY_NAME_UNDER_APPLICATION,
    PIPELINERUN_GET_BY_ID,
    TEMPLATE_GET_BY_ID,
    TEMPLATES_COUNT_BY_GROUP,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def build_application_from_row(row: Mapping[str, Any]) -> Application:
    return Application(
        id=row["id"],
        name=row["name"],
        group_id=row["group_id"],
        description=row.get("description") or "",
        created_by=row.get("created_by") or 0,
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def build_cluster_from_row(row: Mapping[str, Any]) -> Cluster:
    return Cluster(
        id=row["id"],
        name=row["name"],
        application_id=row["application_id"],
        environment=row.get("environment") or "",
        created_by=row.get("created_by") or 0,
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def build_template_from_row(row: Mapping[str, Any]) -> Template:
    return Template(
        id=row["id"],
        name=row["name"],
        group_id=row["group_id"],
        description=row.get("description") or "",
        created_by=row.get("created_by") or 0,
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def build_pipelinerun_from_row(row: Mapping[str, Any]) -> PipelineRun:
    return PipelineRun(
        id=row["id"],
        cluster_id=row["cluster_id"],
        title=row.get("title") or "",
        action=row.get("action") or "",
        created_by=row.get("created_by") or 0,
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class AsyncPGResourceRepository:
    """ResourceRepository backed by PostgreSQL."""

    def __init__(self, db: DatabaseManager, schema: str = "public"):
        self._db = db
        self._schema = schema

    async def _fetch_one(self, query: str, build: Callable[[Mapping[str, Any]], T], *args) -> Optional[T]:
        try:
            row = await self._db.fetchrow(query.format(schema=self._schema), *args)
        except asyncpg.PostgresError as e:
            raise wrap_database_error("fetch resource", e) from e
        return build(row) if row else None

    async def _fetch_all(self, query: str, build: Callable[[Mapping[str, Any]], T], *args) -> List[T]:
        try:
            rows = await self._db.fetch(query.format(schema=self._schema), *args)
        except asyncpg.PostgresError as e:
            raise wrap_database_error("fetch resources", e) from e
        return [build(row) for row in rows]

    async def _count(self, query: str, *args) -> int:
        try:
            return await self._db.fetchval(query.format(schema=self._schema), *args)
        except asyncpg.PostgresError as e:
            raise wrap_database_error("count resources", e) from e

    async def get_application(self, application_id: int) -> Optional[Application]:
        return await self._fetch_one(APPLICATION_GET_BY_ID, build_application_from_row, application_id)

    async def get_cluster(self, cluster_id: int) -> Optional[Cluster]:
        return await self._fetch_one(CLUSTER_GET_BY_ID, build_cluster_from_row, cluster_id)

    async def get_template(self, template_id: int) -> Optional[Template]:
        return await self._fetch_one(TEMPLATE_GET_BY_ID, build_template_from_row, template_id)

    async def get_pipelinerun(self, pipelinerun_id: int) -> Optional[PipelineRun]:
        return await self._fetch_one(PIPELINERUN_GET_BY_ID, build_pipelinerun_from_row, pipelinerun_id)

    async def get_application_by_name_under_group(self, group_id: int, name: str) -> Optional[Application]:
        return await self._fetch_one(
            APPLICATION_GET_BY_NAME_UNDER_GROUP, build_application_from_row, group_id, name
        )

    async def get_applications_by_names_under_group(
        self, group_id: int, names: Sequence[str]
    ) -> List[Application]:
        return await self._fetch_all(
            APPLICATIONS_GET_BY_NAMES_UNDER_GROUP, build_application_from_row, group_id, list(names)
        )

    async def get_cluster_by_name_under_application(
        self, application_id: int, name: str
    ) -> Optional[Cluster]:
        return await self._fetch_one(
            CLUSTER_GET_BY_NAME_UNDER_APPLICATION, build_cluster_from_row, application_id, name
        )

    async def get_applications_by_name_fuzzily(self, name: str) -> List[Application]:
        return await self._fetch_all(APPLICATIONS_GET_BY_NAME_FUZZILY, build_application_from_row, name)

    async def count_applications_by_group(self, group_id: int) -> int:
        return await self._count(APPLICATIONS_COUNT_BY_GROUP, group_id)

    async def count_templates_by_group(self, group_id: int) -> int:
        return await self._count(TEMPLATES_COUNT_BY_GROUP, group_id)
