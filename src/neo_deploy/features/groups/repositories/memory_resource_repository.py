"""Memory resource repository.

ONLY in-memory implementation of the leaf resource lookups. The ``add_*``
helpers register leaves the way the application and cluster managers do,
including the collision check against sibling groups.
"""

import logging
from dataclasses import replace
from typing import List, Optional, Sequence

from ....core.exceptions import (
    GroupConflictWithApplicationError,
    GroupNotFoundError,
    NameConflictError,
    ResourceNotFoundError,
)
from ....config.constants import ResourceType
from ....database.memory import MemoryStore, utc_now
from ..entities.group import is_root
from ..entities.resources import Application, Cluster, PipelineRun, Template

logger = logging.getLogger(__name__)


class MemoryResourceRepository:
    """In-memory ResourceRepository backed by a shared MemoryStore."""

    def __init__(self, store: MemoryStore):
        self._store = store

    def _stamp(self, table: str, resource):
        now = utc_now()
        return replace(resource, id=self._store.next_id(table), created_at=now, updated_at=now)

    # Registration

    async def add_application(self, application: Application) -> Application:
        async with self._store.lock:
            if application.group_id not in self._store.groups:
                raise GroupNotFoundError(application.group_id)
            for group in self._store.groups.values():
                if group.parent_id == application.group_id and application.name in (group.name, group.path):
                    raise GroupConflictWithApplicationError(application.group_id, application.name)
            for existing in self._store.applications.values():
                if existing.name == application.name:
                    raise NameConflictError(application.group_id, application.name)

            stored = self._stamp(ResourceType.APPLICATIONS.value, application)
            self._store.applications[stored.id] = stored
        logger.debug(f"Registered application {stored.id} under group {stored.group_id}")
        return replace(stored)

    async def add_cluster(self, cluster: Cluster) -> Cluster:
        async with self._store.lock:
            if cluster.application_id not in self._store.applications:
                raise ResourceNotFoundError(ResourceType.APPLICATIONS.value, cluster.application_id)
            for existing in self._store.clusters.values():
                if existing.name == cluster.name:
                    raise NameConflictError(cluster.application_id, cluster.name)

            stored = self._stamp(ResourceType.CLUSTERS.value, cluster)
            self._store.clusters[stored.id] = stored
        return replace(stored)

    async def add_template(self, template: Template) -> Template:
        async with self._store.lock:
            if not is_root(template.group_id) and template.group_id not in self._store.groups:
                raise GroupNotFoundError(template.group_id)

            stored = self._stamp(ResourceType.TEMPLATES.value, template)
            self._store.templates[stored.id] = stored
        return replace(stored)

    async def add_pipelinerun(self, pipelinerun: PipelineRun) -> PipelineRun:
        async with self._store.lock:
            if pipelinerun.cluster_id not in self._store.clusters:
                raise ResourceNotFoundError(ResourceType.CLUSTERS.value, pipelinerun.cluster_id)

            stored = self._stamp(ResourceType.PIPELINERUNS.value, pipelinerun)
            self._store.pipelineruns[stored.id] = stored
        return replace(stored)

    # Lookups

    async def get_application(self, application_id: int) -> Optional[Application]:
        application = self._store.applications.get(application_id)
        return replace(application) if application else None

    async def get_cluster(self, cluster_id: int) -> Optional[Cluster]:
        cluster = self._store.clusters.get(cluster_id)
        return replace(cluster) if cluster else None

    async def get_template(self, template_id: int) -> Optional[Template]:
        template = self._store.templates.get(template_id)
        return replace(template) if template else None

    async def get_pipelinerun(self, pipelinerun_id: int) -> Optional[PipelineRun]:
        pipelinerun = self._store.pipelineruns.get(pipelinerun_id)
        return replace(pipelinerun) if pipelinerun else None

    async def get_application_by_name_under_group(self, group_id: int, name: str) -> Optional[Application]:
        for application in self._store.applications.values():
            if application.group_id == group_id and application.name == name:
                return replace(application)
        return None

    async def get_applications_by_names_under_group(
        self, group_id: int, names: Sequence[str]
    ) -> List[Application]:
        wanted = set(names)
        return [
            replace(a) for a in self._store.applications.values()
            if a.group_id == group_id and a.name in wanted
        ]

    async def get_cluster_by_name_under_application(
        self, application_id: int, name: str
    ) -> Optional[Cluster]:
        for cluster in self._store.clusters.values():
            if cluster.application_id == application_id and cluster.name == name:
                return replace(cluster)
        return None

    async def get_applications_by_name_fuzzily(self, name: str) -> List[Application]:
        needle = name.lower()
        return [replace(a) for a in self._store.applications.values() if needle in a.name.lower()]

    async def count_applications_by_group(self, group_id: int) -> int:
        return sum(1 for a in self._store.applications.values() if a.group_id == group_id)

    async def count_templates_by_group(self, group_id: int) -> int:
        return sum(1 for t in self._store.templates.values() if t.group_id == group_id)
