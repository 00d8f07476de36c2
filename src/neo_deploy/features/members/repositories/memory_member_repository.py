"""Memory member repository.

ONLY in-memory implementation - shares its MemoryStore with the group
repository so creator bindings commit together with their group.
"""

import logging
from dataclasses import replace
from typing import List, Optional

from ....config.constants import ResourceType
from ....core.exceptions import MemberNotExistError
from ....database.memory import MemoryStore, utc_now
from ..entities.member import Member, MemberType

logger = logging.getLogger(__name__)


class MemoryMemberRepository:
    """In-memory MemberRepository backed by a shared MemoryStore."""

    def __init__(self, store: MemoryStore):
        self._store = store

    async def create(self, member: Member) -> Member:
        async with self._store.lock:
            return self._store.insert_member(member)

    async def get_by_id(self, member_id: int) -> Optional[Member]:
        member = self._store.members.get(member_id)
        return replace(member) if member else None

    async def get_direct(
        self,
        resource_type: ResourceType,
        resource_id: int,
        member_type: MemberType,
        member_name_id: int
    ) -> Optional[Member]:
        key = (ResourceType(resource_type).value, resource_id, int(member_type), member_name_id)
        for member in self._store.members.values():
            if member.binding_key == key:
                return replace(member)
        return None

    async def update_role(self, member_id: int, role: str, granted_by: int) -> Member:
        async with self._store.lock:
            existing = self._store.members.get(member_id)
            if existing is None:
                raise MemberNotExistError(member_id)
            stored = replace(existing, role=role, granted_by=granted_by, updated_at=utc_now())
            self._store.members[member_id] = stored
        return replace(stored)

    async def delete(self, member_id: int) -> None:
        async with self._store.lock:
            if self._store.members.pop(member_id, None) is None:
                raise MemberNotExistError(member_id)

    async def list_direct_by_resource(self, resource_type: ResourceType, resource_id: int) -> List[Member]:
        resource_type = ResourceType(resource_type)
        members = [
            m for m in self._store.members.values()
            if m.resource_type == resource_type and m.resource_id == resource_id
        ]
        return [replace(m) for m in sorted(members, key=lambda m: m.id)]
