"""In-memory storage shared by the memory repositories.

ONLY in-memory implementation - one store holds every table so that a
multi-table write (a group plus its creator binding) commits as one step
under a single lock. Used for tests and single-process deployments.
"""

import asyncio
import itertools
from collections import defaultdict
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, Iterator

from ..core.exceptions import MemberExistError


def utc_now() -> datetime:
    """Current UTC timestamp."""
    return datetime.now(timezone.utc)


class MemoryStore:
    """Process-local tables guarded by one asyncio lock.

    Writers hold ``lock`` for the whole check-then-write sequence; readers
    take a snapshot copy and never block.
    """

    def __init__(self):
        self.groups: Dict[int, Any] = {}
        self.applications: Dict[int, Any] = {}
        self.clusters: Dict[int, Any] = {}
        self.templates: Dict[int, Any] = {}
        self.pipelineruns: Dict[int, Any] = {}
        self.members: Dict[int, Any] = {}
        self.lock = asyncio.Lock()
        self._sequences: Dict[str, Iterator[int]] = defaultdict(lambda: itertools.count(1))

    def next_id(self, table: str) -> int:
        """Allocate the next id for a table."""
        return next(self._sequences[table])

    def insert_member(self, member: Any) -> Any:
        """Insert a role binding, enforcing one binding per identity and resource.

        Caller must hold ``lock``.
        """
        key = member.binding_key
        for existing in self.members.values():
            if existing.binding_key == key:
                raise MemberExistError(
                    f"member already exists: {existing.base_info()}",
                    details={"member_id": existing.id},
                )
        now = utc_now()
        stored = replace(
            member,
            id=self.next_id("members"),
            created_at=member.created_at or now,
            updated_at=now,
        )
        self.members[stored.id] = stored
        return replace(stored)
