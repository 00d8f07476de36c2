"""Member (role binding) domain entity.

A member binds an identity to a role on one resource. A binding is direct
for the resource it is recorded on and inherited by everything below it.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Iterable, List, Optional, Tuple

from pydantic import BaseModel, Field

from ....config.constants import ResourceType


class MemberType(IntEnum):
    """Kind of identity a binding refers to."""

    USER = 0
    GROUP = 1


@dataclass
class Member:
    """A role binding on a resource."""

    id: int
    resource_type: ResourceType
    resource_id: int
    role: str
    member_type: MemberType
    member_name_id: int
    granted_by: int = 0
    created_by: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        self.resource_type = ResourceType(self.resource_type)
        self.member_type = MemberType(self.member_type)

    @property
    def identity_key(self) -> Tuple[int, int]:
        """Key identifying the bound identity regardless of resource."""
        return (int(self.member_type), self.member_name_id)

    @property
    def binding_key(self) -> Tuple[str, int, int, int]:
        """Uniqueness key of a binding."""
        return (self.resource_type.value, self.resource_id, int(self.member_type), self.member_name_id)

    def base_info(self) -> str:
        """Short description used in authorization reasons."""
        return (
            f"resource({self.resource_type.value}/{self.resource_id})"
            f"-memberInfo({int(self.member_type)}/{self.member_name_id})"
            f"-ruleID({self.id})"
        )

    def __str__(self) -> str:
        return self.base_info()


def deduplicate_members(members: Iterable[Member]) -> List[Member]:
    """Keep the first binding per identity.

    Input is expected closest-first, so the most specific binding wins.
    """
    seen = set()
    result = []
    for member in members:
        if member.identity_key in seen:
            continue
        seen.add(member.identity_key)
        result.append(member)
    return result


class PostMember(BaseModel):
    """Request model for creating a binding."""

    resource_type: ResourceType
    resource_id: int = Field(ge=0)
    member_type: MemberType = MemberType.USER
    member_name_id: int = Field(ge=0)
    role: str = Field(min_length=1)
