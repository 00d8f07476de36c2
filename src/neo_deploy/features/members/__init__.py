"""Membership feature.

Role bindings on tree resources and their resolution across ancestors.
"""

from .entities import Member, MemberType, PostMember, MemberRepository, deduplicate_members
from .repositories import MemoryMemberRepository, AsyncPGMemberRepository
from .services import MemberService, BINDABLE_RESOURCE_TYPES

__all__ = [
    # Entities
    "Member",
    "MemberType",
    "PostMember",
    "deduplicate_members",

    # Protocols
    "MemberRepository",

    # Repositories
    "MemoryMemberRepository",
    "AsyncPGMemberRepository",

    # Services
    "MemberService",
    "BINDABLE_RESOURCE_TYPES",
]
