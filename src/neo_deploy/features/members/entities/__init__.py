"""Role binding entities."""

from .member import Member, MemberType, PostMember, deduplicate_members
from .protocols import MemberRepository

__all__ = [
    "Member",
    "MemberType",
    "PostMember",
    "deduplicate_members",
    "MemberRepository",
]
