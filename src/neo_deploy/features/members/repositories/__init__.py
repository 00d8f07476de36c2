"""Role binding repositories: in-memory and asyncpg implementations."""

from .memory_member_repository import MemoryMemberRepository
from .member_repository import AsyncPGMemberRepository, build_member_from_row

__all__ = [
    "MemoryMemberRepository",
    "AsyncPGMemberRepository",
    "build_member_from_row",
]
