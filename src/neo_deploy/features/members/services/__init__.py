"""Role binding services."""

from .member_service import BINDABLE_RESOURCE_TYPES, MemberService

__all__ = ["MemberService", "BINDABLE_RESOURCE_TYPES"]
