"""Protocol interfaces for role binding persistence."""

from abc import abstractmethod
from typing import List, Optional, Protocol, runtime_checkable

from ....config.constants import ResourceType
from .member import Member, MemberType


@runtime_checkable
class MemberRepository(Protocol):
    """Persistence contract for role bindings."""

    @abstractmethod
    async def create(self, member: Member) -> Member:
        """Insert a binding.

        Raises:
            MemberExistError: if a binding for the same identity and resource exists
        """
        ...

    @abstractmethod
    async def get_by_id(self, member_id: int) -> Optional[Member]:
        """Get a binding by id."""
        ...

    @abstractmethod
    async def get_direct(
        self,
        resource_type: ResourceType,
        resource_id: int,
        member_type: MemberType,
        member_name_id: int
    ) -> Optional[Member]:
        """Get the binding recorded exactly on the resource."""
        ...

    @abstractmethod
    async def update_role(self, member_id: int, role: str, granted_by: int) -> Member:
        """Change the role of a binding."""
        ...

    @abstractmethod
    async def delete(self, member_id: int) -> None:
        """Delete a binding."""
        ...

    @abstractmethod
    async def list_direct_by_resource(self, resource_type: ResourceType, resource_id: int) -> List[Member]:
        """All bindings recorded exactly on the resource, oldest first."""
        ...
