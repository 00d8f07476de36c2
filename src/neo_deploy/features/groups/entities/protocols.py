"""Protocol interfaces for the resource tree.

Repositories own the transactional guarantees: every mutating method runs
its validation reads and its writes as one atomic step, so callers never
observe a half-applied create or transfer.
"""

from abc import abstractmethod
from typing import TYPE_CHECKING, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

from .child import Child
from .group import Group, UpdateGroup
from .resources import Application, Cluster, PipelineRun, Template

if TYPE_CHECKING:
    from ...members.entities.member import Member


@runtime_checkable
class GroupRepository(Protocol):
    """Persistence contract for groups."""

    @abstractmethod
    async def create(self, group: Group, owner: Optional["Member"] = None) -> Group:
        """Insert a group and compute its traversal ids.

        Checks parent existence, sibling name/path uniqueness and sibling
        application collisions in the same transaction as the insert. When
        ``owner`` is given it is bound to the new group in that transaction.
        """
        ...

    @abstractmethod
    async def get_by_id(self, group_id: int) -> Optional[Group]:
        """Get a group by id."""
        ...

    @abstractmethod
    async def get_by_ids(self, group_ids: Sequence[int]) -> List[Group]:
        """Get groups by ids, preserving the order of ``group_ids``."""
        ...

    @abstractmethod
    async def get_by_paths(self, paths: Sequence[str]) -> List[Group]:
        """Get every group whose path segment is in ``paths``."""
        ...

    @abstractmethod
    async def get_child_by_path(self, parent_id: int, path: str) -> Optional[Group]:
        """Get the child of ``parent_id`` with the given path segment."""
        ...

    @abstractmethod
    async def get_by_name_or_path_under_parent(self, parent_id: int, name: str, path: str) -> List[Group]:
        """Children of ``parent_id`` whose name or path collides with the given ones."""
        ...

    @abstractmethod
    async def get_by_name_fuzzily(self, name: str) -> List[Group]:
        """Groups whose name contains ``name``."""
        ...

    @abstractmethod
    async def get_by_id_name_fuzzily(self, group_id: int, name: str) -> List[Group]:
        """Descendants of ``group_id`` whose name contains ``name``."""
        ...

    @abstractmethod
    async def get_subgroups_under_parent_ids(self, parent_ids: Sequence[int]) -> List[Group]:
        """Direct children of any of ``parent_ids``."""
        ...

    @abstractmethod
    async def update_basic(self, group_id: int, update: UpdateGroup, updated_by: int = 0) -> Group:
        """Apply an update to the current row with uniqueness re-checks.

        Fields left unset in ``update`` keep the value stored at write time.
        """
        ...

    @abstractmethod
    async def delete(self, group_id: int) -> None:
        """Delete a childless group."""
        ...

    @abstractmethod
    async def count_by_parent_id(self, parent_id: int) -> int:
        """Number of direct sub-groups."""
        ...

    @abstractmethod
    async def list_subgroups(self, parent_id: int, offset: int, limit: int) -> Tuple[List[Group], int]:
        """Page of direct sub-groups ordered by ``updated_at`` descending, plus the total."""
        ...

    @abstractmethod
    async def list_children(self, parent_id: int, offset: int, limit: int) -> Tuple[List[Child], int]:
        """Page of sub-groups followed by applications, plus the total."""
        ...

    @abstractmethod
    async def transfer(self, group_id: int, new_parent_id: int, updated_by: int = 0) -> Group:
        """Move a group and rewrite traversal ids of its whole subtree atomically."""
        ...


@runtime_checkable
class ResourceRepository(Protocol):
    """Read contract for leaf resources."""

    @abstractmethod
    async def get_application(self, application_id: int) -> Optional[Application]:
        ...

    @abstractmethod
    async def get_cluster(self, cluster_id: int) -> Optional[Cluster]:
        ...

    @abstractmethod
    async def get_template(self, template_id: int) -> Optional[Template]:
        ...

    @abstractmethod
    async def get_pipelinerun(self, pipelinerun_id: int) -> Optional[PipelineRun]:
        ...

    @abstractmethod
    async def get_application_by_name_under_group(self, group_id: int, name: str) -> Optional[Application]:
        ...

    @abstractmethod
    async def get_applications_by_names_under_group(
        self, group_id: int, names: Sequence[str]
    ) -> List[Application]:
        ...

    @abstractmethod
    async def get_cluster_by_name_under_application(
        self, application_id: int, name: str
    ) -> Optional[Cluster]:
        ...

    @abstractmethod
    async def get_applications_by_name_fuzzily(self, name: str) -> List[Application]:
        ...

    @abstractmethod
    async def count_applications_by_group(self, group_id: int) -> int:
        ...

    @abstractmethod
    async def count_templates_by_group(self, group_id: int) -> int:
        ...
