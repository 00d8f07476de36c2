"""Role catalog.

Loads the role definition once, validates it, and exposes read-only lookups.
Rank is the position in ``RolePriorityRankDesc``: a lower index means more
authority. Rank is only used to bound escalation, never to match rules.
"""

import logging
from pathlib import Path
from types import MappingProxyType
from typing import IO, Any, List, Mapping, Optional, Sequence, Union

import yaml
from pydantic import ValidationError

from ....core.exceptions import LoadCheckError, RoleNotFoundError
from ..entities.definition import RoleDefinition
from ..entities.role import Role, RoleCompareResult

logger = logging.getLogger(__name__)


class RoleCatalog:
    """Immutable table of roles ranked by an explicit priority list."""

    def __init__(
        self,
        roles: Sequence[Role],
        priority_rank_desc: Sequence[str],
        default_role: Optional[str] = None,
    ):
        """Validate and freeze a role table.

        Raises:
            LoadCheckError: if roles and the priority list disagree
            RoleNotFoundError: if ``default_role`` is not a defined role
        """
        if len(roles) != len(priority_rank_desc):
            raise LoadCheckError(
                f"{len(roles)} roles defined but {len(priority_rank_desc)} ranked",
                details={"roles": [r.name for r in roles], "ranks": list(priority_rank_desc)},
            )

        by_name = {}
        for role in roles:
            if role.name in by_name:
                raise LoadCheckError(f"role '{role.name}' is defined twice")
            by_name[role.name] = role

        ranks = {}
        for index, name in enumerate(priority_rank_desc):
            if name in ranks:
                raise LoadCheckError(f"role '{name}' is ranked twice")
            if name not in by_name:
                raise LoadCheckError(f"ranked role '{name}' is not defined")
            ranks[name] = index

        if default_role and default_role not in by_name:
            raise RoleNotFoundError(default_role)

        self._roles = MappingProxyType(by_name)
        self._ranks = MappingProxyType(ranks)
        self._order = tuple(priority_rank_desc)
        self._default_role = default_role or None

    # Loading

    @classmethod
    def from_definition(cls, definition: Union[RoleDefinition, Mapping[str, Any]]) -> "RoleCatalog":
        """Build a catalog from a parsed roles document."""
        if not isinstance(definition, RoleDefinition):
            try:
                definition = RoleDefinition.model_validate(definition)
            except ValidationError as e:
                raise LoadCheckError(f"invalid role definition: {e}") from e

        catalog = cls(
            roles=[role_spec.to_role() for role_spec in definition.roles],
            priority_rank_desc=definition.role_priority_rank_desc,
            default_role=definition.default_role,
        )
        logger.info(
            f"Loaded {len(catalog._order)} roles ranked {list(catalog._order)}, "
            f"default role: {catalog._default_role}"
        )
        return catalog

    @classmethod
    def from_yaml(cls, source: Union[str, IO[str]]) -> "RoleCatalog":
        """Build a catalog from YAML text or a text stream."""
        try:
            document = yaml.safe_load(source)
        except yaml.YAMLError as e:
            raise LoadCheckError(f"malformed role definition: {e}") from e
        if not isinstance(document, Mapping):
            raise LoadCheckError("role definition must be a mapping")
        return cls.from_definition(document)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "RoleCatalog":
        """Build a catalog from a YAML file."""
        path = Path(path)
        try:
            with path.open("r", encoding="utf-8") as fp:
                return cls.from_yaml(fp)
        except OSError as e:
            raise LoadCheckError(f"cannot read role definition {path}: {e}") from e

    # Lookups

    def get_role(self, name: str) -> Role:
        role = self._roles.get(name)
        if role is None:
            raise RoleNotFoundError(name)
        return role

    def find_role(self, name: str) -> Optional[Role]:
        return self._roles.get(name)

    def has_role(self, name: str) -> bool:
        return name in self._roles

    def list_roles(self) -> List[Role]:
        """Roles ordered from most to least authority."""
        return [self._roles[name] for name in self._order]

    def default_role(self) -> Optional[Role]:
        if self._default_role is None:
            return None
        return self._roles[self._default_role]

    @property
    def default_role_name(self) -> Optional[str]:
        return self._default_role

    def rank_of(self, name: str) -> int:
        if name not in self._ranks:
            raise RoleNotFoundError(name)
        return self._ranks[name]

    def compare(self, role_a: str, role_b: str) -> RoleCompareResult:
        """Compare the authority of two roles."""
        if role_a not in self._ranks or role_b not in self._ranks:
            return RoleCompareResult.INCOMPARABLE
        rank_a, rank_b = self._ranks[role_a], self._ranks[role_b]
        if rank_a < rank_b:
            return RoleCompareResult.BIGGER
        if rank_a > rank_b:
            return RoleCompareResult.SMALLER
        return RoleCompareResult.EQUAL

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, name: object) -> bool:
        return name in self._roles
