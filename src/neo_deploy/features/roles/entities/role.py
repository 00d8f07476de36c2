"""Role domain entities.

Roles and their policy rules are immutable value objects: once the catalog
is loaded nothing may change them at runtime.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Tuple


class RoleCompareResult(str, Enum):
    """Outcome of comparing two role ranks."""

    BIGGER = "bigger"
    SMALLER = "smaller"
    EQUAL = "equal"
    INCOMPARABLE = "incomparable"

    @property
    def is_bigger_or_equal(self) -> bool:
        return self in (RoleCompareResult.BIGGER, RoleCompareResult.EQUAL)


@dataclass(frozen=True)
class PolicyRule:
    """An attribute predicate granting the actions it matches.

    Within a dimension the values are alternatives; across dimensions they
    must all match. ``*`` matches anything in its dimension.
    """

    verbs: Tuple[str, ...] = ()
    api_groups: Tuple[str, ...] = ()
    resources: Tuple[str, ...] = ()
    scopes: Tuple[str, ...] = ()
    non_resource_urls: Tuple[str, ...] = ()

    @classmethod
    def of(
        cls,
        verbs: Iterable[str] = (),
        api_groups: Iterable[str] = (),
        resources: Iterable[str] = (),
        scopes: Iterable[str] = (),
        non_resource_urls: Iterable[str] = (),
    ) -> "PolicyRule":
        """Build a rule from any iterables."""
        return cls(
            verbs=tuple(verbs),
            api_groups=tuple(api_groups),
            resources=tuple(resources),
            scopes=tuple(scopes),
            non_resource_urls=tuple(non_resource_urls),
        )


@dataclass(frozen=True)
class Role:
    """A named, ordered list of policy rules."""

    name: str
    rules: Tuple[PolicyRule, ...] = ()
    description: str = ""

    def __post_init__(self):
        if not self.name:
            raise ValueError("Role name cannot be empty")
