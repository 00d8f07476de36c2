"""Caller identity entity.

The control plane receives callers already authenticated; this module only
describes the identity the authorizer and the membership guards reason about.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class CurrentUser:
    """An authenticated caller.

    ``id`` is the identity stored on role bindings as ``member_name_id``.
    """

    id: int
    name: str
    full_name: str = ""
    email: str = ""
    is_admin: bool = False

    def __post_init__(self):
        if self.id < 0:
            raise ValueError(f"User id must be non-negative: {self.id}")
        if not self.name:
            raise ValueError("User name cannot be empty")

    def __str__(self) -> str:
        return self.name
