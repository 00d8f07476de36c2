"""Role catalog services."""

from .role_catalog import RoleCatalog

__all__ = ["RoleCatalog"]
