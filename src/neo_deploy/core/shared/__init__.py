"""Shared request-scoped entities."""

from .context import CurrentUser

__all__ = ["CurrentUser"]
