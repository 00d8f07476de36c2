"""Core module for neo-deploy.

Exports the exception hierarchy and the caller identity shared by all features.
"""

from .exceptions import *
from .shared import CurrentUser
from .exceptions import __all__ as _exception_names

__all__ = list(_exception_names) + ["CurrentUser"]
