"""Configuration module for neo-deploy.

Constants, environment-driven settings and logging setup.
"""

from .constants import (
    ROOT_GROUP_ID,
    TRAVERSAL_IDS_SEPARATOR,
    ResourceType,
    ChildType,
    VisibilityLevel,
    DefaultRoles,
    DEFAULT_NOT_CHECKED_RESOURCES,
    DEFAULT_API_PREFIXES,
    DEFAULT_SKIP_PATTERN,
    DEFAULT_SKIP_RULES,
    ANY_METHOD,
    DEFAULT_PAGE_NUMBER,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
)
from .settings import DeploySettings, get_settings
from .logging_config import (
    setup_logging,
    LogVerbosity,
    LogFormat,
    LoggingConfig,
)

__all__ = [
    # Constants
    "ROOT_GROUP_ID",
    "TRAVERSAL_IDS_SEPARATOR",
    "ResourceType",
    "ChildType",
    "VisibilityLevel",
    "DefaultRoles",
    "DEFAULT_NOT_CHECKED_RESOURCES",
    "DEFAULT_API_PREFIXES",
    "DEFAULT_SKIP_PATTERN",
    "DEFAULT_SKIP_RULES",
    "ANY_METHOD",
    "DEFAULT_PAGE_NUMBER",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",

    # Settings
    "DeploySettings",
    "get_settings",

    # Logging
    "setup_logging",
    "LogVerbosity",
    "LogFormat",
    "LoggingConfig",
]
