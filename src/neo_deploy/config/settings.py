"""
Runtime settings for neo-deploy.

Values come from the environment (prefix ``NEO_DEPLOY_``) or a local ``.env``
file, following the pydantic-settings conventions used across the platform.
"""
from typing import List, Optional, Tuple
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator

from .constants import (
    DEFAULT_API_PREFIXES,
    DEFAULT_NOT_CHECKED_RESOURCES,
    DEFAULT_PAGE_SIZE,
    DEFAULT_SKIP_RULES,
    MAX_PAGE_SIZE,
    DefaultRoles,
)


class DeploySettings(BaseSettings):
    """Settings for the deployment control plane."""

    model_config = SettingsConfigDict(
        env_prefix="NEO_DEPLOY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application
    app_name: str = Field(default="neo-deploy")
    environment: str = Field(default="development")

    # Database
    database_url: Optional[str] = Field(default=None)
    database_schema: str = Field(default="public")
    db_pool_min_size: int = Field(default=5, ge=1)
    db_pool_max_size: int = Field(default=20, ge=1)
    db_command_timeout: int = Field(default=60, ge=1)

    # Role catalog
    roles_file: Optional[str] = Field(default=None)
    creator_role: str = Field(default=DefaultRoles.OWNER)

    # Authorization
    use_default_role: bool = Field(default=False)
    not_checked_resources: List[str] = Field(
        default_factory=lambda: sorted(DEFAULT_NOT_CHECKED_RESOURCES)
    )
    api_prefixes: List[str] = Field(default_factory=lambda: list(DEFAULT_API_PREFIXES))
    skip_patterns: List[str] = Field(
        default_factory=lambda: [f"{method} {pattern}" for method, pattern in DEFAULT_SKIP_RULES]
    )

    # Pagination
    default_page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)
    max_page_size: int = Field(default=MAX_PAGE_SIZE, ge=1)

    @field_validator("skip_patterns")
    @classmethod
    def validate_skip_patterns(cls, value: List[str]) -> List[str]:
        """Each entry must read ``"<METHOD> <REGEX>"``."""
        for entry in value:
            if len(entry.strip().split(None, 1)) != 2:
                raise ValueError(f"skip pattern must be '<METHOD> <REGEX>': {entry!r}")
        return value

    def parsed_skip_patterns(self) -> List[Tuple[str, str]]:
        """Split skip patterns into ``(method, regex)`` pairs."""
        pairs = []
        for entry in self.skip_patterns:
            method, pattern = entry.strip().split(None, 1)
            pairs.append((method.upper(), pattern.strip()))
        return pairs

    @property
    def dsn(self) -> Optional[str]:
        """Database URL usable by asyncpg."""
        if self.database_url is None:
            return None
        return self.database_url.replace("+asyncpg", "")


@lru_cache()
def get_settings() -> DeploySettings:
    """Get cached settings instance."""
    return DeploySettings()
