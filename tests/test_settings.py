"""Tests for settings and service wiring."""

import pytest
from pydantic import ValidationError

from neo_deploy.bootstrap import create_memory_services, load_role_catalog
from neo_deploy.config.settings import DeploySettings
from neo_deploy.core.exceptions import SettingsError
from neo_deploy.features.authorization.entities import API, NOT_CHECKED
from neo_deploy.features.groups.entities import NewGroup


class TestDeploySettings:
    """Test environment-driven settings."""

    def test_defaults(self):
        settings = DeploySettings(_env_file=None)

        assert settings.creator_role == "owner"
        assert settings.use_default_role is False
        assert set(settings.not_checked_resources) == {"members", "pipelineruns"}
        assert settings.api_prefixes == ["apis"]
        assert settings.default_page_size == 20
        assert settings.parsed_skip_patterns()[1] == ("GET", "^/apis/core/v1/idps/endpoints")

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("NEO_DEPLOY_USE_DEFAULT_ROLE", "true")
        monkeypatch.setenv("NEO_DEPLOY_SKIP_PATTERNS", '["get ^/version"]')
        monkeypatch.setenv("NEO_DEPLOY_DATABASE_URL", "postgresql+asyncpg://u:p@db/neo")

        settings = DeploySettings(_env_file=None)

        assert settings.use_default_role is True
        assert settings.parsed_skip_patterns() == [("GET", "^/version")]
        assert settings.dsn == "postgresql://u:p@db/neo"

    def test_invalid_skip_pattern(self):
        with pytest.raises(ValidationError):
            DeploySettings(_env_file=None, skip_patterns=["^/health"])


class TestBootstrap:
    """Test wiring services from settings."""

    def test_load_role_catalog_requires_file(self):
        with pytest.raises(SettingsError):
            load_role_catalog(DeploySettings(_env_file=None))

    def test_load_role_catalog_from_file(self, tmp_path):
        roles_file = tmp_path / "roles.yaml"
        roles_file.write_text("RolePriorityRankDesc: [owner]\nRoles:\n  - name: owner\n")

        catalog = load_role_catalog(DeploySettings(_env_file=None, roles_file=str(roles_file)))

        assert catalog.has_role("owner")

    @pytest.mark.asyncio
    async def test_memory_services(self, role_catalog, alice):
        settings = DeploySettings(_env_file=None, skip_patterns=["GET ^/version"])
        services = create_memory_services(role_catalog, settings)

        group = await services.group_service.create_group(alice, NewGroup(name="Platform", path="platform"))
        url = f"/apis/core/v1/groups/{group.id}"
        results = await services.access_review_service.review(alice, [API(url, "DELETE"), API("/version", "GET")])

        assert results[url]["DELETE"].allowed
        assert results["/version"]["GET"].reason == NOT_CHECKED
