"""Tests for request info parsing and skippers."""

import pytest

from neo_deploy.config.constants import DEFAULT_SKIP_RULES
from neo_deploy.core.exceptions import InvalidRequestError, SettingsError
from neo_deploy.core.shared import CurrentUser
from neo_deploy.features.authorization.entities import AttributesRecord
from neo_deploy.features.authorization.services import (
    MethodAndPathSkipper,
    RequestInfoFactory,
    build_skippers,
)


class TestRequestInfoFactory:
    """Test method and URL parsing."""

    @pytest.fixture
    def factory(self):
        return RequestInfoFactory()

    @pytest.mark.parametrize(
        "method, url, verb",
        [
            ("GET", "/apis/core/v1/groups/1", "get"),
            ("GET", "/apis/core/v1/groups", "list"),
            ("POST", "/apis/core/v1/groups", "create"),
            ("PUT", "/apis/core/v1/groups/1", "update"),
            ("PATCH", "/apis/core/v1/groups/1", "patch"),
            ("DELETE", "/apis/core/v1/groups/1", "delete"),
            ("get", "/apis/core/v1/groups/1", "get"),
        ],
    )
    def test_verbs(self, factory, method, url, verb):
        assert factory.new_request_info(method, url).verb == verb

    def test_resource_request(self, factory):
        info = factory.new_request_info("POST", "/apis/core/v1/clusters/7/builddeploy?scope=test/hz")

        assert info.is_resource_request
        assert info.api_prefix == "apis"
        assert info.api_group == "core"
        assert info.api_version == "v1"
        assert info.resource == "clusters"
        assert info.name == "7"
        assert info.subresource == "builddeploy"
        assert info.scope == "test/hz"
        assert info.path == "/apis/core/v1/clusters/7/builddeploy"

    def test_capitalized_scope_key(self, factory):
        info = factory.new_request_info("GET", "/apis/core/v1/clusters/7?Scope=online/hz")

        assert info.scope == "online/hz"

    def test_non_resource_request(self, factory):
        info = factory.new_request_info("GET", "/health")

        assert not info.is_resource_request
        assert info.verb == "get"
        assert info.path == "/health"

    @pytest.mark.parametrize("method, url", [("", "/apis/core/v1/groups"), ("GET", "")])
    def test_invalid_api(self, factory, method, url):
        with pytest.raises(InvalidRequestError):
            factory.new_request_info(method, url)

    def test_relative_path(self, factory):
        assert factory.relative_path("/apis/core/v1/health") == "/health"
        assert factory.relative_path("/health") is None

    @pytest.mark.parametrize(
        "method, url, read_only",
        [
            ("GET", "/apis/core/v1/groups/1", True),
            ("GET", "/apis/core/v1/groups", True),
            ("POST", "/apis/core/v1/groups", False),
            ("DELETE", "/apis/core/v1/groups/1", False),
        ],
    )
    def test_attributes_from_request_info(self, factory, method, url, read_only):
        user = CurrentUser(id=2, name="bob")

        attributes = AttributesRecord.from_request_info(user, factory.new_request_info(method, url))

        assert attributes.is_read_only is read_only
        assert attributes.user_name == "bob"
        assert attributes.resource == "groups"
        assert attributes.resource_request


class TestSkippers:
    """Test authorization skippers."""

    def test_any_method(self):
        skipper = MethodAndPathSkipper("*", r"^/health")

        assert skipper.skip("GET", "/health")
        assert skipper.skip("DELETE", "/health")
        assert not skipper.skip("GET", "/apis/core/v1/groups")

    def test_relative_path(self):
        skipper = MethodAndPathSkipper("*", r"^/health")

        assert skipper.skip("GET", "/apis/core/v1/health", relative_path="/health")

    def test_method_must_match(self):
        skipper = MethodAndPathSkipper("POST", r"^/apis/core/v1/logout")

        assert skipper.skip("post", "/apis/core/v1/logout")
        assert not skipper.skip("GET", "/apis/core/v1/logout")

    def test_default_rules(self):
        skippers = build_skippers(DEFAULT_SKIP_RULES)

        assert any(s.skip("GET", "/apis/core/v1/roles") for s in skippers)
        assert any(s.skip("GET", "/apis/core/v1/templates") for s in skippers)
        assert not any(s.skip("GET", "/apis/core/v1/templates/1") for s in skippers)
        assert not any(s.skip("GET", "/apis/core/v1/groups/1") for s in skippers)

    def test_invalid_pattern(self):
        with pytest.raises(SettingsError):
            build_skippers([("*", "(unclosed")])
