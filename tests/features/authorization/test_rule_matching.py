"""Tests for policy rule matching."""

import pytest

from neo_deploy.features.authorization.entities import AttributesRecord
from neo_deploy.features.authorization.services import (
    non_resource_url_matches,
    resource_matches,
    rule_allows,
    scope_matches,
)
from neo_deploy.features.roles import PolicyRule


def _resource_attrs(verb="get", resource="clusters", subresource="", scope="", api_group="core"):
    return AttributesRecord(
        user=None,
        verb=verb,
        api_group=api_group,
        api_version="v1",
        resource=resource,
        subresource=subresource,
        name="1",
        scope=scope,
        resource_request=True,
        path=f"/apis/{api_group}/v1/{resource}/1",
    )


class TestDimensionMatching:
    """Test single-dimension matchers."""

    @pytest.mark.parametrize(
        "resources, combined, subresource, expected",
        [
            (["*"], "clusters", "", True),
            (["clusters"], "clusters", "", True),
            (["clusters"], "clusters/status", "status", False),
            (["clusters/status"], "clusters/status", "status", True),
            (["*/status"], "applications/status", "status", True),
            (["*/status"], "applications", "", False),
            ([], "clusters", "", False),
        ],
    )
    def test_resource(self, resources, combined, subresource, expected):
        rule = PolicyRule.of(resources=resources)

        assert resource_matches(rule, combined, subresource) is expected

    @pytest.mark.parametrize(
        "scopes, scope, expected",
        [
            (["*"], "online/hz", True),
            (["test/*"], "test/hz", True),
            (["test/*"], "online/hz", False),
            (["online/hz"], "online/hz", True),
            ([], "", False),
        ],
    )
    def test_scope(self, scopes, scope, expected):
        assert scope_matches(PolicyRule.of(scopes=scopes), scope) is expected

    def test_non_resource_url_prefix(self):
        rule = PolicyRule.of(non_resource_urls=["/apis/front/*"])

        assert non_resource_url_matches(rule, "/apis/front/v1/menu")
        assert not non_resource_url_matches(rule, "/apis/back/v1/menu")


class TestRuleAllows:
    """Test whole-rule evaluation."""

    def test_resource_rule(self):
        rule = PolicyRule.of(verbs=["get", "list"], api_groups=["core"], resources=["clusters"], scopes=["*"])

        assert rule_allows(_resource_attrs(verb="get"), rule)
        assert not rule_allows(_resource_attrs(verb="delete"), rule)
        assert not rule_allows(_resource_attrs(api_group="ext"), rule)

    def test_empty_scope_list_matches_nothing(self):
        rule = PolicyRule.of(verbs=["*"], api_groups=["*"], resources=["*"])

        assert not rule_allows(_resource_attrs(), rule)

    def test_non_resource_request_ignores_resource_dimensions(self):
        rule = PolicyRule.of(verbs=["get"], non_resource_urls=["/healthz"])
        attributes = AttributesRecord(user=None, verb="get", path="/healthz")

        assert rule_allows(attributes, rule)
        assert not rule_allows(AttributesRecord(user=None, verb="post", path="/healthz"), rule)

    def test_resource_rule_does_not_grant_non_resource_urls(self):
        rule = PolicyRule.of(verbs=["*"], api_groups=["*"], resources=["*"], scopes=["*"])

        assert not rule_allows(AttributesRecord(user=None, verb="get", path="/healthz"), rule)
