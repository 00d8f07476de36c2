"""Tests for the role catalog."""

import dataclasses

import pytest

from neo_deploy.core.exceptions import LoadCheckError, RoleNotFoundError
from neo_deploy.features.roles import PolicyRule, Role, RoleCatalog, RoleCompareResult


def _role(name):
    return Role(name=name, rules=(PolicyRule.of(verbs=["get"], api_groups=["core"], resources=["*"], scopes=["*"]),))


class TestRoleCatalogLoading:
    """Test loading and validation of the role definition."""

    def test_load_from_yaml(self, role_catalog):
        assert len(role_catalog) == 4
        assert [r.name for r in role_catalog.list_roles()] == ["owner", "maintainer", "pe", "guest"]
        assert role_catalog.default_role_name == "guest"
        assert role_catalog.default_role().name == "guest"

    def test_rule_aliases(self, role_catalog):
        owner = role_catalog.get_role("owner")
        guest = role_catalog.get_role("guest")

        assert owner.description == "full access"
        assert owner.rules[0].api_groups == ("*",)
        assert guest.rules[1].non_resource_urls == ("/front/*",)
        assert guest.rules[1].resources == ()

    def test_load_from_file(self, tmp_path):
        roles_file = tmp_path / "roles.yaml"
        roles_file.write_text(
            "RolePriorityRankDesc: [owner]\n"
            "Roles:\n"
            "  - name: owner\n"
            "    rules:\n"
            "      - verbs: ['*']\n"
        )

        catalog = RoleCatalog.from_file(roles_file)

        assert catalog.has_role("owner")
        assert catalog.default_role() is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(LoadCheckError):
            RoleCatalog.from_file(tmp_path / "missing.yaml")

    def test_rank_length_mismatch(self):
        with pytest.raises(LoadCheckError):
            RoleCatalog([_role("owner"), _role("guest")], ["owner"])

    def test_duplicate_role(self):
        with pytest.raises(LoadCheckError):
            RoleCatalog([_role("owner"), _role("owner")], ["owner", "guest"])

    def test_ranked_role_not_defined(self):
        with pytest.raises(LoadCheckError):
            RoleCatalog([_role("owner"), _role("guest")], ["owner", "maintainer"])

    def test_duplicate_rank(self):
        with pytest.raises(LoadCheckError):
            RoleCatalog([_role("owner"), _role("guest")], ["owner", "owner"])

    def test_unknown_default_role(self):
        with pytest.raises(RoleNotFoundError):
            RoleCatalog([_role("owner")], ["owner"], default_role="guest")

    def test_malformed_yaml(self):
        with pytest.raises(LoadCheckError):
            RoleCatalog.from_yaml("Roles: [unclosed")

    def test_document_must_be_mapping(self):
        with pytest.raises(LoadCheckError):
            RoleCatalog.from_yaml("- owner\n- guest\n")

    def test_missing_priority_list(self):
        with pytest.raises(LoadCheckError):
            RoleCatalog.from_yaml("Roles:\n  - name: owner\n")


class TestRoleCatalogLookups:
    """Test lookups and rank comparison."""

    def test_get_role_unknown(self, role_catalog):
        with pytest.raises(RoleNotFoundError):
            role_catalog.get_role("ghost")
        assert role_catalog.find_role("ghost") is None
        assert "ghost" not in role_catalog

    def test_rank_of(self, role_catalog):
        assert role_catalog.rank_of("owner") == 0
        assert role_catalog.rank_of("guest") == 3

    @pytest.mark.parametrize(
        "role_a, role_b, expected",
        [
            ("owner", "maintainer", RoleCompareResult.BIGGER),
            ("guest", "pe", RoleCompareResult.SMALLER),
            ("pe", "pe", RoleCompareResult.EQUAL),
            ("owner", "ghost", RoleCompareResult.INCOMPARABLE),
        ],
    )
    def test_compare(self, role_catalog, role_a, role_b, expected):
        assert role_catalog.compare(role_a, role_b) is expected

    def test_incomparable_is_not_bigger_or_equal(self):
        assert not RoleCompareResult.INCOMPARABLE.is_bigger_or_equal
        assert RoleCompareResult.EQUAL.is_bigger_or_equal

    def test_roles_are_immutable(self, role_catalog):
        owner = role_catalog.get_role("owner")

        with pytest.raises(dataclasses.FrozenInstanceError):
            owner.name = "root"
        with pytest.raises(TypeError):
            role_catalog._roles["owner"] = owner
