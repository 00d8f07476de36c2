"""Role definition document models.

The document keeps the key names of the on-disk roles file::

    RolePriorityRankDesc: [owner, maintainer]
    DefaultRole: maintainer
    Roles:
      - name: owner
        rules:
          - apiGroups: ["core"]
            resources: ["*"]
            verbs: ["*"]
            scopes: ["*"]
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .role import PolicyRule, Role


class PolicyRuleDefinition(BaseModel):
    """One rule as written in the roles file."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    verbs: List[str] = Field(default_factory=list)
    api_groups: List[str] = Field(default_factory=list, alias="apiGroups")
    resources: List[str] = Field(default_factory=list)
    scopes: List[str] = Field(default_factory=list)
    non_resource_urls: List[str] = Field(default_factory=list, alias="nonResourceURLs")

    def to_rule(self) -> PolicyRule:
        return PolicyRule.of(
            verbs=self.verbs,
            api_groups=self.api_groups,
            resources=self.resources,
            scopes=self.scopes,
            non_resource_urls=self.non_resource_urls,
        )


class RoleSpec(BaseModel):
    """One role as written in the roles file."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(min_length=1)
    description: str = Field(default="", alias="desc")
    rules: List[PolicyRuleDefinition] = Field(default_factory=list)

    def to_role(self) -> Role:
        return Role(
            name=self.name,
            rules=tuple(rule.to_rule() for rule in self.rules),
            description=self.description,
        )


class RoleDefinition(BaseModel):
    """The whole roles document."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    role_priority_rank_desc: List[str] = Field(alias="RolePriorityRankDesc")
    default_role: Optional[str] = Field(default=None, alias="DefaultRole")
    roles: List[RoleSpec] = Field(alias="Roles")
