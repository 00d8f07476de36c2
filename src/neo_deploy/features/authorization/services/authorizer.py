"""Role based authorizer.

Single-shot evaluation: resolve the caller's effective binding on the target
resource, resolve its role, then walk the role's rules in order. The first
matching rule allows; anything unexpected denies.
"""

import logging
import re
from typing import Iterable, Optional

from ....config.constants import DEFAULT_NOT_CHECKED_RESOURCES
from ...members.entities.member import Member
from ...members.services.member_service import MemberService
from ...roles.entities.role import Role
from ...roles.services.role_catalog import RoleCatalog
from ..entities.attributes import AttributesRecord
from ..entities.decision import (
    ADMIN_ALLOW,
    ANONYMOUS_USER,
    INTERNAL_ERROR,
    MEMBER_NOT_EXIST,
    NOT_CHECKED,
    NULL_MEMBER,
    RESOURCE_FORMAT_ERR,
    ROLE_NOT_EXIST,
    AuthorizationDecision,
    allowed_by_rule_reason,
    denied_reason,
)
from .rule_matching import rule_allows

logger = logging.getLogger(__name__)

_RESOURCE_ID = re.compile(r"[0-9]+")


def parse_resource_id(name: str) -> int:
    """Parse an unsigned resource id taken from the request path.

    Raises:
        ValueError: if ``name`` is not a plain unsigned integer
    """
    if not _RESOURCE_ID.fullmatch(name or ""):
        raise ValueError(f"invalid resource id: {name!r}")
    return int(name)


def visit_rules(member: Optional[Member], role: Role, attributes: AttributesRecord) -> AuthorizationDecision:
    """Evaluate ``role``'s rules in order; the first match wins."""
    member_info = member.base_info() if member is not None else NULL_MEMBER
    for index, rule in enumerate(role.rules):
        if rule_allows(attributes, rule):
            return AuthorizationDecision.allow(
                allowed_by_rule_reason(attributes.user_name, member_info, index)
            )
    return AuthorizationDecision.deny(denied_reason(attributes.user_name, member_info))


class Authorizer:
    """Decides whether a caller may perform an action."""

    def __init__(
        self,
        member_service: MemberService,
        role_catalog: RoleCatalog,
        not_checked_resources: Optional[Iterable[str]] = None,
        use_default_role: bool = False,
    ):
        """Initialize the authorizer.

        Args:
            member_service: Resolves effective bindings
            role_catalog: Resolves role names to rules
            not_checked_resources: Resource types always allowed without evaluation
            use_default_role: Evaluate the catalog's default role for callers without a binding
        """
        self._members = member_service
        self._roles = role_catalog
        self._not_checked = frozenset(
            DEFAULT_NOT_CHECKED_RESOURCES if not_checked_resources is None else not_checked_resources
        )
        self._use_default_role = use_default_role

    async def authorize(self, attributes: AttributesRecord) -> AuthorizationDecision:
        decision = await self._authorize(attributes)
        if decision.allowed:
            logger.debug(f"Allow {attributes.verb} {attributes.path}: {decision.reason}")
        else:
            logger.warning(f"Deny {attributes.verb} {attributes.path}: {decision.reason}")
        return decision

    async def _authorize(self, attributes: AttributesRecord) -> AuthorizationDecision:
        user = attributes.user
        if user is None:
            return AuthorizationDecision.deny(ANONYMOUS_USER)
        if user.is_admin:
            return AuthorizationDecision.allow(ADMIN_ALLOW)

        if attributes.resource_request and attributes.resource in self._not_checked:
            logger.warning(f"Resource '{attributes.resource}' is not checked by the authorizer")
            return AuthorizationDecision.allow(NOT_CHECKED)

        if not attributes.resource_request:
            return self._without_member(attributes)

        try:
            resource_id = parse_resource_id(attributes.name)
        except ValueError:
            return AuthorizationDecision.deny(RESOURCE_FORMAT_ERR)

        try:
            member = await self._members.effective_member_of(attributes.resource, resource_id, user.id)
        except Exception as e:
            logger.warning(
                f"Failed to resolve member of {attributes.resource}/{attributes.name} "
                f"for user {user.name}: {e}"
            )
            return AuthorizationDecision.deny(INTERNAL_ERROR, error=e)

        if member is None:
            return self._without_member(attributes)

        role = self._roles.find_role(member.role)
        if role is None:
            logger.error(f"Member {member.base_info()} references unknown role '{member.role}'")
            return AuthorizationDecision.deny(ROLE_NOT_EXIST)

        return visit_rules(member, role, attributes)

    def _without_member(self, attributes: AttributesRecord) -> AuthorizationDecision:
        default_role = self._roles.default_role() if self._use_default_role else None
        if default_role is None:
            return AuthorizationDecision.deny(MEMBER_NOT_EXIST)
        logger.debug(f"User {attributes.user_name} uses the default role {default_role.name}")
        return visit_rules(None, default_role, attributes)
