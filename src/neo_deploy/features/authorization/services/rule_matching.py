"""Policy rule matching.

Each dimension of a rule is a list of alternatives; ``*`` matches any value.
A resource request must match verb, api group, resource and scope; a
non-resource request must match verb and URL. A dimension with no entries
matches nothing.
"""

from ...roles.entities.role import PolicyRule
from ..entities.attributes import AttributesRecord

MATCH_ALL = "*"


def _prefix_matches(patterns, value: str) -> bool:
    for pattern in patterns:
        if pattern == MATCH_ALL or pattern == value:
            return True
        if pattern.endswith(MATCH_ALL) and value.startswith(pattern.rstrip(MATCH_ALL)):
            return True
    return False


def verb_matches(rule: PolicyRule, verb: str) -> bool:
    return any(v == MATCH_ALL or v == verb for v in rule.verbs)


def api_group_matches(rule: PolicyRule, api_group: str) -> bool:
    return any(g == MATCH_ALL or g == api_group for g in rule.api_groups)


def resource_matches(rule: PolicyRule, combined_resource: str, subresource: str) -> bool:
    """Match ``resource`` or ``resource/subresource``.

    A rule entry ``*/<subresource>`` matches that subresource of any resource.
    """
    for rule_resource in rule.resources:
        if rule_resource == MATCH_ALL or rule_resource == combined_resource:
            return True
        if subresource and rule_resource == f"{MATCH_ALL}/{subresource}":
            return True
    return False


def scope_matches(rule: PolicyRule, scope: str) -> bool:
    """Exact, ``*`` or trailing-wildcard prefix match (``test/*``)."""
    return _prefix_matches(rule.scopes, scope)


def non_resource_url_matches(rule: PolicyRule, url: str) -> bool:
    """Exact, ``*`` or trailing-wildcard prefix match (``/apis/front/*``)."""
    return _prefix_matches(rule.non_resource_urls, url)


def combined_resource(attributes: AttributesRecord) -> str:
    if attributes.subresource:
        return f"{attributes.resource}/{attributes.subresource}"
    return attributes.resource


def rule_allows(attributes: AttributesRecord, rule: PolicyRule) -> bool:
    """Whether ``rule`` grants the action described by ``attributes``."""
    if attributes.resource_request:
        return (
            verb_matches(rule, attributes.verb)
            and api_group_matches(rule, attributes.api_group)
            and resource_matches(rule, combined_resource(attributes), attributes.subresource)
            and scope_matches(rule, attributes.scope)
        )

    return verb_matches(rule, attributes.verb) and non_resource_url_matches(rule, attributes.path)
