"""Authorization decisions and review results."""

from dataclasses import dataclass
from typing import Optional

# Reasons reported with decisions
NOT_CHECKED = "not checked"
RESOURCE_FORMAT_ERR = "format error"
ANONYMOUS_USER = "anonymous user"
INTERNAL_ERROR = "internal error"
MEMBER_NOT_EXIST = "member not exist"
ROLE_NOT_EXIST = "role not exist"
ADMIN_ALLOW = "admin allows everything"

NULL_MEMBER = "null"


def allowed_by_rule_reason(user_name: str, member_info: str, rule_index: int) -> str:
    return f"user {user_name} allowed by member({member_info}) by rule[{rule_index}]"


def denied_reason(user_name: str, member_info: str) -> str:
    return f"user {user_name} denied by member({member_info})"


@dataclass(frozen=True)
class AuthorizationDecision:
    """Allow or deny, with a human-readable reason.

    ``error`` carries the internal failure behind a fail-closed deny.
    """

    allowed: bool
    reason: str
    error: Optional[BaseException] = None

    @classmethod
    def allow(cls, reason: str) -> "AuthorizationDecision":
        return cls(allowed=True, reason=reason)

    @classmethod
    def deny(cls, reason: str, error: Optional[BaseException] = None) -> "AuthorizationDecision":
        return cls(allowed=False, reason=reason, error=error)


@dataclass(frozen=True)
class API:
    """One url and method pair submitted for review."""

    url: str
    method: str


@dataclass(frozen=True)
class ReviewResult:
    """Review outcome of one url and method pair."""

    allowed: bool
    reason: str = ""

    def to_dict(self) -> dict:
        return {"allowed": self.allowed, "reason": self.reason}
