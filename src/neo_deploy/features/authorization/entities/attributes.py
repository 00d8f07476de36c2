"""Authorization attributes.

An AttributesRecord describes one action for the authorizer: who performs
it, what verb, and which resource or non-resource path it targets.
"""

from dataclasses import dataclass
from typing import Optional

from ....core.shared import CurrentUser
from .request_info import RequestInfo

READ_ONLY_VERBS = frozenset({"get", "list"})


@dataclass(frozen=True)
class AttributesRecord:
    """Attributes of an action to authorize."""

    user: Optional[CurrentUser]
    verb: str
    api_group: str = ""
    api_version: str = ""
    resource: str = ""
    subresource: str = ""
    name: str = ""
    scope: str = ""
    resource_request: bool = False
    path: str = ""

    @classmethod
    def from_request_info(cls, user: Optional[CurrentUser], info: RequestInfo) -> "AttributesRecord":
        return cls(
            user=user,
            verb=info.verb,
            api_group=info.api_group,
            api_version=info.api_version,
            resource=info.resource,
            subresource=info.subresource,
            name=info.name,
            scope=info.scope,
            resource_request=info.is_resource_request,
            path=info.path,
        )

    @property
    def is_read_only(self) -> bool:
        return self.verb in READ_ONLY_VERBS

    @property
    def user_name(self) -> str:
        return self.user.name if self.user else ""
