"""Parse API method and URL pairs into RequestInfo."""

from typing import Iterable, Optional
from urllib.parse import parse_qs, urlsplit

from ....config.constants import DEFAULT_API_PREFIXES
from ....core.exceptions import InvalidRequestError
from ..entities.request_info import RequestInfo

METHOD_TO_VERB = {
    "POST": "create",
    "GET": "get",
    "HEAD": "get",
    "PUT": "update",
    "PATCH": "patch",
    "DELETE": "delete",
}

SCOPE_QUERY_KEYS = ("scope", "Scope")


def split_path(path: str):
    """Non-empty path segments."""
    trimmed = path.strip("/")
    if not trimmed:
        return []
    return trimmed.split("/")


class RequestInfoFactory:
    """Builds RequestInfo from a method and a URL.

    ``/<prefix>/<group>/<version>/<resource>/<name>/<subresource>`` is a
    resource request when ``<prefix>`` is a known API prefix.
    """

    def __init__(self, api_prefixes: Optional[Iterable[str]] = None):
        self.api_prefixes = frozenset(api_prefixes or DEFAULT_API_PREFIXES)

    def new_request_info(self, method: str, url: str) -> RequestInfo:
        if not method or not url:
            raise InvalidRequestError(
                f"invalid api, url: {url!r}, method: {method!r}",
                details={"url": url, "method": method},
            )
        try:
            parsed = urlsplit(url)
        except ValueError as e:
            raise InvalidRequestError(f"invalid api url: {url!r}", details={"url": url}) from e

        path = parsed.path or "/"
        method = method.upper()
        parts = split_path(path)

        if len(parts) < 3 or parts[0] not in self.api_prefixes:
            return RequestInfo(path=path, verb=method.lower())

        api_prefix, api_group, api_version = parts[:3]
        parts = parts[3:]
        verb = METHOD_TO_VERB.get(method, "")
        resource = parts[0] if len(parts) >= 1 else ""
        name = parts[1] if len(parts) >= 2 else ""
        subresource = parts[2] if len(parts) >= 3 else ""
        if not name and verb == "get":
            verb = "list"

        query = parse_qs(parsed.query)
        scope = ""
        for key in SCOPE_QUERY_KEYS:
            if query.get(key):
                scope = query[key][0]
                break

        return RequestInfo(
            path=path,
            verb=verb,
            is_resource_request=True,
            api_prefix=api_prefix,
            api_group=api_group,
            api_version=api_version,
            resource=resource,
            name=name,
            subresource=subresource,
            scope=scope,
            parts=tuple(parts),
        )

    def relative_path(self, path: str) -> Optional[str]:
        """Path below ``/<prefix>/<group>/<version>``, or None if not an API path."""
        parts = split_path(path)
        if len(parts) < 3 or parts[0] not in self.api_prefixes:
            return None
        return "/" + "/".join(parts[3:])
