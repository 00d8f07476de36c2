"""Request information parsed from an API method and URL."""

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class RequestInfo:
    """What a request addresses.

    Resource requests look like ``/<prefix>/<group>/<version>/<resource>[/<name>[/<subresource>]]``;
    everything else is a non-resource request described only by its path.
    """

    path: str
    verb: str
    is_resource_request: bool = False
    api_prefix: str = ""
    api_group: str = ""
    api_version: str = ""
    resource: str = ""
    name: str = ""
    subresource: str = ""
    scope: str = ""
    parts: Tuple[str, ...] = field(default_factory=tuple)
