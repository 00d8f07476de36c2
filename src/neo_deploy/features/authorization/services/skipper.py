"""Skippers let matching requests bypass authorization entirely."""

import logging
import re
from typing import Iterable, List, Optional, Pattern, Tuple, Union

from ....config.constants import ANY_METHOD
from ....core.exceptions import SettingsError

logger = logging.getLogger(__name__)


class MethodAndPathSkipper:
    """Skip requests whose method and path match.

    ``method`` ``*`` matches any method. The pattern is searched in the full
    path and, when given, in the path relative to the API version root, so
    ``^/health`` also covers ``/apis/core/v1/health``.
    """

    def __init__(self, method: str, pattern: Union[str, Pattern[str]]):
        self.method = method.upper()
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern

    def skip(self, method: str, path: str, relative_path: Optional[str] = None) -> bool:
        if self.method != ANY_METHOD and self.method != method.upper():
            return False
        if self.pattern.search(path):
            return True
        return relative_path is not None and bool(self.pattern.search(relative_path))

    def __repr__(self) -> str:
        return f"MethodAndPathSkipper({self.method!r}, {self.pattern.pattern!r})"


def build_skippers(rules: Iterable[Tuple[str, str]]) -> List[MethodAndPathSkipper]:
    """Compile ``(method, regex)`` pairs.

    Raises:
        SettingsError: if a pattern does not compile
    """
    skippers = []
    for method, pattern in rules:
        try:
            skippers.append(MethodAndPathSkipper(method, pattern))
        except re.error as e:
            raise SettingsError(f"invalid skip pattern {pattern!r}: {e}") from e
    logger.debug(f"Configured {len(skippers)} authorization skippers")
    return skippers
