"""Access review.

Batch authorization of url and method pairs for one caller, consumed by the
gateway to decide which actions a UI may offer.
"""

import asyncio
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from ....core.shared import CurrentUser
from ..entities.attributes import AttributesRecord
from ..entities.decision import NOT_CHECKED, API, ReviewResult
from ..entities.request_info import RequestInfo
from .authorizer import Authorizer
from .request_info_factory import RequestInfoFactory
from .skipper import MethodAndPathSkipper

logger = logging.getLogger(__name__)


class AccessReviewService:
    """Evaluates many url and method pairs independently and concurrently."""

    def __init__(
        self,
        authorizer: Authorizer,
        request_info_factory: Optional[RequestInfoFactory] = None,
        skippers: Sequence[MethodAndPathSkipper] = (),
    ):
        self._authorizer = authorizer
        self._request_info_factory = request_info_factory or RequestInfoFactory()
        self._skippers = list(skippers)

    def is_skipped(self, method: str, info: RequestInfo) -> bool:
        relative_path = self._request_info_factory.relative_path(info.path)
        return any(skipper.skip(method, info.path, relative_path) for skipper in self._skippers)

    async def review(self, caller: Optional[CurrentUser], apis: Sequence[API]) -> Dict[str, Dict[str, ReviewResult]]:
        """Review url and method pairs.

        Duplicate pairs are evaluated once.

        Raises:
            InvalidRequestError: if any url or method is malformed
        """
        pairs: List[Tuple[str, str]] = list(dict.fromkeys((api.url, api.method) for api in apis))
        infos = [self._request_info_factory.new_request_info(method, url) for url, method in pairs]

        results = await asyncio.gather(*(
            self._review_one(caller, method, info) for (_, method), info in zip(pairs, infos)
        ))

        response: Dict[str, Dict[str, ReviewResult]] = {}
        for (url, method), result in zip(pairs, results):
            response.setdefault(url, {})[method] = result
        logger.debug(f"Reviewed {len(pairs)} apis for user {caller.name if caller else None}")
        return response

    async def _review_one(self, caller: Optional[CurrentUser], method: str, info: RequestInfo) -> ReviewResult:
        if self.is_skipped(method, info):
            return ReviewResult(allowed=True, reason=NOT_CHECKED)

        decision = await self._authorizer.authorize(AttributesRecord.from_request_info(caller, info))
        return ReviewResult(allowed=decision.allowed, reason=decision.reason)
