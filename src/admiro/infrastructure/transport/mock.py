"""Scripted transport for testing and dry runs"""

from typing import Any, Dict, Iterable, List, Optional

from admiro.domain.models.outcome import Outcome, Response, Success
from admiro.domain.models.request import RequestDescriptor
from admiro.infrastructure.transport.base import Transport


class ScriptedTransport(Transport):
    """Replays predefined outcomes in order

    Once the script runs out the last outcome repeats. With no script every
    request succeeds with an empty JSON body. Every descriptor seen is kept in
    `requests` for inspection.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        *,
        outcomes: Optional[Iterable[Outcome]] = None,
    ):
        super().__init__(config)
        self.outcomes: List[Outcome] = list(outcomes or [])
        self.requests: List[RequestDescriptor] = []

    @property
    def call_count(self) -> int:
        return len(self.requests)

    async def issue(self, descriptor: RequestDescriptor) -> Outcome:
        self.requests.append(descriptor)
        if not self.outcomes:
            return Success(Response(status_code=200, url=descriptor.url, content=b"{}"))
        index = min(len(self.requests), len(self.outcomes)) - 1
        return self.outcomes[index]
