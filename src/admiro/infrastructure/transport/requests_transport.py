"""Transport backed by requests, run off the event loop"""

import asyncio
import logging
from typing import Any, Dict, Optional
from urllib.parse import urljoin

import requests

from admiro.domain.models.outcome import Failure, FailureKind, Outcome, Response, Success
from admiro.domain.models.request import RequestDescriptor
from admiro.infrastructure.transport.base import Transport

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0


def _to_response(resp: requests.Response) -> Response:
    return Response(
        status_code=resp.status_code,
        url=resp.url,
        headers=dict(resp.headers),
        content=resp.content or b"",
    )


class RequestsTransport(Transport):
    """Blocking requests.Session driven from a worker thread

    Each attempt runs in `asyncio.to_thread` so a slow server never stalls
    other calls sharing the event loop.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        *,
        session: Optional[requests.Session] = None,
    ):
        super().__init__(config)
        self.base_url = self.config.get("base_url", "")
        self.timeout = float(self.config.get("timeout", DEFAULT_TIMEOUT))
        self._session = session or requests.Session()

    def _resolve_url(self, url: str) -> str:
        if self.base_url and not url.startswith(("http://", "https://")):
            return urljoin(self.base_url.rstrip("/") + "/", url.lstrip("/"))
        return url

    def _send(self, descriptor: RequestDescriptor, timeout: float) -> requests.Response:
        return self._session.request(
            descriptor.method,
            self._resolve_url(descriptor.url),
            headers=descriptor.headers,
            params=descriptor.params,
            json=descriptor.json,
            data=descriptor.data,
            timeout=timeout,
        )

    async def issue(self, descriptor: RequestDescriptor) -> Outcome:
        timeout = descriptor.timeout if descriptor.timeout is not None else self.timeout
        try:
            resp = await asyncio.to_thread(self._send, descriptor, timeout)
        except requests.exceptions.Timeout as e:
            return Failure(FailureKind.TRANSPORT, f"Request timed out after {timeout}s", exception=e)
        except requests.exceptions.RequestException as e:
            return Failure(FailureKind.TRANSPORT, f"Network error: {e}", exception=e)

        response = _to_response(resp)
        try:
            resp.raise_for_status()
        except requests.exceptions.HTTPError as e:
            return Failure(FailureKind.RESPONSE, str(e), response=response, exception=e)
        return Success(response)

    async def aclose(self) -> None:
        self._session.close()
