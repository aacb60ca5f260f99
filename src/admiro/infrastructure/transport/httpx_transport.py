"""Async transport backed by httpx"""

import logging
from typing import Any, Dict, Optional

import httpx

from admiro.domain.models.outcome import Failure, FailureKind, Outcome, Response, Success
from admiro.domain.models.request import RequestDescriptor
from admiro.infrastructure.transport.base import Transport

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0


def _to_response(resp: httpx.Response) -> Response:
    return Response(
        status_code=resp.status_code,
        url=str(resp.url),
        headers=dict(resp.headers),
        content=resp.content,
    )


class HttpxTransport(Transport):
    """Transport using a shared httpx.AsyncClient"""

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize httpx transport

        Args:
            config: Optional configuration with:
                - base_url: Prefix for relative request URLs
                - timeout: Default timeout in seconds (default: 15)
            client: Pre-built client (tests inject one with httpx.MockTransport)
        """
        super().__init__(config)
        self.base_url = self.config.get("base_url", "")
        self.timeout = float(self.config.get("timeout", DEFAULT_TIMEOUT))
        self._client = client or httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)

    async def issue(self, descriptor: RequestDescriptor) -> Outcome:
        timeout = descriptor.timeout if descriptor.timeout is not None else self.timeout
        try:
            resp = await self._client.request(
                descriptor.method,
                descriptor.url,
                headers=descriptor.headers,
                params=descriptor.params,
                json=descriptor.json,
                content=descriptor.data,
                timeout=timeout,
            )
        except httpx.TimeoutException as e:
            return Failure(FailureKind.TRANSPORT, f"Request timed out after {timeout}s", exception=e)
        except httpx.TransportError as e:
            return Failure(FailureKind.TRANSPORT, f"Network error: {e}", exception=e)

        response = _to_response(resp)
        if resp.is_error:
            return Failure(
                FailureKind.RESPONSE,
                f"HTTP {resp.status_code} {resp.reason_phrase}",
                response=response,
            )
        return Success(response)

    async def aclose(self) -> None:
        await self._client.aclose()
