"""Outcome models - the result of issuing a request"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union


class FailureKind(str, Enum):
    """Classification of a failed request"""

    TRANSPORT = "transport"  # Network error or timeout, no response received
    RESPONSE = "response"  # Server answered with a non-2xx status


@dataclass(frozen=True)
class Response:
    """Transport-neutral snapshot of an HTTP response"""

    status_code: int
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    content: bytes = b""

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Decode the body as JSON

        Raises:
            ValueError: If the body is not valid JSON
        """
        return json.loads(self.content or b"null")


@dataclass(frozen=True)
class Success:
    """Request completed with a 2xx/3xx response"""

    response: Response

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """Request failed; `response` is set only for FailureKind.RESPONSE"""

    kind: FailureKind
    detail: str
    response: Optional[Response] = None
    exception: Optional[BaseException] = field(default=None, compare=False)

    @property
    def ok(self) -> bool:
        return False

    @property
    def status_code(self) -> Optional[int]:
        """HTTP status of the failed response, None for transport failures"""
        return self.response.status_code if self.response is not None else None


Outcome = Union[Success, Failure]
