"""RequestDescriptor model - describes one HTTP call"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS", "PUT", "DELETE", "TRACE"})


@dataclass(frozen=True)
class RequestDescriptor:
    """Represents a single HTTP request as issued by a caller.

    Descriptors are immutable so the same instance can be re-issued on every
    retry attempt without any risk of one attempt altering the next.
    """

    method: str
    url: str  # Absolute URL or path relative to the transport base URL
    headers: Dict[str, str] = field(default_factory=dict)
    params: Optional[Dict[str, Any]] = None  # Query string parameters
    json: Any = None  # JSON body
    data: Optional[bytes] = None  # Raw body (mutually exclusive with json)
    timeout: Optional[float] = None  # Seconds; None = transport default

    def __post_init__(self):
        """Validate request data"""
        if not self.method or not self.method.strip():
            raise ValueError("HTTP method is required")
        if not self.url:
            raise ValueError("URL is required")
        if self.json is not None and self.data is not None:
            raise ValueError("Provide either json or data, not both")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be positive")
        object.__setattr__(self, "method", self.method.strip().upper())

    @property
    def is_idempotent(self) -> bool:
        """Check if repeating the request has the same effect as sending it once"""
        return self.method in IDEMPOTENT_METHODS

    def with_headers(self, headers: Dict[str, str]) -> "RequestDescriptor":
        """Return a copy with extra headers merged over the existing ones"""
        merged = dict(self.headers)
        merged.update(headers)
        return replace(self, headers=merged)
