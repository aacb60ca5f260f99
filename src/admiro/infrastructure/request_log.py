"""Request/response logging with secret redaction."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from admiro.domain.models.outcome import Outcome
from admiro.domain.models.request import RequestDescriptor

logger = logging.getLogger(__name__)

REDACTED = "***"
SENSITIVE_FIELDS = frozenset({"password", "refreshToken", "accessToken", "token"})
TOKEN_PREVIEW_CHARS = 20


def redact(value: Any) -> Any:
    """Return a copy of `value` with sensitive fields masked.

    Walks nested dicts and lists; the input is left untouched.
    """
    if isinstance(value, dict):
        return {
            k: (REDACTED if k in SENSITIVE_FIELDS and v is not None else redact(v))
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [redact(item) for item in value]
    return value


def mask_authorization(header: Optional[str]) -> Optional[str]:
    """Shorten a bearer token to a short preview: 'Bearer abc...'"""
    if not header:
        return header
    scheme, _, token = header.partition(" ")
    if not token:
        return f"{header[:TOKEN_PREVIEW_CHARS]}..."
    return f"{scheme} {token[:TOKEN_PREVIEW_CHARS]}..."


def safe_headers(headers: Dict[str, str]) -> Dict[str, str]:
    result = {}
    for name, value in headers.items():
        if name.lower() == "authorization":
            result[name] = mask_authorization(value)
        else:
            result[name] = value
    return result


def log_request(descriptor: RequestDescriptor, attempt: int) -> None:
    """Log an outgoing attempt at DEBUG level"""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug(f"HTTP {descriptor.method} {descriptor.url} (attempt {attempt})")
    if descriptor.params:
        logger.debug(f"Query: {descriptor.params}")
    if descriptor.json is not None:
        logger.debug(f"Body: {redact(descriptor.json)}")
    if descriptor.headers:
        logger.debug(f"Headers: {safe_headers(descriptor.headers)}")


def log_outcome(descriptor: RequestDescriptor, outcome: Outcome, attempt: int, duration_ms: float) -> None:
    """Log the outcome of one attempt; failures at WARNING"""
    if outcome.ok:
        logger.debug(
            f"{descriptor.method} {descriptor.url} -> {outcome.response.status_code} "
            f"in {duration_ms:.0f}ms (attempt {attempt})"
        )
    else:
        status = outcome.status_code if outcome.status_code is not None else outcome.kind.value
        logger.warning(
            f"{descriptor.method} {descriptor.url} failed ({status}: {outcome.detail}) "
            f"in {duration_ms:.0f}ms (attempt {attempt})"
        )
