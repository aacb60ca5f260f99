"""Factory for creating HTTP transports"""

import logging
from typing import Any, Dict

from admiro.infrastructure.transport.base import Transport
from admiro.infrastructure.transport.httpx_transport import HttpxTransport
from admiro.infrastructure.transport.mock import ScriptedTransport
from admiro.infrastructure.transport.requests_transport import RequestsTransport

logger = logging.getLogger(__name__)


class TransportFactory:
    """Factory for creating transport instances"""

    TRANSPORTS = {
        "httpx": HttpxTransport,
        "requests": RequestsTransport,
        "mock": ScriptedTransport,
    }

    @classmethod
    def create(cls, transport_type: str, config: Dict[str, Any] = None) -> Transport:
        """Create transport instance

        Args:
            transport_type: Type of transport (httpx, requests, mock)
            config: Transport configuration

        Returns:
            Transport instance

        Raises:
            ValueError: If transport type is not supported
        """
        if config is None:
            config = {}

        transport_type_lower = transport_type.lower()

        if transport_type_lower not in cls.TRANSPORTS:
            available = ", ".join(cls.TRANSPORTS.keys())
            raise ValueError(
                f"Unknown transport: {transport_type}. "
                f"Available transports: {available}"
            )

        transport_class = cls.TRANSPORTS[transport_type_lower]
        logger.info(f"Creating {transport_type_lower} transport")
        return transport_class(config)
