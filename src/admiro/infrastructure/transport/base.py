"""Base HTTP transport interface"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from admiro.domain.models.outcome import Outcome
from admiro.domain.models.request import RequestDescriptor


class Transport(ABC):
    """Abstract base class for HTTP transports

    A transport sends one request and reports one outcome. It never raises
    for network or HTTP errors; those come back as `Failure` values.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """Initialize transport with configuration

        Args:
            config: Transport configuration dictionary

        Raises:
            ValueError: If configuration is invalid
        """
        if config is None:
            config = {}
        self.config = config
        self._validate_config(config)

    def _validate_config(self, config: Dict[str, Any]) -> None:
        """Validate transport configuration

        Raises:
            ValueError: If configuration is invalid
        """
        if "timeout" in config:
            timeout = config["timeout"]
            if not isinstance(timeout, (int, float)) or timeout <= 0:
                raise ValueError("timeout must be a positive number")

    @abstractmethod
    async def issue(self, descriptor: RequestDescriptor) -> Outcome:
        """Send the request once

        Args:
            descriptor: Request to send

        Returns:
            Success with the response, or Failure describing what went wrong
        """
        pass

    async def aclose(self) -> None:
        """Release pooled connections"""
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
