"""HTTP transports"""

from admiro.infrastructure.transport.base import Transport
from admiro.infrastructure.transport.factory import TransportFactory

__all__ = ["Transport", "TransportFactory"]
