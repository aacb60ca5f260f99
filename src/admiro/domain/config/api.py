"""API connection configuration model."""

from typing import Literal, Optional

from pydantic import BaseModel, Field


class ApiConfig(BaseModel):
    """Configuration for the AdMiro API connection.

    Attributes:
        base_url: API server URL
        timeout: Per-attempt request timeout in seconds
        transport: HTTP transport implementation
        token: Bearer token sent with every request (None = anonymous)
    """

    base_url: str = "http://localhost:8000"
    timeout: float = Field(15.0, gt=0.0, le=600.0)
    transport: Literal["httpx", "requests", "mock"] = "httpx"
    token: Optional[str] = None
