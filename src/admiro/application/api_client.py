"""AdMiro API client - resource-level operations over a transport"""

import logging
from typing import Any, Dict, List, Optional, Union

from admiro.domain.models.display import DisplayCreate
from admiro.domain.models.outcome import Outcome
from admiro.domain.models.request import RequestDescriptor
from admiro.infrastructure.transport.base import Transport

logger = logging.getLogger(__name__)

API_PREFIX = "/api"
AD_STATUSES = ("active", "scheduled", "expired", "archived")
DEFAULT_LIST_LIMIT = 1000


class AdMiroApiClient:
    """Client for the AdMiro signage API

    Every method builds a RequestDescriptor and sends it through the
    configured transport, normally a ResilientClient, so all calls share one
    retry policy. Methods return the Outcome unchanged.
    """

    def __init__(self, transport: Transport, token: Optional[str] = None):
        """Initialize API client

        Args:
            transport: Transport used for all requests
            token: Bearer token added to every request (None = anonymous)
        """
        self.transport = transport
        self.token = token

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def build_request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> RequestDescriptor:
        """Build a descriptor for an API path (relative to /api)"""
        return RequestDescriptor(
            method=method,
            url=f"{API_PREFIX}/{path.lstrip('/')}",
            params=params,
            json=json,
        ).with_headers(self._headers())

    async def _call(self, method: str, path: str, **kwargs: Any) -> Outcome:
        descriptor = self.build_request(method, path, **kwargs)
        return await self.transport.issue(descriptor)

    async def health(self) -> Outcome:
        return await self._call("GET", "health")

    # Displays

    async def list_displays(self, limit: int = DEFAULT_LIST_LIMIT) -> Outcome:
        return await self._call("GET", "displays", params={"limit": limit})

    async def get_display(self, display_id: str) -> Outcome:
        return await self._call("GET", f"displays/{display_id}")

    async def create_display(self, display: Union[DisplayCreate, Dict[str, Any]]) -> Outcome:
        """Create a display

        Args:
            display: Validated model, or a raw dict validated here

        Raises:
            pydantic.ValidationError: If the payload is invalid (nothing is sent)
        """
        if not isinstance(display, DisplayCreate):
            display = DisplayCreate.model_validate(display)
        return await self._call("POST", "displays", json=display.to_payload())

    async def update_display(self, display_id: str, payload: Dict[str, Any]) -> Outcome:
        return await self._call("PUT", f"displays/{display_id}", json=payload)

    async def delete_display(self, display_id: str) -> Outcome:
        return await self._call("DELETE", f"displays/{display_id}")

    async def assign_loop(self, display_id: str, loop_id: str) -> Outcome:
        return await self._call("PUT", f"displays/{display_id}/assign-loop", json={"loopId": loop_id})

    async def trigger_refresh(self, display_id: str) -> Outcome:
        return await self._call("POST", f"displays/{display_id}/trigger-refresh")

    async def register_display(self, payload: Dict[str, Any]) -> Outcome:
        return await self._call("POST", "displays/register-self", json=payload)

    async def login_display(self, payload: Dict[str, Any]) -> Outcome:
        return await self._call("POST", "displays/login-display", json=payload)

    async def report_display_status(self, payload: Dict[str, Any]) -> Outcome:
        return await self._call("POST", "displays/report-status", json=payload)

    # Advertisements

    async def list_ads(self, limit: int = DEFAULT_LIST_LIMIT, **filters: Any) -> Outcome:
        params = {"limit": limit}
        params.update({k: v for k, v in filters.items() if v is not None})
        return await self._call("GET", "ads", params=params)

    async def get_ad(self, ad_id: str) -> Outcome:
        return await self._call("GET", f"ads/{ad_id}")

    async def create_ad(self, payload: Dict[str, Any]) -> Outcome:
        return await self._call("POST", "ads", json=payload)

    async def update_ad(self, ad_id: str, payload: Dict[str, Any]) -> Outcome:
        return await self._call("PUT", f"ads/{ad_id}", json=payload)

    async def update_ad_status(self, ad_id: str, status: str) -> Outcome:
        """Change an advertisement's status

        Raises:
            ValueError: If status is not one of AD_STATUSES
        """
        if status not in AD_STATUSES:
            raise ValueError(f"Invalid ad status: {status}. Expected one of: {', '.join(AD_STATUSES)}")
        return await self._call("PUT", f"ads/{ad_id}/status", json={"status": status})

    async def delete_ad(self, ad_id: str) -> Outcome:
        return await self._call("DELETE", f"ads/{ad_id}")

    # Loops

    async def list_loops(self) -> Outcome:
        return await self._call("GET", "loops")

    async def get_loop(self, loop_id: str) -> Outcome:
        return await self._call("GET", f"loops/{loop_id}")

    async def list_display_loops(self, display_id: str) -> Outcome:
        return await self._call("GET", f"loops/displays/{display_id}/loops")

    async def create_loop(self, payload: Dict[str, Any]) -> Outcome:
        return await self._call("POST", "loops", json=payload)

    async def update_loop(self, loop_id: str, payload: Dict[str, Any]) -> Outcome:
        return await self._call("PUT", f"loops/{loop_id}", json=payload)

    async def reorder_loop(self, loop_id: str, advertisement_ids: List[str]) -> Outcome:
        """Set the play order of a loop; position in the list becomes loopOrder"""
        if not advertisement_ids:
            raise ValueError("advertisement_ids must not be empty")
        advertisements = [
            {"adId": ad_id, "loopOrder": index} for index, ad_id in enumerate(advertisement_ids)
        ]
        return await self._call("PUT", f"loops/{loop_id}/reorder", json={"advertisements": advertisements})

    async def delete_loop(self, loop_id: str) -> Outcome:
        return await self._call("DELETE", f"loops/{loop_id}")

    # Profile, analytics, logs

    async def get_profile(self) -> Outcome:
        return await self._call("GET", "profile")

    async def update_profile(self, payload: Dict[str, Any]) -> Outcome:
        return await self._call("PUT", "profile", json=payload)

    async def displays_summary(self) -> Outcome:
        return await self._call("GET", "analytics/displays-summary")

    async def ads_summary(self) -> Outcome:
        return await self._call("GET", "analytics/ads-summary")

    async def delete_log(self, log_id: str) -> Outcome:
        return await self._call("DELETE", f"logs/{log_id}")
