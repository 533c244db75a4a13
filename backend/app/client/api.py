"""
Back office HTTP client

Thin async wrapper over the /api routes used by the stage workflow and the
kanban board. Every non-2xx answer becomes an ApiError carrying the server's
{"error", "details"} body.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "Could not reach the server"


class ApiError(Exception):
    """Back office API error"""

    def __init__(self, status_code: Optional[int], message: str, details: Any = None):
        self.status_code = status_code
        self.message = message
        self.details = details
        super().__init__(f"API error ({status_code}): {message}")


class BackofficeClient:
    """
    Async client for the back office API.

    Pass `http` to reuse an existing httpx.AsyncClient (tests hand in one
    bound to the ASGI app); otherwise a client for `base_url` is created and
    closed by close().
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        http: Optional[httpx.AsyncClient] = None,
        api_prefix: Optional[str] = None,
        timeout: float = 30.0
    ):
        self.api_prefix = settings.API_PREFIX if api_prefix is None else api_prefix
        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(base_url=base_url or settings.API_BASE_URL, timeout=timeout)

    async def close(self):
        if self._owns_http:
            await self.http.aclose()

    async def __aenter__(self) -> "BackofficeClient":
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict] = None,
        params: Optional[Dict] = None
    ) -> Any:
        url = f"{self.api_prefix}{path}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        try:
            response = await self.http.request(method, url, json=json, params=params)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise ApiError(None, NETWORK_ERROR_MESSAGE) from e

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = {}
            message = body.get("error") if isinstance(body, dict) else None
            details = body.get("details") if isinstance(body, dict) else None
            logger.warning(f"{method} {url} -> {response.status_code}: {message or response.text}")
            raise ApiError(
                status_code=response.status_code,
                message=message or f"Request failed with status {response.status_code}",
                details=details
            )

        return response.json() if response.content else None

    # ==================== SHIPPING STAGES ====================

    async def get_stage(self, vehicle_id: int, stage: Optional[str] = None) -> Dict:
        """{"shippingStage": record | None, "currentStage", "vehicleId"}"""
        return await self._request("GET", f"/vehicles/{vehicle_id}/stages", params={"stage": stage})

    async def save_stage(self, vehicle_id: int, payload: Dict) -> Dict:
        return await self._request("PATCH", f"/vehicles/{vehicle_id}/stages", json=payload)

    async def set_current_stage(self, vehicle_id: int, stage: str, notes: Optional[str] = None) -> Dict:
        return await self._request(
            "PUT", f"/vehicles/{vehicle_id}/current-stage", json={"stage": stage, "notes": notes}
        )

    async def list_yards(self) -> List[Dict]:
        return await self._request("GET", "/yards")

    async def create_cost(self, vehicle_id: int, payload: Dict) -> Dict:
        return await self._request("POST", f"/vehicles/{vehicle_id}/costs", json=payload)

    async def list_costs(self, vehicle_id: int, stage: Optional[str] = None) -> List[Dict]:
        return await self._request("GET", f"/vehicles/{vehicle_id}/costs", params={"stage": stage})

    async def create_document(self, vehicle_id: int, payload: Dict) -> Dict:
        return await self._request("POST", f"/vehicles/{vehicle_id}/documents", json=payload)

    async def list_documents(
        self,
        vehicle_id: int,
        stage: Optional[str] = None,
        category: Optional[str] = None
    ) -> List[Dict]:
        return await self._request(
            "GET", f"/vehicles/{vehicle_id}/documents", params={"stage": stage, "category": category}
        )

    # ==================== KANBAN ====================

    async def get_kanban(self, assigned_to: Optional[str] = None) -> Dict:
        return await self._request("GET", "/kanban", params={"assignedTo": assigned_to})

    async def move_inquiry(self, inquiry_id: int, new_status: str, changed_by: Optional[str] = None) -> Dict:
        payload = {"inquiryId": inquiry_id, "newStatus": new_status}
        if changed_by:
            payload["changedBy"] = changed_by
        return await self._request("PATCH", "/kanban", json=payload)
