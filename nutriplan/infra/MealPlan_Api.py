"""HTTP gateway to the remote meal-plan API.

Every call carries the session's bearer token. Responses use the envelope
``{"success": bool, "message": str, "data": ...}``; a transport error, a
non-2xx status and ``success: false`` are all raised as RemoteError.
"""
import logging
from typing import Any, Iterable, List, Optional

import httpx

from nutriplan.domain.Client import Client
from nutriplan.domain.errors import RemoteError
from nutriplan.domain.MealPlan import MealPlan
from nutriplan.domain.Session import Session
from nutriplan.utilities.config import API_BASE_URL, API_TIMEOUT

logger = logging.getLogger(__name__)


class MealPlanApi:
    def __init__(self, session: Session, base_url: str = API_BASE_URL, timeout: float = API_TIMEOUT,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.session = session
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, operation: str, method: str, path: str,
                       json: Optional[dict] = None, params: Optional[dict] = None) -> Any:
        logger.debug("%s %s", method, path)
        try:
            response = await self._client.request(
                method, path, json=json, params=params, headers=self.session.auth_headers()
            )
        except httpx.HTTPError as exc:
            logger.warning("%s: transport error on %s %s: %s", operation, method, path, exc)
            raise RemoteError(operation, str(exc) or exc.__class__.__name__) from exc

        try:
            body = response.json()
        except ValueError:
            body = None
        message = body.get("message") if isinstance(body, dict) else None

        if not response.is_success:
            logger.warning("%s: %s %s -> %s", operation, method, path, response.status_code)
            raise RemoteError(operation, message or response.reason_phrase or "request failed",
                              http_status=response.status_code)
        if not isinstance(body, dict) or not body.get("success"):
            logger.warning("%s: %s %s rejected: %s", operation, method, path, message)
            raise RemoteError(operation, message or "unexpected response", http_status=response.status_code)
        return body.get("data")

    # -------------------- Reads --------------------
    async def list_clients(self) -> List[Client]:
        data = await self._request("Load clients", "GET", f"/clients/{self.session.user_id}/clients")
        return [Client.from_dict(c) for c in data or []]

    async def list_client_plans(self, client_id: str) -> List[MealPlan]:
        data = await self._request(
            "Load meal plans", "GET",
            f"/meal-plans/dietitian/{self.session.user_id}/client/{client_id}",
        )
        return [MealPlan.from_dict(p) for p in data or []]

    async def get_plan(self, plan_id: str) -> MealPlan:
        data = await self._request("Load meal plan", "GET", f"/meal-plans/{plan_id}")
        return MealPlan.from_dict(data)

    async def list_user_plans(self, user_id: str, date_key: Optional[str] = None) -> List[MealPlan]:
        """Plans as the client sees them, optionally only those covering ``date_key``."""
        params = {"date": date_key} if date_key else None
        data = await self._request("Load client meal plans", "GET", f"/meal-plans/user/{user_id}", params=params)
        return [MealPlan.from_dict(p) for p in data or []]

    # -------------------- Mutations --------------------
    async def create_plan(self, payload: dict) -> MealPlan:
        data = await self._request("Create meal plan", "POST", "/meal-plans", json=payload)
        return MealPlan.from_dict(data)

    async def assign_dates(self, plan_id: str, client_id: str, dates: Iterable[str]) -> None:
        await self._request(
            "Assign meal plan", "POST", f"/meal-plans/{plan_id}/assign",
            json={"userId": client_id, "dates": sorted(dates)},
        )

    async def remove_dates(self, plan_id: str, client_id: str, dates: Iterable[str]) -> None:
        await self._request(
            "Remove meal plan", "DELETE", f"/meal-plans/{plan_id}/dates",
            json={"userId": client_id, "dietitianId": self.session.user_id, "dates": sorted(dates)},
        )

    async def delete_plan(self, plan_id: str) -> None:
        await self._request("Delete meal plan", "DELETE", f"/meal-plans/{plan_id}")
