"""HTTP client for the feedback API, used by the dashboard."""

from typing import Any

import httpx

from axiom_api.config import get_settings
from axiom_api.schemas.feedback import FeedbackResponse

settings = get_settings()


class DashboardError(Exception):
    """A failed API call. ``message`` is suitable for showing to staff."""

    def __init__(self, message: str, status_code: int | None = None, request_id: str | None = None) -> None:
        self.message = message
        self.status_code = status_code
        self.request_id = request_id
        super().__init__(message)


class FeedbackApiClient:
    """Thin async wrapper over the feedback endpoints."""

    def __init__(self, base_url: str | None = None, http_client: httpx.AsyncClient | None = None) -> None:
        self.http_client = http_client or httpx.AsyncClient(
            base_url=base_url or settings.dashboard_api_base_url,
            headers={"Content-Type": "application/json"},
            timeout=30.0,
        )
        self.last_request_id: str | None = None

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = await self.http_client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise DashboardError(f"Request failed: {e}") from e

        request_id = response.headers.get("X-Request-Id")
        if request_id:
            self.last_request_id = request_id

        try:
            data = response.json()
        except ValueError:
            data = None

        if not response.is_success:
            message = None
            if isinstance(data, dict) and isinstance(data.get("error"), dict):
                message = data["error"].get("message")
            raise DashboardError(
                message or f"Request failed with status {response.status_code}",
                status_code=response.status_code,
                request_id=request_id,
            )
        if not isinstance(data, dict) or not data.get("success"):
            raise DashboardError("Unexpected response from server", response.status_code, request_id)
        return data

    async def list_feedback(self, params: list[tuple[str, str]]) -> tuple[list[FeedbackResponse], dict[str, Any]]:
        """Fetch one page. ``params`` may repeat keys (e.g. several ``sentiment`` values)."""
        data = await self._request("GET", "/feedback", params=params)
        feedbacks = [FeedbackResponse.model_validate(item) for item in data["data"]]
        return feedbacks, data["pagination"]

    async def list_tags(self) -> list[str]:
        data = await self._request("GET", "/feedback-tags")
        return data["data"]

    async def get_feedback(self, feedback_id: str) -> FeedbackResponse:
        data = await self._request("GET", f"/feedback/{feedback_id}")
        return FeedbackResponse.model_validate(data["data"])

    async def update_next_action(self, feedback_id: str, next_action: str) -> FeedbackResponse:
        data = await self._request("PATCH", f"/feedback/{feedback_id}", json={"nextAction": next_action})
        return FeedbackResponse.model_validate(data["data"])

    async def delete_feedback(self, feedback_id: str) -> str:
        data = await self._request("DELETE", f"/feedback/{feedback_id}")
        return data["deletedId"]

    async def delete_feedbacks(self, feedback_ids: list[str]) -> int:
        data = await self._request("DELETE", "/feedback", json={"ids": feedback_ids})
        return data["deletedCount"]

    async def close(self) -> None:
        """Close HTTP client."""
        await self.http_client.aclose()
