from typing import Any, Optional

import httpx

from runlog.core.config import settings
from runlog.core.errors import ApiError, AuthenticationRequired, GoalParseError
from runlog.schemas.goal import (
    Goal,
    GoalCreate,
    GoalProgress,
    GoalUpdate,
    parse_goal,
    parse_goals,
    parse_progress_list,
)


def _error_message(response: httpx.Response, fallback: str) -> str:
    """Prefer the server's own message, fall back to the per-operation text."""
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict):
        for key in ("message", "detail"):
            if isinstance(body.get(key), str) and body[key]:
                return body[key]
    return fallback


class GoalsApiClient:
    """Thin async wrapper over the /api/goals endpoints.

    `token` may be swapped at any time (login/logout); when it is None every
    call fails with AuthenticationRequired before a request is built.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.token = token
        self._http = httpx.AsyncClient(
            base_url=base_url or settings.api_base_url,
            timeout=timeout or settings.request_timeout,
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @property
    def has_token(self) -> bool:
        return bool(self.token)

    async def _request(
        self,
        method: str,
        path: str,
        failure_message: str,
        json: Any = None,
    ) -> Any:
        if not self.token:
            raise AuthenticationRequired()
        headers = {"Authorization": f"Bearer {self.token}"}
        try:
            r = await self._http.request(method, path, json=json, headers=headers)
        except httpx.RequestError as exc:
            raise ApiError(failure_message) from exc
        if r.is_error:
            raise ApiError(_error_message(r, failure_message), status_code=r.status_code)
        if r.status_code == 204 or not r.content:
            return None
        try:
            return r.json()
        except ValueError as exc:
            raise GoalParseError(f"{failure_message}: response was not JSON") from exc

    async def list_goals(self) -> list[Goal]:
        data = await self._request("GET", "/api/goals", "Failed to fetch goals")
        return parse_goals(data)

    async def create_goal(self, data: GoalCreate) -> Goal:
        body = data.model_dump(mode="json", by_alias=True, exclude_none=True)
        created = await self._request("POST", "/api/goals", "Failed to create goal", json=body)
        return parse_goal(created)

    async def update_goal(self, goal_id: str, patch: GoalUpdate) -> Goal:
        body = patch.model_dump(mode="json", by_alias=True, exclude_unset=True)
        updated = await self._request("PUT", f"/api/goals/{goal_id}", "Failed to update goal", json=body)
        return parse_goal(updated)

    async def delete_goal(self, goal_id: str) -> None:
        await self._request("DELETE", f"/api/goals/{goal_id}", "Failed to delete goal")

    async def complete_goal(self, goal_id: str) -> Goal:
        done = await self._request("POST", f"/api/goals/{goal_id}/complete", "Failed to complete goal")
        return parse_goal(done)

    async def list_progress(self) -> list[GoalProgress]:
        data = await self._request("GET", "/api/goals/progress/all", "Failed to fetch goal progress")
        return parse_progress_list(data)
