# logit/client.py
from __future__ import annotations

from typing import Any, Optional

import httpx

from logit.errors import (
    ConflictError,
    LogitError,
    NotFoundError,
    UnavailableError,
    WorkoutValidationError,
)
from logit.schemas.insight import InsightRead

ERRORS_BY_STATUS: dict[int, type[LogitError]] = {
    400: WorkoutValidationError,
    404: NotFoundError,
    409: ConflictError,
    503: UnavailableError,
}


def error_from_response(resp: httpx.Response) -> LogitError:
    message = None
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        candidate = body.get("error") or body.get("detail")
        message = candidate if isinstance(candidate, str) else None
    error = ERRORS_BY_STATUS.get(resp.status_code, LogitError)(message)
    error.status_code = resp.status_code
    return error


class LogitClient:
    """Async client for the workout API, used by the editor for lookups and submit."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        *,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ) -> None:
        self._http = httpx.AsyncClient(base_url=base_url.rstrip("/"), transport=transport, timeout=timeout)
        if token:
            self.token = token

    @property
    def token(self) -> Optional[str]:
        auth = self._http.headers.get("Authorization", "")
        return auth.removeprefix("Bearer ") or None

    @token.setter
    def token(self, value: str) -> None:
        self._http.headers["Authorization"] = f"Bearer {value}"

    async def __aenter__(self) -> "LogitClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            resp = await self._http.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise UnavailableError("Unable to reach the server.") from exc
        if resp.is_error:
            raise error_from_response(resp)
        return resp

    async def login(self, email: str, password: str) -> str:
        resp = await self._request("POST", "/auth/login", json={"email": email, "password": password})
        self.token = resp.json()["access_token"]
        return self.token

    async def fetch_suggestions(self, query: str) -> list[str]:
        resp = await self._request("GET", "/workouts/exercise-suggestions", params={"query": query})
        suggestions = resp.json().get("suggestions")
        if not isinstance(suggestions, list):
            return []
        return [item.strip() for item in suggestions if isinstance(item, str) and item.strip()]

    async def fetch_insight(self, exercise: str) -> InsightRead:
        resp = await self._request("GET", "/workouts/insights", params={"exercise": exercise})
        return InsightRead.model_validate(resp.json())

    async def create_workout(self, payload: dict[str, Any]) -> int:
        resp = await self._request("POST", "/workouts", json=payload)
        return resp.json()["id"]
