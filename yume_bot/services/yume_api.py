from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from .models import (
    AdminUser,
    AttendancePage,
    CreatedRecord,
    HealthStatus,
    LeaderboardPage,
    TileEventDetail,
    TileEventList,
    TileEventProgress,
)

if TYPE_CHECKING:
    from ..config.settings import Settings

logger = logging.getLogger(__name__)

# NOTE:
# Keep this module dependency-light (no discord import).
# This file is the single source of truth for bot->Yume API HTTP behavior.

M = TypeVar("M", bound=BaseModel)


# -----------------------------
# Errors
# -----------------------------

class ApiError(Exception):
    """Any failure talking to the Yume API. `message` is safe to show users."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ApiStatusError(ApiError):
    """The API answered with a non-success HTTP status."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class ApiTransportError(ApiError):
    """The request never got an HTTP answer (network error, timeout)."""


class ApiDecodeError(ApiError):
    """A success response whose body is not the JSON shape we expect."""


# -----------------------------
# Small primitives
# -----------------------------

def drop_none(params: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in params.items() if v is not None}


def error_message_for(r: httpx.Response) -> str:
    """
    Unwrap the API's `{"error": "..."}` body. Falls back to the HTTP status
    text when the body is not JSON.
    """
    try:
        payload = r.json()
    except Exception:
        return r.reason_phrase or f"API Error: {r.status_code}"

    if isinstance(payload, dict) and payload.get("error"):
        return str(payload["error"])
    return f"API Error: {r.status_code}"


# -----------------------------
# Client
# -----------------------------

class YumeApiClient:
    """
    Thin async client for the Yume API.

    One instance per command invocation:

        async with YumeApiClient.from_settings(settings) as api:
            page = await api.get_leaderboard(limit=10)

    Every named call returns a pydantic model; `request()` returns the raw
    decoded JSON.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        *,
        timeout: float = 20.0,
        user_agent: str = "yume-discord-bot/1.0",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or "").strip().rstrip("/")

        headers = {
            "Content-Type": "application/json",
            "User-Agent": user_agent,
        }
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        self._client = httpx.AsyncClient(
            timeout=float(timeout),
            headers=headers,
            follow_redirects=True,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: "Settings",
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "YumeApiClient":
        return cls(
            settings.api_base_url,
            settings.api_key or None,
            timeout=settings.http_timeout_s,
            user_agent=settings.http_user_agent,
            transport=transport,
        )

    async def __aenter__(self) -> "YumeApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # -------------------------
    # Low-level
    # -------------------------

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Perform one request and return the parsed JSON body unmodified.

        Raises ApiStatusError on non-2xx, ApiTransportError when no response
        arrives and ApiDecodeError when a 2xx body is not JSON.
        """
        m = (method or "GET").strip().upper()
        p = path if (path or "").startswith("/") else f"/{path}"
        url = f"{self.base_url}{p}"
        query = drop_none(params or {})

        try:
            r = await self._client.request(m, url, params=query or None, json=json)
        except httpx.TimeoutException as e:
            raise ApiTransportError("Request timed out contacting API.") from e
        except httpx.RequestError as e:
            raise ApiTransportError(f"Network error contacting API: {e}") from e

        if not r.is_success:
            message = error_message_for(r)
            logger.warning("Yume API %s %s failed (%s): %s", m, p, r.status_code, message)
            raise ApiStatusError(message, r.status_code)

        try:
            return r.json()
        except ValueError as e:
            raise ApiDecodeError(f"API returned a non-JSON response for {p}.") from e

    async def _get_model(
        self,
        model: Type[M],
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> M:
        data = await self.request(method, path, params=params, json=json)
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.warning("Unexpected %s payload from %s: %s", model.__name__, path, e)
            raise ApiDecodeError(f"API returned an unexpected response for {path}.") from e

    # -------------------------
    # Health
    # -------------------------

    async def health(self) -> HealthStatus:
        return await self._get_model(HealthStatus, "GET", "/health")

    # -------------------------
    # Attendance / leaderboard
    # -------------------------

    async def get_leaderboard(
        self,
        *,
        event: Optional[str] = None,
        start: Optional[str] = None,
        end: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> LeaderboardPage:
        params = {"event": event, "start": start, "end": end, "limit": limit}
        return await self._get_model(LeaderboardPage, "GET", "/attendance", params=params)

    async def get_attendance_records(
        self,
        *,
        name: Optional[str] = None,
        event: Optional[str] = None,
        start: Optional[str] = None,
        end: Optional[str] = None,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> AttendancePage:
        params = {
            "name": name,
            "event": event,
            "start": start,
            "end": end,
            "page": page,
            "limit": limit,
        }
        return await self._get_model(AttendancePage, "GET", "/attendance/records", params=params)

    async def create_attendance_record(self, *, name: str, event: str, date: str) -> CreatedRecord:
        payload = {"name": name, "event": event, "date": date}
        return await self._get_model(CreatedRecord, "POST", "/attendance/records", json=payload)

    # -------------------------
    # Tile events
    # -------------------------

    async def get_tile_events(self) -> TileEventList:
        return await self._get_model(TileEventList, "GET", "/tile-events")

    async def get_tile_event(self, event_id: int) -> TileEventDetail:
        return await self._get_model(TileEventDetail, "GET", f"/tile-events/{int(event_id)}")

    async def get_tile_event_progress(
        self,
        event_id: int,
        discord_id: Optional[str] = None,
    ) -> TileEventProgress:
        params = {"discord_id": None if discord_id is None else str(discord_id)}
        return await self._get_model(
            TileEventProgress,
            "GET",
            f"/tile-events/{int(event_id)}/progress",
            params=params,
        )

    # -------------------------
    # Admin users
    # -------------------------

    async def get_user(self, discord_id: str) -> AdminUser:
        return await self._get_model(AdminUser, "GET", "/admin/users", params={"discord_id": str(discord_id)})


__all__ = [
    "ApiError",
    "ApiStatusError",
    "ApiTransportError",
    "ApiDecodeError",
    "YumeApiClient",
    "drop_none",
    "error_message_for",
]
