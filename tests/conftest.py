"""
Shared fixtures: a recording fake for discord.Interaction and a Yume API
client wired to httpx.MockTransport.
"""

import asyncio
import datetime as dt
import json
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from yume_bot.config.settings import Settings
from yume_bot.services.yume_api import YumeApiClient

API_BASE = "https://api.test"


# ============================================================
# Discord fakes
# ============================================================

class FakeUser:
    def __init__(self, user_id: int = 123456789, name: str = "Tester") -> None:
        self.id = user_id
        self.display_name = name
        self.name = name

    def __str__(self) -> str:
        return self.name


class FakeMessage:
    def __init__(self, created_at: dt.datetime) -> None:
        self.created_at = created_at


class FakeResponse:
    """Mimics InteractionResponse: at most one initial reply or defer."""

    def __init__(self) -> None:
        self.deferred = False
        self.defer_kwargs: Dict[str, Any] = {}
        self.sent: List[Dict[str, Any]] = []

    def is_done(self) -> bool:
        return self.deferred or bool(self.sent)

    async def defer(self, **kwargs: Any) -> None:
        assert not self.is_done(), "interaction already acknowledged"
        self.deferred = True
        self.defer_kwargs = kwargs

    async def send_message(self, content: Optional[str] = None, **kwargs: Any) -> None:
        assert not self.is_done(), "interaction already acknowledged"
        self.sent.append({"content": content, **kwargs})


class FakeFollowup:
    def __init__(self) -> None:
        self.sent: List[Dict[str, Any]] = []

    async def send(self, content: Optional[str] = None, **kwargs: Any) -> None:
        self.sent.append({"content": content, **kwargs})


class FakeClient:
    def __init__(self, latency: float = 0.05) -> None:
        self.latency = latency


class FakeInteraction:
    def __init__(self, user: Optional[FakeUser] = None, *, command: Any = None) -> None:
        self.user = user or FakeUser()
        self.created_at = dt.datetime(2025, 6, 1, 12, 0, 0, tzinfo=dt.timezone.utc)
        self.client = FakeClient()
        self.command = command
        self.response = FakeResponse()
        self.followup = FakeFollowup()
        self.edits: List[Dict[str, Any]] = []

    async def original_response(self) -> FakeMessage:
        return FakeMessage(self.created_at + dt.timedelta(milliseconds=42))

    async def edit_original_response(self, **kwargs: Any) -> None:
        assert self.response.is_done(), "edit before acknowledge"
        self.edits.append(kwargs)

    # -- assertion helpers --

    @property
    def final_embed(self):
        if self.edits:
            return self.edits[-1]["embed"]
        return self.response.sent[-1]["embed"]


# ============================================================
# Yume API fakes
# ============================================================

class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: List[httpx.Request] = []

        def _handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_handler)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content.decode("utf-8"))


def json_handler(payload: Any, status: int = 200) -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json=payload)

    return handler


def make_api(transport: httpx.AsyncBaseTransport, api_key: Optional[str] = "secret") -> YumeApiClient:
    return YumeApiClient(API_BASE, api_key, transport=transport)


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        discord_token="token",
        api_base_url=API_BASE,
        api_key="secret",
    )


@pytest.fixture
def interaction() -> FakeInteraction:
    return FakeInteraction()


def field_map(embed) -> Dict[str, str]:
    return {f.name: f.value for f in embed.fields}
