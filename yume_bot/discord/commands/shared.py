from __future__ import annotations

import logging
import math
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator, Optional

from ...services.yume_api import YumeApiClient

if TYPE_CHECKING:
    from ...config.settings import Settings

logger = logging.getLogger(__name__)

# NOTE:
# Keep this module dependency-light (no discord import).
# Rendering helpers that need discord.Embed live in .embeds.

MEDALS = ("🥇", "🥈", "🥉")


# -----------------------------
# Small primitives
# -----------------------------

def truncate(s: str, limit: int = 1024) -> str:
    if not s:
        return ""
    if len(s) <= limit:
        return s
    return s[: max(0, limit - 3)] + "..."


def round_half_up(x: float) -> int:
    # Python's round() is banker's rounding; display math wants .5 to go up.
    return int(math.floor(x + 0.5))


def rank_marker(index: int) -> str:
    """🥇/🥈/🥉 for the first three (0-based index), then `n.`."""
    if 0 <= index < len(MEDALS):
        return MEDALS[index]
    return f"{index + 1}."


def clamp_limit(limit: Optional[int], default: int = 10, lo: int = 1, hi: int = 25) -> int:
    try:
        v = int(limit if limit is not None else default)
    except Exception:
        v = default
    return max(lo, min(v, hi))


def clean_str(s: Optional[str]) -> Optional[str]:
    """Strip surrounding whitespace; blank becomes None. Length is left alone."""
    if s is None:
        return None
    v = str(s).strip()
    return v or None


# -----------------------------
# API helpers
# -----------------------------

@asynccontextmanager
async def open_api(settings: "Settings", api: Optional[YumeApiClient] = None) -> AsyncIterator[YumeApiClient]:
    """
    Yield a Yume API client for a single invocation.

    Callers may pass an already-built client (tests do); otherwise a fresh
    client is built from settings and closed afterwards.
    """
    if api is not None:
        yield api
        return

    async with YumeApiClient.from_settings(settings) as client:
        yield client


__all__ = [
    "MEDALS",
    "truncate",
    "round_half_up",
    "rank_marker",
    "clamp_limit",
    "clean_str",
    "open_api",
]
