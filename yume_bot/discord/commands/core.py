from __future__ import annotations

import logging
import math
import time
from typing import TYPE_CHECKING, Optional, Tuple

from ...services.yume_api import ApiDecodeError, ApiStatusError, ApiTransportError, YumeApiClient
from .embeds import FOOTER, make_embed
from .shared import open_api

if TYPE_CHECKING:
    import discord
    from discord import app_commands

    from ...config.settings import Settings

logger = logging.getLogger(__name__)

STATUS_ONLINE = "✅ Online"
STATUS_DEGRADED = "⚠️ Degraded"
STATUS_ERROR = "❌ Error"
STATUS_OFFLINE = "❌ Offline"


def _ms(seconds: float) -> str:
    if seconds is None or not math.isfinite(seconds):
        return "N/A"
    return f"{round(seconds * 1000)}ms"


async def probe_api(api: YumeApiClient) -> Tuple[str, str]:
    """
    Timed GET /health.

    Returns (status_label, latency_text):
      - Online:   2xx and body status == "ok"
      - Degraded: 2xx with any other status (or an undecodable body)
      - Error:    non-2xx
      - Offline:  no HTTP answer at all (latency "N/A")
    """
    start = time.perf_counter()
    try:
        health = await api.health()
    except ApiStatusError:
        return STATUS_ERROR, _ms(time.perf_counter() - start)
    except ApiDecodeError:
        return STATUS_DEGRADED, _ms(time.perf_counter() - start)
    except ApiTransportError as e:
        logger.warning("API health probe failed: %s", e.message)
        return STATUS_OFFLINE, "N/A"

    elapsed = _ms(time.perf_counter() - start)
    return (STATUS_ONLINE if health.status == "ok" else STATUS_DEGRADED), elapsed


async def run_ping(
    interaction: "discord.Interaction",
    settings: "Settings",
    *,
    api: Optional[YumeApiClient] = None,
) -> None:
    await interaction.response.send_message("🏓 Pinging...")

    message = await interaction.original_response()
    bot_latency = (message.created_at - interaction.created_at).total_seconds()
    ws_latency = interaction.client.latency

    async with open_api(settings, api) as client:
        api_status, api_latency = await probe_api(client)

    embed = make_embed("🌸 Yume Bot Status", footer=FOOTER)
    embed.add_field(name="🤖 Bot Latency", value=_ms(bot_latency), inline=True)
    embed.add_field(name="💓 WebSocket", value=_ms(ws_latency), inline=True)
    embed.add_field(name="🔗 API Status", value=api_status, inline=True)
    embed.add_field(name="⚡ API Latency", value=api_latency, inline=True)

    await interaction.edit_original_response(content=None, embed=embed)


def register(bot: "discord.Client", tree: "app_commands.CommandTree", settings: "Settings") -> None:
    """
    Core sanity commands.

    Provides:
      - /ping   bot latency + API health
    """

    @tree.command(name="ping", description="Check bot latency and API status")
    async def ping(interaction: "discord.Interaction") -> None:
        await run_ping(interaction, settings)
