from __future__ import annotations

import datetime as dt
import logging
from typing import TYPE_CHECKING, Awaitable, Callable, Dict, List, Optional, Sequence

from discord import app_commands

from ...services.models import Tile, TileEvent, TileProgress
from ...services.yume_api import ApiError, YumeApiClient
from .embeds import BRAND, ERROR, FOOTER, GOLD, MUTED, SUCCESS, acknowledge, error_embed, make_embed, no_data_embed, show
from .shared import open_api, rank_marker, round_half_up, truncate

if TYPE_CHECKING:
    import discord

    from ...config.settings import Settings

logger = logging.getLogger(__name__)

BAR_LENGTH = 10
BAR_FILLED = "█"
BAR_EMPTY = "░"

TILE_PREVIEW_COUNT = 5
LEADERBOARD_SIZE = 10
# Past events are only listed when there are few of them.
MAX_ENDED_SHOWN = 3

_EPOCH = dt.datetime.min.replace(tzinfo=dt.timezone.utc)


# -----------------------------
# Pure helpers
# -----------------------------

def progress_percentage(unlocked: int, total: int) -> int:
    if total <= 0:
        return 0
    return round_half_up(unlocked * 100 / total)


def progress_bar(percentage: int, length: int = BAR_LENGTH) -> str:
    filled = max(0, min(length, round_half_up(percentage * length / 100)))
    return BAR_FILLED * filled + BAR_EMPTY * (length - filled)


def _as_utc(ts: dt.datetime) -> dt.datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=dt.timezone.utc)
    return ts


def sort_tile_leaderboard(entries: Sequence[TileProgress]) -> List[TileProgress]:
    """
    Most tiles unlocked first. On equal tiles, completed entries rank ahead
    of uncompleted ones and earlier completions ahead of later ones;
    uncompleted ties keep their server order.
    """

    def key(p: TileProgress):
        if p.completed_at is None:
            return (-p.unlocked_count, 1, _EPOCH)
        return (-p.unlocked_count, 0, _as_utc(p.completed_at))

    return sorted(entries, key=key)


def tile_icon(tile: Tile) -> str:
    if tile.is_start:
        return "🏁"
    if tile.is_end:
        return "🏆"
    return "▫️"


def tile_preview(tiles: Sequence[Tile], count: int = TILE_PREVIEW_COUNT) -> str:
    lines = [f"{tile_icon(t)} **{i + 1}.** {t.title}" for i, t in enumerate(tiles[:count])]
    text = "\n".join(lines)
    if len(tiles) > count:
        text += "\n... and more"
    return text


def long_date(ts: dt.datetime) -> str:
    return f"{ts:%B} {ts.day}, {ts.year}"


def pick_own_progress(progress: Sequence[TileProgress], discord_id: str) -> Optional[TileProgress]:
    if not progress:
        return None
    for p in progress:
        if p.discord_id == discord_id:
            return p
    return progress[0]


# -----------------------------
# Subcommand renderers
# -----------------------------

SubcommandHandler = Callable[[YumeApiClient, "discord.Interaction", Optional[int]], Awaitable["discord.Embed"]]


async def _render_list(api: YumeApiClient, interaction: "discord.Interaction", event_id: Optional[int]) -> "discord.Embed":
    data = await api.get_tile_events()

    if not data.events:
        return no_data_embed("🎮 Tile Events", "No tile events are currently active.")

    active: List[TileEvent] = [e for e in data.events if e.is_active]
    ended: List[TileEvent] = [e for e in data.events if not e.is_active]

    embed = make_embed("🎮 Tile Events", "Use `/tileevent info <event_id>` for details", footer=FOOTER)

    if active:
        block = "\n\n".join(
            f"**#{e.id}** {e.name}\n↳ {e.tile_count} tiles • {e.participant_count} participants" for e in active
        )
        embed.add_field(name="🟢 Active Events", value=truncate(block), inline=False)

    if 0 < len(ended) <= MAX_ENDED_SHOWN:
        block = "\n".join(f"**#{e.id}** {e.name} (ended)" for e in ended)
        embed.add_field(name="⚫ Past Events", value=truncate(block), inline=False)

    return embed


async def _render_info(api: YumeApiClient, interaction: "discord.Interaction", event_id: Optional[int]) -> "discord.Embed":
    data = await api.get_tile_event(int(event_id or 0))

    if data.event is None:
        return make_embed("❌ Event Not Found", f"No tile event found with ID **{event_id}**", color=ERROR)

    event = data.event
    tiles = data.tiles

    embed = make_embed(
        f"🎮 {event.name}",
        truncate(event.description or "No description provided.", 4096),
        color=SUCCESS if event.is_active else MUTED,
        footer=f"Event ID: {event_id}",
    )
    embed.add_field(name="Status", value="🟢 Active" if event.is_active else "⚫ Ended", inline=True)
    embed.add_field(name="Tiles", value=str(len(tiles)), inline=True)
    embed.add_field(name="Participants", value=str(event.participant_count), inline=True)

    if tiles:
        embed.add_field(
            name=f"📋 Tile Path Preview ({len(tiles)} total)",
            value=truncate(tile_preview(tiles)),
            inline=False,
        )

    return embed


async def _render_progress(api: YumeApiClient, interaction: "discord.Interaction", event_id: Optional[int]) -> "discord.Embed":
    discord_id = str(interaction.user.id)
    data = await api.get_tile_event_progress(int(event_id or 0), discord_id)

    progress = pick_own_progress(data.progress, discord_id)
    if progress is None:
        return no_data_embed(
            "🎮 Your Progress",
            "You haven't started this tile event yet!\n\nVisit the website to begin your journey.",
        )

    unlocked = progress.unlocked_count
    total = data.total_tiles or unlocked
    percentage = progress_percentage(unlocked, total)
    completed = progress.completed_at is not None

    embed = make_embed(
        "🏆 Event Completed!" if completed else "🎮 Your Progress",
        f"**Event:** {data.event_name or f'Event #{event_id}'}",
        color=GOLD if completed else BRAND,
    )
    embed.add_field(name="Current Tile", value=f"#{progress.current_tile + 1}", inline=True)
    embed.add_field(name="Tiles Completed", value=f"{unlocked}/{total}", inline=True)
    embed.add_field(name="Progress", value=f"{progress_bar(percentage)} {percentage}%", inline=False)

    if completed:
        embed.add_field(name="🎉 Completed On", value=long_date(progress.completed_at), inline=False)

    return embed


async def _render_leaderboard(api: YumeApiClient, interaction: "discord.Interaction", event_id: Optional[int]) -> "discord.Embed":
    data = await api.get_tile_event_progress(int(event_id or 0))

    if not data.progress:
        return no_data_embed("🏆 Tile Event Leaderboard", "No participants yet for this event.")

    ranked = sort_tile_leaderboard(data.progress)[:LEADERBOARD_SIZE]
    lines = [
        f"{rank_marker(i)} **{p.display_name}** — {p.unlocked_count} tiles{' ✅' if p.completed_at else ''}"
        for i, p in enumerate(ranked)
    ]

    embed = make_embed("🏆 Tile Event Leaderboard", truncate("\n".join(lines), 4096), footer=FOOTER)
    embed.add_field(name="Event", value=data.event_name or f"Event #{event_id}", inline=True)
    embed.add_field(name="Participants", value=str(len(data.progress)), inline=True)
    return embed


SUBCOMMANDS: Dict[str, SubcommandHandler] = {
    "list": _render_list,
    "info": _render_info,
    "progress": _render_progress,
    "leaderboard": _render_leaderboard,
}


# -----------------------------
# Handler
# -----------------------------

async def run_tile_event(
    interaction: "discord.Interaction",
    settings: "Settings",
    subcommand: str,
    *,
    event_id: Optional[int] = None,
    api: Optional[YumeApiClient] = None,
) -> None:
    handler = SUBCOMMANDS.get(subcommand)
    if handler is None:
        logger.error("No tileevent subcommand matching %s was found.", subcommand)
        return

    await acknowledge(interaction)

    try:
        async with open_api(settings, api) as client:
            embed = await handler(client, interaction, event_id)
    except ApiError:
        logger.exception("Tile event %s failed (event_id=%s)", subcommand, event_id)
        embed = error_embed("Failed to fetch tile event data. Please try again later.")

    await show(interaction, embed)


def register(bot: "discord.Client", tree: "app_commands.CommandTree", settings: "Settings") -> None:
    """
    Tile event commands.

    Provides (as /tileevent subcommands):
      - list        (GET /tile-events)
      - info        (GET /tile-events/{id})
      - progress    (GET /tile-events/{id}/progress?discord_id=<you>)
      - leaderboard (GET /tile-events/{id}/progress)
    """

    group = app_commands.Group(name="tileevent", description="View tile event information")

    @group.command(name="list", description="View all active tile events")
    async def list_cmd(interaction: "discord.Interaction") -> None:
        await run_tile_event(interaction, settings, "list")

    @group.command(name="info", description="View details about a specific tile event")
    @app_commands.describe(event_id="The tile event ID")
    async def info_cmd(interaction: "discord.Interaction", event_id: int) -> None:
        await run_tile_event(interaction, settings, "info", event_id=event_id)

    @group.command(name="progress", description="Check your progress in a tile event")
    @app_commands.describe(event_id="The tile event ID")
    async def progress_cmd(interaction: "discord.Interaction", event_id: int) -> None:
        await run_tile_event(interaction, settings, "progress", event_id=event_id)

    @group.command(name="leaderboard", description="View tile event leaderboard")
    @app_commands.describe(event_id="The tile event ID")
    async def leaderboard_cmd(interaction: "discord.Interaction", event_id: int) -> None:
        await run_tile_event(interaction, settings, "leaderboard", event_id=event_id)

    tree.add_command(group)


__all__ = [
    "progress_percentage",
    "progress_bar",
    "sort_tile_leaderboard",
    "tile_preview",
    "pick_own_progress",
    "SUBCOMMANDS",
    "run_tile_event",
    "register",
]
