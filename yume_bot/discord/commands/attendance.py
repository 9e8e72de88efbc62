from __future__ import annotations

import datetime as dt
import logging
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from discord import app_commands

from ...services.models import AttendanceRecord, LeaderboardEntry
from ...services.yume_api import ApiError, YumeApiClient
from .embeds import FOOTER, acknowledge, error_embed, make_embed, no_data_embed, show
from .shared import clamp_limit, clean_str, open_api, rank_marker, truncate

if TYPE_CHECKING:
    import discord

    from ...config.settings import Settings

logger = logging.getLogger(__name__)

PERIOD_CHOICES = [
    app_commands.Choice(name="This Month", value="month"),
    app_commands.Choice(name="This Year", value="year"),
    app_commands.Choice(name="All Time", value="all"),
]

# Lookup shows at most this many lines regardless of the requested limit.
LOOKUP_MAX_LINES = 10


# -----------------------------
# Pure helpers
# -----------------------------

def period_window(period: Optional[str], today: dt.date) -> Tuple[Optional[str], str]:
    """
    Map a leaderboard period to (start_date_or_none, label).

      month -> first day of the current month, "October 2026"
      year  -> January 1st of the current year, "2026"
      all   -> no start boundary, "All Time"
    """
    p = (period or "all").strip().lower()
    if p == "month":
        return today.replace(day=1).isoformat(), f"{today:%B} {today.year}"
    if p == "year":
        return dt.date(today.year, 1, 1).isoformat(), str(today.year)
    return None, "All Time"


def format_leaderboard_lines(entries: Sequence[LeaderboardEntry]) -> List[str]:
    # Server order is the ranking; never re-sort here.
    return [f"{rank_marker(i)} **{e.name}** — {e.count} events" for i, e in enumerate(entries)]


def short_date(d: dt.date, today: dt.date) -> str:
    """`Oct 5` for this year, `Oct 5, 2024` otherwise."""
    if d.year == today.year:
        return f"{d:%b} {d.day}"
    return f"{d:%b} {d.day}, {d.year}"


def recent_first(records: Sequence[AttendanceRecord]) -> List[AttendanceRecord]:
    return sorted(records, key=lambda r: r.date, reverse=True)


def unique_events(records: Sequence[AttendanceRecord]) -> List[str]:
    seen: List[str] = []
    for r in records:
        if r.event not in seen:
            seen.append(r.event)
    return seen


# -----------------------------
# Handlers
# -----------------------------

async def run_leaderboard(
    interaction: "discord.Interaction",
    settings: "Settings",
    *,
    event: Optional[str] = None,
    period: Optional[str] = None,
    limit: Optional[int] = None,
    api: Optional[YumeApiClient] = None,
    today: Optional[dt.date] = None,
) -> None:
    await acknowledge(interaction)

    event_name = clean_str(event)
    limit_i = clamp_limit(limit, default=10, lo=1, hi=25)
    start, period_label = period_window(period, today or dt.date.today())

    try:
        async with open_api(settings, api) as client:
            page = await client.get_leaderboard(event=event_name, start=start, limit=limit_i)
    except ApiError:
        logger.exception("Leaderboard lookup failed (event=%s, period=%s)", event_name, period)
        await show(interaction, error_embed("Failed to fetch leaderboard data. Please try again later."))
        return

    if not page.results:
        await show(
            interaction,
            no_data_embed("📊 Attendance Leaderboard", "No attendance records found for the specified criteria."),
        )
        return

    total = page.total if page.total is not None else len(page.results)

    embed = make_embed(
        "📊 Attendance Leaderboard",
        truncate("\n".join(format_leaderboard_lines(page.results)), 4096),
        footer="Yume Tools • Data from api.itai.gg",
    )
    embed.add_field(name="📅 Period", value=period_label, inline=True)
    embed.add_field(name="🎯 Event", value=event_name or "All Events", inline=True)
    embed.add_field(name="👥 Total Players", value=str(total), inline=True)

    await show(interaction, embed)


async def run_lookup(
    interaction: "discord.Interaction",
    settings: "Settings",
    *,
    name: str,
    limit: Optional[int] = None,
    api: Optional[YumeApiClient] = None,
    today: Optional[dt.date] = None,
) -> None:
    await acknowledge(interaction)

    player = clean_str(name) or ""
    limit_i = clamp_limit(limit, default=10, lo=1, hi=25)
    today = today or dt.date.today()

    try:
        async with open_api(settings, api) as client:
            page = await client.get_attendance_records(name=player, limit=limit_i)
    except ApiError:
        logger.exception("Player lookup failed (name=%s)", player)
        await show(interaction, error_embed("Failed to look up player. Please try again later."))
        return

    if not page.results:
        embed = no_data_embed(f"🔍 Player Lookup: {player}", "No attendance records found for this player.")
        embed.add_field(name="💡 Tip", value="Make sure you're using the exact RuneScape name (spaces matter!)")
        await show(interaction, embed)
        return

    records = recent_first(page.results)
    shown = records[: min(limit_i, LOOKUP_MAX_LINES)]
    lines = [f"• **{r.event}** — {short_date(r.date, today)}" for r in shown]
    total = page.total if page.total is not None else len(page.results)

    embed = make_embed(
        f"🔍 Player Lookup: {page.results[0].name}",
        truncate("\n".join(lines), 4096),
        footer=f"Showing {len(shown)} most recent events",
    )
    embed.add_field(name="📊 Total Events", value=str(total), inline=True)
    embed.add_field(name="🎯 Unique Events", value=str(len(unique_events(page.results))), inline=True)

    await show(interaction, embed)


def register(bot: "discord.Client", tree: "app_commands.CommandTree", settings: "Settings") -> None:
    """
    Attendance commands.

    Provides:
      - /leaderboard (GET /attendance)
      - /lookup      (GET /attendance/records)
    """

    @tree.command(name="leaderboard", description="View event attendance leaderboard")
    @app_commands.describe(
        event='Filter by event name (e.g., "Wildy Wednesday")',
        period="Time period for the leaderboard",
        limit="Number of results to show (default: 10)",
    )
    @app_commands.choices(period=PERIOD_CHOICES)
    async def leaderboard(
        interaction: "discord.Interaction",
        event: Optional[str] = None,
        period: Optional[app_commands.Choice[str]] = None,
        limit: Optional[app_commands.Range[int, 1, 25]] = None,
    ) -> None:
        await run_leaderboard(
            interaction,
            settings,
            event=event,
            period=period.value if period else None,
            limit=limit,
        )

    @tree.command(name="lookup", description="Look up a player's attendance history")
    @app_commands.describe(
        name="Player name to look up (RuneScape name)",
        limit="Number of recent events to show (default: 10)",
    )
    async def lookup(
        interaction: "discord.Interaction",
        name: str,
        limit: Optional[app_commands.Range[int, 1, 25]] = None,
    ) -> None:
        await run_lookup(interaction, settings, name=name, limit=limit)


__all__ = [
    "PERIOD_CHOICES",
    "period_window",
    "format_leaderboard_lines",
    "short_date",
    "recent_first",
    "unique_events",
    "run_leaderboard",
    "run_lookup",
    "register",
]
