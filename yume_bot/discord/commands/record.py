from __future__ import annotations

import datetime as dt
import logging
import re
from typing import TYPE_CHECKING, Optional, Tuple

from discord import app_commands

from ...services.yume_api import ApiError, YumeApiClient
from .embeds import SUCCESS, acknowledge, error_embed, make_embed, reply, show
from .shared import clean_str, open_api

if TYPE_CHECKING:
    import discord

    from ...config.settings import Settings

logger = logging.getLogger(__name__)

OTHER_EVENT = "Other"

RECORD_EVENTS = (
    "Wildy Wednesday",
    "PvM Sunday",
    "Skill & Chill",
    "Bingo Night",
    "CoX Mass",
    "ToB Mass",
    "ToA Mass",
    OTHER_EVENT,
)

_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


# -----------------------------
# Validation
# -----------------------------

def utc_today() -> dt.date:
    return dt.datetime.now(dt.timezone.utc).date()


def validate_record_date(raw: Optional[str], today: dt.date) -> Tuple[Optional[str], Optional[str]]:
    """
    Returns (YYYY-MM-DD, error_msg_or_none).

    Omitted -> today. Provided -> must be exactly 4-2-2 digits, with no
    surrounding whitespace, and a real calendar date.
    """
    if raw is None:
        return today.isoformat(), None

    s = raw
    if not _DATE_RE.fullmatch(s):
        return None, "Date must be in YYYY-MM-DD format (e.g., 2025-12-25)"
    try:
        dt.date.fromisoformat(s)
    except ValueError:
        return None, "Date must be in YYYY-MM-DD format (e.g., 2025-12-25)"
    return s, None


def resolve_event_name(event: str, custom_event: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """
    Returns (event_name, error_msg_or_none). "Other" requires a custom name,
    which then replaces it.
    """
    if event == OTHER_EVENT:
        custom = clean_str(custom_event)
        if not custom:
            return None, 'Please provide a custom event name when selecting "Other".'
        return custom, None
    return event, None


# -----------------------------
# Handler
# -----------------------------

async def run_record(
    interaction: "discord.Interaction",
    settings: "Settings",
    *,
    player: str,
    event: str,
    custom_event: Optional[str] = None,
    date: Optional[str] = None,
    api: Optional[YumeApiClient] = None,
    today: Optional[dt.date] = None,
) -> None:
    # Write path: refuse locally when no API key is configured.
    if not settings.has_api_key:
        await reply(
            interaction,
            error_embed("API key not configured. Contact an administrator.", title="❌ Not Configured"),
            ephemeral=True,
        )
        return

    event_name, err = resolve_event_name(event, custom_event)
    if err:
        await reply(interaction, error_embed(err, title="❌ Missing Custom Event Name"), ephemeral=True)
        return

    record_date, err = validate_record_date(date, today or utc_today())
    if err:
        await reply(interaction, error_embed(err, title="❌ Invalid Date Format"), ephemeral=True)
        return

    player_name = clean_str(player) or player

    await acknowledge(interaction)

    try:
        async with open_api(settings, api) as client:
            created = await client.create_attendance_record(name=player_name, event=event_name, date=record_date)
    except ApiError as e:
        logger.exception("Record failed (player=%s, event=%s, date=%s)", player_name, event_name, record_date)
        await show(
            interaction,
            error_embed(e.message or "Failed to create attendance record. Please try again.", title="❌ Failed to Record"),
        )
        return

    embed = make_embed(
        "✅ Attendance Recorded",
        f"Successfully logged attendance for **{player_name}**",
        color=SUCCESS,
        footer=f"Recorded by {interaction.user}",
    )
    embed.add_field(name="🎯 Event", value=event_name, inline=True)
    embed.add_field(name="📅 Date", value=record_date, inline=True)
    embed.add_field(name="🆔 Record ID", value=str(created.id) if created.id is not None else "Created", inline=True)

    await show(interaction, embed)


def register(bot: "discord.Client", tree: "app_commands.CommandTree", settings: "Settings") -> None:
    """
    Attendance write commands (admin).

    Provides:
      - /record (POST /attendance/records)
    """

    @tree.command(name="record", description="Log attendance for a clan event (Admin only)")
    @app_commands.default_permissions(manage_guild=True)
    @app_commands.describe(
        player="RuneScape player name",
        event='Event name (e.g., "Wildy Wednesday")',
        custom_event='Custom event name (if "Other" selected)',
        date="Date of event (YYYY-MM-DD, defaults to today)",
    )
    @app_commands.choices(event=[app_commands.Choice(name=e, value=e) for e in RECORD_EVENTS])
    async def record(
        interaction: "discord.Interaction",
        player: str,
        event: app_commands.Choice[str],
        custom_event: Optional[str] = None,
        date: Optional[str] = None,
    ) -> None:
        await run_record(
            interaction,
            settings,
            player=player,
            event=event.value,
            custom_event=custom_event,
            date=date,
        )


__all__ = [
    "OTHER_EVENT",
    "RECORD_EVENTS",
    "validate_record_date",
    "resolve_event_name",
    "run_record",
    "register",
]
