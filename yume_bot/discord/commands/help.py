from __future__ import annotations

from typing import TYPE_CHECKING, Sequence, Tuple

from .embeds import make_embed

if TYPE_CHECKING:
    import discord
    from discord import app_commands

    from ...config.settings import Settings

# (category, lines) in display order.
COMMAND_GROUPS: Sequence[Tuple[str, Sequence[str]]] = (
    (
        "📊 Attendance",
        (
            "`/leaderboard` - View event attendance leaderboard",
            "`/lookup <name>` - Look up a player's attendance history",
            "`/record` - Log attendance for an event (Admin)",
        ),
    ),
    (
        "🎮 Tile Events",
        (
            "`/tileevent list` - View active tile events",
            "`/tileevent info <event>` - View event details",
            "`/tileevent progress <event>` - Check your progress",
            "`/tileevent leaderboard <event>` - View event leaderboard",
        ),
    ),
    (
        "🔧 Utility",
        (
            "`/ping` - Check bot and API status",
            "`/help` - Show this help message",
        ),
    ),
)


def build_help_embed() -> "discord.Embed":
    embed = make_embed(
        "🌸 Yume Bot Commands",
        "Your companion for clan event tracking and management!",
        footer="Yume Tools • github.com/yume-tools",
    )
    for category, lines in COMMAND_GROUPS:
        embed.add_field(name=category, value="\n".join(lines), inline=False)
    return embed


def register(bot: "discord.Client", tree: "app_commands.CommandTree", settings: "Settings") -> None:
    """
    Help.

    Provides:
      - /help   (command map)
    """

    @tree.command(name="help", description="Display available commands and bot information")
    async def help_cmd(interaction: "discord.Interaction") -> None:
        await interaction.response.send_message(embed=build_help_embed())
