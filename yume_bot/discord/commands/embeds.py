from __future__ import annotations

from typing import Optional

import discord

# Yume palette
BRAND = 0xE8B4D8
WARNING = 0xF5A623
ERROR = 0xFF4444
SUCCESS = 0x4CAF50
GOLD = 0xFFD700
MUTED = 0x9E9E9E

FOOTER = "Yume Tools"


def make_embed(
    title: str,
    description: Optional[str] = None,
    *,
    color: int = BRAND,
    footer: Optional[str] = None,
) -> discord.Embed:
    embed = discord.Embed(
        title=title,
        description=description,
        color=color,
        timestamp=discord.utils.utcnow(),
    )
    if footer:
        embed.set_footer(text=footer)
    return embed


def error_embed(description: str, title: str = "❌ Error") -> discord.Embed:
    return make_embed(title, description, color=ERROR)


def no_data_embed(title: str, description: str) -> discord.Embed:
    return make_embed(title, description, color=WARNING)


async def acknowledge(interaction: discord.Interaction, *, ephemeral: bool = False) -> None:
    """Send the "thinking..." placeholder so slow API calls don't time out."""
    await interaction.response.defer(thinking=True, ephemeral=ephemeral)


async def show(interaction: discord.Interaction, embed: discord.Embed) -> None:
    """Replace the placeholder with the final embed."""
    await interaction.edit_original_response(content=None, embed=embed)


async def reply(interaction: discord.Interaction, embed: discord.Embed, *, ephemeral: bool = False) -> None:
    await interaction.response.send_message(embed=embed, ephemeral=ephemeral)


__all__ = [
    "BRAND",
    "WARNING",
    "ERROR",
    "SUCCESS",
    "GOLD",
    "MUTED",
    "FOOTER",
    "make_embed",
    "error_embed",
    "no_data_embed",
    "acknowledge",
    "show",
    "reply",
]
