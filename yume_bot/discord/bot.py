from __future__ import annotations

import logging
from typing import List, Optional

import discord
from discord import app_commands

from ..config.settings import Settings, settings as default_settings
from .commands import register_all

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "❌ There was an error executing this command!"


class YumeCommandTree(app_commands.CommandTree):
    """
    Slash-command dispatch table.

    Last-resort error boundary: handlers render their own API errors, so
    anything reaching on_error is either an unknown command (dropped) or a
    bug (logged, generic ephemeral reply).
    """

    async def on_error(self, interaction: discord.Interaction, error: app_commands.AppCommandError) -> None:
        if isinstance(error, app_commands.CommandNotFound):
            logger.warning("No command matching %s was found.", error.name)
            return

        command = interaction.command
        name = command.qualified_name if command is not None else "unknown"
        original = getattr(error, "original", error)
        logger.error("Error executing /%s", name, exc_info=original)

        try:
            if interaction.response.is_done():
                await interaction.followup.send(GENERIC_FAILURE, ephemeral=True)
            else:
                await interaction.response.send_message(GENERIC_FAILURE, ephemeral=True)
        except discord.HTTPException:
            logger.exception("Failed to send error reply for /%s", name)


class YumeBot(discord.Client):
    """
    Discord bot for Yume Tools.

    Notes:
    - discord.Client uses its own internal HTTP client for Discord.
    - Yume API calls build a fresh YumeApiClient per invocation; the bot
      itself holds no API state.
    """

    def __init__(self, settings: Settings = default_settings) -> None:
        intents = discord.Intents.default()
        super().__init__(intents=intents, application_id=settings.discord_client_id)

        self.settings = settings
        self.tree = YumeCommandTree(self)

    async def setup_hook(self) -> None:
        # Register slash commands from modular command files
        register_all(self, self.tree, self.settings)

        if not self.settings.sync_commands_on_startup:
            return

        try:
            await self.sync_commands()
        except Exception:
            logger.exception("Slash command sync failed")

    async def sync_commands(self) -> List[app_commands.AppCommand]:
        """
        Push the registered commands to Discord: to one guild when
        DISCORD_GUILD_ID is set (instant), otherwise globally (can take up
        to an hour to propagate).
        """
        guild_id: Optional[int] = self.settings.discord_guild_id
        if guild_id:
            guild = discord.Object(id=guild_id)
            self.tree.copy_global_to(guild=guild)
            synced = await self.tree.sync(guild=guild)
            logger.info("Slash commands synced to guild=%s (%d)", guild_id, len(synced))
        else:
            synced = await self.tree.sync()
            logger.info("Slash commands synced globally (%d)", len(synced))
        return synced

    async def on_ready(self) -> None:
        logger.info(
            "YumeBot ready as %s (guilds=%d, guild_sync=%s, api=%s)",
            str(self.user),
            len(self.guilds),
            str(self.settings.discord_guild_id or "global"),
            self.settings.api_base_url,
        )
        await self.change_presence(
            status=discord.Status.online,
            activity=discord.Game(name=self.settings.presence_text),
        )


# ---------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------

def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run_bot(settings: Settings = default_settings) -> None:
    configure_logging(settings.log_level)
    settings.validate_startup()
    logger.info("Starting Yume bot (api=%s)", settings.api_base_url)
    # log_handler=None: logging is configured above, don't let discord.py add a second handler.
    YumeBot(settings).run(settings.discord_token, log_handler=None)


if __name__ == "__main__":
    run_bot()
