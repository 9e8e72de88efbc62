from __future__ import annotations

import asyncio
import logging
from typing import List

from discord import app_commands

from ..config.settings import Settings, settings as default_settings
from .bot import YumeBot, configure_logging

logger = logging.getLogger(__name__)


async def deploy_commands(settings: Settings = default_settings) -> List[app_commands.AppCommand]:
    """
    Register/update the slash commands with Discord, then disconnect.

    Run this whenever commands are added, removed or changed. With
    DISCORD_GUILD_ID set the update is instant for that guild; otherwise
    commands deploy globally.
    """
    # Registration happens in setup_hook; the sync below is the one we report on.
    one_shot = settings.model_copy(update={"sync_commands_on_startup": False})
    bot = YumeBot(one_shot)

    async with bot:
        await bot.login(one_shot.discord_token)
        if one_shot.discord_guild_id:
            logger.info("Deploying to guild: %s", one_shot.discord_guild_id)
        else:
            logger.info("Deploying globally (may take up to 1 hour to propagate)")
        deployed = await bot.sync_commands()

    logger.info("Successfully deployed %d command(s)", len(deployed))
    for cmd in deployed:
        logger.info("  /%s - %s", cmd.name, cmd.description)
    return deployed


def run_deploy(settings: Settings = default_settings) -> None:
    configure_logging(settings.log_level)
    settings.validate_startup()
    asyncio.run(deploy_commands(settings))
