from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Protocol, Sequence, Tuple, runtime_checkable

from . import attendance, core, help, record, tile_events

if TYPE_CHECKING:
    import discord
    from discord import app_commands

    from ...config.settings import Settings

logger = logging.getLogger(__name__)


@runtime_checkable
class CommandModule(Protocol):
    """
    A command module registers its slash commands on the shared tree.

    register() closes over the static settings only; it must not keep
    per-invocation state.
    """

    def register(
        self,
        bot: "discord.Client",
        tree: "app_commands.CommandTree",
        settings: "Settings",
    ) -> None: ...


# Single registry of command modules for the bot, in registration order.
# Add new modules here as we expand capabilities.
MODULES: Sequence[Tuple[str, CommandModule]] = (
    ("core", core),                # /ping
    ("help", help),                # /help
    ("attendance", attendance),    # /leaderboard, /lookup
    ("record", record),            # /record (admin)
    ("tile_events", tile_events),  # /tileevent list|info|progress|leaderboard
)

__all__ = ["register_all", "MODULES", "CommandModule"]


def register_all(
    bot: "discord.Client",
    tree: "app_commands.CommandTree",
    settings: "Settings",
    modules: Sequence[Tuple[str, CommandModule]] = MODULES,
) -> Dict[str, str]:
    """
    Register every command module with the shared CommandTree.

    Pattern:
      - bot.py stays small/stable
      - commands are split into focused modules under discord/commands/
      - avoids circular imports by passing (bot, tree, settings) explicitly

    Fail-closed: if any module fails to register (including a duplicate
    command name, which the tree rejects), raise instead of coming up
    half working.

    Returns the per-module registration report.
    """
    results: Dict[str, str] = {}
    fatal: List[str] = []

    for name, mod in modules:
        if not isinstance(mod, CommandModule):
            results[name] = "missing register()"
            fatal.append(f"{name}: missing register()")
            continue

        try:
            mod.register(bot, tree, settings)
            results[name] = "registered"
        except Exception as e:
            logger.exception("commands module register failed: %s", name)
            results[name] = f"register failed: {e}"
            fatal.append(f"{name}: register failed")

    # Log a compact summary (deterministic order)
    summary = ", ".join([f"{k}={results.get(k, 'unknown')}" for k, _ in modules])
    logger.info("discord commands registration summary: %s", summary)

    if fatal:
        msg = "Command modules failed to register: " + "; ".join(fatal)
        logger.error(msg)
        raise RuntimeError(msg)

    return results
