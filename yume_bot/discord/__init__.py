"""
Discord integration package.

Design goals:
- Keep yume_bot.discord.bot as the stable entrypoint (YumeBot + run_bot).
- Commands live in yume_bot.discord.commands.* and are registered statically.
"""

from .bot import YumeBot, YumeCommandTree, run_bot  # re-export for convenience

__all__ = [
    "YumeBot",
    "YumeCommandTree",
    "run_bot",
]
