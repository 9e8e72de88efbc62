"""
Slash-command deployment entrypoint.

Operator notes:
- Run after adding, removing or changing commands.
- DISCORD_GUILD_ID set   -> guild-only deploy (instant updates).
- DISCORD_GUILD_ID unset -> global deploy (up to 1 hour to propagate).
"""

import logging
import sys

from yume_bot.discord.deploy import run_deploy


def main() -> None:
    try:
        run_deploy()
    except Exception:
        logging.basicConfig(level=logging.ERROR)
        logging.exception("Slash command deployment failed.")
        print("\n❌ Slash command deployment failed.")
        print("   See error above. Most common causes:")
        print("   - DISCORD_TOKEN missing or invalid")
        print("   - DISCORD_GUILD_ID points at a guild the bot is not in\n")
        sys.exit(1)


if __name__ == "__main__":
    main()
