"""
Bot entrypoint.

Operator notes:
- This file should remain extremely small and boring.
- All configuration validation happens inside run_bot().
- If this file crashes, the error should be immediately obvious to the operator.
"""

import logging
import sys

from yume_bot.discord.bot import run_bot


def main() -> None:
    try:
        run_bot()
    except Exception:
        # Fail loud and early with a clear signal for operators.
        logging.basicConfig(level=logging.ERROR)
        logging.exception("Yume bot failed to start.")
        print("\n❌ Yume bot failed to start.")
        print("   See error above. Most common causes:")
        print("   - DISCORD_TOKEN missing or not loaded into the environment")
        print("   - Invalid API_BASE_URL")
        print("   - DISCORD_CLIENT_ID / DISCORD_GUILD_ID not a valid id\n")
        sys.exit(1)


if __name__ == "__main__":
    main()
