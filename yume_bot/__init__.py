"""
Yume bot: Discord slash commands for clan attendance and tile events,
backed by the Yume API.
"""

__version__ = "1.0.0"
