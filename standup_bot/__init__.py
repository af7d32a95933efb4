"""
Slack Stand-up Bot Package

Asks each team member the daily stand-up questions over DM and posts their
answers to a shared channel.
"""

__version__ = "1.0.0"

from .bot import StandUpBot
from .config import BotConfig, StandUpConfig
from .timing import Schedule

__all__ = ["StandUpBot", "BotConfig", "StandUpConfig", "Schedule"]
