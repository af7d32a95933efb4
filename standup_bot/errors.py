"""
Exception types raised by the stand-up bot.

Configuration problems are fatal at startup. Routing problems are recoverable:
the router logs them and drops the offending event.
"""


class StandUpBotError(Exception):
    """Base class for all stand-up bot errors."""


class ConfigError(StandUpBotError):
    """Missing or invalid configuration; the bot must not start."""


class ParseError(ConfigError, ValueError):
    """A stand-up time string could not be parsed."""


class RoutingError(StandUpBotError):
    """An inbound message could not be matched to a team member."""


class ListenerError(StandUpBotError):
    """The Slack listener gave up reconnecting."""
