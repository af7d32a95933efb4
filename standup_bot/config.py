"""
Configuration settings for the stand-up bot.

Settings come from environment variables (a ``.env`` file is loaded by the
entry point). ``BotConfig`` holds the raw settings; ``StandUpConfig`` is the
runtime configuration once channel and member names have been resolved
against Slack.
"""

import logging
import os
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Mapping, Optional, Tuple

from .errors import ConfigError, ParseError
from .models import TeamMember
from .timing import Schedule

if TYPE_CHECKING:
    from .directory import SlackDirectory

DEFAULT_TICK_SECONDS = 10
DEFAULT_PORT = 8080

REQUIRED_VARS = ["SLACK_BOT_TOKEN", "SLACK_APP_TOKEN", "CHANNEL", "TEAM_MEMBERS", "STAND_UP_TIME"]

WHOLE_NUMBER = re.compile(r"\d+", re.ASCII)


@dataclass(frozen=True)
class StandUpConfig:
    api_key: str
    channel_id: str
    team_members: Tuple[TeamMember, ...]
    stand_up_time: Schedule
    questions: Tuple[str, ...]

    @property
    def number_of_questions(self) -> int:
        return len(self.questions)


@dataclass(frozen=True)
class BotConfig:
    """Settings read from the environment, before any Slack lookups."""

    slack_bot_token: str
    slack_app_token: str
    channel: str
    team_members: Tuple[str, ...]
    stand_up_time: Schedule
    questions: Tuple[str, ...]
    tick_seconds: int = DEFAULT_TICK_SECONDS
    port: int = DEFAULT_PORT
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "BotConfig":
        """Build and validate the configuration from environment variables."""
        env = os.environ if environ is None else environ

        missing_vars = [var for var in REQUIRED_VARS if not env.get(var, "").strip()]
        if missing_vars:
            raise ConfigError(f"Missing required environment variables: {', '.join(missing_vars)}")

        team_members = tuple(name.strip() for name in env["TEAM_MEMBERS"].split(",") if name.strip())
        if not team_members:
            raise ConfigError("TEAM_MEMBERS does not name anybody")

        try:
            stand_up_time = Schedule.parse(env["STAND_UP_TIME"].strip())
        except ParseError as e:
            raise ConfigError(f"Invalid STAND_UP_TIME: {e}") from e

        log_level = env.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigError(f"Unknown LOG_LEVEL {log_level!r}")

        return cls(
            slack_bot_token=env["SLACK_BOT_TOKEN"].strip(),
            slack_app_token=env["SLACK_APP_TOKEN"].strip(),
            channel=env["CHANNEL"].strip().lstrip("#"),
            team_members=team_members,
            stand_up_time=stand_up_time,
            questions=_read_questions(env),
            tick_seconds=_positive_int(env, "TICK_SECONDS", DEFAULT_TICK_SECONDS),
            port=_positive_int(env, "PORT", DEFAULT_PORT),
            log_level=log_level,
            log_file=env.get("LOG_FILE") or None,
        )

    def resolve(self, directory: "SlackDirectory") -> StandUpConfig:
        """Look up the channel and team members in Slack."""
        return StandUpConfig(
            api_key=self.slack_bot_token,
            channel_id=directory.channel_id(self.channel),
            team_members=tuple(directory.team_members(self.team_members)),
            stand_up_time=self.stand_up_time,
            questions=self.questions,
        )


def _read_questions(env: Mapping[str, str]) -> Tuple[str, ...]:
    raw_count = env.get("NUMBER_OF_QUESTIONS", "").strip()
    if raw_count:
        if not WHOLE_NUMBER.fullmatch(raw_count):
            raise ConfigError(f"NUMBER_OF_QUESTIONS must be a whole number, got {raw_count!r}")
        count = int(raw_count)
        missing = [f"Q{i}" for i in range(1, count + 1) if not env.get(f"Q{i}", "").strip()]
        if missing:
            raise ConfigError(f"Missing questions: {', '.join(missing)}")
        questions = tuple(env[f"Q{i}"].strip() for i in range(1, count + 1))
    else:
        # Without an explicit count, read Q1, Q2, ... until the first gap
        collected = []
        while env.get(f"Q{len(collected) + 1}", "").strip():
            collected.append(env[f"Q{len(collected) + 1}"].strip())
        questions = tuple(collected)

    if not questions:
        raise ConfigError("At least one question (Q1) is required")
    return questions


def _positive_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    if not WHOLE_NUMBER.fullmatch(raw) or int(raw) == 0:
        raise ConfigError(f"{name} must be a positive whole number, got {raw!r}")
    return int(raw)
