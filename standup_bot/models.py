"""Data types shared across the stand-up bot."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Union


@dataclass(frozen=True)
class TeamMember:
    """A resolved team member.

    Equality and hashing use the Slack identity only, so a display name change
    never splits one member into two state-map keys.
    """

    name: str = field(compare=False)
    id: str
    dm_id: str


@dataclass(frozen=True)
class MessageEvent:
    """An inbound Slack message, reduced to what the router needs."""

    sender_id: Optional[str]
    destination_id: Optional[str]
    text: Optional[str] = None


# Conversation states. Exactly one of these is held per member.

@dataclass(frozen=True)
class TooEarly:
    trigger: datetime


@dataclass(frozen=True)
class Asked:
    question_index: int


@dataclass(frozen=True)
class Done:
    pass


ConversationState = Union[TooEarly, Asked, Done]


def state_name(state: ConversationState) -> str:
    if isinstance(state, TooEarly):
        return "too_early"
    if isinstance(state, Asked):
        return f"asked_q{state.question_index}"
    if isinstance(state, Done):
        return "done"
    raise TypeError(f"Unknown conversation state: {state!r}")
