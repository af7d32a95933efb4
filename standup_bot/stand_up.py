"""
The daily stand-up conversation.

Every team member has an independent conversation state:

    TooEarly(trigger) --now > trigger--> Asked(1) --answer--> Asked(2) ... --last answer--> Done

``Asked`` and ``Done`` fall back to ``TooEarly`` with a fresh trigger as soon as
``now`` is earlier than today's trigger again, i.e. once the clock has moved
into a new day whose stand-up time has not come yet. There is no separate
midnight timer.

Only the bot loop calls into this class, so nothing here is locked.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from .config import StandUpConfig
from .errors import ConfigError
from .models import Asked, ConversationState, Done, TeamMember, TooEarly, state_name

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def send(self, destination_id: str, text: str) -> None:
        ...


def format_summary(member: TeamMember, questions: Sequence[str], answers: Sequence[str]) -> str:
    """Build the channel summary: a header line then one ``**question**: answer`` line each."""
    lines = [f"*Stand-up for {member.name}*"]
    lines.extend(f"**{question}**: {answer}" for question, answer in zip(questions, answers))
    return "\n".join(lines)


class StandUpMachine:
    """Owns the per-member conversation states and answer buffers."""

    def __init__(self, config: StandUpConfig, notifier: Notifier, now: datetime):
        if not config.questions:
            raise ConfigError("A stand-up needs at least one question")
        self.config = config
        self.notifier = notifier

        trigger = config.stand_up_time.next_trigger(now)
        self.states: Dict[TeamMember, ConversationState] = {
            member: TooEarly(trigger) for member in config.team_members
        }
        self.answers: Dict[TeamMember, List[str]] = {member: [] for member in config.team_members}

    @property
    def questions(self) -> Tuple[str, ...]:
        return self.config.questions

    def state_of(self, member: TeamMember) -> Optional[ConversationState]:
        return self.states.get(member)

    def tick(self, now: datetime) -> None:
        """Advance every member against the current time."""
        today_trigger = self.config.stand_up_time.next_trigger(now)
        for member in self.config.team_members:
            state = self.states[member]
            logger.debug("STATE: %s is %s", member.name, state_name(state))
            self.states[member] = self._advance(member, state, now, today_trigger)

    def _advance(
        self, member: TeamMember, state: ConversationState, now: datetime, today_trigger: datetime
    ) -> ConversationState:
        if isinstance(state, TooEarly):
            if now > state.trigger:
                logger.info("TRANSITION: asking %s for their stand-up", member.name)
                self._say_hello(member, now)
                self._ask(member, 1)
                return Asked(1)
            return state

        if isinstance(state, (Asked, Done)):
            if now < today_trigger:
                # The latched trigger belongs to a previous day
                logger.info("TRANSITION: day change for %s", member.name)
                self.answers[member].clear()
                return TooEarly(today_trigger)
            return state

        raise TypeError(f"Unknown conversation state: {state!r}")

    def handle_answer(self, member: TeamMember, text: str) -> bool:
        """Record ``text`` as the answer to the member's outstanding question.

        Returns False, without side effects, when no question is outstanding.
        """
        state = self.states.get(member)
        if not isinstance(state, Asked):
            logger.info(
                "Ignoring message from %s: not expecting an answer (%s)",
                member.name,
                state_name(state) if state is not None else "unknown member",
            )
            return False

        answers = self.answers[member]
        answers.append(text)

        if state.question_index >= len(self.questions):
            logger.info("TRANSITION: %s answered everything, stand-up done for today", member.name)
            self.notifier.send(member.dm_id, closing_remark(member))
            self.notifier.send(self.config.channel_id, format_summary(member, self.questions, answers))
            answers.clear()
            self.states[member] = Done()
        else:
            next_index = state.question_index + 1
            logger.info("TRANSITION: %s answered question %d", member.name, state.question_index)
            self._ask(member, next_index)
            self.states[member] = Asked(next_index)
        return True

    def _say_hello(self, member: TeamMember, now: datetime) -> None:
        self.notifier.send(member.dm_id, greeting(member, now))

    def _ask(self, member: TeamMember, question_index: int) -> None:
        self.notifier.send(member.dm_id, self.questions[question_index - 1])


def greeting(member: TeamMember, now: datetime) -> str:
    return f"Hello {member.name}, it's {now.strftime('%A')}! Time for your daily stand-up!"


def closing_remark(member: TeamMember) -> str:
    return f"Thanks {member.name}, that's all for today! Your stand-up has been posted."
