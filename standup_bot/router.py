"""Route inbound Slack messages to the stand-up conversation they answer."""

import logging
from collections import Counter
from typing import Iterable

from .errors import RoutingError
from .models import MessageEvent, TeamMember
from .stand_up import StandUpMachine

logger = logging.getLogger(__name__)

NO_TEXT_ANSWER = "Nothing"


class MessageRouter:
    """Feeds answers from team members' DMs into the state machine.

    Anything that cannot be routed is dropped and counted in ``discarded``.
    """

    def __init__(self, machine: StandUpMachine, team_members: Iterable[TeamMember]):
        self.machine = machine
        team_members = list(team_members)
        self._by_dm_id = {member.dm_id: member for member in team_members}
        self._by_user_id = {member.id: member for member in team_members}
        self.discarded = Counter()

    def route(self, event: MessageEvent) -> bool:
        """Dispatch one event. Returns True when it was taken as an answer."""
        # Ignore all messages that are not DMs with team members
        if event.destination_id not in self._by_dm_id:
            self.discarded["not_a_stand_up_dm"] += 1
            return False

        try:
            member = self.sender_of(event)
        except RoutingError as e:
            logger.warning("⚠️ Discarding message in %s: %s", event.destination_id, e)
            self.discarded["unknown_sender"] += 1
            return False

        answer = event.text or NO_TEXT_ANSWER
        if not self.machine.handle_answer(member, answer):
            self.discarded["not_expecting_answer"] += 1
            return False
        return True

    def sender_of(self, event: MessageEvent) -> TeamMember:
        if event.sender_id is None:
            raise RoutingError("message with no user")
        member = self._by_user_id.get(event.sender_id)
        if member is None:
            raise RoutingError(f"message from unknown user {event.sender_id}")
        return member
