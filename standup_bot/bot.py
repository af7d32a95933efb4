import logging
import queue
import threading
from datetime import datetime, timezone
from typing import Callable, Optional

import schedule

from .config import DEFAULT_TICK_SECONDS, StandUpConfig
from .models import MessageEvent
from .router import MessageRouter
from .stand_up import Notifier, StandUpMachine

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StandUpBot:
    """Main bot class: drains inbound messages and drives the stand-up every tick.

    The loop thread is the only writer of conversation state. Other threads
    talk to it through ``events``.
    """

    def __init__(
        self,
        config: StandUpConfig,
        notifier: Notifier,
        events: Optional["queue.Queue[MessageEvent]"] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.config = config
        self.clock = clock
        self.events = events if events is not None else queue.Queue()
        self.machine = StandUpMachine(config, notifier, clock())
        self.router = MessageRouter(self.machine, config.team_members)
        self.scheduler = schedule.Scheduler()

    def tick(self, now: Optional[datetime] = None) -> int:
        """Route every pending message, then evaluate the clock. Returns the number of messages drained."""
        drained = 0
        while True:
            try:
                event = self.events.get_nowait()
            except queue.Empty:
                break
            self.router.route(event)
            drained += 1

        self.machine.tick(now or self.clock())
        return drained

    def run(self, stop_event: Optional[threading.Event] = None, tick_seconds: int = DEFAULT_TICK_SECONDS) -> None:
        """Tick every ``tick_seconds`` until ``stop_event`` is set."""
        stop_event = stop_event or threading.Event()
        self.scheduler.every(tick_seconds).seconds.do(self.tick)
        logger.info(
            "🤖 Stand-up loop started: %d members, %d questions, daily at %s",
            len(self.config.team_members),
            self.config.number_of_questions,
            self.config.stand_up_time,
        )

        try:
            self.tick()
            while not stop_event.is_set():
                self.scheduler.run_pending()
                stop_event.wait(min(1, tick_seconds))
        finally:
            self.scheduler.clear()
            logger.info("Stand-up loop stopped")
