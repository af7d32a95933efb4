"""
Inbound Slack events over Socket Mode.

The listener runs on its own thread and only ever puts ``MessageEvent``s on
the queue shared with the bot loop.
"""

import logging
import queue
import threading
import time
from typing import Any, Callable, Dict, Optional

from slack_sdk import WebClient
from slack_sdk.errors import SlackClientError
from slack_sdk.socket_mode import SocketModeClient
from slack_sdk.socket_mode.request import SocketModeRequest
from slack_sdk.socket_mode.response import SocketModeResponse

from .errors import ListenerError
from .models import MessageEvent

logger = logging.getLogger(__name__)

MAX_RETRIES = 10
RETRY_WINDOW_SECONDS = 60
RETRY_DELAY_SECONDS = 5
CONNECTION_CHECK_SECONDS = 30

# Message subtypes that still carry something a person typed
ANSWER_SUBTYPES = {None, "file_share", "thread_broadcast"}


def message_event_from_payload(event: Dict[str, Any]) -> Optional[MessageEvent]:
    """Convert a Slack ``message`` event into a MessageEvent, or None if it is not one."""
    if event.get("type") != "message":
        return None
    if event.get("bot_id") or event.get("subtype") not in ANSWER_SUBTYPES:
        return None
    return MessageEvent(
        sender_id=event.get("user"),
        destination_id=event.get("channel"),
        text=event.get("text") or None,
    )


class SocketModeListener:
    def __init__(
        self,
        app_token: str,
        web_client: WebClient,
        events: "queue.Queue[MessageEvent]",
        client: Optional[SocketModeClient] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.events = events
        self.client = client or SocketModeClient(app_token=app_token, web_client=web_client)
        self.client.socket_mode_request_listeners.append(self._handle_socket_request)
        self.clock = clock
        self.retries = 0
        self._last_error: Optional[float] = None

    def _handle_socket_request(self, client: SocketModeClient, request: SocketModeRequest) -> None:
        # Slack redelivers unacknowledged envelopes
        client.send_socket_mode_response(SocketModeResponse(envelope_id=request.envelope_id))
        if request.type != "events_api":
            return

        message = message_event_from_payload(request.payload.get("event", {}))
        if message is not None:
            logger.debug("Queued message from %s in %s", message.sender_id, message.destination_id)
            self.events.put(message)

    def record_error(self, err: Exception) -> int:
        """Count a connection error; raise ListenerError once retries are used up.

        Errors more than a minute apart start the count again.
        """
        now = self.clock()
        if self._last_error is None or now - self._last_error > RETRY_WINDOW_SECONDS:
            self.retries = 1
        else:
            self.retries += 1
        self._last_error = now

        if self.retries > MAX_RETRIES:
            raise ListenerError(f"Listener error after {MAX_RETRIES} retries: {err}") from err
        logger.warning("Listener error, retry %d: %s", self.retries, err)
        return self.retries

    def run(self, stop_event: threading.Event) -> None:
        """Keep the Socket Mode connection up until ``stop_event`` is set."""
        try:
            while not stop_event.is_set():
                try:
                    self.client.connect()
                except (SlackClientError, OSError) as e:
                    self.record_error(e)
                    stop_event.wait(RETRY_DELAY_SECONDS)
                    continue

                logger.info("🔌 Socket Mode listener connected")
                while not stop_event.wait(CONNECTION_CHECK_SECONDS):
                    if not self.client.is_connected():
                        logger.warning("Socket Mode connection lost, reconnecting")
                        break
        finally:
            self.client.close()
