"""Outbound messages to Slack."""

import logging

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError, SlackClientError

logger = logging.getLogger(__name__)


class SlackNotifier:
    """Posts plain text messages. Delivery is best effort: failures are logged, never raised."""

    def __init__(self, client: WebClient):
        self.client = client

    def send(self, destination_id: str, text: str) -> None:
        try:
            self.client.chat_postMessage(channel=destination_id, text=text)
        except SlackApiError as e:
            logger.error("❌ Error sending message to %s: %s", destination_id, e.response["error"])
        except (SlackClientError, OSError) as e:
            logger.error("❌ Error sending message to %s: %s", destination_id, e)
