"""Resolve configured channel and member names to Slack ids."""

import logging
from typing import Dict, Iterable, List

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

from .errors import ConfigError
from .models import TeamMember

logger = logging.getLogger(__name__)

PAGE_SIZE = 200


class SlackDirectory:
    """Looks up channels, users and DM channels through the Slack Web API."""

    def __init__(self, client: WebClient):
        self.client = client

    def channel_id(self, name: str) -> str:
        """Return the id of the channel called ``name``."""
        name = name.lstrip("#")
        try:
            pages = self.client.conversations_list(
                types="public_channel,private_channel",
                exclude_archived=True,
                limit=PAGE_SIZE,
            )
            for page in pages:
                for channel in page["channels"]:
                    if channel.get("name") == name:
                        logger.info("✅ Stand-up channel #%s is %s", name, channel["id"])
                        return channel["id"]
        except SlackApiError as e:
            raise ConfigError(f"Could not list channels: {e.response['error']}") from e

        raise ConfigError(f"Could not find channel #{name} for stand-up")

    def team_members(self, names: Iterable[str]) -> List[TeamMember]:
        """Resolve user names to members with an open DM, in the given order."""
        names = list(names)
        user_ids: Dict[str, str] = {}
        try:
            for page in self.client.users_list(limit=PAGE_SIZE):
                for user in page["members"]:
                    if user.get("deleted") or user.get("is_bot"):
                        continue
                    name = user.get("name")
                    if name in names and name not in user_ids:
                        user_ids[name] = user["id"]
        except SlackApiError as e:
            raise ConfigError(f"Could not list users: {e.response['error']}") from e

        missing = [name for name in names if name not in user_ids]
        if missing:
            raise ConfigError(f"Unknown team members: {', '.join(missing)}")

        members = []
        for name in names:
            members.append(TeamMember(name=name, id=user_ids[name], dm_id=self._open_dm(name, user_ids[name])))
        logger.info("✅ Resolved %d team members", len(members))
        return members

    def _open_dm(self, name: str, user_id: str) -> str:
        try:
            response = self.client.conversations_open(users=user_id)
        except SlackApiError as e:
            raise ConfigError(f"Could not open a DM with {name}: {e.response['error']}") from e
        return response["channel"]["id"]
