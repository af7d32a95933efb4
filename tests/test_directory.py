"""
Unit Tests for Slack Directory Lookups

Tests resolving the stand-up channel and team members with a mocked WebClient.
"""

import pytest
from unittest.mock import Mock

from slack_sdk.errors import SlackApiError

from standup_bot.directory import SlackDirectory
from standup_bot.errors import ConfigError
from standup_bot.models import TeamMember


def slack_error(error):
    return SlackApiError(message=error, response={'ok': False, 'error': error})


class TestChannelLookup:
    """Test class for channel resolution."""

    def test_finds_channel_across_pages(self, mock_slack_client):
        mock_slack_client.conversations_list.return_value = [
            {'channels': [{'id': 'C1', 'name': 'general'}]},
            {'channels': [{'id': 'C2', 'name': 'standup'}]},
        ]

        assert SlackDirectory(mock_slack_client).channel_id('#standup') == 'C2'

    def test_missing_channel(self, mock_slack_client):
        mock_slack_client.conversations_list.return_value = [{'channels': [{'id': 'C1', 'name': 'general'}]}]

        with pytest.raises(ConfigError, match='standup'):
            SlackDirectory(mock_slack_client).channel_id('standup')

    def test_api_error(self, mock_slack_client):
        mock_slack_client.conversations_list.side_effect = slack_error('missing_scope')

        with pytest.raises(ConfigError, match='missing_scope'):
            SlackDirectory(mock_slack_client).channel_id('standup')


class TestMemberLookup:
    """Test class for team member resolution."""

    @pytest.fixture
    def users(self, mock_slack_client):
        mock_slack_client.users_list.return_value = [
            {'members': [
                {'id': 'U1', 'name': 'alice'},
                {'id': 'U0', 'name': 'bob', 'deleted': True},
                {'id': 'UB', 'name': 'standup-bot', 'is_bot': True},
            ]},
            {'members': [{'id': 'U2', 'name': 'bob'}, {'id': 'U3', 'name': 'carol'}]},
        ]
        mock_slack_client.conversations_open.side_effect = lambda users: {
            'ok': True, 'channel': {'id': 'D' + users[1:]},
        }
        return mock_slack_client

    def test_resolves_in_configured_order(self, users):
        members = SlackDirectory(users).team_members(['bob', 'alice'])

        assert members == [TeamMember(name='bob', id='U2', dm_id='D2'), TeamMember(name='alice', id='U1', dm_id='D1')]
        assert [m.name for m in members] == ['bob', 'alice']

    def test_unknown_member(self, users):
        with pytest.raises(ConfigError, match='dave'):
            SlackDirectory(users).team_members(['alice', 'dave'])

    def test_bots_are_not_members(self, users):
        with pytest.raises(ConfigError, match='standup-bot'):
            SlackDirectory(users).team_members(['standup-bot'])

    def test_dm_open_failure(self, users):
        users.conversations_open.side_effect = slack_error('user_not_found')

        with pytest.raises(ConfigError, match='alice'):
            SlackDirectory(users).team_members(['alice'])
