"""Tests for utils/command_helpers.py - Discord command helper utilities."""

from unittest.mock import AsyncMock, MagicMock, patch

import discord
import pytest

from services import error_codes
from services.result import Result
from utils.command_helpers import format_result_error, handle_result


@pytest.fixture
def mock_interaction():
    """Create a mock Discord interaction."""
    interaction = MagicMock(spec=discord.Interaction)
    interaction.followup = MagicMock()
    interaction.followup.send = AsyncMock()
    return interaction


class TestHandleResult:
    """Tests for handle_result function."""

    @pytest.mark.asyncio
    async def test_success_without_message(self, mock_interaction):
        """Successful result with no message should return True without sending."""
        result = Result.ok("raid-team")

        with patch("utils.command_helpers.safe_reply", new_callable=AsyncMock) as mock_reply:
            success = await handle_result(mock_interaction, result)

            assert success is True
            mock_reply.assert_not_called()

    @pytest.mark.asyncio
    async def test_success_with_message_is_public(self, mock_interaction):
        """Success messages go to the channel with mentions suppressed."""
        result = Result.ok()

        with patch("utils.command_helpers.safe_reply", new_callable=AsyncMock) as mock_reply:
            success = await handle_result(mock_interaction, result, success_msg="✅ Joined!")

            assert success is True
            mock_reply.assert_awaited_once()
            call_kwargs = mock_reply.call_args.kwargs
            assert call_kwargs["content"] == "✅ Joined!"
            assert call_kwargs["ephemeral"] is False
            assert isinstance(call_kwargs["allowed_mentions"], discord.AllowedMentions)

    @pytest.mark.asyncio
    async def test_failure_sends_ephemeral_error(self, mock_interaction):
        """Failed result should send error message and return False."""
        result = Result.fail("This group doesn't exist!", code=error_codes.NOT_FOUND)

        with patch("utils.command_helpers.safe_reply", new_callable=AsyncMock) as mock_reply:
            success = await handle_result(mock_interaction, result, success_msg="unused")

            assert success is False
            mock_reply.assert_awaited_once()
            call_kwargs = mock_reply.call_args.kwargs
            assert call_kwargs["content"] == "❌ This group doesn't exist!"
            assert call_kwargs["ephemeral"] is True


class TestFormatResultError:
    def test_success_is_empty(self):
        assert format_result_error(Result.ok(1)) == ""

    def test_failure_includes_message(self):
        result = Result.fail("You must wait 42 seconds before pinging another group.")
        assert format_result_error(result) == (
            "❌ You must wait 42 seconds before pinging another group."
        )

    def test_failure_without_message(self):
        assert format_result_error(Result(success=False)) == "❌ Something went wrong."
