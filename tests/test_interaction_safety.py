from unittest.mock import MagicMock

import discord
import pytest

from utils.interaction_safety import safe_defer, safe_followup, safe_reply


def _http_error():
    return discord.NotFound(MagicMock(), "Unknown interaction")


class _StubFollowup:
    def __init__(self, fail=False):
        self.last_kwargs = None
        self.fail = fail

    async def send(self, **kwargs):
        if self.fail:
            raise _http_error()
        self.last_kwargs = kwargs
        return "ok"


class _StubResponse:
    def __init__(self, done=False, fail=False):
        self.done = done
        self.fail = fail
        self.sent = None
        self.deferred = None

    def is_done(self):
        return self.done

    async def send_message(self, **kwargs):
        if self.fail:
            raise _http_error()
        self.sent = kwargs
        self.done = True

    async def defer(self, ephemeral=False):
        if self.fail:
            raise _http_error()
        self.deferred = {"ephemeral": ephemeral}
        self.done = True


class _StubInteraction:
    def __init__(self, done=False, fail=False):
        self.id = 123
        self.followup = _StubFollowup(fail=fail)
        self.response = _StubResponse(done=done, fail=fail)
        self.channel = None


@pytest.mark.asyncio
async def test_safe_followup_sends():
    interaction = _StubInteraction()

    result = await safe_followup(interaction, content="hi", ephemeral=True)

    assert result == "ok"
    assert interaction.followup.last_kwargs["content"] == "hi"
    assert interaction.followup.last_kwargs["ephemeral"] is True


@pytest.mark.asyncio
async def test_safe_followup_swallows_http_error():
    interaction = _StubInteraction(fail=True)

    assert await safe_followup(interaction, content="hi") is None


@pytest.mark.asyncio
async def test_safe_reply_uses_initial_response_first():
    interaction = _StubInteraction()

    await safe_reply(interaction, content="first")

    assert interaction.response.sent == {"content": "first"}
    assert interaction.followup.last_kwargs is None


@pytest.mark.asyncio
async def test_safe_reply_falls_back_to_followup():
    interaction = _StubInteraction(done=True)

    result = await safe_reply(interaction, content="later", ephemeral=True)

    assert result == "ok"
    assert interaction.response.sent is None
    assert interaction.followup.last_kwargs == {"content": "later", "ephemeral": True}


@pytest.mark.asyncio
async def test_safe_defer_marks_deferred():
    interaction = _StubInteraction()

    assert await safe_defer(interaction, ephemeral=True) is True
    assert interaction.response.deferred == {"ephemeral": True}


@pytest.mark.asyncio
async def test_safe_defer_already_done():
    interaction = _StubInteraction(done=True)

    assert await safe_defer(interaction) is True
    assert interaction.response.deferred is None


@pytest.mark.asyncio
async def test_safe_defer_expired_interaction():
    interaction = _StubInteraction(fail=True)

    assert await safe_defer(interaction) is False
