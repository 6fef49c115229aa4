"""
Unit tests for the thumbs up/down command.
"""

import httpx
import pytest

from conftest import FakeAuthProvider, FakeWindow, TransportRecorder, make_settings
from lightspeed.config.constants import FEEDBACK_THANKS_MESSAGE, LIGHTSPEED_THUMBS_UP_DOWN
from lightspeed.core.feedback_commands import register_lightspeed_commands, thumbs_up_down
from lightspeed.core.manager import LightSpeedManager
from lightspeed.editor.commands import CommandRegistry


@pytest.fixture
def command_env():
    recorder = TransportRecorder()
    window = FakeWindow()
    registry = CommandRegistry()
    auth_provider = FakeAuthProvider()
    manager = LightSpeedManager(
        make_settings(),
        auth_provider,
        window,
        registry,
        transport=httpx.MockTransport(recorder),
    )
    register_lightspeed_commands(registry, manager)
    return manager, registry, recorder, window


class TestThumbsUpDown:
    """Test thumbs_up_down."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("action", [0, 1])
    async def test_sends_vote(self, command_env, action):
        manager, _, recorder, window = command_env

        await thumbs_up_down(manager, {"action": action, "explanationId": "e-1"})

        body = recorder.bodies("v0/ai/feedback/")[0]
        assert body["playbookExplanationFeedback"] == {
            "action": action,
            "explanationId": "e-1",
        }
        assert window.information_messages == [FEEDBACK_THANKS_MESSAGE]

    @pytest.mark.asyncio
    async def test_sent_even_when_disconnected(self, command_env):
        """Test an explicit vote is sent without a connected session."""
        manager, _, recorder, _ = command_env
        manager.auth_provider.user_is_connected = False

        await thumbs_up_down(manager, {"action": 1, "explanationId": "e-1"})

        assert len(recorder.requests) == 1

    @pytest.mark.asyncio
    async def test_failure_is_shown(self, command_env):
        manager, _, recorder, window = command_env
        recorder.route("v0/ai/feedback/", httpx.Response(403))

        await thumbs_up_down(manager, {"action": 0, "explanationId": "e-1"})

        assert len(window.error_messages) == 1
        assert "permission" in window.error_messages[0]

    @pytest.mark.asyncio
    async def test_invalid_action_rejected(self, command_env):
        manager, _, recorder, _ = command_env

        with pytest.raises(ValueError):
            await thumbs_up_down(manager, {"action": 7, "explanationId": "e-1"})

        assert recorder.requests == []


class TestRegisteredCommand:
    @pytest.mark.asyncio
    async def test_panel_vote_reaches_service(self, command_env):
        """Test the registered command runs through the registry."""
        _, registry, recorder, _ = command_env

        assert registry.has_command(LIGHTSPEED_THUMBS_UP_DOWN)
        registry.execute_command(
            LIGHTSPEED_THUMBS_UP_DOWN, {"action": 0, "explanationId": "e-9"}
        )
        await registry.drain()

        body = recorder.bodies("v0/ai/feedback/")[0]
        assert body["playbookExplanationFeedback"]["explanationId"] == "e-9"
