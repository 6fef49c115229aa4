"""
Unit tests for the manager, the settings-backed auth provider and the
status bar.
"""

import asyncio
import logging

import httpx
import pytest

from conftest import (
    FakeAuthProvider,
    FakeCommands,
    FakeWindow,
    TransportRecorder,
    make_settings,
)
from lightspeed.core.manager import LightSpeedManager, SettingsAuthenticationProvider
from lightspeed.editor.status_bar import StatusBarProvider
from lightspeed.models.domain.error import LightspeedAccessDenied
from lightspeed.models.schemas import CompletionRequest


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in (
        "LIGHTSPEED_ACCESS_TOKEN",
        "LIGHTSPEED_RH_USER_HAS_SEAT",
        "LIGHTSPEED_ORG_OPT_OUT_TELEMETRY",
    ):
        monkeypatch.delenv(name, raising=False)


class TestSettingsAuthenticationProvider:
    """Test SettingsAuthenticationProvider."""

    @pytest.mark.asyncio
    async def test_connected_with_token(self):
        provider = SettingsAuthenticationProvider(
            make_settings(LIGHTSPEED_ACCESS_TOKEN="abc", LIGHTSPEED_RH_USER_HAS_SEAT=True)
        )

        assert provider.user_is_connected is True
        assert await provider.grant_access_token() == "abc"
        assert await provider.rh_user_has_seat() is True

    @pytest.mark.asyncio
    async def test_no_token_denies_access(self):
        provider = SettingsAuthenticationProvider(make_settings())

        assert provider.user_is_connected is False
        with pytest.raises(LightspeedAccessDenied):
            await provider.grant_access_token()

    def test_refresh_picks_up_new_token(self, monkeypatch):
        provider = SettingsAuthenticationProvider(make_settings())
        monkeypatch.setenv("LIGHTSPEED_ACCESS_TOKEN", "fresh")
        monkeypatch.setenv("LIGHTSPEED_RH_USER_HAS_SEAT", "true")

        assert provider.refresh() is True
        assert provider.user_is_connected is True
        assert provider.settings.LIGHTSPEED_RH_USER_HAS_SEAT is True

    def test_refresh_without_change(self, monkeypatch):
        provider = SettingsAuthenticationProvider(
            make_settings(LIGHTSPEED_ACCESS_TOKEN="same")
        )
        monkeypatch.setenv("LIGHTSPEED_ACCESS_TOKEN", "same")

        assert provider.refresh() is False


class TestStatusBarProvider:
    @pytest.mark.asyncio
    async def test_text_follows_connection(self):
        auth_provider = FakeAuthProvider()
        provider = StatusBarProvider(auth_provider)

        await provider.refresh()
        assert provider.status_bar.text == "Lightspeed"

        auth_provider.user_is_connected = False
        await provider.refresh()
        assert provider.status_bar.text == "Lightspeed (not logged in)"


class TestLightSpeedManager:
    """Test LightSpeedManager."""

    def test_wires_components(self):
        settings = make_settings(LIGHTSPEED_ORG_OPT_OUT_TELEMETRY=True)
        auth_provider = FakeAuthProvider()
        manager = LightSpeedManager(settings, auth_provider, FakeWindow(), FakeCommands())

        assert manager.api.connection_manager is manager
        assert manager.api.extension_version == "1.2.3"
        assert manager.org_opt_out_telemetry is True
        assert manager.status_bar_provider.auth_provider is auth_provider

    @pytest.mark.asyncio
    async def test_reconnect_decisions(self):
        auth_provider = FakeAuthProvider()
        manager = LightSpeedManager(make_settings(), auth_provider, FakeWindow(), FakeCommands())

        assert await manager.should_reconnect() is True
        assert await manager.should_connect() is False

        auth_provider.user_is_connected = False
        assert await manager.should_reconnect() is False
        assert await manager.should_connect() is True

    @pytest.mark.asyncio
    async def test_unauthorized_refreshes_credentials(self, monkeypatch):
        """Test a rejected token is replaced by one from the environment."""
        recorder = TransportRecorder()
        recorder.route("v0/ai/completions/", httpx.Response(401))
        settings = make_settings(LIGHTSPEED_ACCESS_TOKEN="stale")
        auth_provider = SettingsAuthenticationProvider(settings)
        window = FakeWindow()
        manager = LightSpeedManager(
            settings,
            auth_provider,
            window,
            FakeCommands(),
            transport=httpx.MockTransport(recorder),
        )
        monkeypatch.setenv("LIGHTSPEED_ACCESS_TOKEN", "rotated")

        await manager.api.completion_request(CompletionRequest(prompt="- name: x\n"))

        assert settings.LIGHTSPEED_ACCESS_TOKEN == "rotated"
        assert window.error_messages == []

    @pytest.mark.asyncio
    async def test_missing_token_runs_connect_flow(self, monkeypatch):
        """Test a completion without a token looks for credentials instead of failing."""
        recorder = TransportRecorder()
        settings = make_settings()
        window = FakeWindow()
        manager = LightSpeedManager(
            settings,
            SettingsAuthenticationProvider(settings),
            window,
            FakeCommands(),
            transport=httpx.MockTransport(recorder),
        )
        monkeypatch.setenv("LIGHTSPEED_ACCESS_TOKEN", "from-env")

        result = await manager.api.completion_request(CompletionRequest(prompt="- name: x\n"))

        assert result.predictions == []
        assert recorder.requests == []
        assert window.error_messages == []
        assert settings.LIGHTSPEED_ACCESS_TOKEN == "from-env"

    @pytest.mark.asyncio
    async def test_run_in_background(self):
        manager = LightSpeedManager(make_settings(), FakeAuthProvider(), FakeWindow(), FakeCommands())
        seen = []

        async def work():
            await asyncio.sleep(0)
            seen.append("done")

        manager.run_in_background(work())
        await manager.wait_for_background_tasks()

        assert seen == ["done"]

    @pytest.mark.asyncio
    async def test_background_failure_only_logged(self, caplog):
        manager = LightSpeedManager(make_settings(), FakeAuthProvider(), FakeWindow(), FakeCommands())

        async def work():
            raise RuntimeError("lost ping")

        with caplog.at_level(logging.DEBUG, logger="lightspeed.core.manager"):
            task = manager.run_in_background(work())
            await manager.wait_for_background_tasks()

        assert task.done()
        assert "lost ping" in caplog.text
