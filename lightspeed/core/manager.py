import asyncio
import logging
from typing import Any, Awaitable, Optional, Set

import httpx

from lightspeed.adapters.api_adapter import LightSpeedAPI
from lightspeed.config.settings import Settings
from lightspeed.editor.interfaces import (
    AuthenticationProvider,
    CommandExecutor,
    EditorWindow,
)
from lightspeed.editor.status_bar import StatusBarProvider
from lightspeed.models.domain.error import LightspeedAccessDenied

logger = logging.getLogger(__name__)


class SettingsAuthenticationProvider:
    """
    Authentication provider backed by a token from the environment.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def user_is_connected(self) -> bool:
        return bool(self.settings.LIGHTSPEED_ACCESS_TOKEN)

    async def grant_access_token(self) -> str:
        if not self.settings.LIGHTSPEED_ACCESS_TOKEN:
            raise LightspeedAccessDenied("No Lightspeed access token configured")
        return self.settings.LIGHTSPEED_ACCESS_TOKEN

    async def rh_user_has_seat(self) -> bool:
        return self.settings.LIGHTSPEED_RH_USER_HAS_SEAT

    def refresh(self) -> bool:
        """
        Re-read credentials from the environment.

        Returns:
            True if a different token was found
        """
        fresh = Settings()
        changed = fresh.LIGHTSPEED_ACCESS_TOKEN != self.settings.LIGHTSPEED_ACCESS_TOKEN
        self.settings.LIGHTSPEED_ACCESS_TOKEN = fresh.LIGHTSPEED_ACCESS_TOKEN
        self.settings.LIGHTSPEED_RH_USER_HAS_SEAT = fresh.LIGHTSPEED_RH_USER_HAS_SEAT
        return changed


class LightSpeedManager:
    """
    Wires the Lightspeed components together.

    Constructed once at startup and handed to every component that needs the
    API client, the status bar or the editor collaborators.
    """

    def __init__(
        self,
        settings: Settings,
        auth_provider: AuthenticationProvider,
        window: EditorWindow,
        commands: CommandExecutor,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self.auth_provider = auth_provider
        self.window = window
        self.commands = commands
        self.status_bar_provider = StatusBarProvider(auth_provider)
        self.api = LightSpeedAPI(
            settings,
            auth_provider,
            self,
            window,
            commands,
            extension_version=settings.EXTENSION_VERSION,
            transport=transport,
        )
        self._background_tasks: Set[asyncio.Task] = set()

    @property
    def org_opt_out_telemetry(self) -> bool:
        return self.settings.LIGHTSPEED_ORG_OPT_OUT_TELEMETRY

    def run_in_background(self, coro: Awaitable[Any]) -> asyncio.Task:
        """
        Schedule a best-effort coroutine; its failure is only logged.
        """
        task = asyncio.ensure_future(coro)
        self._background_tasks.add(task)
        task.add_done_callback(self._on_background_done)
        return task

    def _on_background_done(self, task: asyncio.Task):
        self._background_tasks.discard(task)
        if task.cancelled():
            return
        if task.exception() is not None:
            logger.debug(f"Background task failed: {task.exception()}")

    async def wait_for_background_tasks(self):
        pending = [task for task in self._background_tasks if not task.done()]
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    async def should_reconnect(self) -> bool:
        # a token exists but the service rejected it
        return self.auth_provider.user_is_connected

    async def should_connect(self) -> bool:
        return not self.auth_provider.user_is_connected

    def attempt_reconnect(self):
        logger.warning("Lightspeed rejected the access token, refreshing credentials")
        self._refresh_credentials()

    def attempt_connect(self):
        logger.warning("Not connected to Lightspeed, looking for credentials")
        self._refresh_credentials()

    def _refresh_credentials(self):
        refresh = getattr(self.auth_provider, "refresh", None)
        if refresh is None:
            return
        if refresh():
            logger.info("Picked up new Lightspeed credentials")
        else:
            logger.info("No new Lightspeed credentials found; set LIGHTSPEED_ACCESS_TOKEN")
