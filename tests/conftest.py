"""
Shared fixtures and fakes for the Lightspeed client tests.
"""

import asyncio
import json
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest

from lightspeed.adapters.api_adapter import LightSpeedAPI
from lightspeed.config.settings import Settings
from lightspeed.core.explanation import PlaybookExplanationPanel


class FakeWindow:
    def __init__(self):
        self.active_text_editor = None
        self.information_messages: List[str] = []
        self.error_messages: List[str] = []

    def show_information_message(self, message: str):
        self.information_messages.append(message)

    def show_error_message(self, message: str):
        self.error_messages.append(message)


class FakeCommands:
    def __init__(self):
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []

    def execute_command(self, command: str, *args: Any):
        self.calls.append((command, args))


class FakeAuthProvider:
    def __init__(self, connected: bool = True, has_seat: bool = False):
        self.user_is_connected = connected
        self.has_seat = has_seat
        self.token = "test-token"
        self.grant_count = 0

    async def grant_access_token(self) -> str:
        self.grant_count += 1
        return self.token

    async def rh_user_has_seat(self) -> bool:
        return self.has_seat


class FakeConnectionManager:
    def __init__(self, reconnect: bool = False, connect: bool = False):
        self.reconnect = reconnect
        self.connect = connect
        self.reconnect_attempts = 0
        self.connect_attempts = 0

    async def should_reconnect(self) -> bool:
        return self.reconnect

    async def should_connect(self) -> bool:
        return self.connect

    def attempt_reconnect(self):
        self.reconnect_attempts += 1

    def attempt_connect(self):
        self.connect_attempts += 1


class TransportRecorder:
    """
    httpx.MockTransport handler recording requests and answering per path.

    Routes map a path suffix (e.g. "v0/ai/completions/") to either an
    httpx.Response or a callable taking the request.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.routes: Dict[str, Any] = {}

    def route(self, path_suffix: str, response: Any):
        self.routes[path_suffix] = response

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for suffix, response in self.routes.items():
            if request.url.path.endswith(suffix):
                if callable(response):
                    return response(request)
                return response
        return httpx.Response(200, json={})

    def bodies(self, path_suffix: str = "") -> List[Dict[str, Any]]:
        return [
            json.loads(request.content)
            for request in self.requests
            if request.url.path.endswith(path_suffix) and request.content
        ]


class FakeLanguageClient:
    def __init__(self, response: Any = None, error: Optional[Exception] = None):
        self.response = response if response is not None else {"content": ""}
        self.error = error
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        self.on_request: Optional[Callable[[], None]] = None

    async def send_request(self, method: str, params: Dict[str, Any]) -> Any:
        self.calls.append((method, params))
        if self.on_request is not None:
            self.on_request()
        if self.error is not None:
            raise self.error
        return self.response


class GatedLanguageClient:
    """Language client whose responses are released by the test."""

    def __init__(self):
        self.calls: List[Tuple[Dict[str, Any], asyncio.Future]] = []

    async def send_request(self, method: str, params: Dict[str, Any]) -> Any:
        future = asyncio.get_running_loop().create_future()
        self.calls.append((params, future))
        return await future


def make_settings(**overrides) -> Settings:
    values = {
        "LIGHTSPEED_URL": "https://lightspeed.test/",
        "LIGHTSPEED_MODEL": None,
        "LIGHTSPEED_API_TIMEOUT": 5.0,
        "LIGHTSPEED_ACCESS_TOKEN": None,
        "EXTENSION_VERSION": "1.2.3",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture(autouse=True)
def reset_explanation_panel():
    PlaybookExplanationPanel.current_panel = None
    yield
    PlaybookExplanationPanel.current_panel = None


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def window():
    return FakeWindow()


@pytest.fixture
def commands():
    return FakeCommands()


@pytest.fixture
def auth_provider():
    return FakeAuthProvider()


@pytest.fixture
def connection_manager():
    return FakeConnectionManager()


@pytest.fixture
def recorder():
    return TransportRecorder()


@pytest.fixture
def api(settings, auth_provider, connection_manager, window, commands, recorder):
    return LightSpeedAPI(
        settings,
        auth_provider,
        connection_manager,
        window,
        commands,
        extension_version="1.2.3",
        transport=httpx.MockTransport(recorder),
    )
