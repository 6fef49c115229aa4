"""
Structural interfaces for the editor collaborators used by the client.

The editor host (a real IDE bridge, the terminal front-end, or a test fake)
provides objects matching these shapes.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol


class TextDocumentLike(Protocol):
    file_name: str
    language_id: str

    def get_text(self) -> str: ...


class TextEditorLike(Protocol):
    document: TextDocumentLike


class EditorWindow(Protocol):
    active_text_editor: Optional[TextEditorLike]

    def show_information_message(self, message: str) -> None: ...

    def show_error_message(self, message: str) -> None: ...


class CommandExecutor(Protocol):
    def execute_command(self, command: str, *args: Any) -> Any: ...


class AuthenticationProvider(Protocol):
    user_is_connected: bool

    async def grant_access_token(self) -> str: ...

    async def rh_user_has_seat(self) -> bool: ...


class ConnectionManager(Protocol):
    async def should_reconnect(self) -> bool: ...

    async def should_connect(self) -> bool: ...

    def attempt_reconnect(self) -> None: ...

    def attempt_connect(self) -> None: ...


class LanguageClient(Protocol):
    async def send_request(self, method: str, params: Dict[str, Any]) -> Any: ...


class Webview(Protocol):
    html: str
    csp_source: str

    def as_webview_uri(self, path: Path) -> str: ...

    def on_did_receive_message(
        self, listener: Callable[[Dict[str, Any]], None]
    ) -> None: ...


class WebviewPanel(Protocol):
    webview: Webview

    def reveal(self) -> None: ...

    def dispose(self) -> None: ...

    def on_did_dispose(self, listener: Callable[[], None]) -> None: ...


@dataclass
class WebviewOptions:
    enable_scripts: bool = True
    enable_command_uris: bool = True
    retain_context_when_hidden: bool = True
    local_resource_roots: List[Path] = field(default_factory=list)
    view_column: str = "beside"


class WebviewHost(Protocol):
    def create_webview_panel(
        self, view_type: str, title: str, options: WebviewOptions
    ) -> WebviewPanel: ...
