"""
Playbook explanation flow and the panel that displays it.

The panel moves through three states: CLOSED, LOADING while the language
server works, and DISPLAYING once the explanation (or an inline error) is
rendered. Only one panel exists at a time.
"""

import logging
import uuid
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

from lightspeed.config.constants import (
    ANSIBLE_LANGUAGE_ID,
    LIGHTSPEED_THUMBS_UP_DOWN,
    PLAYBOOK_EXPLANATION_METHOD,
)
from lightspeed.editor.interfaces import (
    CommandExecutor,
    EditorWindow,
    LanguageClient,
    WebviewHost,
    WebviewOptions,
    WebviewPanel,
)
from lightspeed.models.schemas import (
    ExplanationResponse,
    FeedbackRequest,
    PlaybookExplanationEvent,
)
from lightspeed.utils.html_utils import (
    build_explanation_html,
    error_snippet,
    get_nonce,
    get_uri,
    loading_snippet,
    markdown_to_html,
)

logger = logging.getLogger(__name__)


class PanelState(str, Enum):
    CLOSED = "closed"
    LOADING = "loading"
    DISPLAYING = "displaying"


async def playbook_explanation(
    extension_uri: Union[str, Path],
    client: LanguageClient,
    manager,
    webview_host: WebviewHost,
) -> None:
    """
    Explain the playbook open in the active editor.

    Args:
        extension_uri: Root directory holding the webview script and styles
        client: Client for the language server that generates explanations
        manager: The LightSpeedManager owning the API client and status bar
        webview_host: Host creating the explanation panel
    """
    editor = manager.window.active_text_editor
    if editor is None:
        return
    document = editor.document
    if document is None or document.language_id != ANSIBLE_LANGUAGE_ID:
        return

    explanation_id = str(uuid.uuid4())
    manager.run_in_background(
        manager.api.feedback_request(
            FeedbackRequest(
                playbook_explanation=PlaybookExplanationEvent(
                    explanation_id=explanation_id
                )
            ),
            False,
            False,
        )
    )

    current_panel = PlaybookExplanationPanel.create_or_show(
        extension_uri,
        explanation_id,
        webview_host,
        manager.commands,
        manager.window,
    )
    current_panel.set_content(
        loading_snippet(Path(document.file_name).name),
        explanation_id,
        state=PanelState.LOADING,
    )

    content = document.get_text()
    status_bar = manager.status_bar_provider.status_bar
    status_bar_text = (
        await manager.status_bar_provider.get_lightspeed_status_bar_text()
    )

    status_bar.text = f"$(loading~spin) {status_bar_text}"
    try:
        access_token = await manager.auth_provider.grant_access_token()
        response = await client.send_request(
            PLAYBOOK_EXPLANATION_METHOD,
            {
                "accessToken": access_token,
                "URL": manager.settings.LIGHTSPEED_URL,
                "content": content,
                "explanationId": explanation_id,
            },
        )
        markdown = ExplanationResponse.model_validate(response or {}).content
    except Exception as e:
        logger.error(f"Cannot load the explanation {explanation_id}: {e}")
        current_panel.set_content(error_snippet(e), explanation_id)
        return
    finally:
        status_bar.text = status_bar_text

    current_panel.set_content(
        markdown_to_html(markdown), explanation_id, show_feedback_box=True
    )


class PlaybookExplanationPanel:
    current_panel: Optional["PlaybookExplanationPanel"] = None

    view_type = "Explanation"

    @classmethod
    def create_or_show(
        cls,
        extension_uri: Union[str, Path],
        explanation_id: str,
        webview_host: WebviewHost,
        commands: CommandExecutor,
        window: EditorWindow,
    ) -> "PlaybookExplanationPanel":
        if cls.current_panel is not None:
            cls.current_panel._panel.reveal()
            return cls.current_panel

        extension_root = Path(extension_uri)
        panel = webview_host.create_webview_panel(
            cls.view_type,
            "Explanation",
            WebviewOptions(
                enable_scripts=True,
                enable_command_uris=True,
                retain_context_when_hidden=True,
                local_resource_roots=[
                    extension_root / "out",
                    extension_root / "media",
                ],
            ),
        )
        cls.current_panel = cls(panel, extension_uri, explanation_id, commands, window)
        return cls.current_panel

    def __init__(
        self,
        panel: WebviewPanel,
        extension_uri: Union[str, Path],
        explanation_id: str,
        commands: CommandExecutor,
        window: EditorWindow,
    ):
        self._panel = panel
        self._extension_uri = extension_uri
        self.explanation_id: Optional[str] = explanation_id
        self._commands = commands
        self._window = window
        self.state = PanelState.CLOSED

        self._panel.webview.on_did_receive_message(self._on_message)
        self._panel.on_did_dispose(self._on_dispose)

    def _on_message(self, message: Dict[str, Any]):
        command = message.get("command")
        if command in ("thumbsUp", "thumbsDown"):
            self._commands.execute_command(
                LIGHTSPEED_THUMBS_UP_DOWN,
                {
                    "action": message.get("action"),
                    "explanationId": self.explanation_id,
                },
            )
        elif command == "alert":
            self._window.show_error_message(message.get("text", ""))

    def _on_dispose(self):
        self.state = PanelState.CLOSED
        self.explanation_id = None
        if PlaybookExplanationPanel.current_panel is self:
            PlaybookExplanationPanel.current_panel = None

    @property
    def webview(self):
        return self._panel.webview

    def dispose(self):
        self._panel.dispose()

    def set_content(
        self,
        html_snippet: str,
        explanation_id: Optional[str] = None,
        show_feedback_box: bool = False,
        state: PanelState = PanelState.DISPLAYING,
    ):
        """
        Render a snippet in the panel.

        Votes posted from the panel carry the id of the explanation on screen.
        """
        if explanation_id is not None:
            self.explanation_id = explanation_id
        self._panel.webview.html = self._build_full_html(
            html_snippet, show_feedback_box
        )
        self.state = state

    def _build_full_html(self, html_snippet: str, show_feedback_box: bool = False):
        webview = self._panel.webview
        script_uri = get_uri(
            webview,
            self._extension_uri,
            [
                "out",
                "client",
                "webview",
                "apps",
                "lightspeed",
                "playbookExplanation",
                "main.js",
            ],
        )
        style_uri = get_uri(
            webview,
            self._extension_uri,
            ["media", "playbookGeneration", "style.css"],
        )
        codicons_uri = get_uri(
            webview, self._extension_uri, ["media", "codicons", "codicon.css"]
        )
        return build_explanation_html(
            html_snippet,
            nonce=get_nonce(),
            csp_source=webview.csp_source,
            script_uri=script_uri,
            style_uri=style_uri,
            codicons_uri=codicons_uri,
            show_feedback_box=show_feedback_box,
        )
