"""
File-backed webview host.

Each panel writes its HTML document to a file so that the terminal front-end
can open it in a browser. Messages a real webview would post back are fed in
through ``post_message``.
"""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from lightspeed.editor.interfaces import WebviewOptions

logger = logging.getLogger(__name__)


class FileWebview:
    csp_source = "file:"

    def __init__(self, output_path: Path):
        self.output_path = Path(output_path)
        self._html = ""
        self._listeners: List[Callable[[Dict[str, Any]], None]] = []

    @property
    def html(self) -> str:
        return self._html

    @html.setter
    def html(self, value: str):
        self._html = value
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self.output_path.write_text(value, encoding="utf-8")
        logger.debug(f"Webview content written to {self.output_path}")

    def as_webview_uri(self, path: Path) -> str:
        return Path(path).resolve().as_uri()

    def on_did_receive_message(self, listener: Callable[[Dict[str, Any]], None]):
        self._listeners.append(listener)

    def post_message(self, message: Dict[str, Any]):
        for listener in list(self._listeners):
            listener(message)


class FileWebviewPanel:
    def __init__(
        self,
        view_type: str,
        title: str,
        options: WebviewOptions,
        output_path: Path,
    ):
        self.view_type = view_type
        self.title = title
        self.options = options
        self.webview = FileWebview(output_path)
        self.visible = True
        self.disposed = False
        self._dispose_listeners: List[Callable[[], None]] = []

    def reveal(self):
        self.visible = True

    def on_did_dispose(self, listener: Callable[[], None]):
        self._dispose_listeners.append(listener)

    def dispose(self):
        if self.disposed:
            return
        self.disposed = True
        self.visible = False
        for listener in list(self._dispose_listeners):
            listener()


class FileWebviewHost:
    """
    Creates panels whose HTML lands in ``output_dir/<view_type>.html``
    unless an explicit output path is given.
    """

    def __init__(self, output_dir: Path, output_path: Optional[Path] = None):
        self.output_dir = Path(output_dir)
        self.output_path = Path(output_path) if output_path else None
        self.panels: List[FileWebviewPanel] = []

    def create_webview_panel(
        self, view_type: str, title: str, options: WebviewOptions
    ) -> FileWebviewPanel:
        path = self.output_path or self.output_dir / f"{view_type.lower()}.html"
        panel = FileWebviewPanel(view_type, title, options, path)
        self.panels.append(panel)
        return panel
