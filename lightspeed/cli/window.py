"""
Terminal implementation of the editor window using Rich.
"""
from typing import List, Optional

from rich.console import Console

from lightspeed.editor.document import TextEditor


class RichWindow:
    """Editor window that prints notifications to the terminal"""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(stderr=True)
        self.active_text_editor: Optional[TextEditor] = None
        self.information_messages: List[str] = []
        self.error_messages: List[str] = []

    def show_information_message(self, message: str):
        self.information_messages.append(message)
        self.console.print(f"[bold blue]Info:[/bold blue] {message}")

    def show_error_message(self, message: str):
        self.error_messages.append(message)
        self.console.print(f"[bold red]Error:[/bold red] {message}")
