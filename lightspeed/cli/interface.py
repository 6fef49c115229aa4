"""
CLI interface for the Ansible Lightspeed client.
This module provides a command-line interface using Rich for enhanced output.
"""
import asyncio
import uuid
from pathlib import Path
from typing import Optional, Tuple

import typer
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from lightspeed.adapters.language_client_adapter import LanguageServiceClient
from lightspeed.cli.window import RichWindow
from lightspeed.config.constants import ANSIBLE_LANGUAGE_ID
from lightspeed.config.settings import settings
from lightspeed.core.explanation import PlaybookExplanationPanel, playbook_explanation
from lightspeed.core.feedback_commands import register_lightspeed_commands
from lightspeed.core.manager import LightSpeedManager, SettingsAuthenticationProvider
from lightspeed.editor.commands import CommandRegistry
from lightspeed.editor.document import TextDocument, TextEditor
from lightspeed.editor.webview import FileWebviewHost
from lightspeed.models.domain.error import (
    LightspeedAccessDenied,
    LightspeedApiError,
    LightspeedError,
)
from lightspeed.models.schemas import (
    CompletionMetadata,
    CompletionRequest,
    ContentMatchesRequest,
    FeedbackRequest,
    SentimentFeedback,
    ThumbsUpDownAction,
)
from lightspeed.utils.logger import setup_logger

app = typer.Typer(help="Ansible Lightspeed client")
console = Console()


def _build_manager() -> Tuple[LightSpeedManager, RichWindow, CommandRegistry]:
    window = RichWindow()
    registry = CommandRegistry()
    manager = LightSpeedManager(
        settings,
        SettingsAuthenticationProvider(settings),
        window,
        registry,
    )
    register_lightspeed_commands(registry, manager)
    return manager, window, registry


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Talk to the Ansible Lightspeed service from the terminal"""
    setup_logger(
        level="DEBUG" if verbose else settings.LOG_LEVEL, fmt=settings.LOG_FORMAT
    )


@app.command()
def complete(
    prompt: Optional[str] = typer.Argument(None, help="Prompt text"),
    file: Optional[Path] = typer.Option(
        None, "--file", "-f", exists=True, dir_okay=False, help="Read the prompt from a file"
    ),
):
    """Request an inline suggestion for a task prompt"""
    if prompt is None and file is None:
        console.print("[bold red]Error:[/bold red] provide a prompt or --file")
        raise typer.Exit(code=2)

    text = file.read_text(encoding="utf-8") if file else prompt
    metadata = CompletionMetadata(
        activity_id=str(uuid.uuid4()),
        document_uri=file.resolve().as_uri() if file else None,
        ansible_file_type="playbook",
    )
    manager, window, _ = _build_manager()

    response = asyncio.run(
        manager.api.completion_request(
            CompletionRequest(prompt=text, suggestion_id=str(uuid.uuid4()), metadata=metadata)
        )
    )
    if not response.predictions:
        raise typer.Exit(code=1 if window.error_messages else 0)

    console.print(
        Panel(
            Syntax(response.predictions[0], "yaml", theme="monokai", word_wrap=True),
            title=f"Suggestion ({response.model or 'default model'})",
            border_style="green",
        )
    )


async def _explain(
    file: Path,
    output: Path,
    server_command: str,
    language_id: Optional[str],
    vote: Optional[ThumbsUpDownAction],
) -> Optional[PlaybookExplanationPanel]:
    document = TextDocument.from_path(file, language_id=language_id)
    if document.language_id != ANSIBLE_LANGUAGE_ID:
        return None

    manager, window, registry = _build_manager()
    window.active_text_editor = TextEditor(document)
    host = FileWebviewHost(output.parent, output_path=output)

    async with LanguageServiceClient(
        server_command, root_uri=file.resolve().parent.as_uri()
    ) as client:
        await playbook_explanation(settings.EXTENSION_ROOT, client, manager, host)

    panel = PlaybookExplanationPanel.current_panel
    if panel is not None and vote is not None:
        panel.webview.post_message(
            {
                "command": "thumbsUp" if vote == ThumbsUpDownAction.UP else "thumbsDown",
                "action": int(vote),
            }
        )
    await registry.drain()
    await manager.wait_for_background_tasks()
    return panel


@app.command()
def explain(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Playbook to explain"),
    output: Path = typer.Option(
        Path("explanation.html"), "--out", "-o", help="Where to write the rendered explanation"
    ),
    server_command: str = typer.Option(
        settings.LANGUAGE_SERVER_COMMAND, "--server-command", help="Language server command line"
    ),
    language_id: Optional[str] = typer.Option(
        None, "--language-id", help="Override the detected language id"
    ),
    vote: Optional[str] = typer.Option(
        None, "--vote", help="Send a thumbs 'up' or 'down' vote for the explanation"
    ),
):
    """Explain a playbook and render the result as HTML"""
    action = None
    if vote is not None:
        if vote.lower() not in ("up", "down"):
            console.print("[bold red]Error:[/bold red] --vote must be 'up' or 'down'")
            raise typer.Exit(code=2)
        action = ThumbsUpDownAction.UP if vote.lower() == "up" else ThumbsUpDownAction.DOWN

    try:
        panel = asyncio.run(_explain(file, output, server_command, language_id, action))
    except OSError as e:
        console.print(f"[bold red]Error:[/bold red] cannot start the language server: {e}")
        raise typer.Exit(code=1)
    if panel is None:
        console.print(f"[yellow]{file.name} is not an Ansible file, nothing to explain[/yellow]")
        raise typer.Exit(code=1)
    console.print(f"[green]Explanation written to[/green] {output}")


@app.command("content-matches")
def content_matches(
    suggestion: str = typer.Argument(..., help="Suggestion text to attribute"),
    suggestion_id: str = typer.Option(..., "--suggestion-id", help="Id of the suggestion"),
):
    """Show the training sources that match a suggestion"""
    manager, window, _ = _build_manager()
    result = asyncio.run(
        manager.api.content_matches_request(
            ContentMatchesRequest(suggestions=[suggestion], suggestion_id=suggestion_id)
        )
    )
    if isinstance(result, LightspeedError):
        console.print(f"[bold red]Error:[/bold red] {result.message} ({result.code})")
        raise typer.Exit(code=1)
    if window.error_messages:
        raise typer.Exit(code=1)

    table = Table(title="Content matches")
    table.add_column("Repository", style="cyan")
    table.add_column("Path", style="magenta")
    table.add_column("License")
    table.add_column("Score", justify="right")
    for detail in result.contentmatches:
        for match in detail.contentmatch:
            table.add_row(
                match.repo_name or "",
                match.path or "",
                match.license or "",
                f"{match.score:.3f}" if match.score is not None else "",
            )
    console.print(table)


@app.command()
def feedback(
    rating: int = typer.Option(..., "--rating", min=1, max=5, help="Rating from 1 to 5"),
    text: str = typer.Option(..., "--text", help="Feedback text"),
):
    """Send sentiment feedback about Ansible Lightspeed"""
    manager, _, _ = _build_manager()
    asyncio.run(
        manager.api.feedback_request(
            FeedbackRequest(sentiment_feedback=SentimentFeedback(value=rating, feedback=text)),
            org_opt_out_telemetry=manager.org_opt_out_telemetry,
            show_auth_error_message=True,
            show_info_message=True,
        )
    )


@app.command()
def whoami():
    """Show the authenticated Lightspeed user"""
    manager, _, _ = _build_manager()
    try:
        details = asyncio.run(manager.api.get_user_details())
    except LightspeedAccessDenied as e:
        console.print(f"[bold red]Access denied:[/bold red] {e}")
        raise typer.Exit(code=1)
    except LightspeedApiError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1)

    table = Table(title="Lightspeed user")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Username", details.username or "")
    table.add_row("Has seat", str(details.rh_user_has_seat))
    table.add_row("Org subscription", str(details.rh_org_has_subscription))
    table.add_row("Org admin", str(details.rh_user_is_org_admin))
    console.print(table)


if __name__ == "__main__":
    app()
