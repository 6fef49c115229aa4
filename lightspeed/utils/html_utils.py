"""
Utilities for generating the HTML documents shown in Lightspeed webviews.

Every page is produced by a pure function from its content and flags; the
only inputs coming from the webview are its CSP source and resource URIs.
"""

import html
import secrets
import string
from pathlib import Path
from typing import List, Union

import markdown
from markdown.extensions import Extension

_NONCE_ALPHABET = string.ascii_letters + string.digits


def get_nonce() -> str:
    return "".join(secrets.choice(_NONCE_ALPHABET) for _ in range(32))


def get_uri(webview, extension_uri: Union[str, Path], path_list: List[str]) -> str:
    return webview.as_webview_uri(Path(extension_uri).joinpath(*path_list))


class EscapeRawHtmlExtension(Extension):
    """Render raw HTML found in the markdown source as text."""

    def extendMarkdown(self, md):
        md.preprocessors.deregister("html_block")
        md.inlinePatterns.deregister("html")


def markdown_to_html(text: str) -> str:
    return markdown.markdown(
        text or "",
        extensions=["fenced_code", "tables", EscapeRawHtmlExtension()],
    )


def loading_snippet(file_name: str) -> str:
    return f"""<div id="icons">
        <span class="codicon codicon-loading codicon-modifier-spin"></span>
        Generating the explanation for {html.escape(file_name)}
      </div>"""


def error_snippet(error: object) -> str:
    return (
        '<p><span class="codicon codicon-error"></span>'
        f"Cannot load the explanation: <code>{html.escape(str(error))}</code></p>"
    )


FEEDBACK_BOX_SNIPPET = """<div class="stickyFeedbackContainer">
    <div class="feedbackContainer">
    <vscode-button class="iconButton" appearance="icon" id="thumbsup-button">
        <span class="codicon codicon-thumbsup"></span>
    </vscode-button>
    <vscode-button class="iconButton" appearance="icon" id="thumbsdown-button">
        <span class="codicon codicon-thumbsdown"></span>
    </vscode-button>
    </div>
    </div>"""


def build_explanation_html(
    html_snippet: str,
    *,
    nonce: str,
    csp_source: str,
    script_uri: str,
    style_uri: str,
    codicons_uri: str,
    show_feedback_box: bool = False,
) -> str:
    feedback_box = FEEDBACK_BOX_SNIPPET if show_feedback_box else ""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <meta http-equiv="Content-Security-Policy" content="default-src 'none'; script-src 'nonce-{nonce}'; style-src {csp_source}; font-src {csp_source};">
    <link rel="stylesheet" href="{codicons_uri}">
    <link rel="stylesheet" href="{style_uri}">
    <title>Playbook explanation</title>
</head>
<body>
    <div class="playbookGeneration">
      {html_snippet}
    </div>
    {feedback_box}

    <script type="module" nonce="{nonce}" src="{script_uri}"></script>
</body>
</html>"""
