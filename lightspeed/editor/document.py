from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from lightspeed.config.constants import ANSIBLE_LANGUAGE_ID


def guess_language_id(file_name: str) -> str:
    """Guess the language id based on file extension"""
    ext = file_name.split(".")[-1].lower() if "." in file_name else ""

    lang_map = {
        "yml": ANSIBLE_LANGUAGE_ID,
        "yaml": ANSIBLE_LANGUAGE_ID,
        "py": "python",
        "json": "json",
        "md": "markdown",
        "sh": "shellscript",
        "j2": "jinja",
        "txt": "plaintext",
    }

    return lang_map.get(ext, "plaintext")


@dataclass
class TextDocument:
    file_name: str
    language_id: str
    text: str = ""

    def get_text(self) -> str:
        return self.text

    @property
    def uri(self) -> str:
        return Path(self.file_name).resolve().as_uri()

    @classmethod
    def from_path(
        cls, path: Path, language_id: Optional[str] = None
    ) -> "TextDocument":
        path = Path(path)
        return cls(
            file_name=str(path),
            language_id=language_id or guess_language_id(path.name),
            text=path.read_text(encoding="utf-8"),
        )


@dataclass
class TextEditor:
    document: TextDocument
