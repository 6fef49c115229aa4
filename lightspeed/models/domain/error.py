from datetime import datetime
from typing import Any, Optional


class LightspeedError:
    def __init__(
        self, code: str, message: Optional[str] = None, detail: Any = None
    ):
        self.code: str = code
        self.message: Optional[str] = message
        self.detail: Any = detail
        self.timestamp: str = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

    def to_dict(self):
        return {
            "code": self.code,
            "message": self.message,
            "detail": self.detail,
            "timestamp": self.timestamp,
        }

    def __repr__(self):
        return f"LightspeedError(code={self.code!r}, message={self.message!r})"


class LightspeedApiError(Exception):
    """Raised when an authenticated GET against the service fails."""


class LightspeedAccessDenied(LightspeedApiError):
    """Raised when the service rejects the credentials (HTTP 401)."""
