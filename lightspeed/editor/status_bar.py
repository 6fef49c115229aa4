from dataclasses import dataclass

from lightspeed.editor.interfaces import AuthenticationProvider


@dataclass
class StatusBarItem:
    text: str = ""


class StatusBarProvider:
    """
    Owns the Lightspeed status bar item.
    """

    def __init__(self, auth_provider: AuthenticationProvider):
        self.auth_provider = auth_provider
        self.status_bar = StatusBarItem()

    async def get_lightspeed_status_bar_text(self) -> str:
        if self.auth_provider.user_is_connected:
            return "Lightspeed"
        return "Lightspeed (not logged in)"

    async def refresh(self):
        self.status_bar.text = await self.get_lightspeed_status_bar_text()
