from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from lightspeed import __version__


class Settings(BaseSettings):
    """
    Configuration settings for the Lightspeed client.
    """

    # Lightspeed service settings
    LIGHTSPEED_URL: str = "https://c.ai.ansible.redhat.com"
    LIGHTSPEED_MODEL: Optional[str] = None
    LIGHTSPEED_API_TIMEOUT: float = 28.0

    # Credentials used by the settings-backed authentication provider
    LIGHTSPEED_ACCESS_TOKEN: Optional[str] = None
    LIGHTSPEED_RH_USER_HAS_SEAT: bool = False
    LIGHTSPEED_ORG_OPT_OUT_TELEMETRY: bool = False

    # Extension settings
    EXTENSION_VERSION: str = __version__
    EXTENSION_ROOT: str = "."
    LANGUAGE_SERVER_COMMAND: str = "ansible-language-server --stdio"

    # Logging settings
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


settings = Settings()
