def get_base_uri(settings) -> str:
    """Return the configured service URL without trailing slashes."""
    return settings.LIGHTSPEED_URL.strip().rstrip("/")
