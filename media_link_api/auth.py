from .config import Settings
from .errors import ConfigError


def require_apify_token(settings: Settings) -> str:
    if not settings.apify_token:
        raise ConfigError("APIFY_TOKEN not set")
    return settings.apify_token
