from pydantic import BaseModel, Field
from typing import Dict, List
import os

DEFAULT_PLATFORM_TASKS: Dict[str, str] = {
    "tiktok": "scraper-mind/tiktok-video-downloader",
    "instagram": "scraper-mind/instagram-video-downloader",
    "facebook": "scraper-mind/facebook-video-downloader",
    "snapchat": "scraper-mind/snapchat-video-downloader",
    "pinterest": "scraper-mind/pinterest-video-downloader",
    "youtube": "scraper-mind/youtube-video-downloader",
}


def _env(key: str, default: str | None = None):
    return lambda: os.getenv(key, default)


def _platform_tasks() -> Dict[str, str]:
    return {
        platform: os.getenv(f"APIFY_TASK_{platform.upper()}", task_id)
        for platform, task_id in DEFAULT_PLATFORM_TASKS.items()
    }


class Settings(BaseModel):
    apify_token: str | None = Field(default_factory=_env("APIFY_TOKEN"))
    apify_base_url: str = Field(default_factory=_env("APIFY_BASE_URL", "https://api.apify.com/v2"))
    host: str = Field(default_factory=_env("HOST", "0.0.0.0"))
    port: int = Field(default_factory=lambda: int(os.getenv("PORT", 5000)))
    poll_max_attempts: int = Field(default_factory=lambda: int(os.getenv("POLL_MAX_ATTEMPTS", 30)), ge=1)
    poll_interval_ms: int = Field(default_factory=lambda: int(os.getenv("POLL_INTERVAL_MS", 3000)), ge=0)
    http_timeout_seconds: float = Field(default_factory=lambda: float(os.getenv("HTTP_TIMEOUT_SECONDS", 60)))
    cors_origins: List[str] = Field(
        default_factory=lambda: [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
    )
    log_level: str = Field(default_factory=_env("LOG_LEVEL", "INFO"))
    platform_tasks: Dict[str, str] = Field(default_factory=_platform_tasks)


def get_settings() -> Settings:
    # Rebuilt per call so the token is read at request time.
    return Settings()
