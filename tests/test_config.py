from pathlib import Path
import sys

sys.path.append(str(Path(__file__).resolve().parents[1]))

from media_link_api.config import DEFAULT_PLATFORM_TASKS, get_settings


def test_defaults(monkeypatch):
    for key in ("APIFY_TOKEN", "APIFY_BASE_URL", "PORT", "POLL_MAX_ATTEMPTS", "POLL_INTERVAL_MS", "CORS_ORIGINS"):
        monkeypatch.delenv(key, raising=False)

    settings = get_settings()

    assert settings.apify_token is None
    assert settings.apify_base_url == "https://api.apify.com/v2"
    assert settings.port == 5000
    assert settings.poll_max_attempts == 30
    assert settings.poll_interval_ms == 3000
    assert settings.cors_origins == ["*"]
    assert settings.platform_tasks["tiktok"] == DEFAULT_PLATFORM_TASKS["tiktok"]


def test_environment_is_read_on_each_call(monkeypatch):
    monkeypatch.setenv("APIFY_TOKEN", "first")
    assert get_settings().apify_token == "first"

    monkeypatch.setenv("APIFY_TOKEN", "second")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example")
    monkeypatch.setenv("APIFY_TASK_YOUTUBE", "me~yt")

    settings = get_settings()
    assert settings.apify_token == "second"
    assert settings.cors_origins == ["https://a.example", "https://b.example"]
    assert settings.platform_tasks["youtube"] == "me~yt"
