"""
Settings loaded from environment variables.

    KRISHA_API_URL            Storefront API base URL (wishlist routes)
    KRISHA_STORAGE_BACKEND    memory | file | redis
    KRISHA_STORAGE_PATH       JSON file used by the file backend
    KRISHA_HTTP_TIMEOUT       Wishlist request timeout, seconds
    UPSTASH_REDIS_REST_URL    Redis backend
    UPSTASH_REDIS_REST_TOKEN  Redis backend
"""

import os
from dataclasses import dataclass

DEFAULT_API_URL = "http://localhost:5000"
DEFAULT_STORAGE_PATH = os.path.join("~", ".krisha", "storage.json")
DEFAULT_HTTP_TIMEOUT = 10.0


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for the storefront engine."""

    api_url: str = DEFAULT_API_URL
    storage_backend: str = "file"
    storage_path: str = DEFAULT_STORAGE_PATH
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    redis_url: str = ""
    redis_token: str = ""


def _get_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "")
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


def get_settings() -> Settings:
    """Build Settings from the current environment."""
    return Settings(
        api_url=os.environ.get("KRISHA_API_URL", DEFAULT_API_URL).rstrip("/"),
        storage_backend=os.environ.get("KRISHA_STORAGE_BACKEND", "file").lower(),
        storage_path=os.path.expanduser(os.environ.get("KRISHA_STORAGE_PATH", DEFAULT_STORAGE_PATH)),
        http_timeout=_get_float("KRISHA_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
        redis_url=os.environ.get("UPSTASH_REDIS_REST_URL", ""),
        redis_token=os.environ.get("UPSTASH_REDIS_REST_TOKEN", ""),
    )
