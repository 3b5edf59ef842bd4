"""
Environment-backed settings.

Values are read on every call so tests can change them with `monkeypatch`.
"""

from __future__ import annotations

import os

DEFAULT_CORS_ORIGINS = (
    "https://carcare.netlify.app",
    "http://localhost:3000",
)
DEFAULT_MEDIA_FOLDER = "auto_pro_care"
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MiB


def env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip() or default


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", "").strip()
    if not raw:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def media_folder() -> str:
    return env_str("CLOUDINARY_FOLDER", DEFAULT_MEDIA_FOLDER)


def media_timeout_s() -> float:
    return env_float("MEDIA_TIMEOUT_S", 60.0)


def max_upload_bytes() -> int:
    value = env_int("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)
    return value if value > 0 else DEFAULT_MAX_UPLOAD_BYTES
