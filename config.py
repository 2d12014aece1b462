"""Configuration values shared across the application."""

from __future__ import annotations

import os
import sys
from typing import List


# What: Convert an environment variable to ``int`` safely.
# Inputs: ``name`` - variable name; ``default`` - fallback when missing/invalid.
# Outputs: Parsed integer value.
def _int_env(name: str, default: int = 0) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


# What: Split a comma separated environment variable into a list.
# Inputs: ``name`` - variable name; ``default`` - raw fallback string.
# Outputs: List of stripped, non-empty items.
def _list_env(name: str, default: str) -> List[str]:
    raw = os.getenv(name) or default
    return [item.strip() for item in raw.split(",") if item.strip()]


PORT = _int_env("PORT", 3000)
HOST = os.getenv("HOST", "0.0.0.0")

YTDLP_PATH = os.getenv("YTDLP_PATH") or ("yt-dlp.exe" if sys.platform == "win32" else "yt-dlp")

PUBLIC_DIR = os.getenv("PUBLIC_DIR", "public")
LOG_DIR = os.getenv("LOG_DIR", "")

CHUNK_SIZE = _int_env("CHUNK_SIZE", 64 * 1024)
CORS_ORIGINS = _list_env("CORS_ORIGINS", "*")

EXAMPLE_VIDEO_URL = os.getenv("EXAMPLE_VIDEO_URL", "https://youtu.be/dQw4w9WgXcQ")
BASE_URL = f"http://localhost:{PORT}"
