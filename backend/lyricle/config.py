"""Centralised runtime configuration loaded from environment variables."""

import os

DATA_PATH: str = os.getenv("LYRICLE_DATA_PATH", "data/lyricle.json")

# Share of guessable lyric tokens a player must find to win
WIN_LYRICS_RATIO: float = float(os.getenv("WIN_LYRICS_RATIO", "0.8"))

GENIUS_API_URL: str = os.getenv("GENIUS_API_URL", "https://api.genius.com")
GENIUS_ACCESS_TOKEN: str = os.getenv("GENIUS_ACCESS_TOKEN", "")
HTTP_TIMEOUT: float = float(os.getenv("HTTP_TIMEOUT", "10.0"))

ADMIN_MODE: bool = os.getenv("ADMIN_MODE", "true").lower() in ("1", "true", "yes")

# Bind address for `lyricle` / `python -m lyricle.main`
HOST: str = os.getenv("HOST", "127.0.0.1")
PORT: int = int(os.getenv("PORT", "8000"))
