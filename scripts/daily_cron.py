#!/usr/bin/env python3
"""Daily cron script: schedules the song of the day.

Usage:
    python scripts/daily_cron.py            # schedule today
    python scripts/daily_cron.py --force    # replace an already scheduled song

Run this daily (e.g. via crontab or a scheduler):
    0 2 * * * /path/to/venv/bin/python /path/to/scripts/daily_cron.py

Songs and games are written to the JSON store at $LYRICLE_DATA_PATH
(default: data/lyricle.json).
"""

import argparse
import asyncio
from datetime import date

from lyricle import config, genius
from lyricle.errors import GameNotFoundError
from lyricle.main import build_services
from lyricle.store import JsonFileRepository

# ---------------------------------------------------------------------------
# Hardcoded song list, edit this to your taste.
# Songs are selected deterministically: index = date.toordinal() % len(SONGS)
# ---------------------------------------------------------------------------
SONGS: list[tuple[str, str]] = [
    # --- (title, artist) pairs ---
    ("Party in the U.S.A.", "Miley Cyrus"),
    ("Never Gonna Give You Up", "Rick Astley"),
    # ("Bohemian Rhapsody", "Queen"),
    # ("Dancing Queen", "ABBA"),
    # ("La Vie en rose", "Édith Piaf"),
]


def _pick_song(target_date: date) -> tuple[str, str]:
    """Deterministically pick a song for the given date."""
    if not SONGS:
        raise ValueError("SONGS list is empty, add some (title, artist) pairs first.")
    idx = target_date.toordinal() % len(SONGS)
    return SONGS[idx]


async def schedule(target_date: date, force: bool = False) -> None:
    services = build_services(JsonFileRepository(config.DATA_PATH))
    day = target_date.isoformat()

    try:
        existing = services.games.get_by_date(day)
    except GameNotFoundError:
        existing = None
    if existing is not None and not force:
        print(f"[cron] A song is already scheduled for {day}. Use --force to replace it.")
        return

    title, artist = _pick_song(target_date)
    print(f"[cron] Fetching lyrics for '{title}' by {artist} …")

    source = await genius.search(title, artist)
    lyrics = await genius.fetch_lyrics(source.url)

    song = services.songs.create(title, artist, lyrics, genius=source)
    services.games.create_or_update(day, song.id)
    print(f"[cron] Scheduled {song.id} for {day} → {config.DATA_PATH}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Schedule the song of the day.")
    parser.add_argument(
        "--date",
        help="Target date in YYYY-MM-DD format (default: today)",
        default=None,
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Replace the song even if the date already has one.",
    )
    args = parser.parse_args()

    if args.date:
        target = date.fromisoformat(args.date)
    else:
        target = date.today()

    asyncio.run(schedule(target, force=args.force))


if __name__ == "__main__":
    main()
