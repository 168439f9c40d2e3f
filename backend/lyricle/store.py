"""Document store for songs, games and guesses.

``SongRepository`` keeps everything in memory behind a re-entrant lock.
``JsonFileRepository`` adds persistence to a single JSON file, rewritten after
every committed transaction.
"""

from __future__ import annotations

import json
import logging
import os
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

from .models import Game, Guess, Song
from .tokenizer import normalize_word

logger = logging.getLogger(__name__)


class UniqueViolationError(Exception):
    """A write would break a uniqueness constraint."""

    def __init__(self, constraint: str):
        super().__init__(f"Unique constraint violated: {constraint}")
        self.constraint = constraint


def _new_id() -> str:
    return uuid.uuid4().hex


class SongRepository:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._depth = 0
        self._songs: dict[str, Song] = {}
        self._games: dict[str, Game] = {}  # keyed by date
        self._guesses: list[Guess] = []
        self._guess_keys: set[tuple[str, str, str]] = set()

    # -- transactions -------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator[SongRepository]:
        """Run a read-check-write sequence atomically.

        Nested calls join the outer transaction. On error every change made
        inside the outermost block is rolled back, including when the commit
        itself fails.
        """
        # Snapshot and commit both cover the whole store: sized for a single
        # small deployment (a few thousand guesses a day), not a shared database.
        with self._lock:
            outermost = self._depth == 0
            snapshot = self._snapshot() if outermost else None
            self._depth += 1
            try:
                yield self
                if outermost:
                    self._commit()
            except BaseException:
                if outermost:
                    self._restore(snapshot)
                raise
            finally:
                self._depth -= 1

    def _snapshot(self) -> tuple:
        return (
            dict(self._songs),
            dict(self._games),
            list(self._guesses),
            set(self._guess_keys),
        )

    def _restore(self, snapshot: tuple) -> None:
        self._songs, self._games, self._guesses, self._guess_keys = snapshot

    def _commit(self) -> None:
        """Hook for subclasses that persist committed state."""

    # -- songs --------------------------------------------------------------

    def get_song(self, song_id: str) -> Song | None:
        with self._lock:
            return self._songs.get(song_id)

    def add_song(self, song: Song) -> Song:
        with self.transaction():
            if not song.id:
                song = song.model_copy(update={"id": _new_id()})
            if song.id in self._songs:
                raise UniqueViolationError("song.id")
            self._songs[song.id] = song
        return song

    # -- games --------------------------------------------------------------

    def get_game(self, game_id: str) -> Game | None:
        with self._lock:
            return next((g for g in self._games.values() if g.id == game_id), None)

    def get_game_by_date(self, date: str) -> Game | None:
        with self._lock:
            return self._games.get(date)

    def list_games_between(self, start: str, end: str) -> list[Game]:
        """Games with ``start <= date <= end`` ordered by date."""
        with self._lock:
            games = [g for d, g in self._games.items() if start <= d <= end]
        return sorted(games, key=lambda g: g.date)

    def upsert_game(self, date: str, song_id: str) -> Game:
        with self.transaction():
            existing = self._games.get(date)
            if existing is not None:
                game = existing.model_copy(update={"song_id": song_id})
            else:
                game = Game(id=_new_id(), date=date, song_id=song_id)
            self._games[date] = game
        return game

    def delete_game(self, date: str) -> bool:
        with self.transaction():
            return self._games.pop(date, None) is not None

    # -- guesses ------------------------------------------------------------

    def list_guesses(self, game_id: str, player_id: str | None = None) -> list[Guess]:
        """Guesses of a game, optionally for one player, oldest first."""
        with self._lock:
            guesses = [
                g
                for g in self._guesses
                if g.game_id == game_id and (player_id is None or g.player_id == player_id)
            ]
        # sort is stable so equal timestamps keep insertion order
        return sorted(guesses, key=lambda g: g.created_at)

    def add_guess(self, game_id: str, player_id: str, word: str, valid: bool) -> Guess:
        key = (game_id, player_id, normalize_word(word))
        with self.transaction():
            if key in self._guess_keys:
                raise UniqueViolationError("guess.game_id_player_id_word")
            guess = Guess(
                id=_new_id(),
                game_id=game_id,
                player_id=player_id,
                word=word,
                valid=valid,
                created_at=datetime.now(timezone.utc),
            )
            self._guesses.append(guess)
            self._guess_keys.add(key)
        return guess


class JsonFileRepository(SongRepository):
    def __init__(self, path: str | Path) -> None:
        super().__init__()
        self.path = Path(path)
        if self.path.exists():
            self._load()

    def _load(self) -> None:
        data = json.loads(self.path.read_text(encoding="utf-8"))
        for raw in data.get("songs", []):
            song = Song.model_validate(raw)
            self._songs[song.id] = song
        for raw in data.get("games", []):
            game = Game.model_validate(raw)
            self._games[game.date] = game
        for raw in data.get("guesses", []):
            guess = Guess.model_validate(raw)
            self._guesses.append(guess)
            self._guess_keys.add((guess.game_id, guess.player_id, normalize_word(guess.word)))
        logger.info(
            "[store] Loaded %d songs, %d games, %d guesses from %s",
            len(self._songs),
            len(self._games),
            len(self._guesses),
            self.path,
        )

    def _commit(self) -> None:
        data = {
            "songs": [s.model_dump(mode="json") for s in self._songs.values()],
            "games": [g.model_dump(mode="json") for g in self._games.values()],
            "guesses": [g.model_dump(mode="json") for g in self._guesses],
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Write beside the target then swap, so a crash never leaves a truncated store
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        tmp_path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp_path, self.path)
