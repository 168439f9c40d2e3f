"""Per-player projection of a daily game: reveal progress and win condition."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from . import config
from .errors import GameNotFoundError
from .game import month_bounds
from .masked_lyrics import mask_tokens
from .models import Game, GameState, Guess, MaskedLyrics, Song, SongIdentity
from .store import SongRepository
from .tokenizer import Token
from .validation import validate_date, validate_month, validate_player_id

logger = logging.getLogger(__name__)


@dataclass
class Progress:
    lyrics_found: int
    lyrics_total: int
    title_artist_found: int
    title_artist_total: int

    def is_won(self, lyrics_ratio: float = config.WIN_LYRICS_RATIO) -> bool:
        """80 % of lyric tokens, or every title and artist token."""
        lyrics_won = (
            self.lyrics_total > 0 and self.lyrics_found / self.lyrics_total >= lyrics_ratio
        )
        title_artist_won = (
            self.title_artist_total > 0
            and self.title_artist_found == self.title_artist_total
        )
        return lyrics_won or title_artist_won


def _count(tokens: list[Token], found_words: set[str]) -> tuple[int, int]:
    guessable = [tok for tok in tokens if tok.is_to_guess]
    found = sum(1 for tok in guessable if tok.value.lower() in found_words)
    return found, len(guessable)


def compute_progress(masked: MaskedLyrics, found_words: set[str]) -> Progress:
    """Count found guessable tokens; repeated words count every occurrence."""
    lyrics_found, lyrics_total = _count(masked.lyrics, found_words)
    title_artist_found, title_artist_total = _count(
        masked.title + masked.artist, found_words
    )
    return Progress(lyrics_found, lyrics_total, title_artist_found, title_artist_total)


def valid_words(guesses: list[Guess]) -> set[str]:
    return {g.word.lower() for g in guesses if g.valid}


class GameStateService:
    def __init__(self, repository: SongRepository) -> None:
        self.repository = repository

    def get_game_state(self, date: str, player_id: str) -> GameState:
        date = validate_date(date)
        player_id = validate_player_id(player_id)

        game = self.repository.get_game_by_date(date)
        song = self.repository.get_song(game.song_id) if game else None
        if game is None or song is None:
            raise GameNotFoundError(date)
        return self._project(game, song, player_id)

    def get_game_states_by_month(self, month: str, player_id: str) -> list[GameState]:
        month = validate_month(month)
        player_id = validate_player_id(player_id)

        games = self.repository.list_games_between(*month_bounds(month))

        states: list[GameState] = []
        for game in games:
            song = self.repository.get_song(game.song_id)
            if song is None:
                logger.warning(
                    "[game-state] Game %s references missing song %s", game.date, game.song_id
                )
                continue
            states.append(self._project(game, song, player_id))
        return states

    def _project(self, game: Game, song: Song, player_id: str) -> GameState:
        guesses = self.repository.list_guesses(game.id, player_id)
        found = valid_words(guesses)
        masked = song.masked_lyrics
        won = compute_progress(masked, found).is_won()

        view = MaskedLyrics(
            title=mask_tokens(masked.title, found, reveal_all=won),
            artist=mask_tokens(masked.artist, found, reveal_all=won),
            lyrics=mask_tokens(masked.lyrics, found, reveal_all=won),
        )
        return GameState(
            id=game.id,
            date=game.date,
            masked=view,
            guesses=guesses,
            song=SongIdentity(title=song.title, artist=song.artist) if won else None,
        )
