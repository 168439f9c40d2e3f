"""Guess submission workflow.

A submission for a given (game, player, word) is either rejected outright
(malformed input, unknown date, duplicate) or recorded exactly once with a
validity flag. A wrong word is a normal, recorded outcome.
"""

import logging

from .errors import DuplicateGuessError, GameNotFoundForGuessError
from .game_state import GameStateService
from .models import GameState, Guess, Song
from .store import SongRepository, UniqueViolationError
from .tokenizer import guessable_words, normalize_word
from .validation import validate_date, validate_game_id, validate_player_id, validate_word

logger = logging.getLogger(__name__)


def is_valid_guess(word: str, song: Song) -> bool:
    """True if the normalized *word* is a guessable unit of the song."""
    target = normalize_word(word)
    return any(
        target in guessable_words(text) for text in (song.title, song.artist, song.lyrics)
    )


class GuessService:
    def __init__(self, repository: SongRepository, game_state: GameStateService) -> None:
        self.repository = repository
        self.game_state = game_state

    def submit_guess(self, date: str, player_id: str, raw_word: str) -> GameState:
        date = validate_date(date)
        player_id = validate_player_id(player_id)
        validate_word(raw_word)

        game = self.repository.get_game_by_date(date)
        song = self.repository.get_song(game.song_id) if game else None
        if game is None or song is None:
            raise GameNotFoundForGuessError(date)

        word = normalize_word(raw_word)
        existing = self.repository.list_guesses(game.id, player_id)
        if any(g.word == word for g in existing):
            logger.warning("[guess] Duplicate %r from player %s on %s", word, player_id, date)
            raise DuplicateGuessError()

        valid = is_valid_guess(word, song)
        try:
            self.repository.add_guess(game.id, player_id, word, valid)
        except UniqueViolationError:
            # lost a race with a concurrent submission of the same word
            logger.warning("[guess] Concurrent duplicate %r from player %s", word, player_id)
            raise DuplicateGuessError() from None

        logger.info(
            "[guess] %s guessed %r on %s (%s)",
            player_id,
            word,
            date,
            "valid" if valid else "invalid",
        )
        return self.game_state.get_game_state(date, player_id)

    def get_player_guesses(self, game_id: str, player_id: str) -> list[Guess]:
        game_id = validate_game_id(game_id)
        player_id = validate_player_id(player_id)
        if self.repository.get_game(game_id) is None:
            raise GameNotFoundForGuessError("unknown")
        return self.repository.list_guesses(game_id, player_id)
