"""Cross-player aggregates for one game."""

from .errors import GameNotFoundError
from .models import GameStats
from .store import SongRepository
from .validation import validate_date, validate_game_id


class StatsService:
    def __init__(self, repository: SongRepository) -> None:
        self.repository = repository

    def get_game_stats(self, game_id: str) -> GameStats:
        """Aggregate every guess of the game, across all players.

        ``wins`` counts players with at least one valid guess. This is looser
        than the per-player win condition used for game state.
        """
        game_id = validate_game_id(game_id)
        guesses = self.repository.list_guesses(game_id)

        total_guesses = len(guesses)
        correct_guesses = sum(1 for g in guesses if g.valid)
        total_players = len({g.player_id for g in guesses})
        wins = len({g.player_id for g in guesses if g.valid})
        average = total_guesses / total_players if total_players > 0 else 0.0

        return GameStats(
            game_id=game_id,
            total_guesses=total_guesses,
            correct_guesses=correct_guesses,
            average_attempts=average,
            wins=wins,
            total_players=total_players,
            average_guesses=average,
            total_valid_guesses=correct_guesses,
            # placeholders until per-winner completion and difficulty are defined
            average_lyrics_completion_for_winners=1.0 if wins > 0 else 0.0,
            difficulty_score=0,
        )

    def get_game_stats_by_date(self, date: str) -> GameStats:
        date = validate_date(date)
        game = self.repository.get_game_by_date(date)
        if game is None:
            raise GameNotFoundError(date)
        return self.get_game_stats(game.id)
