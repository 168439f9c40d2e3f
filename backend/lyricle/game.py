"""Scheduling of songs onto calendar dates."""

import calendar
import logging

from .errors import GameNotFoundError, SongNotFoundError
from .models import Game
from .store import SongRepository
from .validation import validate_date, validate_month, validate_song_id

logger = logging.getLogger(__name__)


def month_bounds(month: str) -> tuple[str, str]:
    """First and last date of a YYYY-MM month."""
    year, month_num = (int(part) for part in month.split("-"))
    last_day = calendar.monthrange(year, month_num)[1]
    return f"{month}-01", f"{month}-{last_day:02d}"


class GameService:
    def __init__(self, repository: SongRepository) -> None:
        self.repository = repository

    def create_or_update(self, date: str, song_id: str) -> Game:
        """Assign *song_id* to *date*, creating the game if needed."""
        date = validate_date(date)
        song_id = validate_song_id(song_id)

        with self.repository.transaction() as tx:
            if tx.get_song(song_id) is None:
                raise SongNotFoundError(song_id)
            game = tx.upsert_game(date, song_id)

        logger.info("[game] %s -> song %s", date, song_id)
        return game

    def get_by_date(self, date: str) -> Game:
        date = validate_date(date)
        game = self.repository.get_game_by_date(date)
        if game is None:
            raise GameNotFoundError(date)
        return game

    def get_by_month(self, month: str) -> list[Game]:
        return self.repository.list_games_between(*month_bounds(validate_month(month)))

    def delete(self, date: str) -> None:
        date = validate_date(date)
        if not self.repository.delete_game(date):
            raise GameNotFoundError(date)
        logger.info("[game] Deleted game for %s", date)
