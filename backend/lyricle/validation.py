"""Input checks for dates, months, ids and guessed words."""

import re
from datetime import date as _date

from .errors import ValidationError

_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_MONTH_RE = re.compile(r"[0-9]{4}-(0[1-9]|1[0-2])")

DATE_MESSAGE = "Invalid date format. Expected YYYY-MM-DD"
MONTH_MESSAGE = "Invalid month format. Expected YYYY-MM"


def validate_date(value: object) -> str:
    if not isinstance(value, str) or not _DATE_RE.fullmatch(value):
        raise ValidationError("date", DATE_MESSAGE)
    try:
        _date.fromisoformat(value)
    except ValueError:
        raise ValidationError("date", DATE_MESSAGE) from None
    return value


def validate_month(value: object) -> str:
    if not isinstance(value, str) or not _MONTH_RE.fullmatch(value):
        raise ValidationError("month", MONTH_MESSAGE)
    return value


def _require_text(value: object, field: str, message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(field, message)
    return value.strip()


def validate_player_id(value: object) -> str:
    return _require_text(value, "player_id", "Player ID is required")


def validate_game_id(value: object) -> str:
    return _require_text(value, "game_id", "Game ID is required")


def validate_song_id(value: object) -> str:
    return _require_text(value, "song_id", "Song ID is required")


def validate_word(value: object) -> str:
    return _require_text(value, "word", "Word is required")
