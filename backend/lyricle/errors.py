"""Error taxonomy shared by the services and the HTTP layer."""


class AppError(Exception):
    code = "INTERNAL_ERROR"
    status = 500

    def __init__(self, message: str, code: str | None = None, status: int | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status is not None:
            self.status = status

    def to_dict(self) -> dict[str, str]:
        return {"error": self.code, "message": self.message}


class ValidationError(AppError):
    code = "VALIDATION_ERROR"
    status = 400

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict[str, str]:
        return {**super().to_dict(), "field": self.field}


class NotFoundError(AppError):
    code = "NOT_FOUND"
    status = 404


class GameNotFoundError(NotFoundError):
    code = "GAME_NOT_FOUND"

    def __init__(self, date: str):
        super().__init__(f"Game not found for date: {date}")
        self.date = date


class GameNotFoundForGuessError(NotFoundError):
    code = "GAME_NOT_FOUND_FOR_GUESS"

    def __init__(self, date: str):
        super().__init__(f"Game not found for date: {date}")
        self.date = date


class SongNotFoundError(NotFoundError):
    code = "SONG_NOT_FOUND"

    def __init__(self, song_id: str):
        super().__init__(f"Song not found: {song_id}")
        self.song_id = song_id


class NoLyricsFoundError(NotFoundError):
    code = "NO_LYRICS_FOUND"

    def __init__(self, message: str = "No lyrics found"):
        super().__init__(message)


class DuplicateGuessError(AppError):
    code = "DUPLICATE_GUESS"
    status = 400

    def __init__(self):
        super().__init__("Player has already submitted this word as a guess for this game")


class LyricsExtractionError(AppError):
    code = "LYRICS_EXTRACTION_ERROR"
    status = 502

    def __init__(self, reason: str):
        super().__init__(f"Failed to extract lyrics: {reason}")


class GeniusApiError(AppError):
    code = "GENIUS_API_ERROR"
    status = 502

    def __init__(self, reason: str):
        super().__init__(f"Genius API error: {reason}")
