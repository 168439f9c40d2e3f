"""Song ingestion: raw strings plus typed metadata in, tokenized song out."""

import logging

from .errors import SongNotFoundError, ValidationError
from .masked_lyrics import MaskedLyricsService
from .models import GeniusMetadata, Song, TrackMetadata
from .store import SongRepository
from .validation import validate_song_id

logger = logging.getLogger(__name__)


def _require(value: str | None, field: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(field, f"{field.capitalize()} is required")
    return value


class SongService:
    def __init__(self, repository: SongRepository, masked_lyrics: MaskedLyricsService) -> None:
        self.repository = repository
        self.masked_lyrics = masked_lyrics

    def create(
        self,
        title: str,
        artist: str,
        lyrics: str,
        track: TrackMetadata | None = None,
        genius: GeniusMetadata | None = None,
    ) -> Song:
        title = _require(title, "title")
        artist = _require(artist, "artist")
        lyrics = _require(lyrics, "lyrics")

        song = Song(
            id="",
            title=title,
            artist=artist,
            lyrics=lyrics,
            masked_lyrics=self.masked_lyrics.create(title, artist, lyrics),
            track=track,
            genius=genius,
        )
        song = self.repository.add_song(song)
        logger.info("[song] Stored %r by %r as %s", title, artist, song.id)
        return song

    def create_from_track(
        self, track: TrackMetadata, lyrics: str, genius: GeniusMetadata | None = None
    ) -> Song:
        """Use the track name and its first artist as the song identity."""
        return self.create(track.name, track.artists[0].name, lyrics, track=track, genius=genius)

    def get(self, song_id: str) -> Song:
        song_id = validate_song_id(song_id)
        song = self.repository.get_song(song_id)
        if song is None:
            raise SongNotFoundError(song_id)
        return song
