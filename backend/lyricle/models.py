from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from .tokenizer import Token


class MaskedLyrics(BaseModel):
    title: list[Token]
    artist: list[Token]
    lyrics: list[Token]


class RevealedText(BaseModel):
    title: str
    artist: str
    lyrics: str


# ---------------------------------------------------------------------------
# Ingestion metadata (validated when a song enters the system)
# ---------------------------------------------------------------------------


class TrackArtist(BaseModel):
    name: str = Field(min_length=1)
    id: str | None = None


class AlbumImage(BaseModel):
    url: str
    height: int | None = None
    width: int | None = None


class TrackAlbum(BaseModel):
    name: str
    images: list[AlbumImage] = []


class TrackMetadata(BaseModel):
    source: Literal["spotify"] = "spotify"
    id: str
    name: str = Field(min_length=1)
    artists: list[TrackArtist] = Field(min_length=1)
    album: TrackAlbum | None = None
    preview_url: str | None = None


class GeniusMetadata(BaseModel):
    source: Literal["genius"] = "genius"
    url: str
    title: str
    artist: str


# ---------------------------------------------------------------------------
# Stored documents
# ---------------------------------------------------------------------------


class Song(BaseModel):
    id: str
    title: str
    artist: str
    lyrics: str
    masked_lyrics: MaskedLyrics
    track: TrackMetadata | None = None
    genius: GeniusMetadata | None = None


class Game(BaseModel):
    id: str
    date: str
    song_id: str


class Guess(BaseModel):
    id: str
    game_id: str
    player_id: str
    word: str
    valid: bool
    created_at: datetime


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------


class SongIdentity(BaseModel):
    title: str
    artist: str


class GameState(BaseModel):
    id: str
    date: str
    masked: MaskedLyrics
    guesses: list[Guess]
    song: SongIdentity | None = None  # only set once the player has won


class GameStats(BaseModel):
    game_id: str
    total_guesses: int
    correct_guesses: int
    average_attempts: float
    wins: int
    total_players: int
    average_guesses: float
    total_valid_guesses: int
    average_lyrics_completion_for_winners: float
    difficulty_score: float


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------


class GuessRequest(BaseModel):
    guess: str


class GameUpsertRequest(BaseModel):
    song_id: str


class SongCreateRequest(BaseModel):
    title: str | None = None
    artist: str | None = None
    lyrics: str | None = None  # fetched from Genius when omitted
    track: TrackMetadata | None = None
