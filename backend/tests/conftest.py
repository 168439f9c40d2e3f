import pytest
from lyricle.main import build_services
from lyricle.store import SongRepository

TITLE = "Party in the U.S.A."
ARTIST = "Miley Cyrus"
LYRICS = (
    "Hopped off the plane at LAX\n"
    "With a dream and my cardigan\n"
    "Welcome to the land of fame excess, whoa"
)
DATE = "2025-01-15"
PLAYER = "player-one"


@pytest.fixture()
def repository():
    return SongRepository()


@pytest.fixture()
def services(repository):
    return build_services(repository)


@pytest.fixture()
def song(services):
    return services.songs.create(TITLE, ARTIST, LYRICS)


@pytest.fixture()
def game(services, song):
    return services.games.create_or_update(DATE, song.id)


@pytest.fixture()
def make_game(services):
    """Schedule an arbitrary song on a date."""

    def _make(date, title, artist, lyrics):
        created = services.songs.create(title, artist, lyrics)
        return services.games.create_or_update(date, created.id)

    return _make
