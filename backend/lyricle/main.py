import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Header, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from . import config, genius
from .errors import AppError, ValidationError
from .game import GameService
from .game_state import GameStateService
from .guess import GuessService
from .masked_lyrics import MaskedLyricsService
from .models import (
    Game,
    GameState,
    GameStats,
    GameUpsertRequest,
    GuessRequest,
    Song,
    SongCreateRequest,
)
from .song import SongService
from .stats import StatsService
from .store import JsonFileRepository, SongRepository

logger = logging.getLogger(__name__)


@dataclass
class Services:
    repository: SongRepository
    masked_lyrics: MaskedLyricsService
    songs: SongService
    games: GameService
    game_state: GameStateService
    guesses: GuessService
    stats: StatsService


def build_services(repository: SongRepository) -> Services:
    """Wire every service around one repository."""
    masked_lyrics = MaskedLyricsService()
    game_state = GameStateService(repository)
    return Services(
        repository=repository,
        masked_lyrics=masked_lyrics,
        songs=SongService(repository, masked_lyrics),
        games=GameService(repository),
        game_state=game_state,
        guesses=GuessService(repository, game_state),
        stats=StatsService(repository),
    )


def get_services(request: Request) -> Services:
    return request.app.state.services


async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    if exc.status >= 500:
        logger.warning("[api] %s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(exc.to_dict(), status_code=exc.status)


# ---------------------------------------------------------------------------
# Player routes
# ---------------------------------------------------------------------------

games_router = APIRouter(prefix="/api/games")


@games_router.get("/stats", response_model=GameStats)
def get_stats(date: str = "", services: Services = Depends(get_services)):
    return services.stats.get_game_stats_by_date(date)


@games_router.get("/month/{month}", response_model=list[GameState], response_model_exclude_none=True)
def get_month(
    month: str,
    x_user_id: str = Header(default=""),
    services: Services = Depends(get_services),
):
    return services.game_state.get_game_states_by_month(month, x_user_id)


@games_router.get("/{date}", response_model=GameState, response_model_exclude_none=True)
def get_game(
    date: str,
    x_user_id: str = Header(default=""),
    services: Services = Depends(get_services),
):
    return services.game_state.get_game_state(date, x_user_id)


@games_router.post("/{date}/guess", response_model=GameState, response_model_exclude_none=True)
def post_guess(
    date: str,
    body: GuessRequest,
    x_user_id: str = Header(default=""),
    services: Services = Depends(get_services),
):
    return services.guesses.submit_guess(date, x_user_id, body.guess)


# ---------------------------------------------------------------------------
# Admin routes
# ---------------------------------------------------------------------------

admin_router = APIRouter(prefix="/api/admin")


@admin_router.post("/songs", response_model=Song, status_code=201)
async def post_song(body: SongCreateRequest, services: Services = Depends(get_services)):
    title = body.title or (body.track.name if body.track else None)
    artist = body.artist or (body.track.artists[0].name if body.track else None)
    if not title:
        raise ValidationError("title", "Title is required")
    if not artist:
        raise ValidationError("artist", "Artist is required")

    lyrics = body.lyrics
    source = None
    if not lyrics:
        source = await genius.search(title, artist)
        lyrics = await genius.fetch_lyrics(source.url)
    # the store takes a thread lock and writes to disk, keep it off the event loop
    return await run_in_threadpool(
        services.songs.create, title, artist, lyrics, track=body.track, genius=source
    )


@admin_router.put("/games/{date}", response_model=Game)
def put_game(date: str, body: GameUpsertRequest, services: Services = Depends(get_services)):
    return services.games.create_or_update(date, body.song_id)


@admin_router.delete("/games/{date}", status_code=204)
def delete_game(date: str, services: Services = Depends(get_services)):
    services.games.delete(date)


def create_app(repository: SongRepository | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        repo = repository if repository is not None else JsonFileRepository(config.DATA_PATH)
        app.state.services = build_services(repo)
        logger.info("[api] Services ready (admin routes %s)", "on" if config.ADMIN_MODE else "off")
        yield

    app = FastAPI(title="Lyricle", lifespan=lifespan)
    app.add_exception_handler(AppError, handle_app_error)
    app.include_router(games_router)
    if config.ADMIN_MODE:
        app.include_router(admin_router)
    return app


def run() -> None:
    """Serve the app with uvicorn on ``config.HOST:config.PORT``."""
    uvicorn.run("lyricle.main:create_app", factory=True, host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    run()
