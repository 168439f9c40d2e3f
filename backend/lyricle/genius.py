"""Genius search API lookup + lyrics page scraping."""

import logging
import re
from contextlib import asynccontextmanager

import httpx
from bs4 import BeautifulSoup

from . import config
from .errors import GeniusApiError, LyricsExtractionError, NoLyricsFoundError
from .models import GeniusMetadata

logger = logging.getLogger(__name__)

_HEADERS = {"User-Agent": "Lyricle/1.0 (daily lyrics guessing game)"}

_SECTION_HEADER_RE = re.compile(r"\[.+?\]")
_ANNOTATION_RE = re.compile(r"\{.+?\}")
_REPEAT_RE = re.compile(r"\(\d+x\)")
_PUNCT_RE = re.compile(r"[.,/#!$%^&*;:{}=\-_`~()]")


def _clean_query_part(text: str) -> str:
    text = text.lower()
    # Drop " - Remastered 2011" and "(feat. X)" style suffixes
    text = re.sub(r"\s*-.*$", "", text)
    text = re.sub(r"\s*\(.*\).*$", "", text)
    text = re.sub(r"['‘’′`\"]", "", text)
    text = "".join(c for c in text if c.isalnum() or c.isspace())
    return re.sub(r"\s+", " ", text).strip()


def build_search_query(title: str, artist: str) -> str:
    """Return a search query with the cleaned title quoted for exact matching."""
    return f'"{_clean_query_part(title)}" {_clean_query_part(artist)}'


def _normalize(text: str) -> str:
    text = _PUNCT_RE.sub("", text.lower())
    return re.sub(r"\s+", " ", text).strip()


def find_best_match(title: str, artist: str, hits: list[dict]) -> dict | None:
    """Pick the search hit matching *title* and *artist*.

    Tries an exact match, then title containment, then at least half of the
    title words in common. The artist must always match exactly.
    """
    wanted_title = _normalize(title)
    wanted_artist = _normalize(artist)

    candidates = []
    for hit in hits:
        result = hit.get("result") or {}
        hit_artist = _normalize((result.get("primary_artist") or {}).get("name", ""))
        if hit_artist == wanted_artist:
            candidates.append((_normalize(result.get("title", "")), hit))

    for hit_title, hit in candidates:
        if hit_title == wanted_title:
            return hit
    for hit_title, hit in candidates:
        if hit_title and (wanted_title in hit_title or hit_title in wanted_title):
            return hit
    title_words = wanted_title.split(" ")
    for hit_title, hit in candidates:
        hit_words = hit_title.split(" ")
        common = [w for w in title_words if w in hit_words]
        if len(common) >= min(len(title_words), len(hit_words)) * 0.5:
            return hit
    return None


@asynccontextmanager
async def _client(client: httpx.AsyncClient | None):
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=config.HTTP_TIMEOUT, headers=_HEADERS) as owned:
        yield owned


async def search(
    title: str, artist: str, client: httpx.AsyncClient | None = None
) -> GeniusMetadata:
    """Find the Genius page for a song.

    Raises NoLyricsFoundError when nothing matches, GeniusApiError when the
    API cannot be reached or answers with an error status.
    """
    query = build_search_query(title, artist)
    headers = {}
    if config.GENIUS_ACCESS_TOKEN:
        headers["Authorization"] = f"Bearer {config.GENIUS_ACCESS_TOKEN}"

    try:
        async with _client(client) as http:
            resp = await http.get(
                f"{config.GENIUS_API_URL}/search", params={"q": query}, headers=headers
            )
            resp.raise_for_status()
            data = resp.json()
    except httpx.HTTPError as exc:
        logger.warning("[genius] Search for %r failed: %s", query, exc)
        raise GeniusApiError(str(exc)) from exc

    hits = data.get("response", {}).get("hits", [])
    if not hits:
        raise NoLyricsFoundError(f"No Genius results for {query}")

    best = find_best_match(title, artist, hits)
    if best is None:
        raise NoLyricsFoundError(f"No matching Genius song for {title!r} by {artist!r}")

    result = best["result"]
    logger.info("[genius] Matched %r -> %s", query, result.get("url"))
    return GeniusMetadata(
        url=result["url"],
        title=result["title"],
        artist=result["primary_artist"]["name"],
    )


async def fetch_lyrics(url: str, client: httpx.AsyncClient | None = None) -> str:
    """Download a Genius song page and return its cleaned lyrics."""
    try:
        async with _client(client) as http:
            resp = await http.get(url)
            resp.raise_for_status()
            html = resp.text
    except httpx.HTTPError as exc:
        logger.warning("[genius] Fetching %s failed: %s", url, exc)
        raise LyricsExtractionError(str(exc)) from exc
    return extract_lyrics(html)


def extract_lyrics(html: str) -> str:
    """Parse a Genius song page into plain lyrics text.

    Raises LyricsExtractionError if no lyrics container yields any text.
    """
    soup = BeautifulSoup(html, "lxml")

    containers = soup.select("[data-lyrics-container]")
    if not containers:
        containers = soup.select("div.lyrics")

    parts: list[str] = []
    for container in containers:
        for br in container.find_all("br"):
            br.replace_with("\n")
        parts.append(container.get_text().strip())

    text = "\n\n".join(parts)
    text = _SECTION_HEADER_RE.sub("", text)
    text = _ANNOTATION_RE.sub("", text)
    text = _REPEAT_RE.sub("", text)
    text = re.sub(r"\s*\n\s*", "\n", text).strip()

    if not text:
        raise LyricsExtractionError("no lyrics found in page")
    return text
