"""Tests for Genius search matching and lyrics extraction (no network)."""

import asyncio

import httpx
import pytest
from lyricle import genius
from lyricle.errors import GeniusApiError, LyricsExtractionError, NoLyricsFoundError

PAGE = """
<html><body>
<div data-lyrics-container="true">[Verse 1]<br/>Hopped off the plane at LAX<br/>
With a dream and my cardigan</div>
<div class="ad">Buy now</div>
<div data-lyrics-container="true">[Chorus]<br/>So I put my hands up (2x)<br/>
They're playin' my song {annotation}</div>
</body></html>
"""


def _hit(title, artist, url="https://genius.com/x"):
    return {"result": {"title": title, "url": url, "primary_artist": {"name": artist}}}


# ── query & matching ──────────────────────────────────────────────────────

class TestBuildSearchQuery:
    def test_strips_version_suffix(self):
        assert genius.build_search_query("Bohemian Rhapsody - Remastered 2011", "Queen") == (
            '"bohemian rhapsody" queen'
        )

    def test_strips_feature_and_quotes(self):
        assert genius.build_search_query("Don't Stop (feat. X)", "Band") == '"dont stop" band'


class TestFindBestMatch:
    def test_exact_match_preferred(self):
        hits = [_hit("Party in the USA (Remix)", "Miley Cyrus"), _hit("Party in the U.S.A.", "Miley Cyrus")]
        assert genius.find_best_match("Party in the U.S.A.", "Miley Cyrus", hits) is hits[1]

    def test_containment_match(self):
        hits = [_hit("Party in the USA (Live)", "Miley Cyrus")]
        assert genius.find_best_match("Party in the USA", "Miley Cyrus", hits) is hits[0]

    def test_artist_must_match(self):
        hits = [_hit("Party in the U.S.A.", "Cover Band")]
        assert genius.find_best_match("Party in the U.S.A.", "Miley Cyrus", hits) is None


# ── extraction ────────────────────────────────────────────────────────────

class TestExtractLyrics:
    def test_joins_containers_and_cleans(self):
        lyrics = genius.extract_lyrics(PAGE)
        assert lyrics.startswith("Hopped off the plane at LAX\nWith a dream")
        assert "[Verse 1]" not in lyrics
        assert "(2x)" not in lyrics
        assert "{annotation}" not in lyrics
        assert "Buy now" not in lyrics

    def test_page_without_lyrics(self):
        with pytest.raises(LyricsExtractionError):
            genius.extract_lyrics("<html><body><p>Nothing</p></body></html>")

    def test_legacy_container(self):
        html = '<div class="lyrics"><p>Old school<br>lyrics</p></div>'
        assert genius.extract_lyrics(html) == "Old school\nlyrics"


# ── network calls through a mock transport ────────────────────────────────

def _client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestSearch:
    def test_returns_metadata(self):
        def handler(request):
            assert request.url.path.endswith("/search")
            return httpx.Response(
                200,
                json={"response": {"hits": [_hit("Party in the U.S.A.", "Miley Cyrus", "https://genius.com/p")]}},
            )

        async def run():
            async with _client(handler) as client:
                return await genius.search("Party in the U.S.A.", "Miley Cyrus", client=client)

        meta = asyncio.run(run())
        assert meta.url == "https://genius.com/p"
        assert meta.source == "genius"

    def test_no_hits(self):
        def handler(request):
            return httpx.Response(200, json={"response": {"hits": []}})

        async def run():
            async with _client(handler) as client:
                return await genius.search("Nothing", "Nobody", client=client)

        with pytest.raises(NoLyricsFoundError):
            asyncio.run(run())

    def test_error_status_becomes_api_error(self):
        def handler(request):
            return httpx.Response(503, text="unavailable")

        async def run():
            async with _client(handler) as client:
                return await genius.search("Party in the U.S.A.", "Miley Cyrus", client=client)

        with pytest.raises(GeniusApiError) as exc_info:
            asyncio.run(run())
        assert exc_info.value.status == 502
        assert exc_info.value.to_dict()["error"] == "GENIUS_API_ERROR"

    def test_connection_failure_becomes_api_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async def run():
            async with _client(handler) as client:
                return await genius.search("Party in the U.S.A.", "Miley Cyrus", client=client)

        with pytest.raises(GeniusApiError):
            asyncio.run(run())


class TestFetchLyrics:
    def test_fetches_and_extracts(self):
        def handler(request):
            return httpx.Response(200, text=PAGE)

        async def run():
            async with _client(handler) as client:
                return await genius.fetch_lyrics("https://genius.com/p", client=client)

        assert "cardigan" in asyncio.run(run())

    def test_http_error_becomes_extraction_error(self):
        def handler(request):
            return httpx.Response(404)

        async def run():
            async with _client(handler) as client:
                return await genius.fetch_lyrics("https://genius.com/p", client=client)

        with pytest.raises(LyricsExtractionError):
            asyncio.run(run())
