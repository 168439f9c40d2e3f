"""Masking and revealing of a song's tokenized title, artist and lyrics."""

from collections.abc import Iterable

from .models import MaskedLyrics, RevealedText
from .tokenizer import Token, normalize_word, tokenize

MASK_CHAR = "_"


def mask_tokens(
    tokens: list[Token],
    guessed_words: Iterable[str] = (),
    reveal_all: bool = False,
) -> list[Token]:
    """Return *tokens* with unguessed words replaced by same-length blanks.

    *guessed_words* is expected to be normalized already.
    """
    guessed = set(guessed_words)
    result: list[Token] = []
    for tok in tokens:
        if not tok.is_to_guess or reveal_all or normalize_word(tok.value) in guessed:
            result.append(tok)
        else:
            result.append(Token(value=MASK_CHAR * len(tok.value), is_to_guess=True))
    return result


def _join(tokens: list[Token]) -> str:
    return "".join(tok.value for tok in tokens)


class MaskedLyricsService:
    def create(self, title: str, artist: str, lyrics: str) -> MaskedLyrics:
        """Tokenize each field independently."""
        return MaskedLyrics(
            title=tokenize(title),
            artist=tokenize(artist),
            lyrics=tokenize(lyrics),
        )

    def reveal(
        self, masked: MaskedLyrics, guessed_words: Iterable[str] | None = None
    ) -> RevealedText:
        """Render the three fields as strings, revealing only guessed words.

        Blanks keep the length of the hidden word. Passing ``None`` gives the
        original text back.
        """
        if guessed_words is None:
            return RevealedText(
                title=_join(masked.title),
                artist=_join(masked.artist),
                lyrics=_join(masked.lyrics),
            )
        guessed = {normalize_word(w) for w in guessed_words}
        return RevealedText(
            title=_join(mask_tokens(masked.title, guessed)),
            artist=_join(mask_tokens(masked.artist, guessed)),
            lyrics=_join(mask_tokens(masked.lyrics, guessed)),
        )

    def has_word(self, word: str, masked: MaskedLyrics) -> bool:
        """Return True if *word* matches a guessable token in any field."""
        target = normalize_word(word)
        if not target:
            return False
        return any(
            tok.is_to_guess and tok.value.lower() == target
            for section in (masked.title, masked.artist, masked.lyrics)
            for tok in section
        )
