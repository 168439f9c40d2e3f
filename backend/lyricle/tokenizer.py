"""Unicode word segmentation shared by masking and guess matching."""

import unicodedata
from dataclasses import dataclass


@dataclass(frozen=True)
class Token:
    value: str
    is_to_guess: bool


def _run_class(ch: str) -> str | None:
    """Return "L" for letters, "N" for digits, "M" for marks, None otherwise."""
    major = unicodedata.category(ch)[0]
    if major in ("L", "N", "M"):
        return major
    return None


def normalize_word(word: str) -> str:
    """Trim and lowercase a word for matching."""
    return word.strip().lower()


def tokenize(text: str) -> list[Token]:
    """Split *text* into letter runs, digit runs and separator spans.

    Letter runs and digit runs are separate guessable tokens ("abc123" gives
    "abc" and "123"). Combining marks stay attached to the run they follow so
    decomposed accents never split a word. Joining every value gives back the
    input unchanged.
    """
    tokens: list[Token] = []
    pos = 0
    run_start = 0
    run_kind: str | None = None

    for i, ch in enumerate(text):
        kind = _run_class(ch)
        if kind == "M":
            # a mark continues the current word, or is a separator on its own
            kind = run_kind
        if kind == run_kind and kind is not None:
            continue
        if run_kind is not None:
            tokens.append(Token(value=text[run_start:i], is_to_guess=True))
            pos = i
        if kind is not None:
            if i > pos:
                tokens.append(Token(value=text[pos:i], is_to_guess=False))
            run_start = i
        run_kind = kind

    if run_kind is not None:
        tokens.append(Token(value=text[run_start:], is_to_guess=True))
    elif pos < len(text):
        tokens.append(Token(value=text[pos:], is_to_guess=False))
    return tokens


def guessable_words(text: str) -> set[str]:
    """Lowercased values of every guessable token in *text*."""
    return {tok.value.lower() for tok in tokenize(text) if tok.is_to_guess}
