"""Lexer for the ``!``-prefixed extension directives embedded in lyrics.

Recognized tokens (each must be preceded by whitespace or the start of the
text run, and followed by whitespace or its end):

    !+N  !-N        set the transpose offset to +N / -N semitones
    !!name          alternate notation for the following chords
    !!!name         primary notation for the following chords
    !>  !>>  !>>>   reference to the chorus at level 1, 2, 3...

``!!``, ``!!>``, a lone ``!`` and the like stay literal text.  ``!+`` or
``!-`` not followed by digits only is reported as malformed.
"""

import re
from dataclasses import dataclass

# A "!" word: starts at text start or after whitespace, runs to whitespace.
_CANDIDATE_RE = re.compile(r"(?<!\S)!\S*")

_TRANSPOSE_RE = re.compile(r"!([+-]\d+)")
_MALFORMED_TRANSPOSE_RE = re.compile(r"![+-]\S*")
_NOTATION_RE = re.compile(r"(!!!?)([A-Za-z]+)")
_CHORUS_REF_RE = re.compile(r"!(>+)")


@dataclass(frozen=True)
class TransposeToken:
    offset: int


@dataclass(frozen=True)
class NotationToken:
    name: str  # as written, not yet resolved
    alternate: bool  # True for "!!name", False for "!!!name"


@dataclass(frozen=True)
class ChorusRefToken:
    level: int
    prefix_space: str


@dataclass(frozen=True)
class MalformedToken:
    fragment: str


Token = TransposeToken | NotationToken | ChorusRefToken | MalformedToken


def classify(word: str) -> Token | None:
    """Classify a single ``!``-word, ignoring context.

    Returns None for words that are plain text.  Chorus references are
    returned with an empty prefix space.
    """
    m = _TRANSPOSE_RE.fullmatch(word)
    if m:
        return TransposeToken(int(m.group(1)))
    if _MALFORMED_TRANSPOSE_RE.fullmatch(word):
        return MalformedToken(word)
    m = _NOTATION_RE.fullmatch(word)
    if m:
        return NotationToken(m.group(2), alternate=len(m.group(1)) == 2)
    m = _CHORUS_REF_RE.fullmatch(word)
    if m:
        return ChorusRefToken(len(m.group(1)), "")
    return None


def lex(text: str) -> list[str | Token]:
    """Split *text* into literal fragments and directive tokens, in order.

    The single whitespace character preceding a directive is removed from the
    literal before it; for chorus references it is recorded as the token's
    ``prefix_space``.  Malformed tokens are returned as :class:`MalformedToken`
    without touching surrounding whitespace, so callers can restore them as
    literal text.  Empty fragments are dropped.

    Example::

        >>> lex("Mixed !>> in text.")
        ['Mixed', ChorusRefToken(level=2, prefix_space=' '), ' in text.']
    """
    pieces: list[str | Token] = []
    pos = 0
    for m in _CANDIDATE_RE.finditer(text):
        token = classify(m.group())
        if token is None:
            continue

        start = m.start()
        prefix = ""
        if start > 0 and not isinstance(token, MalformedToken):
            prefix = text[start - 1]
            start -= 1
        if start > pos:
            pieces.append(text[pos:start])

        if isinstance(token, ChorusRefToken):
            token = ChorusRefToken(token.level, " " if prefix else "")
        pieces.append(token)
        pos = m.end()

    if pos < len(text):
        pieces.append(text[pos:])
    return pieces
