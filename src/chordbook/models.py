"""Immutable document tree produced by the parser.

Renderers receive these objects read-only; every sequence is a tuple and
every dataclass is frozen.  The JSON shape of each node is defined in
:mod:`chordbook.serialize`.
"""

from dataclasses import dataclass, field

# ---------------------------------------------------------------------------
# Inlines
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Text:
    """A run of lyrics text, whitespace already collapsed."""

    text: str


@dataclass(frozen=True)
class Break:
    """A line break inside a paragraph."""


@dataclass(frozen=True)
class ChordInline:
    """A chord decorating the lyrics that follow it.

    ``inlines`` holds the lyrics up to the next chord, line break or the end
    of the paragraph.  It never contains another chord or a break.
    """

    chord: str
    alt_chord: str | None = None
    backticks: int = 1
    inlines: tuple["Inline", ...] = ()


@dataclass(frozen=True)
class Strong:
    inlines: tuple["Inline", ...] = ()


@dataclass(frozen=True)
class Emph:
    inlines: tuple["Inline", ...] = ()


@dataclass(frozen=True)
class Transpose:
    """Residue of a transpose or notation directive.

    Exactly one of the three fields is set.
    """

    transpose: int | None = None
    alt_notation: str | None = None
    notation: str | None = None


@dataclass(frozen=True)
class ChorusRef:
    """A reference to a chorus, e.g. ``!>`` or ``!>>``."""

    num: int | None = None
    prefix_space: str = ""


Inline = Text | Break | ChordInline | Strong | Emph | Transpose | ChorusRef

Paragraph = tuple[Inline, ...]


# ---------------------------------------------------------------------------
# Verse labels
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class VerseNumber:
    number: int


@dataclass(frozen=True)
class ChorusLabel:
    level: int | None = None  # None when the song only has one chorus level


@dataclass(frozen=True)
class CustomLabel:
    text: str


@dataclass(frozen=True)
class NoLabel:
    pass


VerseLabel = VerseNumber | ChorusLabel | CustomLabel | NoLabel


# ---------------------------------------------------------------------------
# Blocks and songs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Verse:
    """A labelled run of paragraphs (verse, chorus, custom section...)."""

    label: VerseLabel
    paragraphs: tuple[Paragraph, ...] = ()


Block = Verse


@dataclass(frozen=True)
class Song:
    """One song of the songbook."""

    title: str
    subtitles: tuple[str, ...] = ()
    notation: str = "english"
    blocks: tuple[Block, ...] = field(default_factory=tuple)
