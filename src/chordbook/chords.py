"""Chord model and transposer.

A chord string is split into a root and a tail::

    "F#m7/C#"  ->  root F# (pitch 6, sharp)  +  tail "m7"  +  bass C#

The tail is passed through verbatim except for slash-bass roots, which are
transposed and re-spelled exactly like the main root.  Accidental kind is
sticky: a chord spelled with a flat is rendered with flat names, anything
else with sharp names.

The flat preference lives on :class:`Chord`, so ``transposed(k)`` followed by
``transposed(-k)`` gives back the original spelling.  A rendered string does
not carry it: ``"Db"`` up one is ``"D"``, which reads back as a sharp-side
chord.  Roots outside the name tables (``E#``, ``Cb``) come out re-spelled.
"""

from dataclasses import dataclass

from .exceptions import ChordError
from .notations.base import Notation


@dataclass(frozen=True)
class Chord:
    pitch: int  # pitch class, 0 = C
    flat: bool
    suffix: str = ""  # quality etc. up to the first "/"
    basses: tuple["Chord | str", ...] = ()  # one entry per "/"-separated part

    @classmethod
    def parse(cls, text: str, notation: Notation) -> "Chord":
        """Parse *text* in *notation*.

        Raises ChordError if the text does not start with a root.
        """
        head, *slashes = text.split("/")
        lexed = notation.lex_root(head)
        if lexed is None:
            raise ChordError(text, notation.name)
        pitch, flat, length = lexed
        basses: list[Chord | str] = []
        for part in slashes:
            bass = notation.lex_root(part)
            if bass is None:
                basses.append(part)
            else:
                basses.append(cls(bass[0], bass[1], part[bass[2]:]))
        return cls(pitch, flat, head[length:], tuple(basses))

    def transposed(self, offset: int) -> "Chord":
        basses = tuple(b.transposed(offset) if isinstance(b, Chord) else b for b in self.basses)
        return Chord((self.pitch + offset) % 12, self.flat, self.suffix, basses)

    def render(self, notation: Notation) -> str:
        parts = [notation.render_root(self.pitch, self.flat) + self.suffix]
        for bass in self.basses:
            parts.append(bass.render(notation) if isinstance(bass, Chord) else bass)
        return "/".join(parts)


def transpose(text: str, offset: int, notation: Notation, target: Notation | None = None) -> str:
    """Transpose chord *text* by *offset* semitones.

    The chord is read in *notation* and written in *target* (defaults to
    *notation*).  Raises ChordError if the root does not lex.
    """
    return Chord.parse(text, notation).transposed(offset).render(target or notation)
