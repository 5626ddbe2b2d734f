"""Central-European letter names, as used in German and Czech songbooks.

The only difference from English naming is around B:

    English   Central-European
    -------   ----------------
    B         H
    Bb / A#   B  (A# when spelled with sharps)

A bare ``B`` is a flattened H, so chords rooted on it keep flat spelling when
transposed.
"""

from .base import Notation, lex_letter

_LETTERS = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "H": 11, "B": 10}

_SHARP_NAMES = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "H")
_FLAT_NAMES = ("C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "B", "H")


class GermanNotation(Notation):
    name = "german"
    aliases = ("german", "czech")

    def lex_root(self, chord: str) -> tuple[int, bool, int] | None:
        lexed = lex_letter(chord, _LETTERS)
        if lexed is not None and chord[0] == "B" and lexed[2] == 1:
            return lexed[0], True, 1
        return lexed

    def render_root(self, pitch: int, flat: bool) -> str:
        names = _FLAT_NAMES if flat else _SHARP_NAMES
        return names[pitch % 12]
