"""English letter names: C D E F G A B, accidentals ``#`` and ``b``."""

from .base import Notation, lex_letter

_LETTERS = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}

_SHARP_NAMES = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")
_FLAT_NAMES = ("C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B")


class EnglishNotation(Notation):
    name = "english"
    aliases = ("english",)

    def lex_root(self, chord: str) -> tuple[int, bool, int] | None:
        return lex_letter(chord, _LETTERS)

    def render_root(self, pitch: int, flat: bool) -> str:
        names = _FLAT_NAMES if flat else _SHARP_NAMES
        return names[pitch % 12]
