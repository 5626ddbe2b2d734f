from abc import ABC, abstractmethod


class Notation(ABC):
    """Abstract base class for chord-root naming schemes.

    A notation knows how to read a root at the start of a chord string and
    how to spell a pitch class (0 = C … 11 = B) back into a root name.
    """

    #: Canonical name, as written into ``Song.notation`` and directives.
    name: str = ""
    #: All names accepted in directives and configuration (lowercase).
    aliases: tuple[str, ...] = ()

    @classmethod
    def can_handle(cls, name: str) -> bool:
        """Return True if *name* refers to this notation."""
        return name.lower() in cls.aliases

    @abstractmethod
    def lex_root(self, chord: str) -> tuple[int, bool, int] | None:
        """Read the root at the start of *chord*.

        Returns ``(pitch, flat, length)`` where *pitch* is the pitch class,
        *flat* tells whether the root was spelled as a flat and *length* is
        the number of characters consumed, or None if *chord* does not start
        with a root in this notation.
        """

    @abstractmethod
    def render_root(self, pitch: int, flat: bool) -> str:
        """Spell pitch class *pitch*, preferring flats if *flat* is True."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"


def lex_letter(chord: str, letters: dict[str, int]) -> tuple[int, bool, int] | None:
    """Shared root lexer: a letter from *letters* optionally followed by ``#``/``b``."""
    if not chord or chord[0] not in letters:
        return None
    pitch = letters[chord[0]]
    if len(chord) > 1 and chord[1] == "#":
        return (pitch + 1) % 12, False, 2
    if len(chord) > 1 and chord[1] == "b":
        return (pitch - 1) % 12, True, 2
    return pitch, False, 1
