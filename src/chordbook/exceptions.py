from dataclasses import dataclass


# ---------------------------------------------------------------------------
# Error kinds
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Transposition:
    """A chord whose root does not lex under the active notation."""

    chord: str

    def describe(self) -> str:
        return f"Cannot transpose chord `{self.chord}`"


@dataclass(frozen=True)
class UnknownNotation:
    """A notation directive (or the configuration) names an unknown notation."""

    name: str

    def describe(self) -> str:
        return f"Unknown notation `{self.name}`"


@dataclass(frozen=True)
class MalformedDirective:
    """A directive-like prefix that cannot be completed, e.g. ``!+`` with no digits."""

    fragment: str

    def describe(self) -> str:
        return f"Malformed directive `{self.fragment}`"


@dataclass(frozen=True)
class EmptyInput:
    """The input contains nothing but whitespace."""

    def describe(self) -> str:
        return "Input is empty"


ErrorKind = Transposition | UnknownNotation | MalformedDirective | EmptyInput


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ChordbookError(Exception):
    """Base exception for chordbook."""


class ParseError(ChordbookError):
    """Raised when a song file cannot be parsed.

    Carries the file name and 1-based line number of the offending source
    line (0 when the error is not tied to a line).
    """

    def __init__(self, file: str, line: int, kind: ErrorKind):
        self.file = file
        self.line = line
        self.kind = kind
        super().__init__(f"{file}:{line}: {kind.describe()}")


class ChordError(ChordbookError):
    """Raised when a chord root does not lex in the given notation."""

    def __init__(self, chord: str, notation: str):
        self.chord = chord
        self.notation = notation
        super().__init__(f"Chord `{chord}` is not valid in {notation} notation")


class SchemaError(ChordbookError):
    """Raised when a serialized song tree does not match the schema."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid song tree: {reason}")


class NotationNotFound(ChordbookError):
    """Raised when no notation matches the given name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No notation named: {name}")
