from dataclasses import dataclass

# Title given to the song formed by content preceding the first `#` heading.
FALLBACK_TITLE = "Untitled"


@dataclass(frozen=True)
class ParserConfig:
    """Options recognized by :class:`~chordbook.parser.Parser`.

    Attributes:
        xp_disabled:      Leave chords untransposed.  Directives are still
                          parsed and kept in the tree as ``Transpose`` residue,
                          and alternate-notation chords are still computed.
        fallback_title:   Title of the song formed by pre-heading content.
        initial_notation: Primary notation at the start of every song.
        strict:           Raise on malformed directives instead of warning.
    """

    xp_disabled: bool = False
    fallback_title: str = FALLBACK_TITLE
    initial_notation: str = "english"
    strict: bool = False
