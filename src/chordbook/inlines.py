"""Inline preprocessor: turns one Markdown paragraph into song inlines.

Pipeline for a paragraph
------------------------

1. Flatten the Markdown inline tree into *leaves* (text, break, chord),
   each tagged with the stack of emphasis spans it sits in.
2. Lex every text leaf for extension directives.  Directives update the
   song state in source order, so a ``!+2`` affects only later chords.
3. Split the leaves into lines at breaks, strip the whitespace at both ends
   of each line and drop lines left empty.
4. Within a line, every chord starts a new segment that runs up to the next
   chord or the end of the line.  Each segment rebuilds its emphasis nesting
   from the leaf stacks, so emphasis straddling a chord or a break ends up as
   two sibling spans with the same wrapping.

Example::

    Sailing **round `G`the _ocean,
    Sailing_ round the `D`sea.**

becomes::

    Text("Sailing ") Strong[Text("round ")]
    Chord("G", [Strong[Text("the "), Emph[Text("ocean,")]]])
    Break
    Strong[Emph[Text("Sailing")], Text(" round the ")]
    Chord("D", [Strong[Text("sea.")]])
"""

import logging
import re
from dataclasses import dataclass, replace

from .chords import Chord
from .config import ParserConfig
from .directives import ChorusRefToken, MalformedToken, NotationToken, Token, TransposeToken, lex
from .exceptions import (
    ChordError,
    MalformedDirective,
    NotationNotFound,
    ParseError,
    Transposition,
    UnknownNotation,
)
from .markdown import MdBreak, MdCode, MdEmph, MdInline, MdStrong, MdText
from .models import Break, ChordInline, ChorusRef, Emph, Inline, Paragraph, Strong, Text, Transpose
from .notations.base import Notation
from .registry import get_notation

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")

# Code spans with more backticks than this are literal text, not chords.
MAX_CHORD_BACKTICKS = 3

# Emphasis stack entry: (Strong or Emph, identity of the source span)
_Stack = tuple[tuple[type, int], ...]
_Leaf = tuple[Inline, _Stack]


@dataclass
class SongState:
    """Parser state that directives mutate while a song is being read."""

    notation: Notation
    alt_notation: Notation | None = None
    offset: int = 0
    chorus_numbering: bool = True


class InlineRewriter:
    """Rewrite Markdown paragraphs of one song into :data:`Paragraph` tuples."""

    def __init__(self, state: SongState, config: ParserConfig, file: str):
        self.state = state
        self.config = config
        self.file = file

    def paragraph(self, inlines: tuple[MdInline, ...]) -> Paragraph | None:
        """Return the rewritten paragraph, or None if nothing is left of it."""
        leaves: list[_Leaf] = []
        self._collect(inlines, (), leaves)

        out: list[Inline] = []
        for line in _split_lines(leaves):
            line = _strip_line(line)
            if not line:
                continue
            if out:
                out.append(Break())
            out.extend(_build_line(line))
        return tuple(out) or None

    def literal(self, text: str) -> Paragraph | None:
        """Return a paragraph of plain text lines, for code and HTML blocks."""
        out: list[Inline] = []
        for line in text.splitlines():
            line = _WHITESPACE_RE.sub(" ", line).strip()
            if not line:
                continue
            if out:
                out.append(Break())
            out.append(Text(line))
        return tuple(out) or None

    # -----------------------------------------------------------------------
    # Flattening
    # -----------------------------------------------------------------------

    def _collect(self, nodes: tuple[MdInline, ...], stack: _Stack, leaves: list[_Leaf]) -> None:
        for node in nodes:
            if isinstance(node, MdText):
                self._collect_text(node, stack, leaves)
            elif isinstance(node, MdBreak):
                leaves.append((Break(), ()))
            elif isinstance(node, MdCode):
                if node.backticks > MAX_CHORD_BACKTICKS:
                    _push_text(leaves, node.content, stack)
                else:
                    leaves.append((self._chord(node), stack))
            elif isinstance(node, MdStrong):
                self._collect(node.children, stack + ((Strong, id(node)),), leaves)
            elif isinstance(node, MdEmph):
                self._collect(node.children, stack + ((Emph, id(node)),), leaves)

    def _collect_text(self, node: MdText, stack: _Stack, leaves: list[_Leaf]) -> None:
        if node.literal:
            _push_text(leaves, node.text, stack)
            return
        for piece in lex(_WHITESPACE_RE.sub(" ", node.text)):
            if isinstance(piece, str):
                _push_text(leaves, piece, stack)
                continue
            inline = self._directive(piece, node.line)
            if isinstance(inline, Text):
                _push_text(leaves, inline.text, stack)
            elif inline is not None:
                leaves.append((inline, stack))

    # -----------------------------------------------------------------------
    # Directives and chords
    # -----------------------------------------------------------------------

    def _directive(self, token: Token, line: int) -> Inline | None:
        """Apply *token* to the song state and return its residue inline, if any."""
        state = self.state
        residue = self.config.xp_disabled

        if isinstance(token, TransposeToken):
            state.offset = token.offset
            return Transpose(transpose=token.offset) if residue else None

        if isinstance(token, NotationToken):
            try:
                notation = get_notation(token.name)
            except NotationNotFound as exc:
                raise ParseError(self.file, line, UnknownNotation(token.name)) from exc
            if token.alternate:
                state.alt_notation = notation
                return Transpose(alt_notation=notation.name) if residue else None
            state.notation = notation
            return Transpose(notation=notation.name) if residue else None

        if isinstance(token, ChorusRefToken):
            num = token.level if state.chorus_numbering else None
            return ChorusRef(num=num, prefix_space=token.prefix_space)

        if isinstance(token, MalformedToken):
            if self.config.strict:
                raise ParseError(self.file, line, MalformedDirective(token.fragment))
            logger.warning(
                "%s:%d: malformed directive %r kept as text", self.file, line, token.fragment
            )
            return Text(token.fragment)

        raise TypeError(f"unexpected token: {token!r}")

    def _chord(self, node: MdCode) -> ChordInline:
        state = self.state
        text = node.content
        transposing = not self.config.xp_disabled and state.offset % 12 != 0
        if not transposing and state.alt_notation is None:
            return ChordInline(chord=text, backticks=node.backticks)

        try:
            chord = Chord.parse(text, state.notation)
        except ChordError as exc:
            raise ParseError(self.file, node.line, Transposition(text)) from exc

        primary = chord.transposed(state.offset).render(state.notation) if transposing else text
        alt = chord.render(state.alt_notation) if state.alt_notation is not None else None
        return ChordInline(chord=primary, alt_chord=alt, backticks=node.backticks)


# ---------------------------------------------------------------------------
# Line and segment helpers
# ---------------------------------------------------------------------------


def _push_text(leaves: list[_Leaf], text: str, stack: _Stack) -> None:
    """Append a text leaf, merging it into a preceding text leaf with the same stack."""
    if not text:
        return
    if leaves:
        prev, prev_stack = leaves[-1]
        if isinstance(prev, Text) and prev_stack == stack:
            leaves[-1] = (Text(prev.text + text), stack)
            return
    leaves.append((Text(text), stack))


def _split_lines(leaves: list[_Leaf]) -> list[list[_Leaf]]:
    lines: list[list[_Leaf]] = [[]]
    for leaf in leaves:
        if isinstance(leaf[0], Break):
            lines.append([])
        else:
            lines[-1].append(leaf)
    return lines


def _strip_line(line: list[_Leaf]) -> list[_Leaf]:
    """Strip leading whitespace of the first and trailing of the last text leaf."""
    line = list(line)
    while line and isinstance(line[0][0], Text):
        text = line[0][0].text.lstrip()
        if text:
            line[0] = (Text(text), line[0][1])
            break
        line.pop(0)
    while line and isinstance(line[-1][0], Text):
        text = line[-1][0].text.rstrip()
        if text:
            line[-1] = (Text(text), line[-1][1])
            break
        line.pop()
    return line


def _build_line(line: list[_Leaf]) -> list[Inline]:
    out: list[Inline] = []
    chord: ChordInline | None = None
    segment: list[_Leaf] = []

    def flush() -> None:
        inlines = _nest(segment, 0)
        if chord is None:
            out.extend(inlines)
        else:
            out.append(replace(chord, inlines=tuple(inlines)))

    for leaf in line:
        if isinstance(leaf[0], ChordInline):
            flush()
            chord = leaf[0]
            segment = []
        else:
            segment.append(leaf)
    flush()
    return out


def _nest(leaves: list[_Leaf], depth: int) -> list[Inline]:
    """Rebuild emphasis nesting for *leaves* below stack depth *depth*."""
    out: list[Inline] = []
    i = 0
    while i < len(leaves):
        inline, stack = leaves[i]
        if len(stack) <= depth:
            out.append(inline)
            i += 1
            continue

        span = stack[depth]
        j = i + 1
        while j < len(leaves) and len(leaves[j][1]) > depth and leaves[j][1][depth] == span:
            j += 1
        wrapper, _ = span
        out.append(wrapper(tuple(_nest(leaves[i:j], depth + 1))))
        i = j
    return out
