"""Song segmentation, block classification and the parser driver.

Top-level Markdown blocks are classified as follows:

+-----------------------------+---------------------------------------------+
| Block                       | Effect                                      |
+=============================+=============================================+
| ``# Title``                 | starts a new song                           |
+-----------------------------+---------------------------------------------+
| ``## Subtitle``             | subtitle, if no content came before it;     |
|                             | ignored otherwise                           |
+-----------------------------+---------------------------------------------+
| ``### Label`` (and deeper)  | starts a custom-labelled verse              |
+-----------------------------+---------------------------------------------+
| ``1.`` list item            | starts the next numbered verse (the typed   |
|                             | number is ignored)                          |
+-----------------------------+---------------------------------------------+
| ``>`` block-quote           | chorus; the nesting depth is its level and  |
|                             | a change of depth starts a new chorus       |
+-----------------------------+---------------------------------------------+
| anything else               | another paragraph of the open block, or an  |
|                             | unlabelled verse if none is open            |
+-----------------------------+---------------------------------------------+

Usage::

    from chordbook.parser import parse
    songs = parse(Path("songs.md").read_text(), "songs.md")
"""

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path

from .config import ParserConfig
from .exceptions import EmptyInput, NotationNotFound, ParseError, UnknownNotation
from .inlines import InlineRewriter, SongState
from .markdown import (
    MdBlock,
    MdHeading,
    MdList,
    MdListItem,
    MdLiteral,
    MdParagraph,
    MdQuote,
    parse_markdown,
    plain_text,
)
from .models import (
    ChorusLabel,
    CustomLabel,
    NoLabel,
    Paragraph,
    Song,
    Verse,
    VerseLabel,
    VerseNumber,
)
from .notations.base import Notation
from .registry import get_notation

logger = logging.getLogger(__name__)


@dataclass
class _SongSource:
    """The Markdown blocks belonging to one song."""

    title: str
    line: int
    blocks: list[MdBlock] = field(default_factory=list)


class Parser:
    """Parse songbook Markdown into a list of :class:`~chordbook.models.Song`.

    Raises ParseError (with file and line) on the first error.
    """

    def __init__(self, text: str, file: str = "<input>", config: ParserConfig | None = None):
        self.text = text
        self.file = file
        self.config = config or ParserConfig()
        self.notation = self._initial_notation()

    def set_xp_disabled(self, disabled: bool) -> None:
        self.config = replace(self.config, xp_disabled=disabled)

    def parse(self) -> list[Song]:
        if not self.text.strip():
            raise ParseError(self.file, 0, EmptyInput())

        songs = []
        for source in self._split_songs(parse_markdown(self.text)):
            song = _SongBuilder(source, self.notation, self.config, self.file).build()
            logger.debug(
                "%s:%d: song %r with %d blocks", self.file, source.line, song.title, len(song.blocks)
            )
            songs.append(song)
        return songs

    def _initial_notation(self) -> Notation:
        try:
            return get_notation(self.config.initial_notation)
        except NotationNotFound as exc:
            raise ParseError(self.file, 0, UnknownNotation(self.config.initial_notation)) from exc

    def _split_songs(self, blocks: tuple[MdBlock, ...]) -> list[_SongSource]:
        """Group top-level blocks by `#` headings.

        Blocks before the first heading form a song with the fallback title,
        which is only created if there are any.
        """
        sources: list[_SongSource] = []
        for block in blocks:
            if isinstance(block, MdHeading) and block.level == 1:
                title = plain_text(block.inlines) or self.config.fallback_title
                sources.append(_SongSource(title, block.line))
                continue
            if not sources:
                sources.append(_SongSource(self.config.fallback_title, 1))
            sources[-1].blocks.append(block)
        return sources


def parse(text: str, file: str = "<input>", config: ParserConfig | None = None) -> list[Song]:
    """Parse songbook *text*; *file* is only used in error messages."""
    return Parser(text, file, config).parse()


def parse_file(path: str | Path, config: ParserConfig | None = None) -> list[Song]:
    """Read a UTF-8 songbook file and parse it."""
    path = Path(path)
    return parse(path.read_text(encoding="utf-8"), str(path), config)


# ---------------------------------------------------------------------------
# Song builder
# ---------------------------------------------------------------------------


class _Numbered:
    """Placeholder label for a numbered verse; the number is assigned on flush."""


_NUMBERED = _Numbered()


class _SongBuilder:
    def __init__(self, source: _SongSource, notation: Notation, config: ParserConfig, file: str):
        self.source = source
        self.initial_notation = notation
        self.config = config
        self.file = file

        self.state = SongState(
            notation=notation,
            chorus_numbering=_max_quote_depth(source.blocks) > 1,
        )
        self.rewriter = InlineRewriter(self.state, config, file)

        self.subtitles: list[str] = []
        self.verses: list[Verse] = []
        self.has_content = False
        self.next_verse = 1

        self.label: VerseLabel | _Numbered | None = None  # None: no block open
        self.chorus_depth: int | None = None
        self.paragraphs: list[Paragraph] = []

    def build(self) -> Song:
        for block in self.source.blocks:
            self._block(block)
        self._flush()
        return Song(
            title=self.source.title,
            subtitles=tuple(self.subtitles),
            notation=self.initial_notation.name,
            blocks=tuple(self.verses),
        )

    # -----------------------------------------------------------------------
    # Classification
    # -----------------------------------------------------------------------

    def _block(self, block: MdBlock) -> None:
        if isinstance(block, MdHeading):
            text = plain_text(block.inlines)
            if block.level == 2:
                if not self.has_content:
                    self.subtitles.append(text)
                return
            self.has_content = True
            self._open(CustomLabel(text))
            return

        if isinstance(block, MdQuote):
            self._quote(block, 1)
        elif isinstance(block, MdList):
            for item in block.items:
                self._list_item(item)
        elif isinstance(block, MdParagraph):
            self._plain(self.rewriter.paragraph(block.inlines))
        elif isinstance(block, MdLiteral):
            self._plain(self.rewriter.literal(block.text))

    def _quote(self, quote: MdQuote, depth: int) -> None:
        for child in quote.children:
            if isinstance(child, MdQuote):
                self._quote(child, depth + 1)
                continue
            if self.chorus_depth != depth:
                level = depth if self.state.chorus_numbering else None
                self._open(ChorusLabel(level))
                self.chorus_depth = depth
            self._add_all(child)

    def _list_item(self, item: MdListItem) -> None:
        if item.number is not None and item.number > 0:
            self._open(_NUMBERED)
            for child in item.children:
                self._add_all(child)
        else:
            for child in item.children:
                self._plain_all(child)

    def _add_all(self, block: MdBlock) -> None:
        """Append every paragraph inside *block* to the open block."""
        for paragraph in self._paragraphs(block):
            self._add(paragraph)

    def _plain_all(self, block: MdBlock) -> None:
        for paragraph in self._paragraphs(block):
            self._plain(paragraph)

    def _paragraphs(self, block: MdBlock) -> list[Paragraph | None]:
        """Rewrite all paragraphs nested in *block*, in source order."""
        if isinstance(block, (MdParagraph, MdHeading)):
            return [self.rewriter.paragraph(block.inlines)]
        if isinstance(block, MdLiteral):
            return [self.rewriter.literal(block.text)]
        if isinstance(block, MdQuote):
            return [p for child in block.children for p in self._paragraphs(child)]
        return [p for item in block.items for child in item.children for p in self._paragraphs(child)]

    # -----------------------------------------------------------------------
    # Open block bookkeeping
    # -----------------------------------------------------------------------

    def _plain(self, paragraph: Paragraph | None) -> None:
        if self.label is None:
            self._open(NoLabel())
        self._add(paragraph)

    def _open(self, label: VerseLabel | _Numbered) -> None:
        self._flush()
        self.label = label
        self.chorus_depth = None

    def _add(self, paragraph: Paragraph | None) -> None:
        if paragraph is not None:
            self.paragraphs.append(paragraph)
            self.has_content = True

    def _flush(self) -> None:
        label = self.label
        paragraphs = self.paragraphs
        self.label = None
        self.paragraphs = []
        if label is None or not paragraphs:
            return
        if label is _NUMBERED:
            label = VerseNumber(self.next_verse)
            self.next_verse += 1
        self.verses.append(Verse(label=label, paragraphs=tuple(paragraphs)))


def _max_quote_depth(blocks: list[MdBlock] | tuple[MdBlock, ...], depth: int = 0) -> int:
    """Deepest top-level block-quote nesting among *blocks*."""
    deepest = depth
    for block in blocks:
        if isinstance(block, MdQuote):
            deepest = max(deepest, _max_quote_depth(block.children, depth + 1))
    return deepest
