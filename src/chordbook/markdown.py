"""Markdown front-end adapter.

Parses song text with ``markdown-it-py`` (CommonMark preset) and converts its
:class:`~markdown_it.tree.SyntaxTreeNode` tree into a small immutable
intermediate tree that the rest of the parser works on.  Only the node kinds
that matter for song sheets survive:

    blocks   MdHeading, MdParagraph, MdQuote, MdList/MdListItem, MdLiteral
    inlines  MdText, MdBreak, MdCode, MdStrong, MdEmph

Links and images degrade to their text, inline HTML to literal text, and
fenced/indented code or HTML blocks to :class:`MdLiteral` text.  Every inline
leaf records the 1-based source line it starts on.  Backslash-escaped characters
become ``literal`` text nodes that are never read as directives.
"""

from dataclasses import dataclass

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

# text_join would fold backslash escapes back into plain text
_md = MarkdownIt("commonmark").disable("text_join")

# ---------------------------------------------------------------------------
# Inline nodes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MdText:
    text: str
    line: int = 0
    literal: bool = False  # backslash-escaped, never a directive


@dataclass(frozen=True)
class MdBreak:
    line: int = 0


@dataclass(frozen=True)
class MdCode:
    content: str
    backticks: int = 1
    line: int = 0


@dataclass(frozen=True)
class MdStrong:
    children: tuple["MdInline", ...] = ()


@dataclass(frozen=True)
class MdEmph:
    children: tuple["MdInline", ...] = ()


MdInline = MdText | MdBreak | MdCode | MdStrong | MdEmph


# ---------------------------------------------------------------------------
# Block nodes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MdHeading:
    level: int
    inlines: tuple[MdInline, ...] = ()
    line: int = 0


@dataclass(frozen=True)
class MdParagraph:
    inlines: tuple[MdInline, ...] = ()
    line: int = 0


@dataclass(frozen=True)
class MdQuote:
    children: tuple["MdBlock", ...] = ()


@dataclass(frozen=True)
class MdListItem:
    number: int | None  # None for bullet items
    children: tuple["MdBlock", ...] = ()


@dataclass(frozen=True)
class MdList:
    ordered: bool
    items: tuple[MdListItem, ...] = ()


@dataclass(frozen=True)
class MdLiteral:
    """Verbatim text of a code or HTML block."""

    text: str
    line: int = 0


MdBlock = MdHeading | MdParagraph | MdQuote | MdList | MdLiteral


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------


def parse_markdown(text: str) -> tuple[MdBlock, ...]:
    """Parse *text* and return its top-level blocks in source order."""
    root = SyntaxTreeNode(_md.parse(text))
    return _convert_blocks(root.children)


def kind_of(node: MdInline | MdBlock) -> str:
    """Return the node kind: ``"text"``, ``"code"``, ``"quote"``, ..."""
    return _KINDS[type(node)]


def split_text(node: MdText, offset: int) -> tuple[MdText, MdText]:
    """Split *node* around the character at *offset*.

    Returns two sibling text nodes; the character at *offset* is covered by
    neither of them.
    """
    if not 0 <= offset < len(node.text):
        raise IndexError(f"offset {offset} out of range for {node.text!r}")
    return (
        MdText(node.text[:offset], node.line, node.literal),
        MdText(node.text[offset + 1:], node.line, node.literal),
    )


def plain_text(inlines: tuple[MdInline, ...]) -> str:
    """Concatenate the text of *inlines*, e.g. for a heading title."""
    parts: list[str] = []
    for node in inlines:
        if isinstance(node, MdText):
            parts.append(node.text)
        elif isinstance(node, MdCode):
            parts.append(node.content)
        elif isinstance(node, MdBreak):
            parts.append(" ")
        else:
            parts.append(plain_text(node.children))
    return " ".join("".join(parts).split())


_KINDS = {
    MdText: "text",
    MdBreak: "break",
    MdCode: "code",
    MdStrong: "strong",
    MdEmph: "emph",
    MdHeading: "heading",
    MdParagraph: "paragraph",
    MdQuote: "quote",
    MdList: "list",
    MdListItem: "item",
    MdLiteral: "literal",
}


# ---------------------------------------------------------------------------
# SyntaxTreeNode conversion
# ---------------------------------------------------------------------------


def _start_line(node: SyntaxTreeNode) -> int:
    # node.map is [start, end) 0-indexed
    return node.map[0] + 1 if node.map else 0


def _convert_blocks(nodes: list[SyntaxTreeNode]) -> tuple[MdBlock, ...]:
    blocks: list[MdBlock] = []
    for node in nodes:
        block = _convert_block(node)
        if block is not None:
            blocks.append(block)
    return tuple(blocks)


def _convert_block(node: SyntaxTreeNode) -> MdBlock | None:
    if node.type in ("heading", "paragraph"):
        line = _start_line(node)
        inline = node.children[0] if node.children else None
        inlines = _convert_inlines(inline.children, [line]) if inline is not None else ()
        if node.type == "heading":
            return MdHeading(int(node.tag[1:]), inlines, line)
        return MdParagraph(inlines, line)

    if node.type == "blockquote":
        return MdQuote(_convert_blocks(node.children))

    if node.type in ("ordered_list", "bullet_list"):
        ordered = node.type == "ordered_list"
        items = tuple(
            MdListItem(
                int(item.info) if ordered and item.info else None,
                _convert_blocks(item.children),
            )
            for item in node.children
        )
        return MdList(ordered, items)

    if node.type in ("fence", "code_block", "html_block"):
        return MdLiteral(node.content, _start_line(node))

    # hr and anything the CommonMark preset may add later
    return None


def _convert_inlines(nodes: list[SyntaxTreeNode], line: list[int]) -> tuple[MdInline, ...]:
    """Convert inline nodes; *line* is a one-element counter advanced on breaks."""
    out: list[MdInline] = []
    for node in nodes:
        if node.type in ("softbreak", "hardbreak"):
            out.append(MdBreak(line[0]))
            line[0] += 1
        elif node.type == "code_inline":
            out.append(MdCode(node.content, len(node.markup), line[0]))
        elif node.type == "strong":
            out.append(MdStrong(_convert_inlines(node.children, line)))
        elif node.type == "em":
            out.append(MdEmph(_convert_inlines(node.children, line)))
        elif node.type == "link":
            out.extend(_convert_inlines(node.children, line))
        elif node.type in ("text", "text_special"):
            literal = node.type == "text_special" and node.info == "escape"
            _push_text(out, MdText(node.content, line[0], literal))
        elif node.content:
            # image (alt text), html_inline
            out.append(MdText(node.content, line[0]))
    return tuple(out)


def _push_text(out: list[MdInline], node: MdText) -> None:
    """Append *node*, joining it to a preceding text node of the same kind."""
    if not node.text:
        return
    if out and isinstance(out[-1], MdText) and out[-1].literal == node.literal:
        out[-1] = MdText(out[-1].text + node.text, out[-1].line, node.literal)
        return
    out.append(node)
