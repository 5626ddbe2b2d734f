import logging

import pytest

from chordbook.config import ParserConfig
from chordbook.exceptions import MalformedDirective, ParseError, Transposition, UnknownNotation
from chordbook.inlines import InlineRewriter, SongState
from chordbook.markdown import parse_markdown
from chordbook.models import Break, ChordInline, ChorusRef, Emph, Strong, Text, Transpose
from chordbook.registry import get_notation


def _rewriter(**config) -> InlineRewriter:
    state = SongState(notation=get_notation("english"))
    return InlineRewriter(state, ParserConfig(**config), "<test>")


def _para(text: str, rewriter: InlineRewriter | None = None):
    rewriter = rewriter or _rewriter()
    block = parse_markdown(text)[0]
    return rewriter.paragraph(block.inlines)


# ---------------------------------------------------------------------------
# Breaks and whitespace
# ---------------------------------------------------------------------------


def test_plain_paragraph():
    assert _para("Just lyrics.") == (Text("Just lyrics."),)


def test_soft_break_becomes_break():
    assert _para("One\nTwo") == (Text("One"), Break(), Text("Two"))


def test_hard_break_becomes_break():
    assert _para("One  \nTwo") == (Text("One"), Break(), Text("Two"))


def test_whitespace_collapsed():
    assert _para("a    b\tc") == (Text("a b c"),)


# ---------------------------------------------------------------------------
# Chords
# ---------------------------------------------------------------------------


def test_chords_take_following_lyrics():
    assert _para("Sailing round `G`the ocean,\nSailing round the ```D```sea.") == (
        Text("Sailing round "),
        ChordInline("G", None, 1, (Text("the ocean,"),)),
        Break(),
        Text("Sailing round the "),
        ChordInline("D", None, 3, (Text("sea."),)),
    )


def test_chord_at_line_end_has_no_lyrics():
    assert _para("Lyrics `C`") == (Text("Lyrics "), ChordInline("C"))


def test_consecutive_chords():
    assert _para("`C`la`G`di") == (
        ChordInline("C", inlines=(Text("la"),)),
        ChordInline("G", inlines=(Text("di"),)),
    )


def test_long_code_span_is_text():
    assert _para("a ````x```` b") == (Text("a x b"),)


def test_emphasis_split_around_chords():
    assert _para("Sailing **round `G`the _ocean,\nSailing_ round the `D`sea.**") == (
        Text("Sailing "),
        Strong((Text("round "),)),
        ChordInline("G", None, 1, (Strong((Text("the "), Emph((Text("ocean,"),)))),)),
        Break(),
        Strong((Emph((Text("Sailing"),)), Text(" round the "))),
        ChordInline("D", None, 1, (Strong((Text("sea."),)),)),
    )


def test_emphasis_around_chord_only():
    assert _para("la **`C`**") == (Text("la "), ChordInline("C"))


def test_chord_inlines_never_hold_breaks_or_chords():
    para = _para("**a `C`b\nc `D`d `E`e**")
    for inline in para:
        if isinstance(inline, ChordInline):
            assert not any(isinstance(i, (ChordInline, Break)) for i in inline.inlines)


# ---------------------------------------------------------------------------
# Transposition
# ---------------------------------------------------------------------------


def test_transpose_directive_consumed_and_applied():
    assert _para("!+2 `C`la") == (ChordInline("D", inlines=(Text("la"),)),)


def test_transpose_sets_offset():
    rewriter = _rewriter()
    _para("!+5", rewriter)
    assert _para("`Bm`a !+0\n`Bm`b", rewriter) == (
        ChordInline("Em", inlines=(Text("a"),)),
        Break(),
        ChordInline("Bm", inlines=(Text("b"),)),
    )


def test_alt_notation_uses_untransposed_chord():
    rewriter = _rewriter()
    assert _para("!+5\n!!czech", rewriter) is None
    assert _para("`Bm`Yippie `D`oh!", rewriter) == (
        ChordInline("Em", "Hm", 1, (Text("Yippie "),)),
        ChordInline("G", "D", 1, (Text("oh!"),)),
    )


def test_primary_notation_switch():
    rewriter = _rewriter()
    _para("!!!czech !+1", rewriter)
    assert _para("`H`la", rewriter) == (ChordInline("C", inlines=(Text("la"),)),)


def test_xp_disabled_keeps_chords_and_residue():
    rewriter = _rewriter(xp_disabled=True)
    assert _para("!+5\n!!czech", rewriter) == (
        Transpose(transpose=5),
        Break(),
        Transpose(alt_notation="german"),
    )
    assert _para("`Bm`la", rewriter) == (ChordInline("Bm", "Hm", 1, (Text("la"),)),)


def test_xp_disabled_primary_notation_residue():
    rewriter = _rewriter(xp_disabled=True)
    assert _para("Lyrics !!> !!!english !+0", rewriter) == (
        Text("Lyrics !!>"),
        Transpose(notation="english"),
        Transpose(transpose=0),
    )


def test_directive_removal_strips_line_start():
    rewriter = _rewriter()
    assert _para("la\n!+0 Yippie yea", rewriter) == (Text("la"), Break(), Text("Yippie yea"))


def test_bad_chord_raises_with_line():
    rewriter = _rewriter()
    _para("!+5", rewriter)
    with pytest.raises(ParseError) as exc_info:
        _para("\n`C`ok\nthen `X`bad", rewriter)
    assert exc_info.value.line == 3
    assert exc_info.value.kind == Transposition("X")


def test_bad_chord_untransposed_is_kept():
    assert _para("`X`la") == (ChordInline("X", inlines=(Text("la"),)),)


def test_bad_chord_with_alt_notation_raises_even_if_disabled():
    rewriter = _rewriter(xp_disabled=True)
    _para("!!german", rewriter)
    with pytest.raises(ParseError) as exc_info:
        _para("`X`la", rewriter)
    assert exc_info.value.kind == Transposition("X")


def test_unknown_notation_raises():
    with pytest.raises(ParseError) as exc_info:
        _para("!!klingon")
    assert exc_info.value.kind == UnknownNotation("klingon")
    assert exc_info.value.file == "<test>"


# ---------------------------------------------------------------------------
# Chorus references and malformed directives
# ---------------------------------------------------------------------------


def test_chorus_refs():
    assert _para("Reference both: !> !>>\n!> First on the line.\nMixed !>> in text.") == (
        Text("Reference both:"),
        ChorusRef(1, " "),
        ChorusRef(2, " "),
        Break(),
        ChorusRef(1, ""),
        Text(" First on the line."),
        Break(),
        Text("Mixed"),
        ChorusRef(2, " "),
        Text(" in text."),
    )


def test_chorus_refs_unnumbered():
    rewriter = _rewriter()
    rewriter.state.chorus_numbering = False
    assert _para("Again !>>", rewriter) == (Text("Again"), ChorusRef(None, " "))


def test_malformed_directive_warns_and_stays_text(caplog):
    with caplog.at_level(logging.WARNING, logger="chordbook.inlines"):
        assert _para("go !+ now") == (Text("go !+ now"),)
    assert "malformed directive" in caplog.text


def test_malformed_directive_strict_raises():
    with pytest.raises(ParseError) as exc_info:
        _para("go !+ now", _rewriter(strict=True))
    assert exc_info.value.kind == MalformedDirective("!+")


def test_literal_block():
    assert _rewriter().literal("line  one\n\nline two\n") == (
        Text("line one"),
        Break(),
        Text("line two"),
    )
