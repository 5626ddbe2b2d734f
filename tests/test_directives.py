from chordbook.directives import (
    ChorusRefToken,
    MalformedToken,
    NotationToken,
    TransposeToken,
    classify,
    lex,
)

# ---------------------------------------------------------------------------
# classify
# ---------------------------------------------------------------------------


def test_classify_transpose():
    assert classify("!+5") == TransposeToken(5)
    assert classify("!-2") == TransposeToken(-2)
    assert classify("!+0") == TransposeToken(0)


def test_classify_alt_notation():
    assert classify("!!czech") == NotationToken("czech", alternate=True)


def test_classify_primary_notation():
    assert classify("!!!english") == NotationToken("english", alternate=False)


def test_classify_chorus_refs():
    assert classify("!>") == ChorusRefToken(1, "")
    assert classify("!>>") == ChorusRefToken(2, "")
    assert classify("!>>>") == ChorusRefToken(3, "")


def test_classify_literals():
    assert classify("!") is None
    assert classify("!!") is None
    assert classify("!!>") is None
    assert classify("!!!") is None
    assert classify("!!!>") is None
    assert classify("!hello") is None


def test_classify_malformed_transpose():
    assert classify("!+") == MalformedToken("!+")
    assert classify("!-x") == MalformedToken("!-x")
    assert classify("!+5x") == MalformedToken("!+5x")


# ---------------------------------------------------------------------------
# lex
# ---------------------------------------------------------------------------


def test_lex_plain_text_unchanged():
    assert lex("Sailing round the ocean") == ["Sailing round the ocean"]


def test_lex_directive_alone():
    assert lex("!+5") == [TransposeToken(5)]


def test_lex_absorbs_preceding_space():
    assert lex("Lyrics !+0") == ["Lyrics", TransposeToken(0)]


def test_lex_keeps_following_space():
    assert lex("!+2 More lyrics") == [TransposeToken(2), " More lyrics"]


def test_lex_chorus_ref_prefix_space():
    assert lex("More lyrics !>") == ["More lyrics", ChorusRefToken(1, " ")]
    assert lex("!> First on the line.") == [ChorusRefToken(1, ""), " First on the line."]


def test_lex_chorus_ref_mid_text():
    assert lex("Mixed !>> in text.") == ["Mixed", ChorusRefToken(2, " "), " in text."]


def test_lex_consecutive_tokens_stay_separate():
    assert lex("Reference both: !> !>>") == [
        "Reference both:",
        ChorusRefToken(1, " "),
        ChorusRefToken(2, " "),
    ]
    assert lex("!+1 !+2 !+3") == [TransposeToken(1), TransposeToken(2), TransposeToken(3)]


def test_lex_requires_preceding_whitespace():
    assert lex("Hey!> there") == ["Hey!> there"]
    assert lex("wow!+5") == ["wow!+5"]


def test_lex_requires_following_whitespace():
    assert lex("!>. end") == ["!>. end"]
    assert lex("see !>, then") == ["see !>, then"]
    assert lex("now !!german,") == ["now !!german,"]


def test_lex_transpose_followed_by_punctuation_is_malformed():
    assert lex("key !+2.") == ["key ", MalformedToken("!+2.")]
    assert lex("!-3, down") == [MalformedToken("!-3,"), " down"]


def test_lex_literal_bangs_kept():
    assert lex("Lyrics !!> !!!english !+0") == [
        "Lyrics !!>",
        NotationToken("english", alternate=False),
        TransposeToken(0),
    ]


def test_lex_malformed_keeps_surrounding_text():
    assert lex("go !+ now") == ["go ", MalformedToken("!+"), " now"]
