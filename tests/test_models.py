import dataclasses

import pytest

from chordbook.models import (
    Break,
    ChordInline,
    ChorusLabel,
    ChorusRef,
    NoLabel,
    Song,
    Text,
    Transpose,
    Verse,
    VerseNumber,
)


def test_text_stores_text():
    assert Text("Sailing round ").text == "Sailing round "


def test_chord_defaults():
    chord = ChordInline(chord="G")
    assert chord.alt_chord is None
    assert chord.backticks == 1
    assert chord.inlines == ()


def test_chorus_label_defaults_to_unnumbered():
    assert ChorusLabel().level is None


def test_chorus_ref_defaults():
    ref = ChorusRef()
    assert ref.num is None
    assert ref.prefix_space == ""


def test_transpose_single_field():
    xp = Transpose(transpose=5)
    assert xp.transpose == 5
    assert xp.alt_notation is None
    assert xp.notation is None


def test_song_defaults():
    song = Song(title="Wellerman")
    assert song.subtitles == ()
    assert song.notation == "english"
    assert song.blocks == ()


def test_song_all_fields():
    verse = Verse(label=VerseNumber(1), paragraphs=((Text("Lyrics"), Break(), Text("More")),))
    song = Song(title="Wellerman", subtitles=("Sea shanty",), notation="german", blocks=(verse,))
    assert song.subtitles == ("Sea shanty",)
    assert song.notation == "german"
    assert song.blocks[0].label == VerseNumber(1)


def test_models_are_frozen():
    with pytest.raises(dataclasses.FrozenInstanceError):
        Song(title="x").title = "y"  # type: ignore[misc]


def test_equal_by_value():
    assert Verse(label=NoLabel(), paragraphs=((Text("a"),),)) == Verse(
        label=NoLabel(), paragraphs=((Text("a"),),)
    )
