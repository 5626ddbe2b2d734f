"""JSON schema of the song tree.

This is the stable shape renderers consume::

    Song   {"title", "subtitles", "notation", "blocks"}
    Block  {"type": "b-verse", "label", "paragraphs": [[Inline]]}

Verse labels are single-key objects:

+------------------------------+-----------------------------+
| Label                        | JSON                        |
+==============================+=============================+
| ``VerseNumber(3)``           | ``{"verse": 3}``            |
+------------------------------+-----------------------------+
| ``ChorusLabel(2)``           | ``{"chorus": 2}``           |
+------------------------------+-----------------------------+
| ``CustomLabel("Bridge")``    | ``{"custom": "Bridge"}``    |
+------------------------------+-----------------------------+
| ``NoLabel()``                | ``{"none": {}}``            |
+------------------------------+-----------------------------+

Inlines are tagged by ``"type"``: ``i-text``, ``i-break``, ``i-chord``,
``i-strong``, ``i-emph``, ``i-transpose`` and ``i-chorus-ref``.  A transpose
inline carries exactly one of ``t-transpose``, ``t-alt-notation`` or
``t-notation``.

Usage::

    from chordbook.serialize import songs_to_json
    Path("songs.json").write_text(songs_to_json(songs))
"""

import json
from typing import Any

from .exceptions import SchemaError
from .models import (
    Break,
    ChordInline,
    ChorusLabel,
    ChorusRef,
    CustomLabel,
    Emph,
    Inline,
    NoLabel,
    Song,
    Strong,
    Text,
    Transpose,
    Verse,
    VerseLabel,
    VerseNumber,
)

# Transpose field name -> JSON key
_TRANSPOSE_KEYS = {
    "transpose": "t-transpose",
    "alt_notation": "t-alt-notation",
    "notation": "t-notation",
}


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def song_to_dict(song: Song) -> dict[str, Any]:
    return {
        "title": song.title,
        "subtitles": list(song.subtitles),
        "notation": song.notation,
        "blocks": [_verse_to_dict(verse) for verse in song.blocks],
    }


def songs_to_json(songs: list[Song], indent: int | None = 2) -> str:
    """Return the JSON text of *songs* (a list of song objects)."""
    return json.dumps([song_to_dict(s) for s in songs], indent=indent, ensure_ascii=False)


def _verse_to_dict(verse: Verse) -> dict[str, Any]:
    return {
        "type": "b-verse",
        "label": _label_to_dict(verse.label),
        "paragraphs": [_inlines_to_list(p) for p in verse.paragraphs],
    }


def _label_to_dict(label: VerseLabel) -> dict[str, Any]:
    if isinstance(label, VerseNumber):
        return {"verse": label.number}
    if isinstance(label, ChorusLabel):
        return {"chorus": label.level}
    if isinstance(label, CustomLabel):
        return {"custom": label.text}
    return {"none": {}}


def _inlines_to_list(inlines: tuple[Inline, ...]) -> list[dict[str, Any]]:
    return [_inline_to_dict(i) for i in inlines]


def _inline_to_dict(inline: Inline) -> dict[str, Any]:
    if isinstance(inline, Text):
        return {"type": "i-text", "text": inline.text}
    if isinstance(inline, Break):
        return {"type": "i-break"}
    if isinstance(inline, ChordInline):
        return {
            "type": "i-chord",
            "chord": inline.chord,
            "alt_chord": inline.alt_chord,
            "backticks": inline.backticks,
            "inlines": _inlines_to_list(inline.inlines),
        }
    if isinstance(inline, Strong):
        return {"type": "i-strong", "inlines": _inlines_to_list(inline.inlines)}
    if isinstance(inline, Emph):
        return {"type": "i-emph", "inlines": _inlines_to_list(inline.inlines)}
    if isinstance(inline, Transpose):
        for attr, key in _TRANSPOSE_KEYS.items():
            value = getattr(inline, attr)
            if value is not None:
                return {"type": "i-transpose", key: value}
        raise SchemaError("transpose inline without a value")
    if isinstance(inline, ChorusRef):
        return {"type": "i-chorus-ref", "num": inline.num, "prefix_space": inline.prefix_space}
    raise SchemaError(f"unknown inline {inline!r}")


# ---------------------------------------------------------------------------
# Deserialization
# ---------------------------------------------------------------------------


def song_from_dict(data: dict[str, Any]) -> Song:
    """Rebuild a :class:`Song` from its JSON dictionary.

    Raises SchemaError if *data* does not follow the schema.
    """
    try:
        return Song(
            title=data["title"],
            subtitles=tuple(data["subtitles"]),
            notation=data["notation"],
            blocks=tuple(_verse_from_dict(b) for b in data["blocks"]),
        )
    except (AttributeError, KeyError, TypeError) as exc:
        raise SchemaError(f"malformed song: {exc}") from exc


def songs_from_json(text: str) -> list[Song]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SchemaError(f"invalid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise SchemaError("expected a list of songs")
    return [song_from_dict(d) for d in data]


def _verse_from_dict(data: dict[str, Any]) -> Verse:
    if data.get("type") != "b-verse":
        raise SchemaError(f"unknown block type {data.get('type')!r}")
    return Verse(
        label=_label_from_dict(data["label"]),
        paragraphs=tuple(_inlines_from_list(p) for p in data["paragraphs"]),
    )


def _label_from_dict(data: dict[str, Any]) -> VerseLabel:
    if len(data) != 1:
        raise SchemaError(f"verse label must have exactly one key: {data!r}")
    (key, value), = data.items()
    if key == "verse":
        return VerseNumber(value)
    if key == "chorus":
        return ChorusLabel(value)
    if key == "custom":
        return CustomLabel(value)
    if key == "none":
        return NoLabel()
    raise SchemaError(f"unknown verse label {key!r}")


def _inlines_from_list(data: list[dict[str, Any]]) -> tuple[Inline, ...]:
    return tuple(_inline_from_dict(d) for d in data)


def _inline_from_dict(data: dict[str, Any]) -> Inline:
    kind = data.get("type")
    if kind == "i-text":
        return Text(data["text"])
    if kind == "i-break":
        return Break()
    if kind == "i-chord":
        return ChordInline(
            chord=data["chord"],
            alt_chord=data["alt_chord"],
            backticks=data["backticks"],
            inlines=_inlines_from_list(data["inlines"]),
        )
    if kind == "i-strong":
        return Strong(_inlines_from_list(data["inlines"]))
    if kind == "i-emph":
        return Emph(_inlines_from_list(data["inlines"]))
    if kind == "i-transpose":
        for attr, key in _TRANSPOSE_KEYS.items():
            if key in data:
                return Transpose(**{attr: data[key]})
        raise SchemaError(f"transpose inline without a value: {data!r}")
    if kind == "i-chorus-ref":
        return ChorusRef(num=data["num"], prefix_space=data["prefix_space"])
    raise SchemaError(f"unknown inline type {kind!r}")
