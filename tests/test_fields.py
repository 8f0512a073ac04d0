import pytest

from styleprompt.services.exceptions import InvariantViolation
from styleprompt.services.fields import (
    extract_field,
    has_field,
    insert_field_after,
    is_quoted_layout,
    replace_field_line,
)

QUOTED = "\n".join(
    [
        "[Is_MAX_MODE: MAX](MAX)",
        "",
        'genre: "jazz rock"',
        'bpm: "between 100 and 160"',
        'instruments: "piano, upright bass"',
        'style tags: "plate reverb, warm"',
        'recording: "live takes, room ambience"',
    ]
)

BRACKET = "\n".join(
    [
        "[Smooth, Jazz Rock, Key: D dorian]",
        "",
        "Genre: Jazz Rock",
        "BPM: 120",
        "Mood: smooth, driving",
        "Instruments: piano, upright bass",
        "Style Tags: plate reverb, warm",
        "Recording: live takes",
        "",
        "[INTRO]",
        "piano enters softly over upright bass",
    ]
)


def test_extracts_fields_from_both_layouts() -> None:
    assert extract_field(QUOTED, "genre") == "jazz rock"
    assert extract_field(QUOTED, "Style Tags") == "plate reverb, warm"
    assert extract_field(BRACKET, "Genre") == "Jazz Rock"
    assert extract_field(BRACKET, "bpm") == "120"
    assert extract_field(BRACKET, "mood") == "smooth, driving"


def test_missing_fields_return_safe_defaults() -> None:
    assert extract_field("no fields here", "genre") == "pop"
    assert extract_field(QUOTED, "mood") == "emotional"
    assert extract_field("no fields here", "recording") == ""
    assert extract_field("no fields here", "genre", "rock") == "rock"


def test_replace_touches_only_the_matched_line() -> None:
    for text, expected in [(QUOTED, 'genre: "punk"'), (BRACKET, "Genre: punk")]:
        updated = replace_field_line(text, "Genre", "punk")
        before = text.split("\n")
        after = updated.split("\n")
        assert len(before) == len(after)
        changed = [index for index, (old, new) in enumerate(zip(before, after)) if old != new]
        assert len(changed) == 1
        assert after[changed[0]] == expected


def test_replace_without_match_returns_text_unchanged() -> None:
    text = "just a sentence\nwith two lines"
    assert replace_field_line(text, "genre", "punk") == text


def test_layout_detection_and_insertion() -> None:
    assert is_quoted_layout(QUOTED)
    assert not is_quoted_layout(BRACKET)
    without_bpm = QUOTED.replace('bpm: "between 100 and 160"\n', "")
    assert not has_field(without_bpm, "bpm")
    restored = insert_field_after(without_bpm, "genre", "bpm", "between 100 and 160")
    assert restored == QUOTED


def test_unknown_field_name_is_a_programming_error() -> None:
    with pytest.raises(InvariantViolation):
        extract_field(QUOTED, "lyrics")
