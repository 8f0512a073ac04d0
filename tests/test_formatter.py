from styleprompt.services.fields import extract_field
from styleprompt.services.formatter import (
    MAX_MODE_HEADER,
    PromptFields,
    build_sections,
    format_bracket_prompt,
    format_quoted_prompt,
    inject_bpm,
    is_structured_prompt,
    select_key_and_mode,
    truncate_prompt,
)
from styleprompt.services.random_stream import RandomStream
from styleprompt.services.vocabulary import KEYS

FIELDS = PromptFields(
    genre="jazz",
    bpm="between 80 and 160",
    mood="smooth, smoky",
    instruments="piano, upright bass",
    style_tags="small club reverb, wide stereo field",
    recording="live takes, room ambience, analog warmth",
)


def test_quoted_layout_lines() -> None:
    prompt = format_quoted_prompt(FIELDS)
    assert prompt.startswith(MAX_MODE_HEADER + "\n\n")
    assert prompt.splitlines()[-5:] == [
        'genre: "jazz"',
        'bpm: "between 80 and 160"',
        'instruments: "piano, upright bass"',
        'style tags: "small club reverb, wide stereo field"',
        'recording: "live takes, room ambience, analog warmth"',
    ]
    assert not format_quoted_prompt(FIELDS, max_mode=False).startswith("[")


def test_bracket_layout_header_and_sections() -> None:
    rng = RandomStream(6)
    sections = build_sections(["piano", "upright bass"], rng)
    prompt = format_bracket_prompt(
        FIELDS,
        header_mood="Smooth",
        genre_display="Jazz",
        key="D",
        mode="dorian",
        sections=sections,
    )
    lines = prompt.splitlines()
    assert lines[0] == "[Smooth, Jazz, Key: D dorian]"
    assert lines[1] == ""
    assert lines[2] == "Genre: jazz"
    assert "[INTRO]" in lines
    assert "[OUTRO]" in lines
    assert [label for label, _ in sections] == ["INTRO", "VERSE", "CHORUS", "BRIDGE", "OUTRO"]


def test_key_and_mode_come_from_genre_modes() -> None:
    key, mode = select_key_and_mode("jazz", RandomStream(2))
    assert key in KEYS
    assert mode in ("dorian", "mixolydian", "major")


def test_truncate_prefers_clean_breaks() -> None:
    text = ("x" * 29 + "\n") * 50
    truncated = truncate_prompt(text, 1000)
    assert len(truncated) <= 1000
    assert truncated.endswith("x")
    assert text.startswith(truncated)


def test_truncate_hard_cuts_without_breaks() -> None:
    assert truncate_prompt("y" * 1200, 1000) == "y" * 1000
    assert truncate_prompt("short", 1000) == "short"


def test_structured_detection_and_bpm_injection() -> None:
    prompt = format_quoted_prompt(FIELDS)
    assert is_structured_prompt(prompt)
    assert not is_structured_prompt("a free-text idea about rain")
    assert 'bpm: "96"' in inject_bpm(prompt, 96)
    stripped = prompt.replace('bpm: "between 80 and 160"\n', "")
    injected = inject_bpm(stripped, 100)
    assert injected.splitlines()[-4] == 'bpm: "100"'


def test_field_values_are_kept_on_one_readable_line() -> None:
    fields = PromptFields(
        genre='punk "rock"',
        bpm="between 160 and 200",
        mood="wild",
        instruments="distorted guitar",
        style_tags="rain\nrecording: injected, garage recording",
        recording="live takes",
    )
    quoted = format_quoted_prompt(fields, max_mode=False)
    assert extract_field(quoted, "genre") == "punk 'rock'"
    assert extract_field(quoted, "style tags") == "rain recording: injected, garage recording"
    assert [line for line in quoted.splitlines() if line.startswith("recording:")] == [
        'recording: "live takes"'
    ]

    bracket = format_bracket_prompt(
        fields,
        header_mood='Wild\n"Loud"',
        genre_display='Punk "Rock"',
        key="E",
        mode="minor",
    )
    assert bracket.splitlines()[0] == "[Wild 'Loud', Punk 'Rock', Key: E minor]"
    assert extract_field(bracket, "genre") == "Punk 'Rock'"
    assert extract_field(bracket, "recording") == "live takes"
