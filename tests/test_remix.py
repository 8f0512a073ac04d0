from styleprompt.app.models import RemixField
from styleprompt.services.bpm import blend_bpm_range, bpm_text_for_genres
from styleprompt.services.catalog import CATALOG
from styleprompt.services.fields import extract_field, split_field_values
from styleprompt.services.genre import parse_genre_components
from styleprompt.services.random_stream import RandomStream
from styleprompt.services.remix import RemixEngine
from styleprompt.services.trace import TraceCollector
from styleprompt.services.vocabulary import RECORDING_DESCRIPTORS

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


def _changed_lines(before: str, after: str) -> list[int]:
    old_lines = before.split("\n")
    new_lines = after.split("\n")
    assert len(old_lines) == len(new_lines)
    return [index for index, (old, new) in enumerate(zip(old_lines, new_lines)) if old != new]


def test_remix_genre_preserves_count_and_rederives_bpm() -> None:
    engine = RemixEngine()
    for seed in range(15):
        result = engine.remix_genre(QUOTED, RandomStream(seed))
        components = parse_genre_components(result.value)
        assert len(components) == 2
        assert not {"jazz", "rock"} & set(components)
        assert extract_field(result.prompt, "genre") == result.value
        assert extract_field(result.prompt, "bpm") == bpm_text_for_genres(components)
        assert set(_changed_lines(QUOTED, result.prompt)) <= {2, 3}


def test_remix_genre_honours_target_count() -> None:
    result = RemixEngine().remix_genre(QUOTED, RandomStream(3), target_count=3)
    assert len(parse_genre_components(result.value)) == 3


def test_remix_genre_keeps_numeric_bpm_in_bracket_layout() -> None:
    for seed in range(10):
        result = RemixEngine().remix_genre(BRACKET, RandomStream(seed))
        components = parse_genre_components(result.value)
        blended = blend_bpm_range(components)
        assert blended is not None
        bpm = extract_field(result.prompt, "bpm")
        assert bpm.isdigit()
        assert blended.min <= int(bpm) <= blended.max
        assert result.value == " ".join(CATALOG.display_name(genre_id) for genre_id in components)


def test_remix_mood_rewrites_only_the_mood_line() -> None:
    result = RemixEngine().remix_mood(BRACKET, RandomStream(8))
    moods = split_field_values(result.value)
    assert 2 <= len(moods) <= 3
    pool = {mood.lower() for genre_id in ("jazz", "rock") for mood in CATALOG.genres[genre_id].moods}
    assert set(moods) <= pool
    assert _changed_lines(BRACKET, result.prompt) == [4]


def test_remix_instruments_and_style_tags_are_line_local() -> None:
    engine = RemixEngine()
    instruments = engine.remix_instruments(QUOTED, RandomStream(2))
    assert _changed_lines(QUOTED, instruments.prompt) == [4]
    assert instruments.value.endswith("vocals")

    style = engine.remix_style_tags(QUOTED, RandomStream(2))
    assert _changed_lines(QUOTED, style.prompt) == [5]
    assert len(split_field_values(style.value)) <= 10


def test_remix_recording_picks_three_descriptors() -> None:
    result = RemixEngine().remix(QUOTED, RemixField.RECORDING, RandomStream(5))
    values = split_field_values(result.value)
    assert len(values) == 3
    assert set(values) <= set(RECORDING_DESCRIPTORS)
    assert _changed_lines(QUOTED, result.prompt) == [6]


def test_missing_field_leaves_prompt_unchanged() -> None:
    text = "Genre: Jazz\nBPM: 100"
    trace = TraceCollector(run_id="remix")
    result = RemixEngine().remix_recording(text, RandomStream(1), trace=trace)
    assert result.prompt == text
    assert result.trace[-1].branch_taken == "field-missing"


def test_remix_is_deterministic_for_a_seed() -> None:
    engine = RemixEngine()
    first = engine.remix(BRACKET, RemixField.STYLE, RandomStream(99))
    second = engine.remix(BRACKET, RemixField.STYLE, RandomStream(99))
    assert first == second


def test_remix_genre_without_genre_line_leaves_prompt_unchanged() -> None:
    text = "BPM: 120\nMood: smooth"
    trace = TraceCollector(run_id="remix")
    result = RemixEngine().remix_genre(text, RandomStream(3), trace=trace)
    assert result.prompt == text
    assert result.value == ""
    assert [event.branch_taken for event in result.trace] == ["field-missing"]


def test_remix_genre_keeps_bracket_header() -> None:
    result = RemixEngine().remix_genre(BRACKET, RandomStream(4))
    assert result.prompt.splitlines()[0] == "[Smooth, Jazz Rock, Key: D dorian]"
    assert set(_changed_lines(BRACKET, result.prompt)) <= {2, 3}
