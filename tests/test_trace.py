import pytest

from styleprompt.app.models import PromptLayout
from styleprompt.app.settings import Settings
from styleprompt.services.trace import MAX_TRACE_CANDIDATES, TraceCollector, trace_decision


def test_trace_collector_numbers_events() -> None:
    trace = TraceCollector(run_id="run")
    trace_decision(trace, domain="genre", key="genre.resolve", branch_taken="keyword", why="matched")
    trace_decision(
        trace,
        domain="styles",
        key="styles.vocal",
        branch_taken="included",
        why="draw below weight",
        method="weighted",
        candidates=[f"tag {index}" for index in range(40)],
    )
    assert [event.id for event in trace.events] == ["run.1", "run.2"]
    assert trace.events[0].selection is None
    assert len(trace.events[1].selection.candidates) == MAX_TRACE_CANDIDATES
    assert trace.by_domain("styles") == [trace.events[1]]


def test_trace_decision_without_collector_is_noop() -> None:
    trace_decision(None, domain="genre", key="genre.resolve", branch_taken="random", why="none")


def test_trace_collector_generates_run_id() -> None:
    assert len(TraceCollector().run_id) == 12


def test_settings_read_prefixed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STYLEPROMPT_DEFAULT_LAYOUT", "bracket")
    monkeypatch.setenv("STYLEPROMPT_DEFAULT_GENRE", "  Jazz ")
    settings = Settings()
    assert settings.default_layout == PromptLayout.BRACKET
    assert settings.default_genre == "jazz"


def test_settings_reject_tiny_prompt_cap() -> None:
    with pytest.raises(ValueError):
        Settings(max_prompt_chars=50)


def test_settings_keep_room_for_protected_tags() -> None:
    with pytest.raises(ValueError):
        Settings(style_tag_limit=4)
    assert Settings(style_tag_limit=5).style_tag_limit == 5
