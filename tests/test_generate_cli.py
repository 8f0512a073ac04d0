from __future__ import annotations

import json
from pathlib import Path

import pytest

from styleprompt.app.settings import Settings, get_settings
from styleprompt.generate import _run, main


def test_generate_cli_prints_quoted_prompt(capsys: pytest.CaptureFixture[str]) -> None:
    _run("smooth jazz night", seed="42", settings=Settings())
    captured = capsys.readouterr()
    assert 'genre: "jazz"' in captured.out
    assert "[Is_MAX_MODE: MAX](MAX)" in captured.out


def test_generate_cli_bracket_layout(capsys: pytest.CaptureFixture[str]) -> None:
    main(["--description", "smooth jazz night", "--seed", "1", "--layout", "bracket", "--no-max-mode"])
    captured = capsys.readouterr()
    assert "Genre: Jazz" in captured.out
    assert "[INTRO]" in captured.out


def test_generate_cli_remixes_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    prompt_path = tmp_path / "prompt.txt"
    prompt_path.write_text('genre: "jazz"\nbpm: "between 80 and 160"\nrecording: "live takes"\n')
    _run("", remix="recording", input_path=prompt_path, seed="3", trace=True, settings=Settings())
    captured = capsys.readouterr()
    assert 'genre: "jazz"' in captured.out
    assert 'recording: "live takes"' not in captured.out
    trace_start = captured.out.index("[\n")
    events = json.loads(captured.out[trace_start:])
    assert events[-1]["domain"] == "remix"


def test_generate_cli_reads_settings_environment(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setenv("STYLEPROMPT_MAX_MODE", "false")
    get_settings.cache_clear()
    try:
        _run("smooth jazz night", seed="9")
    finally:
        get_settings.cache_clear()
    captured = capsys.readouterr()
    assert captured.out.startswith('genre: "jazz"')
