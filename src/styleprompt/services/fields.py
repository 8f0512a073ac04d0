"""Line-oriented editor for the labelled fields of a formatted prompt.

Both layouts put one field per line, either ``genre: "jazz"`` or
``Genre: Jazz``. Each field name owns a single anchored pattern; edits
rewrite the matched line and leave every other byte of the text alone.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Optional

from .exceptions import InvariantViolation

DEFAULT_GENRE = "pop"
DEFAULT_MOOD = "emotional"

FIELD_LABELS = {
    "genre": r"genres?",
    "bpm": r"bpm|tempo",
    "mood": r"moods?",
    "instruments": r"instruments?",
    "style tags": r"style[ \t]+tags?",
    "recording": r"recording",
}

DISPLAY_LABELS = {
    "genre": "Genre",
    "bpm": "BPM",
    "mood": "Mood",
    "instruments": "Instruments",
    "style tags": "Style Tags",
    "recording": "Recording",
}

FIELD_DEFAULTS = {
    "genre": DEFAULT_GENRE,
    "mood": DEFAULT_MOOD,
}


def field_key(name: str) -> str:
    key = " ".join(name.lower().replace("_", " ").split())
    if key == "style":
        key = "style tags"
    if key not in FIELD_LABELS:
        raise InvariantViolation(f"unknown prompt field '{name}'")
    return key


@lru_cache(maxsize=None)
def _field_pattern(key: str) -> re.Pattern[str]:
    return re.compile(
        rf"^(?P<label>{FIELD_LABELS[key]})(?P<sep>[ \t]*:[ \t]*)"
        rf'(?P<quote>"?)(?P<value>[^"\n]*?)(?P=quote)[ \t]*$',
        re.IGNORECASE | re.MULTILINE,
    )


def _search(text: str, name: str) -> Optional[re.Match[str]]:
    return _field_pattern(field_key(name)).search(text)


def has_field(text: str, name: str) -> bool:
    return _search(text, name) is not None


def extract_field(text: str, name: str, default: Optional[str] = None) -> str:
    """Value of the first line labelled ``name``, or the field's default."""
    match = _search(text, name)
    if match is not None and match.group("value").strip():
        return match.group("value").strip()
    if default is not None:
        return default
    return FIELD_DEFAULTS.get(field_key(name), "")


def split_field_values(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def is_quoted_layout(text: str) -> bool:
    match = _search(text, "genre")
    return match is not None and match.group("quote") == '"'


def clean_value(value: str) -> str:
    """Collapse a value onto one line and swap double quotes for single ones."""
    return " ".join(value.replace('"', "'").split())


def replace_field_line(text: str, name: str, value: str) -> str:
    match = _search(text, name)
    if match is None:
        return text
    quote = match.group("quote")
    line = f"{match.group('label')}{match.group('sep')}{quote}{clean_value(value)}{quote}"
    return text[: match.start()] + line + text[match.end():]


def render_field_line(name: str, value: str, *, quoted: bool) -> str:
    key = field_key(name)
    if quoted:
        return f'{key}: "{clean_value(value)}"'
    return f"{DISPLAY_LABELS[key]}: {clean_value(value)}"


def insert_field_after(text: str, anchor: str, name: str, value: str) -> str:
    """Insert a new field line directly below ``anchor``, matching its quoting."""
    match = _search(text, anchor)
    if match is None:
        return text
    line = render_field_line(name, value, quoted=match.group("quote") == '"')
    return text[: match.end()] + "\n" + line + text[match.end():]
