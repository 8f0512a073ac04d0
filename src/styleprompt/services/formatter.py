"""Rendering of assembled prompt fields into the two text layouts."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Sequence, Union

from .catalog import CATALOG
from .fields import clean_value, has_field, insert_field_after, render_field_line, replace_field_line
from .random_stream import Rng, select_random
from .vocabulary import DEFAULT_MODES, KEYS, SECTION_DIRECTIONS

MAX_PROMPT_CHARS = 1000
CLEAN_BREAK_RATIO = 0.8

MAX_MODE_HEADER = "\n".join(
    [
        "[Is_MAX_MODE: MAX](MAX)",
        "[QUALITY: MAX](MAX)",
        "[REALISM: MAX](MAX)",
        "[REAL_INSTRUMENTS: MAX](MAX)",
    ]
)

SECTION_ORDER = ["INTRO", "VERSE", "CHORUS", "BRIDGE", "OUTRO"]

QUOTED_FIELDS = ("genre", "bpm", "instruments", "style tags", "recording")
BRACKET_FIELDS = ("genre", "bpm", "mood", "instruments", "style tags", "recording")

_STRUCTURED_PATTERN = re.compile(r"^(?:genre|style[ \t]+tags?)[ \t]*:", re.IGNORECASE | re.MULTILINE)


@dataclass(frozen=True)
class PromptFields:
    genre: str
    bpm: str
    mood: str
    instruments: str
    style_tags: str
    recording: str


def _field_lines(fields: PromptFields, names: Sequence[str], *, quoted: bool) -> list[str]:
    return [
        render_field_line(name, getattr(fields, name.replace(" ", "_")), quoted=quoted)
        for name in names
    ]


def format_quoted_prompt(fields: PromptFields, *, max_mode: bool = True) -> str:
    lines: list[str] = []
    if max_mode:
        lines.extend([MAX_MODE_HEADER, ""])
    lines.extend(_field_lines(fields, QUOTED_FIELDS, quoted=True))
    return "\n".join(lines)


def format_bracket_prompt(
    fields: PromptFields,
    *,
    header_mood: str,
    genre_display: str,
    key: str,
    mode: str,
    sections: Sequence[tuple[str, str]] = (),
) -> str:
    lines = [
        f"[{clean_value(header_mood)}, {clean_value(genre_display)}, Key: {key} {mode}]",
        "",
        *_field_lines(fields, BRACKET_FIELDS, quoted=False),
    ]
    for label, direction in sections:
        lines.extend(["", f"[{label}]", clean_value(direction)])
    return "\n".join(lines)


def select_key_and_mode(genre_id: str, rng: Rng) -> tuple[str, str]:
    genre = CATALOG.get(genre_id)
    modes = genre.modes if genre is not None else DEFAULT_MODES
    return select_random(KEYS, rng), select_random(modes, rng)


def build_sections(instruments: Sequence[str], rng: Rng) -> list[tuple[str, str]]:
    pool = list(instruments) or ["lead melody", "rhythm section"]
    sections: list[tuple[str, str]] = []
    for index, label in enumerate(SECTION_ORDER):
        lead = pool[index % len(pool)]
        support = pool[(index + 1) % len(pool)] if len(pool) > 1 else "the rhythm section"
        template = select_random(SECTION_DIRECTIONS[label], rng)
        sections.append((label, template.format(lead=lead, support=support)))
    return sections


def genre_display_name(components: Sequence[str]) -> str:
    return " ".join(CATALOG.display_name(genre_id) for genre_id in components)


def truncate_prompt(text: str, max_chars: int = MAX_PROMPT_CHARS) -> str:
    """Cap ``text`` at ``max_chars``, preferring the last newline or closing quote."""
    if len(text) <= max_chars:
        return text
    head = text[:max_chars]
    threshold = max_chars * CLEAN_BREAK_RATIO
    newline = head.rfind("\n")
    if newline > threshold:
        return head[:newline].rstrip()
    quote = head.rfind('"')
    if quote > threshold:
        return head[: quote + 1]
    return head


def is_structured_prompt(text: str) -> bool:
    return bool(text) and _STRUCTURED_PATTERN.search(text) is not None


def inject_bpm(text: str, bpm: Union[int, str]) -> str:
    """Set the BPM field, inserting it below the genre line when absent."""
    value = str(bpm)
    if has_field(text, "bpm"):
        return replace_field_line(text, "bpm", value)
    return insert_field_after(text, "genre", "bpm", value)
