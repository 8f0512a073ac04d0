"""Keyword-level conflict checks between instruments and production tags."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from loguru import logger

from ..app.models import CoherenceConflict, CoherenceFix, CoherenceResult
from .trace import TraceCollector, trace_decision

PERMISSIVE_CREATIVITY_THRESHOLD = 60


@dataclass(frozen=True)
class ConflictRule:
    id: str
    description: str
    instrument_patterns: tuple[str, ...]
    production_patterns: tuple[str, ...]
    suggestion: str


CONFLICT_RULES = (
    ConflictRule(
        id="distorted-intimate",
        description="Distorted instruments with intimate production",
        instrument_patterns=("distorted", "overdriven", "fuzz", "heavy guitar", "crushing", "screaming"),
        production_patterns=("intimate", "bedroom", "whisper", "gentle", "delicate", "soft"),
        suggestion="Pair distorted instruments with a room or live production instead",
    ),
    ConflictRule(
        id="acoustic-digital",
        description="Pure acoustic instruments with heavy digital processing",
        instrument_patterns=("acoustic guitar", "upright bass", "acoustic piano", "nylon string", "ukulele"),
        production_patterns=("glitch", "bitcrushed", "digital distortion", "vocoder", "autotune", "robotic"),
        suggestion="Keep acoustic instruments in a natural, lightly processed mix",
    ),
    ConflictRule(
        id="orchestral-lofi",
        description="Orchestral instruments with lo-fi production",
        instrument_patterns=(
            "symphony",
            "orchestra",
            "string section",
            "philharmonic",
            "chamber orchestra",
            "full strings",
        ),
        production_patterns=("lo-fi", "vinyl crackle", "tape hiss", "dusty", "bedroom production", "cassette"),
        suggestion="Give orchestral parts a hall or scoring-stage production",
    ),
    ConflictRule(
        id="delicate-aggressive",
        description="Delicate instruments with aggressive production",
        instrument_patterns=(
            "music box",
            "celesta",
            "harp",
            "glockenspiel",
            "kalimba",
            "wind chimes",
            "glass harmonica",
        ),
        production_patterns=(
            "crushing",
            "aggressive",
            "slamming",
            "brutal",
            "punishing",
            "extreme compression",
        ),
        suggestion="Use gentle dynamics around delicate instruments",
    ),
    ConflictRule(
        id="vintage-futuristic",
        description="Vintage instruments with futuristic production",
        instrument_patterns=("phonograph", "gramophone", "1920s", "antique", "victorian", "baroque"),
        production_patterns=("futuristic", "sci-fi", "neural", "ai-generated", "cyber", "space age"),
        suggestion="Match vintage instruments with period-appropriate production",
    ),
)


def _matches_any(text: str, patterns: Sequence[str]) -> bool:
    folded = text.lower()
    return any(pattern in folded for pattern in patterns)


def _rule_conflicts(
    rule: ConflictRule,
    instruments: Sequence[str],
    production_tags: Sequence[str],
) -> list[CoherenceConflict]:
    return [
        CoherenceConflict(rule=rule.id, instrument=instrument, tag=tag, suggestion=rule.suggestion)
        for instrument in instruments
        if _matches_any(instrument, rule.instrument_patterns)
        for tag in production_tags
        if _matches_any(tag, rule.production_patterns)
    ]


def check_coherence(
    instruments: Sequence[str],
    production_tags: Sequence[str],
    creativity_level: int,
) -> CoherenceResult:
    if creativity_level > PERMISSIVE_CREATIVITY_THRESHOLD:
        return CoherenceResult(valid=True)

    conflicts: list[str] = []
    suggestions: list[str] = []
    details: list[CoherenceConflict] = []
    for rule in CONFLICT_RULES:
        pairs = _rule_conflicts(rule, instruments, production_tags)
        if pairs:
            conflicts.append(rule.id)
            suggestions.append(rule.suggestion)
            details.extend(pairs)
    return CoherenceResult(
        valid=not conflicts,
        conflicts=conflicts,
        suggestions=suggestions,
        details=details,
    )


def fix_coherence(
    instruments: Sequence[str],
    production_tags: Sequence[str],
    creativity_level: int,
    trace: Optional[TraceCollector] = None,
) -> CoherenceFix:
    """Drop only the production tags that take part in a conflict."""
    result = check_coherence(instruments, production_tags, creativity_level)
    if result.valid:
        return CoherenceFix(tags=list(production_tags))

    offending = {detail.tag for detail in result.details}
    kept = [tag for tag in production_tags if tag not in offending]
    removed = [tag for tag in production_tags if tag in offending]
    logger.warning("Coherence fix removed {} tag(s): {}", len(removed), removed)
    trace_decision(
        trace,
        domain="coherence",
        key="coherence.fix",
        branch_taken="tags-filtered",
        why=f"removed {len(removed)} conflicting tags at creativity={creativity_level}",
        method="filter",
        candidates=removed,
    )
    return CoherenceFix(tags=kept, removed=removed, conflicts=result.conflicts)
