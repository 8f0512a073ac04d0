"""Chains the assemblers into one deterministic prompt generation."""

from __future__ import annotations

from typing import Optional

from loguru import logger

from ..app.models import (
    AssembledStyleResult,
    CoherenceFix,
    GenerationRequest,
    GenerationResult,
    PromptLayout,
)
from ..app.settings import Settings
from .bpm import DEFAULT_BPM_TEXT, blend_bpm_range, format_bpm_range, random_bpm
from .coherence import check_coherence, fix_coherence
from .exceptions import InvariantViolation
from .formatter import (
    PromptFields,
    build_sections,
    format_bracket_prompt,
    format_quoted_prompt,
    genre_display_name,
    select_key_and_mode,
    truncate_prompt,
)
from .genre import resolve_genre
from .instruments import assemble_instruments
from .random_stream import RandomStream, Rng, select_random_n
from .remix import RECORDING_DESCRIPTOR_COUNT
from .styles import PROTECTED_TAG_COUNT, assemble_style_tags
from .trace import TraceCollector
from .vocabulary import RECORDING_DESCRIPTORS


class PromptBuilder:
    """Generates deterministic structured prompts from requests."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def generate(self, request: GenerationRequest) -> GenerationResult:
        if request.seed is None:
            raise InvariantViolation("prompt generation requires an explicit seed")
        trace = None
        if request.trace or self._settings.trace_enabled:
            trace = TraceCollector(run_id=f"seed-{request.seed}")
        return self.build(request, RandomStream(request.seed), trace=trace, seed=request.seed)

    def _apply_coherence(
        self,
        style: AssembledStyleResult,
        instruments: list[str],
        creativity: int,
        trace: Optional[TraceCollector],
    ) -> tuple[AssembledStyleResult, CoherenceFix]:
        """Filter conflicting tags past the protected tiers, refilling from dropped tags."""
        protected = style.tags[:PROTECTED_TAG_COUNT]
        fix = fix_coherence(instruments, style.tags[PROTECTED_TAG_COUNT:], creativity, trace)
        if not fix.removed:
            return style, fix.model_copy(update={"tags": list(style.tags)})

        limit = max(self._settings.style_tag_limit, PROTECTED_TAG_COUNT)
        slots = limit - len(protected) - len(fix.tags)
        refill = [
            tag for tag in style.dropped if check_coherence(instruments, [tag], creativity).valid
        ]
        tags = protected + fix.tags + refill[:slots]
        style = style.model_copy(
            update={
                "tags": tags,
                "formatted": ", ".join(tags),
                "moods": [mood for mood in style.moods if mood in tags],
                "dropped": [tag for tag in style.dropped if tag not in tags],
            }
        )
        return style, fix.model_copy(update={"tags": tags})

    def build(
        self,
        request: GenerationRequest,
        rng: Rng,
        *,
        trace: Optional[TraceCollector] = None,
        seed: int = 0,
    ) -> GenerationResult:
        settings = self._settings
        layout = request.layout or settings.default_layout
        creativity = (
            request.creativity_level
            if request.creativity_level is not None
            else settings.creativity_level
        )

        genre = resolve_genre(request.description, request.genre_override, rng, trace)
        bpm_range = blend_bpm_range(genre.components)
        instruments = assemble_instruments(genre.components, rng, trace)
        style = assemble_style_tags(
            genre.components,
            rng,
            context=request.context,
            description=request.description,
            trace=trace,
            limit=settings.style_tag_limit,
        )
        style, coherence = self._apply_coherence(style, instruments.instruments, creativity, trace)
        recording = select_random_n(RECORDING_DESCRIPTORS, RECORDING_DESCRIPTOR_COUNT, rng)
        key, mode = select_key_and_mode(genre.primary, rng)
        moods = ", ".join(style.moods) or settings.default_mood

        if layout == PromptLayout.QUOTED:
            bpm_text = format_bpm_range(bpm_range) if bpm_range is not None else DEFAULT_BPM_TEXT
            fields = PromptFields(
                genre=genre.display,
                bpm=bpm_text,
                mood=moods,
                instruments=instruments.formatted,
                style_tags=style.formatted,
                recording=", ".join(recording),
            )
            max_mode = request.max_mode if request.max_mode is not None else settings.max_mode
            prompt = format_quoted_prompt(fields, max_mode=max_mode)
        else:
            bpm_text = str(random_bpm(bpm_range, rng)) if bpm_range is not None else DEFAULT_BPM_TEXT
            display = genre_display_name(genre.components)
            fields = PromptFields(
                genre=display,
                bpm=bpm_text,
                mood=moods,
                instruments=instruments.formatted,
                style_tags=style.formatted,
                recording=", ".join(recording),
            )
            header_mood = (style.moods[0] if style.moods else settings.default_mood).title()
            prompt = format_bracket_prompt(
                fields,
                header_mood=header_mood,
                genre_display=display,
                key=key,
                mode=mode,
                sections=build_sections(instruments.instruments, rng),
            )

        prompt = truncate_prompt(prompt, settings.max_prompt_chars)
        logger.info("Generated {} prompt ({} chars) for genre {}", layout.value, len(prompt), genre.display)
        return GenerationResult(
            prompt=prompt,
            layout=layout,
            seed=seed,
            genre=genre,
            bpm=bpm_text,
            bpm_range=bpm_range,
            instruments=instruments,
            style=style,
            recording=recording,
            key=key,
            mode=mode,
            coherence=coherence,
            trace=list(trace.events) if trace is not None else [],
        )
