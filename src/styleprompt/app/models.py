from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PromptLayout(str, Enum):
    QUOTED = "quoted"
    BRACKET = "bracket"


class EnergyLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RemixField(str, Enum):
    GENRE = "genre"
    INSTRUMENTS = "instruments"
    MOOD = "mood"
    STYLE = "style"
    RECORDING = "recording"


class ThematicContext(BaseModel):
    """Already-resolved enrichment supplied by an upstream collaborator."""

    themes: list[str] = Field(default_factory=list)
    scene: Optional[str] = Field(default=None, max_length=128)
    mood: Optional[str] = Field(default=None, max_length=64)
    era: Optional[str] = Field(default=None, max_length=16)
    spatial_hint: Optional[str] = Field(default=None, max_length=64)
    energy_level: Optional[EnergyLevel] = None
    narrative_arc: list[str] = Field(default_factory=list)
    vocal_character: Optional[str] = Field(default=None, max_length=64)
    intent: Optional[str] = Field(default=None, max_length=32)


class ResolvedGenre(BaseModel):
    model_config = ConfigDict(frozen=True)

    detected: Optional[str] = None
    display: str = Field(..., min_length=1)
    primary: str = Field(..., min_length=1)
    components: list[str] = Field(..., min_length=1, max_length=4)

    @model_validator(mode="after")
    def _primary_leads_components(self) -> "ResolvedGenre":
        if self.primary != self.components[0]:
            raise ValueError("primary genre must be the first component")
        return self


class BpmRange(BaseModel):
    min: int = Field(..., ge=1)
    max: int = Field(..., ge=1)
    is_intersection: bool


class TagCategoryWeights(BaseModel):
    vocal: float = Field(default=0.6, ge=0.0, le=1.0)
    spatial: float = Field(default=0.5, ge=0.0, le=1.0)
    harmonic: float = Field(default=0.4, ge=0.0, le=1.0)
    dynamic: float = Field(default=0.4, ge=0.0, le=1.0)
    temporal: float = Field(default=0.3, ge=0.0, le=1.0)


class AssembledStyleResult(BaseModel):
    tags: list[str] = Field(default_factory=list)
    formatted: str = ""
    moods: list[str] = Field(default_factory=list)
    dropped: list[str] = Field(default_factory=list)


class InstrumentSelection(BaseModel):
    instruments: list[str] = Field(default_factory=list)
    chord_progression: str
    vocal_style: str
    formatted: str


class CoherenceConflict(BaseModel):
    rule: str
    instrument: str
    tag: str
    suggestion: str


class CoherenceResult(BaseModel):
    valid: bool
    conflicts: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    details: list[CoherenceConflict] = Field(default_factory=list)


class CoherenceFix(BaseModel):
    tags: list[str] = Field(default_factory=list)
    removed: list[str] = Field(default_factory=list)
    conflicts: list[str] = Field(default_factory=list)


class CoherenceRequest(BaseModel):
    instruments: list[str] = Field(default_factory=list)
    production_tags: list[str] = Field(default_factory=list)
    creativity_level: int = Field(default=50, ge=0, le=100)


class TraceSelection(BaseModel):
    method: str
    chosen_index: Optional[int] = None
    candidates: list[str] = Field(default_factory=list)


class TraceDecisionEvent(BaseModel):
    id: str
    domain: str
    key: str
    branch_taken: str
    why: str
    selection: Optional[TraceSelection] = None


class GenerationRequest(BaseModel):
    description: str = Field(default="", max_length=2000)
    genre_override: Optional[str] = Field(default=None, max_length=128)
    layout: Optional[PromptLayout] = None
    seed: Optional[int] = Field(default=None, ge=0, le=0xFFFFFFFF)
    context: Optional[ThematicContext] = None
    creativity_level: Optional[int] = Field(default=None, ge=0, le=100)
    max_mode: Optional[bool] = None
    trace: bool = False


class GenerationResult(BaseModel):
    prompt: str
    layout: PromptLayout
    seed: int
    genre: ResolvedGenre
    bpm: str
    bpm_range: Optional[BpmRange] = None
    instruments: InstrumentSelection
    style: AssembledStyleResult
    recording: list[str] = Field(default_factory=list)
    key: str
    mode: str
    coherence: Optional[CoherenceFix] = None
    trace: list[TraceDecisionEvent] = Field(default_factory=list)


class RemixRequest(BaseModel):
    prompt: str = Field(..., min_length=1, max_length=10_000)
    field: RemixField
    seed: Optional[int] = Field(default=None, ge=0, le=0xFFFFFFFF)
    target_count: Optional[int] = Field(default=None, ge=1, le=4)
    trace: bool = False


class RemixResult(BaseModel):
    prompt: str
    field: RemixField
    value: str
    trace: list[TraceDecisionEvent] = Field(default_factory=list)
