from __future__ import annotations

from typing import cast

from fastapi import APIRouter, Request

from ..services.builder import PromptBuilder
from ..services.catalog import CATALOG
from ..services.coherence import check_coherence
from ..services.random_stream import RandomStream
from ..services.remix import RemixEngine
from ..services.trace import TraceCollector
from .models import (
    CoherenceRequest,
    CoherenceResult,
    GenerationRequest,
    GenerationResult,
    RemixRequest,
    RemixResult,
)
from .settings import Settings

router = APIRouter()


def get_builder(request: Request) -> PromptBuilder:
    return cast(PromptBuilder, request.app.state.builder)


def get_remix_engine(request: Request) -> RemixEngine:
    return cast(RemixEngine, request.app.state.remix_engine)


def _seed_or_entropy(seed: int | None) -> int:
    return seed if seed is not None else RandomStream.from_entropy().seed


@router.get("/health")
async def health(request: Request) -> dict[str, object]:
    settings = cast(Settings, request.app.state.settings)
    return {
        "status": "ok",
        "catalog_version": CATALOG.version,
        "genre_count": len(CATALOG.genres),
        "default_layout": settings.default_layout.value,
        "max_prompt_chars": settings.max_prompt_chars,
    }


@router.post("/prompts", response_model=GenerationResult)
async def create_prompt(payload: GenerationRequest, request: Request) -> GenerationResult:
    seeded = payload.model_copy(update={"seed": _seed_or_entropy(payload.seed)})
    return get_builder(request).generate(seeded)


@router.post("/remix", response_model=RemixResult)
async def remix_prompt(payload: RemixRequest, request: Request) -> RemixResult:
    seed = _seed_or_entropy(payload.seed)
    trace = TraceCollector(run_id=f"seed-{seed}") if payload.trace else None
    return get_remix_engine(request).remix(
        payload.prompt,
        payload.field,
        RandomStream(seed),
        target_count=payload.target_count,
        trace=trace,
    )


@router.post("/coherence", response_model=CoherenceResult)
async def coherence(payload: CoherenceRequest) -> CoherenceResult:
    return check_coherence(payload.instruments, payload.production_tags, payload.creativity_level)
