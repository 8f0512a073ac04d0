"""
CLI entry point to generate or remix a structured music-style prompt.

Example:
    python -m styleprompt.generate --description "smooth jazz night" --seed 42
    python -m styleprompt.generate --remix genre --input prompt.txt --seed 7
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from .app.models import GenerationRequest, PromptLayout, RemixField
from .app.settings import Settings, get_settings
from .services.builder import PromptBuilder
from .services.random_stream import RandomStream, derive_seed
from .services.remix import RemixEngine
from .services.trace import TraceCollector


def _parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate deterministic music-style prompts.")
    parser.add_argument("--description", default="", help="Free-text description of the track.")
    parser.add_argument("--genre", default=None, help="Explicit genre override, e.g. 'jazz rock'.")
    parser.add_argument(
        "--layout",
        choices=[layout.value for layout in PromptLayout],
        default=None,
        help="Output layout (defaults to settings).",
    )
    parser.add_argument(
        "--seed",
        default=None,
        help="Integer or text seed; omitted seeds are drawn from entropy.",
    )
    parser.add_argument(
        "--creativity",
        type=int,
        default=None,
        help="Creativity level 0-100; above 60 skips coherence filtering.",
    )
    parser.add_argument(
        "--no-max-mode",
        action="store_true",
        help="Omit the MAX header block from quoted prompts.",
    )
    parser.add_argument(
        "--remix",
        choices=[field.value for field in RemixField],
        default=None,
        help="Remix one field of an existing prompt instead of generating.",
    )
    parser.add_argument(
        "--input",
        type=Path,
        default=None,
        help="Prompt file to remix ('-' reads stdin).",
    )
    parser.add_argument(
        "--target-count",
        type=int,
        default=None,
        help="Number of genres to pick when remixing the genre field (1-4).",
    )
    parser.add_argument("--trace", action="store_true", help="Print decision trace events as JSON.")
    return parser.parse_args(argv)


def _read_prompt(path: Optional[Path]) -> str:
    if path is None or str(path) == "-":
        return sys.stdin.read()
    return path.read_text(encoding="utf-8")


def _run(
    description: str,
    *,
    genre: Optional[str] = None,
    layout: Optional[str] = None,
    seed: Optional[str] = None,
    creativity: Optional[int] = None,
    max_mode: Optional[bool] = None,
    remix: Optional[str] = None,
    input_path: Optional[Path] = None,
    target_count: Optional[int] = None,
    trace: bool = False,
    settings: Optional[Settings] = None,
) -> None:
    settings = settings or get_settings()
    resolved_seed = derive_seed(seed) if seed is not None else RandomStream.from_entropy().seed
    logger.info("Using seed {}", resolved_seed)

    if remix is not None:
        engine = RemixEngine(
            default_genre=settings.default_genre,
            style_tag_limit=settings.style_tag_limit,
        )
        collector = TraceCollector(run_id=f"seed-{resolved_seed}") if trace else None
        result = engine.remix(
            _read_prompt(input_path),
            RemixField(remix),
            RandomStream(resolved_seed),
            target_count=target_count,
            trace=collector,
        )
        prompt = result.prompt
        events = result.trace
    else:
        builder = PromptBuilder(settings)
        request = GenerationRequest(
            description=description,
            genre_override=genre,
            layout=PromptLayout(layout) if layout is not None else None,
            seed=resolved_seed,
            creativity_level=creativity,
            max_mode=max_mode,
            trace=trace,
        )
        generated = builder.generate(request)
        prompt = generated.prompt
        events = generated.trace

    print(prompt)
    if trace:
        print(json.dumps([event.model_dump() for event in events], indent=2))


def main(argv: Optional[list[str]] = None) -> None:
    args = _parse_args(argv)
    _run(
        args.description,
        genre=args.genre,
        layout=args.layout,
        seed=args.seed,
        creativity=args.creativity,
        max_mode=False if args.no_max_mode else None,
        remix=args.remix,
        input_path=args.input,
        target_count=args.target_count,
        trace=args.trace,
    )


if __name__ == "__main__":
    main()
