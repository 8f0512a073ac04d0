"""Read-only genre catalog loaded from the bundled JSON data file."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .vocabulary import (
    DEFAULT_MODES,
    DEFAULT_PROGRESSIONS,
    DEFAULT_REVERBS,
    DEFAULT_TEXTURES,
    DEFAULT_VOCALS,
)

_CATALOG_PATH = Path(__file__).resolve().parents[1] / "data" / "catalog.json"

TAG_CATEGORIES = ("vocal", "spatial", "harmonic", "dynamic", "temporal")


@dataclass(frozen=True)
class BpmSpan:
    min: int
    max: int
    typical: int


@dataclass(frozen=True)
class InstrumentPool:
    name: str
    items: tuple[str, ...]
    min_pick: int
    max_pick: int
    chance: float


@dataclass(frozen=True)
class InstrumentRules:
    order: tuple[str, ...]
    pools: dict[str, InstrumentPool]
    max_tags: int
    exclusions: tuple[tuple[str, str], ...]


@dataclass(frozen=True)
class ChordProgression:
    name: str
    pattern: str


@dataclass(frozen=True)
class VocalProfile:
    ranges: tuple[str, ...]
    deliveries: tuple[str, ...]


@dataclass(frozen=True)
class GenreDefinition:
    id: str
    name: str
    keywords: tuple[str, ...]
    bpm: BpmSpan
    moods: tuple[str, ...]
    instruments: InstrumentRules
    textures: tuple[str, ...]
    reverbs: tuple[str, ...]
    recording_contexts: tuple[str, ...]
    tag_weights: Optional[dict[str, float]]
    progressions: tuple[ChordProgression, ...]
    vocals: VocalProfile
    modes: tuple[str, ...]


@dataclass(frozen=True)
class Catalog:
    version: int
    genres: dict[str, GenreDefinition]
    priority: tuple[str, ...]
    aliases: dict[str, str]
    mood_genres: dict[str, str]
    names: dict[str, str]

    @property
    def genre_ids(self) -> list[str]:
        return list(self.genres)

    def get(self, genre_id: str) -> Optional[GenreDefinition]:
        return self.genres.get(genre_id.strip().lower())

    def lookup(self, token: str) -> Optional[str]:
        """Map an identifier, display name or alias onto its canonical identifier."""
        key = token.strip().lower()
        if not key:
            return None
        if key in self.genres:
            return key
        if key in self.names:
            return self.names[key]
        return self.aliases.get(key)

    def scan_order(self) -> list[str]:
        ordered = [genre_id for genre_id in self.priority if genre_id in self.genres]
        ordered.extend(genre_id for genre_id in self.genres if genre_id not in ordered)
        return ordered

    def display_name(self, genre_id: str) -> str:
        genre = self.get(genre_id)
        return genre.name if genre is not None else genre_id.title()


def _build_instrument_rules(genre_id: str, raw: dict) -> InstrumentRules:
    pools: dict[str, InstrumentPool] = {}
    for name, entry in raw["pools"].items():
        min_pick = int(entry.get("min", 1))
        max_pick = int(entry.get("max", min_pick))
        if min_pick > max_pick:  # pragma: no cover - configuration error
            raise ValueError(f"pool '{name}' of genre '{genre_id}' has min > max")
        pools[name] = InstrumentPool(
            name=name,
            items=tuple(entry["items"]),
            min_pick=min_pick,
            max_pick=max_pick,
            chance=float(entry.get("chance", 1.0)),
        )
    order = tuple(raw.get("order") or pools.keys())
    for name in order:
        if name not in pools:  # pragma: no cover - configuration error
            raise ValueError(f"genre '{genre_id}' orders unknown pool '{name}'")
    exclusions = tuple((pair[0], pair[1]) for pair in raw.get("exclusions", []))
    return InstrumentRules(
        order=order,
        pools=pools,
        max_tags=int(raw.get("max_tags", 4)),
        exclusions=exclusions,
    )


def _build_genre(entry: dict) -> GenreDefinition:
    genre_id = entry["id"].strip().lower()
    bpm_raw = entry["bpm"]
    bpm = BpmSpan(
        min=int(bpm_raw["min"]),
        max=int(bpm_raw["max"]),
        typical=int(bpm_raw.get("typical", (bpm_raw["min"] + bpm_raw["max"]) // 2)),
    )
    if not bpm.min <= bpm.typical <= bpm.max:  # pragma: no cover - configuration error
        raise ValueError(f"genre '{genre_id}' bpm must satisfy min <= typical <= max")

    production = entry.get("production", {})
    weights = entry.get("tag_weights")
    if weights is not None:
        unknown = set(weights) - set(TAG_CATEGORIES)
        if unknown:  # pragma: no cover - configuration error
            raise ValueError(f"genre '{genre_id}' has unknown tag weights {sorted(unknown)}")

    vocals_raw = entry.get("vocals", DEFAULT_VOCALS)
    progressions_raw = entry.get("progressions") or DEFAULT_PROGRESSIONS
    return GenreDefinition(
        id=genre_id,
        name=entry.get("name", genre_id.title()),
        keywords=tuple(entry.get("keywords", [genre_id])),
        bpm=bpm,
        moods=tuple(entry.get("moods", [])),
        instruments=_build_instrument_rules(genre_id, entry["instruments"]),
        textures=tuple(production.get("textures") or DEFAULT_TEXTURES),
        reverbs=tuple(production.get("reverbs") or DEFAULT_REVERBS),
        recording_contexts=tuple(entry.get("recording_contexts", [])),
        tag_weights=dict(weights) if weights is not None else None,
        progressions=tuple(
            ChordProgression(name=item["name"], pattern=item["pattern"])
            for item in progressions_raw
        ),
        vocals=VocalProfile(
            ranges=tuple(vocals_raw["ranges"]),
            deliveries=tuple(vocals_raw["deliveries"]),
        ),
        modes=tuple(entry.get("modes") or DEFAULT_MODES),
    )


def load_catalog(path: Path = _CATALOG_PATH) -> Catalog:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:  # pragma: no cover - configuration error
        raise RuntimeError(f"genre catalog file missing at {path}") from exc

    genres: dict[str, GenreDefinition] = {}
    for entry in raw["genres"]:
        genre = _build_genre(entry)
        if genre.id in genres:  # pragma: no cover - configuration error
            raise ValueError(f"duplicate genre identifier '{genre.id}' in catalog")
        genres[genre.id] = genre

    aliases: dict[str, str] = {}
    for alias, target in raw.get("aliases", {}).items():
        if target not in genres:  # pragma: no cover - configuration error
            raise ValueError(f"alias '{alias}' points at unknown genre '{target}'")
        aliases[alias.lower()] = target

    mood_genres = {
        phrase.lower(): target
        for phrase, target in raw.get("mood_genres", {}).items()
        if target in genres
    }
    names = {genre.name.lower(): genre.id for genre in genres.values()}

    return Catalog(
        version=int(raw["version"]),
        genres=genres,
        priority=tuple(raw.get("priority", [])),
        aliases=aliases,
        mood_genres=mood_genres,
        names=names,
    )


CATALOG = load_catalog()
