from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import PromptLayout


class Settings(BaseSettings):
    """Runtime configuration for prompt generation surfaces."""

    model_config = SettingsConfigDict(
        env_prefix="STYLEPROMPT_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    max_prompt_chars: int = Field(
        default=1000,
        ge=200,
        le=5000,
        description="Character cap applied to every formatted prompt.",
    )
    style_tag_limit: int = Field(
        default=10,
        ge=5,
        le=20,
        description="Maximum number of style tags kept after truncation.",
    )
    default_genre: str = Field(
        default="pop",
        max_length=32,
        description="Genre assumed when a remixed prompt carries no readable genre line.",
    )
    default_mood: str = Field(default="emotional", max_length=32)
    default_layout: PromptLayout = PromptLayout.QUOTED
    creativity_level: int = Field(
        default=50,
        ge=0,
        le=100,
        description="Creativity above 60 disables coherence filtering.",
    )
    max_mode: bool = Field(
        default=True,
        description="Prefix quoted-layout prompts with the MAX header block.",
    )
    trace_enabled: bool = Field(
        default=False,
        description="Collect decision trace events for every request.",
    )

    @model_validator(mode="after")
    def _normalise_defaults(self) -> "Settings":
        self.default_genre = self.default_genre.strip().lower() or "pop"
        self.default_mood = self.default_mood.strip().lower() or "emotional"
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
