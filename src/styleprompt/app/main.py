from __future__ import annotations

from fastapi import FastAPI
from loguru import logger

from ..services.builder import PromptBuilder
from ..services.catalog import CATALOG
from ..services.remix import RemixEngine
from .routes import router
from .settings import Settings, get_settings


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure FastAPI instance."""
    settings = settings or get_settings()
    app = FastAPI(title="Styleprompt", version="0.1.0")
    app.state.settings = settings
    app.state.builder = PromptBuilder(settings)
    app.state.remix_engine = RemixEngine(
        default_genre=settings.default_genre,
        style_tag_limit=settings.style_tag_limit,
    )
    app.include_router(router)
    logger.info(
        "Styleprompt app ready: catalog v{} with {} genres",
        CATALOG.version,
        len(CATALOG.genres),
    )
    return app


app = create_app()
