from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from itemlister.api.errors import register_error_handlers
from itemlister.api.routes import export, health, images, pipeline, records
from itemlister.api.services import Services, build_services
from itemlister.config.settings import Settings
from itemlister.logging.logger import Log


def create_app(settings: Settings, services: Services | None = None) -> FastAPI:
    """Build the HTTP application around a fully wired service set."""
    services = services or build_services(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        Log.info(f"itemlister API started (env={settings.app_env})")
        yield
        services.shutdown()
        Log.info("itemlister API stopped")

    app = FastAPI(title="itemlister", version="1.0.0", lifespan=lifespan)
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app, production=settings.is_production)

    app.include_router(health.router)
    app.include_router(images.router)
    app.include_router(pipeline.router)
    app.include_router(records.cards_router)
    app.include_router(records.books_router)
    app.include_router(export.card_export_router)
    app.include_router(export.book_export_router)

    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=upload_dir), name="uploads")
    return app
