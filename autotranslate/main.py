import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from autotranslate.automatic.registry import host_registry, host_type_of
from autotranslate.config import settings
from autotranslate.database import get_db
from autotranslate.routes.automatic_translations import build_automatic_translation_router
from autotranslate.scheduler import scheduler
from autotranslate.utils.logging import setup_structured_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.automatic_translation_asynchronously and not scheduler.running:
        scheduler.start()
        logger.info("Translation scheduler started")
    yield
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Translation scheduler stopped")


def create_app() -> FastAPI:
    """Create the FastAPI application with toggle routes for every registered model.

    Models must be imported (and so registered) before this is called.
    """
    setup_structured_logging(settings.log_level, json_format=settings.log_json)

    app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)

    for model in host_registry.all_models():
        host_type = host_type_of(model)
        app.include_router(
            build_automatic_translation_router(model, get_db),
            prefix=f"/api/v1/{host_type}",
        )
        logger.info("Mounted automatic translation routes for %s", host_type)

    @app.get("/health")
    def health():
        return {"status": "ok", "asynchronous": settings.automatic_translation_asynchronously}

    return app
