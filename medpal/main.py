import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from prometheus_client import make_asgi_app

from medpal.api.errors import register_exception_handlers
from medpal.api.v1.api import api_router
from medpal.container import Services, services_from_settings
from medpal.core.config import Settings, get_settings

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    services: Services = app.state.services
    logger.info(f"Starting up {services.settings.PROJECT_NAME} ({services.settings.ENVIRONMENT.value})...")
    logger.info(
        f"Channels | sms configured={services.dispatcher.sms_sender.configured}, "
        f"email configured={services.dispatcher.email_sender.configured}"
    )
    yield
    logger.info("Shutting down...")


def create_app(settings: Optional[Settings] = None, services: Optional[Services] = None) -> FastAPI:
    settings = settings or (services.settings if services else get_settings())
    app = FastAPI(title=settings.PROJECT_NAME, version=settings.VERSION, lifespan=lifespan)
    app.state.services = services or services_from_settings(settings)

    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.API_V1_STR)
    if settings.METRICS_ENABLED:
        app.mount("/metrics", make_asgi_app())
    return app
