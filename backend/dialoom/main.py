# backend/dialoom/main.py
from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import is_running_tests, settings
from .core.constants import API_TITLE, API_VERSION, BRAND_NAME
from .database import init_db
from .errors import register_error_handlers
from .middleware.prometheus_middleware import PrometheusMiddleware
from .routes import health, prometheus
from .routes.v1 import admin_config, admin_hosts, bookings, hosts

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown."""
    logger.info(f"{BRAND_NAME} API starting up...")
    logger.info(f"Environment: {settings.environment}")
    if is_running_tests():
        logger.info("Running under pytest (test mode active)")

    init_db()
    if not settings.stripe_configured:
        logger.warning("Stripe is not configured; payment confirmation is disabled")

    yield

    logger.info(f"{BRAND_NAME} API shutting down...")


app = FastAPI(
    title=API_TITLE,
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=app_lifespan,
)
register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["*"],
)
app.add_middleware(PrometheusMiddleware)

api_router = APIRouter(prefix="/api")
api_router.include_router(bookings.router, prefix="/bookings")
api_router.include_router(hosts.router, prefix="/hosts")
api_router.include_router(hosts.host_router, prefix="/host")
api_router.include_router(admin_hosts.router, prefix="/admin/hosts")
api_router.include_router(admin_config.router, prefix="/admin/config")
api_router.include_router(health.router)

app.include_router(api_router)
app.include_router(prometheus.router)


@app.get("/")
def read_root() -> dict[str, str]:
    return {"message": f"Welcome to the {API_TITLE}", "version": API_VERSION}
