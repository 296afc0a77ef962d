from contextlib import asynccontextmanager
import logging
import time

from fastapi import FastAPI
from starlette.requests import Request

from jobly.api.router import api_router
from jobly.core.config import get_settings
from jobly.core.security import authenticate_jwt
from jobly.core.telemetry import configure_api_logging, setup_api_telemetry, shutdown_api_telemetry
from jobly.services.database import get_database

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        yield
    finally:
        shutdown_api_telemetry(app, app.state.telemetry)
        await get_database().close()
        get_database.cache_clear()


def create_app() -> FastAPI:
    settings = get_settings()
    configure_api_logging()

    application = FastAPI(title=settings.app_name, lifespan=lifespan)

    # Registered first so it runs innermost, after the principal is resolved.
    application.middleware("http")(log_request)
    application.middleware("http")(authenticate_jwt)
    application.include_router(api_router)
    # Instrumented last so the server span wraps the auth middleware.
    application.state.telemetry = setup_api_telemetry(application, settings)
    return application


async def log_request(request: Request, call_next):
    started_at = time.perf_counter()
    response = await call_next(request)
    principal = getattr(request.state, "principal", None)
    logger.info(
        "http request method=%s path=%s status=%s user=%s duration_ms=%.2f",
        request.method,
        request.url.path,
        response.status_code,
        principal.username if principal is not None else "-",
        (time.perf_counter() - started_at) * 1000.0,
    )
    return response


app = create_app()
