"""FastAPI application for the Golf Improvement Tracker API."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from config import Settings
from database import NotFoundError, seed_demo_data
from database.db_manager import DatabaseManager
from integrations import GhinApiError, GhinAuthenticationError, GhinConfigurationError
from api.schemas import HealthResponse

logger = logging.getLogger(__name__)

_REQUEST_LOCATIONS = {"body", "query", "path", "form", "header", "cookie"}


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _field_errors(errors) -> list:
    """Flatten pydantic error dicts into [{field, message}]."""
    result = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ())]
        if loc and loc[0] in _REQUEST_LOCATIONS:
            loc = loc[1:]
        result.append({"field": ".".join(loc) or "body", "message": err.get("msg", "Invalid value")})
    return result


def _validation_response(errors) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"detail": "Validation failed", "errors": _field_errors(errors)},
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load demo data on startup."""
    if app.state.settings.seed_demo_data:
        await seed_demo_data(app.state.db_manager)
    yield


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return _validation_response(exc.errors())

    @app.exception_handler(ValidationError)
    async def model_validation_handler(request: Request, exc: ValidationError):
        return _validation_response(exc.errors())

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(GhinConfigurationError)
    async def ghin_config_handler(request: Request, exc: GhinConfigurationError):
        return JSONResponse(status_code=503, content={"detail": str(exc), "code": "setup_required"})

    @app.exception_handler(GhinAuthenticationError)
    async def ghin_auth_handler(request: Request, exc: GhinAuthenticationError):
        return JSONResponse(status_code=401, content={"detail": str(exc), "code": "reconnect_required"})

    @app.exception_handler(GhinApiError)
    async def ghin_api_handler(request: Request, exc: GhinApiError):
        logger.warning("GHIN request failed: %s", exc)
        return JSONResponse(status_code=502, content={"detail": str(exc), "code": "upstream_error"})

    @app.exception_handler(Exception)
    async def unhandled_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app(
    settings: Optional[Settings] = None,
    db: Optional[DatabaseManager] = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Golf Improvement Tracker API",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db_manager = db or DatabaseManager()
    app.state.ghin_oauth_states = {}

    from api.routers.rounds import MULTIPART_OVERHEAD_BYTES, upload_limit_detail
    upload_paths = {"/api/rounds/extract"}

    @app.middleware("http")
    async def limit_upload_size(request: Request, call_next):
        """Refuse oversized uploads from Content-Length before the body is read."""
        if request.url.path in upload_paths:
            length = request.headers.get("content-length", "")
            if length.isdigit() and int(length) > settings.max_upload_bytes + MULTIPART_OVERHEAD_BYTES:
                return JSONResponse(
                    status_code=413,
                    content={"detail": upload_limit_detail(settings.max_upload_bytes)},
                )
        return await call_next(request)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    from api.routers import (
        activities, ghin, practice_plans, resources, rounds, stats, users,
    )
    app.include_router(users.router, prefix="/api/user", tags=["user"])
    app.include_router(stats.router, prefix="/api", tags=["stats"])
    app.include_router(rounds.router, prefix="/api/rounds", tags=["rounds"])
    app.include_router(activities.router, prefix="/api/activities", tags=["activities"])
    app.include_router(resources.router, prefix="/api/resources", tags=["resources"])
    app.include_router(practice_plans.router, prefix="/api/practice-plans", tags=["practice-plans"])
    app.include_router(ghin.router, prefix="/api/ghin", tags=["ghin"])

    @app.get("/api/health", response_model=HealthResponse)
    async def health():
        tables = app.state.db_manager.health_check()
        return HealthResponse(status="ok", users=tables["users"], tables=tables)

    return app


app = create_app()
