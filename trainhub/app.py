from __future__ import annotations

import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware

from trainhub import __version__
from trainhub.core.config import Settings, get_settings
from trainhub.core.errors import TrainHubError, ValidationFailure
from trainhub.core.logging import configure_logging, get_logger
from trainhub.repositories import TrainingRepository, UserRepository
from trainhub.routers import barcode as barcode_router
from trainhub.routers import trainings as trainings_router
from trainhub.routers import uploads as uploads_router
from trainhub.routers import users as users_router
from trainhub.services.auth_service import AuthService
from trainhub.services.barcode_service import BarcodeService
from trainhub.services.training_service import TrainingService
from trainhub.services.upload_service import UploadService

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and duration of every request."""

    async def dispatch(self, request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("request failed", method=request.method, path=request.url.path)
            raise
        logger.info(
            "request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return response


def _error_response(message: str, status_code: int, *, field: str | None = None) -> JSONResponse:
    body = {"ok": False, "error": message}
    if field:
        body["field"] = field
    return JSONResponse(body, status_code=status_code)


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(TrainHubError)
    async def trainhub_error_handler(request: Request, exc: TrainHubError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("request error", code=exc.code, detail=exc.message, path=request.url.path)
        field = exc.field if isinstance(exc, ValidationFailure) else None
        return _error_response(exc.public_message, exc.status_code, field=field)

    @app.exception_handler(RequestValidationError)
    async def body_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("invalid request body", path=request.url.path, errors=exc.errors())
        return _error_response("invalid request body", 400)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application with its stores; uvicorn uses this as a factory."""
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="TrainHub API",
        version=__version__,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None,
    )

    # one store per record kind, shared by every request
    users = UserRepository.from_path(settings.users_file)
    trainings = TrainingRepository.from_path(settings.trainings_file)
    upload_service = UploadService(settings)
    upload_service.ensure_dirs()

    app.state.settings = settings
    app.state.users = users
    app.state.trainings = trainings
    app.state.auth_service = AuthService(users)
    app.state.training_service = TrainingService(trainings)
    app.state.upload_service = upload_service
    app.state.barcode_service = BarcodeService(settings)

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.cors_origins),
            allow_credentials="*" not in settings.cors_origins,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
        )
    app.add_middleware(RequestLoggingMiddleware)
    _register_error_handlers(app)

    app.include_router(users_router.router)
    app.include_router(trainings_router.router)
    app.include_router(uploads_router.router)
    app.include_router(barcode_router.router)

    app.mount("/uploads/videos", StaticFiles(directory=settings.video_uploads_dir), name="videos")
    app.mount("/uploads/images", StaticFiles(directory=settings.image_uploads_dir), name="images")
    if settings.client_dir.is_dir():
        app.mount("/", StaticFiles(directory=settings.client_dir, html=True), name="client")

    logger.info(
        "app ready",
        env=settings.app_env,
        users=len(users.store),
        trainings=len(trainings.store),
    )
    return app
