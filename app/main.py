import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from app.config import get_settings
from app.errors import (
    AuthError,
    BuildValidationError,
    ConflictError,
    NotFoundError,
    PersistenceError,
)

logger = logging.getLogger(__name__)

# Leading segment pydantic adds to request validation error locations
_REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie"}


def _bootstrap(settings) -> None:
    from app.database import SessionLocal, init_db
    from app.deps import get_memory_storage
    from app.services.bootstrap import bootstrap
    from app.storage import DatabaseStorage

    if settings.STORAGE_BACKEND == "memory":
        bootstrap(get_memory_storage(), settings)
        return

    init_db()
    db = SessionLocal()
    try:
        bootstrap(DatabaseStorage(db), settings)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    if settings.BOOTSTRAP_ON_STARTUP:
        _bootstrap(settings)
    logger.info("Using %s storage", settings.STORAGE_BACKEND)
    yield


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"message": message}, status_code=status_code)


def _validation_response(exc: BuildValidationError) -> JSONResponse:
    return JSONResponse({"message": exc.message, "errors": exc.errors}, status_code=400)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(BuildValidationError)
    async def validation_error_handler(request: Request, exc: BuildValidationError):
        return _validation_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = []
        for err in exc.errors():
            loc = list(err["loc"])
            if loc and loc[0] in _REQUEST_LOCATIONS:
                loc = loc[1:]
            field = ".".join(str(part) for part in loc) or "body"
            errors.append({"field": field, "message": err["msg"]})
        return _validation_response(BuildValidationError(errors))

    @app.exception_handler(ConflictError)
    async def conflict_handler(request: Request, exc: ConflictError):
        return _message(400, exc.message)

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return _message(404, exc.message or "Not found")

    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError):
        return _message(401, exc.message)

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError):
        return _message(500, "Internal server error")

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _message(500, "Internal server error")


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
    app = FastAPI(title=settings.APP_TITLE, lifespan=lifespan)

    upload_dir = Path(settings.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=str(upload_dir)), name="uploads")

    from app.api import api_router

    app.include_router(api_router)
    register_exception_handlers(app)

    @app.middleware("http")
    async def log_api_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        if request.url.path.startswith("/api"):
            duration_ms = (time.perf_counter() - start) * 1000
            logger.info(
                "%s %s %s in %.0fms",
                request.method,
                request.url.path,
                response.status_code,
                duration_ms,
            )
        return response

    # Add SessionMiddleware last so it wraps everything
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SECRET_KEY,
        session_cookie="build_manager_session",
        max_age=86400 * 30,
    )

    return app


app = create_app()
