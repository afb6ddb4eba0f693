"""FastAPI application entrypoint. No business logic; only wiring, middleware and error envelopes."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from pictura.api.v1 import router as v1_router
from pictura.core.config import settings
from pictura.core.database import session_scope
from pictura.core.errors import AppError
from pictura.schemas.common import ErrorResponse
from pictura.services.accounts import ensure_admin

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"

# Documents the envelope produced by the exception handlers below.
ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    code: {"model": ErrorResponse}
    for code in (
        status.HTTP_400_BAD_REQUEST,
        status.HTTP_401_UNAUTHORIZED,
        status.HTTP_403_FORBIDDEN,
        status.HTTP_404_NOT_FOUND,
        status.HTTP_409_CONFLICT,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
}


def provision_admin() -> None:
    """Create the configured administrator once if it does not exist yet."""
    if not settings.ADMIN_EMAIL or settings.ADMIN_PASSWORD is None:
        logger.info("ADMIN_EMAIL/ADMIN_PASSWORD not set; skipping administrator provisioning.")
        return
    try:
        with session_scope() as db:
            _, created = ensure_admin(
                db,
                settings.ADMIN_EMAIL,
                settings.ADMIN_PASSWORD.get_secret_value(),
                settings.ADMIN_NAME,
            )
        if created:
            logger.info("Administrator account created for %s", settings.ADMIN_EMAIL)
    except AppError as e:
        logger.error("Administrator provisioning rejected: %s", e.message)
    except SQLAlchemyError:
        logger.exception("Administrator provisioning failed; database unavailable")


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    provision_admin()
    yield


app = FastAPI(
    title="Pictura API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)


def _error_response(
    status_code: int,
    message: str,
    errors: list | None = None,
) -> JSONResponse:
    content: dict = {"success": False, "message": message}
    if errors is not None:
        content["errors"] = errors
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=status_code, content=content, headers=headers)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        message = INTERNAL_ERROR_MESSAGE if settings.APP_ENV == "prod" else exc.message
        return _error_response(exc.status_code, message)
    return _error_response(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        "Invalid request",
        errors=[
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
            for err in exc.errors()
        ],
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        message = f"Route not found: {request.method} {request.url.path}"
    else:
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return _error_response(exc.status_code, message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = INTERNAL_ERROR_MESSAGE if settings.APP_ENV == "prod" else str(exc) or INTERNAL_ERROR_MESSAGE
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, message)


app.include_router(v1_router, prefix=settings.API_V1_PREFIX, responses=ERROR_RESPONSES)


@app.get("/")
def root() -> dict[str, object]:
    """Root route; minimal payload for discovery."""
    return {
        "success": True,
        "message": "Pictura API",
        "version": app.version,
        "environment": settings.APP_ENV,
    }
