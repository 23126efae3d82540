"""FastAPI application factory / entrypoint.

This service exposes HTTP endpoints for:
- user registration/login and bearer-token authentication
- owner-scoped CRUD over teams, players and per-game stat lines
- player and team statistics (AVG/OBP/SLG/OPS, ERA/WHIP/K9/BB9)
- public, read-only team/player pages for sharing
- health checks

The API is intended to be consumed by the React web frontend and by
`baseball_stats_api.client`.

Operational notes:
- CORS origins come from settings (local Vite dev by default).
- Uploaded profile images are served from `/uploads`.
- Every error leaves as `{"ok": false, "error": <code>, "detail": <message>}`.
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .db import init_db
from .errors import ApiError, error_body
from .logging_config import configure_logging
from .routes import router
from .settings import get_settings
from .uploads import PUBLIC_PREFIX

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

_STATUS_CODES = {
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
}


@asynccontextmanager
async def lifespan(_app: FastAPI):
    init_db()
    yield


app = FastAPI(title="Baseball Stats API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

os.makedirs(settings.upload_dir, exist_ok=True)
app.mount(PUBLIC_PREFIX, StaticFiles(directory=settings.upload_dir), name="uploads")

app.include_router(router)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.code, exc.detail),
        headers=exc.headers,
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    code = _STATUS_CODES.get(exc.status_code, "error")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(code, exc.detail),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content=error_body("validation", jsonable_encoder(exc.errors())),
    )


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Storage error on %s %s", request.method, request.url.path)
    detail = str(exc) if settings.environment == "development" else "Database error"
    return JSONResponse(status_code=500, content=error_body("storage_error", detail))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    detail = str(exc) if settings.environment == "development" else "Internal server error"
    return JSONResponse(status_code=500, content=error_body("error", detail))


@app.get("/health")
def health():
    """Health check endpoint.

    Returns a minimal payload used by local dev tooling, containers, and
    orchestrators (Docker Compose / Kubernetes) to determine whether the API
    process is up and able to serve requests.

    Returns:
        dict: `{"status": "ok", "service": "api"}`.
    """
    return {"status": "ok", "service": "api"}
