"""
wordstreak.api.main — FastAPI application entry point
=======================================================

Run with::

    uvicorn wordstreak.api.main:app --reload --port 8000
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

load_dotenv()

from wordstreak import __version__  # noqa: E402
from wordstreak.api.deps import get_config, get_engine  # noqa: E402
from wordstreak.api.routes.competition import router as competition_router  # noqa: E402
from wordstreak.api.routes.entries import router as entries_router  # noqa: E402
from wordstreak.api.routes.mastery import router as mastery_router  # noqa: E402
from wordstreak.api.routes.participants import router as participants_router  # noqa: E402
from wordstreak.api.routes.streaks import router as streaks_router  # noqa: E402
from wordstreak.database.engine import init_db  # noqa: E402

logger = logging.getLogger(__name__)


def _cors_origins() -> list[str]:
    """Resolve allowed CORS origins from env with safe defaults.

    Priority:
      1) CORS_ALLOW_ORIGINS (comma-separated)
      2) FRONTEND_URL (single origin)
    """
    raw = os.getenv("CORS_ALLOW_ORIGINS", "").strip()
    if raw:
        return [origin.strip().rstrip("/") for origin in raw.split(",") if origin.strip()]

    frontend_url = os.getenv("FRONTEND_URL", "").strip()
    if frontend_url:
        return [frontend_url.rstrip("/")]

    return []


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle — create tables and seed the roster."""
    engine = get_engine()
    config = get_config()
    init_db(engine, config)
    logger.info(
        "Wordstreak API started for %s — engine ready (%s)",
        config.community_name, engine.url.database,
    )
    yield
    logger.info("Wordstreak API shutting down")


app = FastAPI(
    title="Wordstreak API",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(HTTPException)
async def http_error(request: Request, exc: HTTPException) -> JSONResponse:
    """Errors go out as ``{"error": "..."}``."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies and bad query/path values are client errors (400)."""
    errors = exc.errors()
    if errors and errors[0].get("type") == "json_invalid":
        message = "Malformed JSON body"
    elif errors:
        first = errors[0]
        where = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{where}: {first.get('msg')}" if where else str(first.get("msg"))
    else:
        message = "Invalid request"
    logger.info("Rejected %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=400, content={"error": message})


# Mount routers
app.include_router(streaks_router, prefix="/api")
app.include_router(entries_router, prefix="/api")
app.include_router(competition_router, prefix="/api")
app.include_router(participants_router, prefix="/api")
app.include_router(mastery_router, prefix="/api")


@app.get("/api/health")
def health():
    return {"status": "ok"}
