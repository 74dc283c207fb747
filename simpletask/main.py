"""FastAPI application that serves the SimpleTask front-end.

Task data never reaches this server: the client keeps it in local storage.
The app only serves static assets and falls back to ``index.html`` so that
client-side routes resolve.
"""

import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, PlainTextResponse
from loguru import logger

from simpletask import __version__
from simpletask.config import Settings, load_settings
from simpletask.models import HealthResponse

ROOT_MESSAGE = (
    "SimpleTask Backend (Static File Server) is running. "
    "Data persistence is client-side (LocalStorage)."
)


def _resolve_static(static_dir: Path, path: str) -> Path | None:
    """Map a request path to a file inside static_dir, or None."""
    root = static_dir.resolve()
    candidate = (root / path.lstrip("/")).resolve()
    if not candidate.is_relative_to(root):
        return None
    return candidate if candidate.is_file() else None


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the static file server."""
    settings = settings or load_settings()
    static_dir = settings.static_dir

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        logger.info("Serving static assets from {}", static_dir.resolve())
        logger.info("Task data persistence is client-side (LocalStorage).")
        yield

    app = FastAPI(
        title="SimpleTask",
        description="Static file server for the SimpleTask to-do list.",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "{} {} {} {} - {:.1f} ms",
            request.method,
            request.url.path,
            response.status_code,
            response.headers.get("content-length", "-"),
            elapsed_ms,
        )
        return response

    @app.get("/", response_class=PlainTextResponse, tags=["System"])
    async def root() -> str:
        """Report that the server is running."""
        return ROOT_MESSAGE

    @app.get("/api/health", response_model=HealthResponse, tags=["System"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(version=__version__)

    @app.get("/{full_path:path}", include_in_schema=False)
    async def static_or_index(full_path: str) -> FileResponse:
        """Serve a static asset, or index.html for any unmatched route."""
        asset = _resolve_static(static_dir, full_path)
        if asset is not None:
            return FileResponse(asset)

        index = _resolve_static(static_dir, "index.html")
        if index is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Not found",
            )
        return FileResponse(index)

    return app
