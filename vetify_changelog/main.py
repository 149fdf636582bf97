"""
Vetify Changelog API

Serves the Vetify release history to the public updates page.

This API provides:
- Parsed changelog entries in source order
- Spanish display labels and dates for each version
- Lookup of the latest release or a specific version
- Parsing of ad-hoc changelog markdown for previews
"""

import re
import time
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from vetify_changelog.config.config import Settings, get_settings
from vetify_changelog.config.logging_config import configure_logging, get_logger, log_request_context
from vetify_changelog.models.models import (
    ChangelogEntryView,
    ChangelogResponse,
    ErrorResponse,
    HealthResponse,
    HealthStatus,
    ParseChangelogRequest,
)
from vetify_changelog.services.changelog_content import (
    ChangelogNotFoundError,
    get_changelog_content,
    resolve_changelog_path,
)
from vetify_changelog.services.changelog_parser import parse_changelog
from vetify_changelog.services.changelog_presenter import present_entries

configure_logging()
logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
# Accepted caller-supplied request ids (proxies, the Next.js frontend)
REQUEST_ID_PATTERN = re.compile(r'^[A-Za-z0-9._-]{1,128}$')


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log which changelog will be served and whether it exists."""
    settings = get_settings()
    changelog_path = resolve_changelog_path(settings.changelog_path)

    logger.info(
        "Changelog service starting",
        version=settings.app_version,
        environment=settings.environment,
        changelog=str(changelog_path),
        changelog_available=changelog_path.is_file(),
        config=settings.get_safe_config_dict(),
    )

    yield

    logger.info("Changelog service stopped")


def _request_id_for(request: Request) -> str:
    """Reuse the caller's X-Request-ID when it is well formed, otherwise mint one."""
    incoming = request.headers.get(REQUEST_ID_HEADER, "")
    if REQUEST_ID_PATTERN.match(incoming):
        return incoming
    return str(uuid4())


def _error_response(
    request: Request,
    status_code: int,
    error: str,
    message: str,
    details: dict | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=error,
            message=message,
            details=details,
            request_id=getattr(request.state, "request_id", None),
        ).model_dump(mode="json"),
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Optional settings override for testing.

    Returns:
        Configured FastAPI application.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description=__doc__,
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    # The updates page only reads the changelog and posts previews
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
    )

    @app.middleware("http")
    async def bind_request_id(request: Request, call_next):
        """Tag each request with an id, echo it back and log the timing."""
        request_id = _request_id_for(request)
        request.state.request_id = request_id
        log_request_context(request_id=request_id, method=request.method, path=request.url.path)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = int((time.perf_counter() - started) * 1000)

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Processing-Time-Ms"] = str(elapsed_ms)
        logger.info("Request completed", status_code=response.status_code, processing_time_ms=elapsed_ms)
        return response

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return _error_response(request, exc.status_code, f"HTTP_{exc.status_code}", str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Report invalid request bodies without echoing the submitted input."""
        errors = [
            {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", ""), "type": err.get("type", "")}
            for err in exc.errors()
        ]
        logger.info("Request rejected", errors=errors)
        return _error_response(request, 422, "VALIDATION_ERROR", "Invalid request body", {"errors": errors})

    @app.exception_handler(ChangelogNotFoundError)
    async def changelog_not_found_handler(request: Request, exc: ChangelogNotFoundError):
        return _error_response(
            request, 404, "CHANGELOG_NOT_FOUND", "Changelog is not available", {"reason": str(exc)}
        )

    @app.exception_handler(Exception)
    async def unexpected_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception", error=str(exc))
        return _error_response(request, 500, "INTERNAL_ERROR", "An unexpected error occurred")

    register_routes(app)

    return app


def load_entries(settings: Settings) -> list[ChangelogEntryView]:
    """Read, parse and present the configured changelog."""
    content = get_changelog_content(settings.changelog_path)
    return present_entries(parse_changelog(content))


def register_routes(app: FastAPI) -> None:
    """Register all API routes."""

    @app.get("/", tags=["Root"])
    async def root(settings: Settings = Depends(get_settings)):
        """Root endpoint with API information."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "status": "operational",
            "docs": "/docs" if settings.debug else "disabled",
        }

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(settings: Settings = Depends(get_settings)) -> HealthResponse:
        """
        Health check endpoint for monitoring.

        Reports degraded when the changelog file is missing.
        """
        checks = {
            "api": True,
            "changelog_available": resolve_changelog_path(settings.changelog_path).is_file(),
        }

        status = HealthStatus.HEALTHY if all(checks.values()) else HealthStatus.DEGRADED

        return HealthResponse(
            status=status,
            version=settings.app_version,
            environment=settings.environment,
            checks=checks,
        )

    @app.get("/api/v1/changelog", response_model=ChangelogResponse, tags=["Changelog"])
    async def get_changelog(settings: Settings = Depends(get_settings)) -> ChangelogResponse:
        """
        Get all changelog entries.

        Entries keep the order of the version headings in CHANGELOG.md;
        versions without recognized categories are omitted.
        """
        entries = load_entries(settings)
        logger.info("Changelog served", total_entries=len(entries))
        source = resolve_changelog_path(settings.changelog_path)
        return ChangelogResponse(entries=entries, total=len(entries), source=str(source))

    @app.get("/api/v1/changelog/latest", response_model=ChangelogEntryView, tags=["Changelog"])
    async def get_latest_entry(settings: Settings = Depends(get_settings)) -> ChangelogEntryView:
        """Get the most recent changelog entry (the first in the file)."""
        entries = load_entries(settings)
        if not entries:
            raise HTTPException(status_code=404, detail="No changelog entries available")
        return entries[0]

    @app.get("/api/v1/changelog/{version}", response_model=ChangelogEntryView, tags=["Changelog"])
    async def get_entry(version: str, settings: Settings = Depends(get_settings)) -> ChangelogEntryView:
        """
        Get a single changelog entry.

        Args:
            version: Version token exactly as written, e.g. "1.2.0" or "Unreleased".
        """
        for entry in load_entries(settings):
            if entry.version == version:
                return entry
        raise HTTPException(status_code=404, detail=f"Version not found: {version}")

    @app.post("/api/v1/changelog/parse", response_model=ChangelogResponse, tags=["Changelog"])
    async def parse_changelog_content(request: ParseChangelogRequest) -> ChangelogResponse:
        """
        Parse changelog markdown sent in the request body.

        Malformed markdown is not an error; it yields fewer or no entries.
        """
        entries = present_entries(parse_changelog(request.content))
        logger.info("Changelog preview parsed", total_entries=len(entries), chars=len(request.content))
        return ChangelogResponse(entries=entries, total=len(entries))


# Create the application instance
app = create_app()


def run() -> None:
    """Run the API with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "vetify_changelog.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
