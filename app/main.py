import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from app.core.config import Settings, load_settings
from app.core.db import ConnectionPool
from app.core.logging import configure_logging
from app.core.middleware import BodySizeLimitMiddleware, RequestContextMiddleware, SecurityHeadersMiddleware
from app.core.rate_limit import RateLimiter, RateLimitMiddleware
from app.core.storage import ensure_upload_dir
from app.routers import get_api_router, get_page_router
from app.services import PageComposer
from app.services import exceptions as service_exceptions

STATIC_DIRS = ("images", "partials", "js", "uploads")
SESSION_MAX_AGE = 7 * 24 * 60 * 60


def _storage_error_message(exc: SQLAlchemyError) -> str:
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return str(exc.orig)
    return str(exc)


def _summarize_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts) or "Invalid request"


def _add_middleware(app: FastAPI, settings: Settings, limiter: RateLimiter) -> None:
    # Starlette wraps in reverse order: the last middleware added runs first.
    # The body ceiling sits innermost so its receive wrapper feeds the endpoint directly.
    app.add_middleware(
        BodySizeLimitMiddleware,
        max_body_bytes=settings.app.max_body_bytes,
        max_upload_bytes=settings.app.max_upload_bytes,
    )
    app.add_middleware(
        RateLimitMiddleware,
        limiter=limiter,
        prefix=settings.app.api_prefix,
        trust_proxy=settings.server.trust_proxy,
    )
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.server.session_secret,
        session_cookie="sid",
        max_age=SESSION_MAX_AGE,
        same_site="lax",
        https_only=settings.secure_cookies,
    )
    if settings.app.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.app.cors_origins),
            allow_credentials=False,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestContextMiddleware, trust_proxy=settings.server.trust_proxy)


def _mount_static(app: FastAPI, settings: Settings) -> None:
    public_dir = settings.app.public_dir
    ensure_upload_dir(public_dir)
    for name in STATIC_DIRS:
        directory = public_dir / name
        if directory.is_dir():
            app.mount(f"/{name}", StaticFiles(directory=directory), name=name)
    if public_dir.is_dir():
        app.mount("/public", StaticFiles(directory=public_dir), name="public")


def create_app(settings: Optional[Settings] = None, pool: Optional[ConnectionPool] = None) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings)

    logger = logging.getLogger("app.validation")
    error_logger = logging.getLogger("app.errors")

    app = FastAPI(
        title=settings.app.project_name,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None,
        openapi_url=None if settings.is_production else "/openapi.json",
    )
    app.state.settings = settings
    app.state.pool = pool or ConnectionPool.from_settings(settings.db)
    limiter = RateLimiter(
        limit=settings.app.rate_limit_requests,
        window_seconds=settings.app.rate_limit_window_seconds,
        redis_url=settings.app.redis_url,
    )
    app.state.rate_limiter = limiter

    _add_middleware(app, settings, limiter)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        body_bytes = await request.body()
        body_text = body_bytes.decode("utf-8", errors="replace") if body_bytes else ""
        logger.error(
            "Validation error on %s %s body=%s detail=%s",
            request.method,
            request.url.path,
            body_text,
            exc.errors(),
        )
        errors = exc.errors()
        if errors and all(error.get("loc", ("",))[0] == "path" for error in errors):
            # An unparseable id cannot name an existing record.
            return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"message": "Not found"})
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": _summarize_validation_errors(exc)},
        )

    @app.exception_handler(service_exceptions.ValidationError)
    async def service_validation_handler(request: Request, exc: service_exceptions.ValidationError):
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": str(exc)})

    @app.exception_handler(service_exceptions.NotFoundError)
    async def not_found_handler(request: Request, exc: service_exceptions.NotFoundError):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"message": str(exc)})

    @app.exception_handler(SQLAlchemyError)
    async def storage_error_handler(request: Request, exc: SQLAlchemyError):
        error_logger.exception("Storage error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"ok": False, "error": _storage_error_message(exc)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_413_REQUEST_ENTITY_TOO_LARGE:
            return JSONResponse(status_code=exc.status_code, content={"ok": False, "error": "Payload Too Large"})
        if exc.status_code != status.HTTP_404_NOT_FOUND:
            return await http_exception_handler(request, exc)
        if "text/html" in request.headers.get("accept", ""):
            composer = PageComposer(settings.app.public_dir)
            html = await run_in_threadpool(composer.render)
            return HTMLResponse(html, status_code=status.HTTP_404_NOT_FOUND)
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"ok": False, "error": "Not Found"})

    app.include_router(get_page_router(include_debug=not settings.is_production))
    api_router = get_api_router()
    app.include_router(api_router)
    app.include_router(api_router, prefix=settings.app.api_prefix)
    _mount_static(app, settings)

    @app.on_event("startup")
    def startup_event():
        app.state.pool.create_all()
        limiter.init_backend()

    @app.on_event("shutdown")
    def shutdown_event():
        app.state.pool.dispose()

    return app


def run() -> None:
    import uvicorn

    settings = load_settings()
    uvicorn.run(
        create_app(settings),
        host="0.0.0.0",
        port=settings.server.port,
        proxy_headers=settings.server.trust_proxy,
    )


if __name__ == "__main__":
    run()
