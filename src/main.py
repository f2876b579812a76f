"""Feed comments API - Main Application."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.auth.router import router as auth_router
from src.auth.service import AuthService
from src.comments.router import router as comments_router
from src.comments.service import CommentService
from src.config import get_settings
from src.core.context import get_request_id
from src.core.database import init_async_cassandra, shutdown_async_cassandra
from src.core.logging import SENSITIVE_KEYS, configure_structlog, get_logger
from src.core.middleware import RequestContextMiddleware
from src.health import router as health_router
from src.posts.router import router as posts_router
from src.posts.service import PostService


# Configure logging early (before creating logger)
settings = get_settings()
configure_structlog(settings, log_dir=Path(settings.log_dir))

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings = get_settings()
    logger.info(
        "starting_application",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )

    # Without a database the app still serves health checks; service
    # dependencies answer 503.
    try:
        session = await init_async_cassandra()
        logger.info("cassandra_initialized")

        app.state.auth_service = AuthService(
            session=session,
            keyspace=settings.cassandra_keyspace,
        )
        app.state.post_service = PostService(
            session=session,
            keyspace=settings.cassandra_keyspace,
        )
        app.state.comment_service = CommentService(
            session=session,
            keyspace=settings.cassandra_keyspace,
        )
        logger.info("services_initialized")
    except Exception as e:
        logger.warning(
            "database_init_skipped",
            error=str(e),
            message="Running without database connection",
        )
        # A half-initialized schema leaves no services; drop the connection too
        await shutdown_async_cassandra()

    yield

    # Shutdown
    logger.info("shutting_down_application")
    await shutdown_async_cassandra()


def _get_request_id_safe(request: Request) -> str | None:
    """Get request_id from request state or context."""
    if hasattr(request.state, "request_id"):
        return request.state.request_id
    return get_request_id()


def validation_error_items(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Flatten pydantic errors into `{msg, param, location, value}` entries.

    Field validators raise plain messages ("Text is required"); pydantic
    prefixes those with "Value error, " which is dropped here. A missing
    field reads the same as an empty one.
    """
    items = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ())]
        location = loc[0] if loc else "body"
        param = loc[-1] if len(loc) > 1 else ""

        if err.get("type") == "value_error" and "error" in err.get("ctx", {}):
            msg = str(err["ctx"]["error"])
        elif err.get("type") == "missing" and param:
            msg = f"{param.capitalize()} is required"
        else:
            msg = err.get("msg", "Invalid value")

        value = err.get("input")
        # Never echo a password or token back to the client
        if any(sensitive in param.lower() for sensitive in SENSITIVE_KEYS):
            value = None
        items.append(
            {
                "msg": msg,
                "param": param,
                "location": location,
                "value": value if isinstance(value, str | int | float | bool) else None,
            }
        )
    return items


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    # Always debug=False so Starlette never renders stack traces; the
    # handlers below log details and answer with safe messages.
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Comments on feed posts - API",
        debug=False,
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
    )

    # Request context middleware (must be added first - outermost)
    app.add_middleware(
        RequestContextMiddleware,
        log_requests=settings.log_requests,
        exclude_paths=settings.log_exclude_paths,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
        max_age=settings.cors_max_age,
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> ORJSONResponse:
        """Answer HTTP errors as `{"msg": detail}`."""
        logger.warning(
            "http_exception",
            status_code=exc.status_code,
            detail=str(exc.detail),
            path=request.url.path,
            method=request.method,
            request_id=_get_request_id_safe(request),
        )

        msg = (
            str(exc.detail)
            if exc.status_code < status.HTTP_500_INTERNAL_SERVER_ERROR
            else "Server error"
        )
        return ORJSONResponse(
            status_code=exc.status_code,
            content={"msg": msg},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> ORJSONResponse:
        """Answer validation failures with 400 and one entry per field."""
        errors = validation_error_items(exc.errors())

        logger.warning(
            "validation_error",
            errors=[{"param": e["param"], "msg": e["msg"]} for e in errors],
            path=request.url.path,
            method=request.method,
        )

        return ORJSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"errors": errors},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request, exc: Exception
    ) -> ORJSONResponse:
        """Catch-all handler for unhandled exceptions.

        Details go to the log only; the client sees a generic message.
        """
        logger.exception(
            "unhandled_exception",
            error_type=type(exc).__name__,
            error_message=str(exc),
            path=request.url.path,
            method=request.method,
            request_id=_get_request_id_safe(request),
        )

        return ORJSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"msg": "Server error"},
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(posts_router)
    app.include_router(comments_router)

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {
            "message": "Feed comments API",
            "version": settings.app_version,
        }

    return app


app = create_app()
