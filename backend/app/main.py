"""FastAPI application factory."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.app.core import AppException, StoreError, configure_logging, logs, settings
from backend.app.features.results.routes import router as results_router
from backend.app.features.results.schemas import ErrorResponse


def _error_content(error: str, details=None) -> dict:
    return ErrorResponse(error=error, details=details or None).model_dump(exclude_none=True)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render application errors as ``{"error": ..., "success": false}``."""
    details = None if isinstance(exc, StoreError) else exc.details
    if exc.status_code >= 500:
        logs.error(
            "Request failed",
            "api",
            {"path": request.url.path, "status": exc.status_code},
        )
    return JSONResponse(
        status_code=exc.status_code, content=_error_content(exc.message, details)
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]
    logs.warning("Rejected query parameters", "api", {"path": request.url.path})
    return JSONResponse(
        status_code=400,
        content=_error_content("Invalid query parameters", {"errors": errors}),
    )


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.include_router(results_router, prefix=settings.API_PREFIX)

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok", "version": settings.APP_VERSION}

    return app


app = create_app()
