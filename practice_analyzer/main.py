"""
Swim Practice Analyzer HTTP service.

    uvicorn practice_analyzer.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.routes import health, practice
from .config.settings import Settings, get_settings

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=get_settings().log_level.upper(),
)

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Something went wrong on our side. Please try again."

DESCRIPTION = """
Coaching feedback for free-text swim practice logs.

`POST /api/v1/practice/analyze` with your practice log (and optionally a
competition week flag, events, and weaknesses) returns a per-practice
breakdown, an overall analysis and coaching tips. Send your key in the
`X-API-Key` header.
"""


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Report provider setup and configuration gaps once, at startup."""
    settings = get_settings()
    logger.info(
        "Swim Practice Analyzer starting",
        extra={
            "version": settings.api_version,
            "provider": settings.generation_provider,
            "model": settings.generation_model,
        }
    )

    missing_fields = settings.validate_required_fields()
    if missing_fields:
        # Analyze answers 503 until these are set
        logger.error(
            "Missing required configuration",
            extra={"missing_fields": missing_fields}
        )

    yield

    logger.info("Swim Practice Analyzer stopped")


def _register_routes(app: FastAPI, settings: Settings) -> None:
    app.include_router(health.router, prefix="/health", tags=["Health"])
    app.include_router(practice.router, prefix="/api/v1/practice", tags=["Practice Analysis"])

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "service": settings.api_title,
            "version": settings.api_version,
            "analyze": "/api/v1/practice/analyze",
            "docs": "/docs",
        }


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description=DESCRIPTION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "X-API-Key"],
    )

    _register_routes(app, settings)

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        # Analysis failures are mapped by the route; anything here is a bug
        logger.error(
            "Unhandled exception",
            extra={"path": request.url.path, "method": request.method, "error": str(exc)},
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR_MESSAGE})

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "practice_analyzer.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=get_settings().log_level.lower(),
    )
