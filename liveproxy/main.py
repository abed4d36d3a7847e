"""
Live Proxy Application Entry Point

FastAPI application main entry, including router registration and application configuration.
"""

import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from liveproxy import __version__
from liveproxy.api import proxy_router
from liveproxy.api.proxy import to_fastapi_response
from liveproxy.common.errors import AppError
from liveproxy.config import get_settings
from liveproxy.logging_config import setup_logging
from liveproxy.services import build_error_response

logger = logging.getLogger(__name__)

# Initialize logging configuration
setup_logging()

settings = get_settings()

# Generated docs are disabled: every path belongs to the catch-all proxy route.
app = FastAPI(
    title=settings.APP_NAME,
    description="Transparent HTTP(S) proxy with CORS and live-stream headers",
    version=__version__,
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)


# Global Exception Handler
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """
    Handle application custom exceptions

    Reported in the same plain-text shape as proxy failures.
    """
    logger.error("Request failed: path=%s code=%s error=%s", request.url.path, exc.code, exc.message)
    return to_fastapi_response(build_error_response(exc))


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """
    Handle uncaught exceptions

    In production mode, stack traces and error details are logged but not returned to clients.
    """
    settings = get_settings()
    logger.error(
        "Uncaught exception: %s\nPath: %s\nTraceback:\n%s",
        str(exc),
        request.url.path,
        traceback.format_exc(),
    )

    if settings.DEBUG:
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "message": str(exc),
                    "type": type(exc).__name__,
                    "code": "internal_error",
                    "traceback": traceback.format_exc().split("\n"),
                }
            },
            headers={"Access-Control-Allow-Origin": "*"},
        )

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "message": "Internal server error",
                "type": "internal_error",
                "code": "internal_error",
            }
        },
        headers={"Access-Control-Allow-Origin": "*"},
    )


# Health Check Endpoint
@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health Check

    Used for service liveness probe.
    """
    return {"status": "healthy"}


# Registered last: the proxy route matches every path
app.include_router(proxy_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "liveproxy.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
