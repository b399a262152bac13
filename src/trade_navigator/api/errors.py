"""
Exception handlers that turn handled errors into {"error": ...} responses.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..errors import TradeNavigatorError

logger = logging.getLogger(__name__)


def error_body(exc: TradeNavigatorError) -> dict:
    body = {"error": exc.message}
    if exc.details is not None:
        body["details"] = exc.details
    return body


def register_error_handlers(app: FastAPI):
    """Register global exception handlers."""

    @app.exception_handler(TradeNavigatorError)
    async def handled_error(request: Request, exc: TradeNavigatorError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=error_body(exc))

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": "The server encountered an unexpected error"},
        )
