# stock_relay/errors.py
"""
Error types raised by the stock handlers and the boundary filter.
Each one carries the HTTP status and the short `error` label that
ends up in the JSON body.
"""
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class StockRelayError(Exception):
    def __init__(self, message: str, error: str, status_code: int, hint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error = error
        self.status_code = status_code
        self.hint = hint

    def to_dict(self) -> dict:
        body = {"error": self.error, "message": self.message}
        if self.hint:
            body["hint"] = self.hint
        return body


class UnauthorizedError(StockRelayError):
    def __init__(self, message: str = "Invalid or missing Authorization header", hint: Optional[str] = None):
        super().__init__(message, error="Unauthorized", status_code=401, hint=hint)


class BadRequestError(StockRelayError):
    def __init__(self, message: str):
        super().__init__(message, error="Bad request", status_code=400)


class StockNotFoundError(StockRelayError):
    def __init__(self, stock_id: str):
        super().__init__(f"Stock with id {stock_id} not found", error="Not found", status_code=404)
        self.stock_id = stock_id


class InternalError(StockRelayError):
    def __init__(self, message: str):
        super().__init__(message, error="Internal server error", status_code=500)


def setup_error_handlers(app: FastAPI) -> None:
    """Registers the handler that renders StockRelayError as {error, message}."""

    @app.exception_handler(StockRelayError)
    async def handle_stock_relay_error(request: Request, exc: StockRelayError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"❌ {request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
