"""
Обробники помилок: будь-яка помилка віддається як ``{"message": str}``.

Збої сховища та неочікувані винятки пишуться в лог сервера, а клієнт
отримує загальну відповідь 500 без внутрішніх деталей.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import settings
from core.errors import (
    RecordConflictError,
    RecordError,
    RecordNotFoundError,
    RecordValidationError,
)

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal Server Error"


def status_for(exc: RecordError) -> int:
    if isinstance(exc, RecordNotFoundError):
        return settings.NOT_FOUND_STATUS_CODE
    if isinstance(exc, RecordConflictError):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, RecordValidationError):
        return status.HTTP_400_BAD_REQUEST
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RecordError)
    async def record_error_handler(request: Request, exc: RecordError):
        status_code = status_for(exc)
        if status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}", exc_info=exc)
            return JSONResponse(status_code=status_code, content={"message": INTERNAL_ERROR_MESSAGE})

        logger.info(f"{request.method} {request.url.path} -> {status_code}: {exc.message}")
        return JSONResponse(status_code=status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.info(f"{request.method} {request.url.path} rejected: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": "Invalid request data"},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": INTERNAL_ERROR_MESSAGE},
        )
