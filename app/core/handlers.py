from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import ApiError


def _client_address(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def _failure(status_code: int, message: str, errors=None, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "statusCode": status_code,
            "success": False,
            "message": message,
            "errors": errors or [],
        },
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if isinstance(exc, ApiError):
        message, errors = exc.message, exc.errors
    else:
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        errors = [] if isinstance(exc.detail, str) else [exc.detail]

    if exc.status_code == status.HTTP_404_NOT_FOUND and not isinstance(exc, ApiError):
        message = f"Route {request.method} {request.url.path} not found"

    logger.warning(
        f"{exc.status_code} - {message} | path={request.url.path} "
        f"method={request.method} ip={_client_address(request)}"
    )
    return _failure(exc.status_code, message, errors, getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())[1:]) or None,
            "message": err.get("msg"),
        }
        for err in exc.errors()
    ]
    logger.warning(
        f"400 - Validation failed | path={request.url.path} "
        f"method={request.method} ip={_client_address(request)} errors={errors}"
    )
    return _failure(status.HTTP_400_BAD_REQUEST, "Validation failed", errors)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error(
        f"500 - {exc} | path={request.url.path} "
        f"method={request.method} ip={_client_address(request)}"
    )
    return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError,
                              validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
