# orderhub/api/errors.py
"""
The one place where domain errors become HTTP responses.
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from orderhub.domain.errors import DomainError, ErrorKind
from orderhub.utils.logging import get_logger

logger = get_logger(__name__)

_HTTP_KINDS = {
    401: ErrorKind.UNAUTHENTICATED,
    403: ErrorKind.FORBIDDEN,
    404: ErrorKind.NOT_FOUND,
    409: ErrorKind.CONFLICT,
}


def error_response(status_code: int, kind: ErrorKind, detail) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": kind.value, "detail": detail})


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.kind.value}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.kind.value}: {exc.message}")
    return error_response(exc.status_code, exc.kind, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg")}
        for e in exc.errors()
    ]
    return error_response(400, ErrorKind.INVALID_ARGUMENT, errors)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    #framework errors: unknown route, wrong method, ...
    default = ErrorKind.INTERNAL if exc.status_code >= 500 else ErrorKind.INVALID_ARGUMENT
    kind = _HTTP_KINDS.get(exc.status_code, default)
    return error_response(exc.status_code, kind, exc.detail)


async def persistence_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception(f"{request.method} {request.url.path} persistence failure")
    return error_response(500, ErrorKind.INTERNAL, "Persistence failure")


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"{request.method} {request.url.path} unexpected error")
    return error_response(500, ErrorKind.INTERNAL, "Internal server error")


def register_error_handlers(app: FastAPI):
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(SQLAlchemyError, persistence_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
