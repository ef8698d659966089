"""Error responses and exception handlers."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from levantapedidos.core.errors import ClientNotFoundError, ConfigurationError, UpstreamError
from levantapedidos.core.logging import get_logger, get_request_id

log = get_logger("levantapedidos.web")

_HTTP_MESSAGES = {
    404: "Not Found",
    405: "Method not allowed",
}


def error_response(status_code: int, error: str, details: Any = None, headers=None) -> JSONResponse:
    """JSON error body: {"error": ..., "details": ...}."""
    content: dict[str, Any] = {"error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def describe_validation_errors(errors: list[dict]) -> tuple[str, list[dict]]:
    """Turn pydantic errors into a headline message plus per-field details."""
    details = [
        {
            "field": ".".join(str(p) for p in e.get("loc", ())[1:]) or "body",
            "message": e.get("msg", ""),
        }
        for e in errors
    ]

    if any(e.get("type") == "json_invalid" for e in errors):
        return "Invalid JSON body", details

    missing = [d["field"] for d, e in zip(details, errors) if e.get("type") == "missing"]
    if missing:
        return f"Missing required parameters: {', '.join(missing)}", details

    first = details[0] if details else {"field": "body", "message": "invalid"}
    return f"Invalid value for {first['field']}: {first['message']}", details


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    message, details = describe_validation_errors(list(exc.errors()))
    log.info("request_rejected", extra={"path": request.url.path, "reason": message})
    return error_response(status.HTTP_400_BAD_REQUEST, message, details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = _HTTP_MESSAGES.get(exc.status_code, str(exc.detail))
    return error_response(exc.status_code, message, headers=getattr(exc, "headers", None))


async def configuration_error_handler(request: Request, exc: ConfigurationError):
    log.error("configuration_error", extra={"path": request.url.path, "error": str(exc)})
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc), exc.details)


async def upstream_error_handler(request: Request, exc: UpstreamError):
    log.error(
        "upstream_error",
        extra={"path": request.url.path, "error": str(exc), "status": exc.status},
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Error al consultar DominioDZ", str(exc)
    )


async def client_not_found_handler(request: Request, exc: ClientNotFoundError):
    return error_response(
        status.HTTP_404_NOT_FOUND,
        "Cliente no encontrado",
        "No se encontraron datos para el cliente especificado",
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    """Last-resort handler: message only, never the traceback."""
    log.error(
        "unhandled_exception",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error": str(exc),
            "error_type": type(exc).__name__,
        },
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "details": str(exc),
            "request_id": get_request_id() or None,
        },
    )


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(ConfigurationError, configuration_error_handler)
    app.add_exception_handler(UpstreamError, upstream_error_handler)
    app.add_exception_handler(ClientNotFoundError, client_not_found_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["describe_validation_errors", "error_response", "install_exception_handlers"]
