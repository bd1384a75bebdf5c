"""Request correlation, request logging, and uniform JSON error responses."""

from __future__ import annotations

from time import perf_counter
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError, ResponseValidationError
from fastapi.responses import JSONResponse
from starlette.datastructures import Headers, MutableHeaders
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from taskboard.core.config import settings
from taskboard.core.logging import get_logger

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-Id"
INTERNAL_SERVER_ERROR_DETAIL = "Internal Server Error"
_HEALTH_PATHS = frozenset({"/health", "/healthz", "/readyz"})
_MAX_REQUEST_ID_LENGTH = 128


def _incoming_request_id(scope: Scope) -> str | None:
    raw = Headers(scope=scope).get(REQUEST_ID_HEADER)
    if raw is None:
        return None
    candidate = raw.strip()
    if not candidate or len(candidate) > _MAX_REQUEST_ID_LENGTH:
        return None
    return candidate


class RequestContextMiddleware:
    """Assign a request id, echo it back as a header, and log request timing."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = _incoming_request_id(scope) or uuid4().hex
        scope.setdefault("state", {})["request_id"] = request_id
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        started = perf_counter()

        async def send_with_request_id(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = int(message["status"])
                headers = MutableHeaders(scope=message)
                headers[REQUEST_ID_HEADER] = request_id
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            duration_ms = (perf_counter() - started) * 1000
            _log_request(
                scope,
                request_id=request_id,
                status_code=status_code,
                duration_ms=duration_ms,
            )


def _log_request(
    scope: Scope,
    *,
    request_id: str,
    status_code: int,
    duration_ms: float,
) -> None:
    path = str(scope.get("path", ""))
    if path in _HEALTH_PATHS and not settings.request_log_include_health:
        return
    extra = {
        "request_id": request_id,
        "method": scope.get("method", ""),
        "path": path,
        "status_code": status_code,
        "duration_ms": round(duration_ms, 2),
    }
    threshold = settings.request_log_slow_ms
    if threshold > 0 and duration_ms >= threshold:
        logger.warning(
            "http.request.slow",
            extra={**extra, "slow_threshold_ms": threshold},
        )
        return
    logger.info("http.request.complete", extra=extra)


def _get_request_id(request: Request) -> str | None:
    request_id = getattr(request.state, "request_id", None)
    if isinstance(request_id, str) and request_id:
        return request_id
    return None


def _error_payload(*, detail: Any, request_id: str | None) -> dict[str, Any]:
    payload: dict[str, Any] = {"detail": detail}
    if request_id is not None:
        payload["request_id"] = request_id
    return payload


def _json_safe(value: Any) -> Any:
    """Coerce validation error fragments (bytes, exceptions, ...) into JSON values."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, dict):
        return {str(key): _json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_json_safe(item) for item in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def _json_error(
    request: Request,
    *,
    status_code: int,
    detail: Any,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    request_id = _get_request_id(request)
    response_headers = dict(headers or {})
    if request_id is not None:
        response_headers[REQUEST_ID_HEADER] = request_id
    return JSONResponse(
        status_code=status_code,
        content=_error_payload(detail=detail, request_id=request_id),
        headers=response_headers,
    )


async def _handle_request_validation(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    return _json_error(
        request,
        status_code=422,
        detail=_json_safe(exc.errors()),
    )


async def _handle_response_validation(
    request: Request,
    exc: ResponseValidationError,
) -> JSONResponse:
    logger.error(
        "http.response.validation_failed",
        extra={
            "request_id": _get_request_id(request),
            "path": request.url.path,
            "error_count": len(exc.errors()),
        },
    )
    return _json_error(
        request,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=INTERNAL_SERVER_ERROR_DETAIL,
    )


async def _handle_http_exception(
    request: Request,
    exc: StarletteHTTPException,
) -> Response:
    if exc.status_code in {status.HTTP_204_NO_CONTENT, status.HTTP_304_NOT_MODIFIED}:
        return Response(status_code=exc.status_code, headers=exc.headers)
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.warning(
            "http.request.server_error",
            extra={
                "request_id": _get_request_id(request),
                "path": request.url.path,
                "status_code": exc.status_code,
            },
        )
    return _json_error(
        request,
        status_code=exc.status_code,
        detail=_json_safe(exc.detail),
        headers=exc.headers,
    )


async def _request_validation_exception_handler(
    request: Request,
    exc: Exception,
) -> Response:
    if not isinstance(exc, RequestValidationError):
        raise TypeError(f"Expected RequestValidationError, got {type(exc).__name__}")
    return await _handle_request_validation(request, exc)


async def _response_validation_exception_handler(
    request: Request,
    exc: Exception,
) -> Response:
    if not isinstance(exc, ResponseValidationError):
        raise TypeError(f"Expected ResponseValidationError, got {type(exc).__name__}")
    return await _handle_response_validation(request, exc)


async def _http_exception_exception_handler(
    request: Request,
    exc: Exception,
) -> Response:
    if not isinstance(exc, StarletteHTTPException):
        raise TypeError(f"Expected StarletteHTTPException, got {type(exc).__name__}")
    return await _handle_http_exception(request, exc)


async def _unhandled_exception_handler(request: Request, exc: Exception) -> Response:
    logger.exception(
        "http.request.unhandled_exception",
        extra={
            "request_id": _get_request_id(request),
            "path": request.url.path,
            "error_type": type(exc).__name__,
        },
    )
    return _json_error(
        request,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=INTERNAL_SERVER_ERROR_DETAIL,
    )


def install_error_handling(app: FastAPI) -> None:
    """Register request-id middleware and JSON exception handlers on `app`."""
    app.add_middleware(RequestContextMiddleware)
    app.add_exception_handler(RequestValidationError, _request_validation_exception_handler)
    app.add_exception_handler(ResponseValidationError, _response_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
