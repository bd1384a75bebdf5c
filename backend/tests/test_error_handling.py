# ruff: noqa

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel, Field
from starlette.requests import Request

from taskboard.core import error_handling
from taskboard.core.error_handling import (
    REQUEST_ID_HEADER,
    _error_payload,
    _get_request_id,
    _http_exception_exception_handler,
    _request_validation_exception_handler,
    _response_validation_exception_handler,
    install_error_handling,
)
from taskboard.schemas.errors import FieldProblem
from taskboard.services.errors import InvalidColumn, InvalidInput, NotFound, StorageFailure


def _app_raising(exc: Exception) -> FastAPI:
    app = FastAPI()
    install_error_handling(app)

    @app.get("/fail")
    def fail() -> None:
        raise exc

    return app


def test_not_found_renders_structured_detail_with_request_id() -> None:
    client = TestClient(_app_raising(NotFound("Item")))
    resp = client.get("/fail")

    assert resp.status_code == 404
    body = resp.json()
    assert body["detail"] == {"code": "not_found", "message": "Item not found"}
    assert isinstance(body.get("request_id"), str) and body["request_id"]
    assert resp.headers.get(REQUEST_ID_HEADER) == body["request_id"]


def test_invalid_column_is_a_400() -> None:
    client = TestClient(_app_raising(InvalidColumn("Invalid target column")))
    resp = client.get("/fail")

    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "invalid_column"


def test_invalid_input_carries_field_problems() -> None:
    exc = InvalidInput(
        "Title is required",
        fields=[FieldProblem(field="title", message="Title must not be empty")],
    )
    client = TestClient(_app_raising(exc))
    resp = client.get("/fail")

    assert resp.status_code == 400
    assert resp.json()["detail"] == {
        "code": "invalid_input",
        "message": "Title is required",
        "fields": [{"field": "title", "message": "Title must not be empty"}],
    }


def test_storage_failure_is_a_500_without_internal_detail() -> None:
    client = TestClient(_app_raising(StorageFailure()))
    resp = client.get("/fail")

    assert resp.status_code == 500
    assert resp.json()["detail"] == {
        "code": "storage_failure",
        "message": "Board storage is unavailable",
    }


def test_request_validation_error_includes_request_id() -> None:
    app = FastAPI()
    install_error_handling(app)

    @app.get("/events")
    def events(limit: int) -> dict[str, int]:
        return {"limit": limit}

    client = TestClient(app)
    resp = client.get("/events?limit=abc")

    assert resp.status_code == 422
    body = resp.json()
    assert isinstance(body.get("detail"), list)
    assert resp.headers.get(REQUEST_ID_HEADER) == body["request_id"]


def test_request_validation_error_handles_bytes_input_without_500() -> None:
    class CommentBody(BaseModel):
        text: str

    app = FastAPI()
    install_error_handling(app)

    @app.post("/comments")
    def comment(payload: CommentBody) -> dict[str, str]:
        return {"text": payload.text}

    client = TestClient(app, raise_server_exceptions=False)
    resp = client.post(
        "/comments",
        content=b"plain-text-body",
        headers={"content-type": "text/plain"},
    )

    assert resp.status_code == 422
    assert isinstance(resp.json().get("detail"), list)


def test_unhandled_exception_returns_500_with_request_id() -> None:
    client = TestClient(_app_raising(RuntimeError("disk on fire")), raise_server_exceptions=False)
    resp = client.get("/fail")

    assert resp.status_code == 500
    body = resp.json()
    assert body["detail"] == "Internal Server Error"
    assert "disk on fire" not in resp.text
    assert resp.headers.get(REQUEST_ID_HEADER) == body["request_id"]


def test_response_validation_error_returns_500_with_request_id() -> None:
    class Out(BaseModel):
        title: str = Field(min_length=1)

    app = FastAPI()
    install_error_handling(app)

    @app.get("/bad", response_model=Out)
    def bad() -> dict[str, str]:
        return {"title": ""}

    client = TestClient(app, raise_server_exceptions=False)
    resp = client.get("/bad")

    assert resp.status_code == 500
    assert resp.json()["detail"] == "Internal Server Error"


def test_client_provided_request_id_is_preserved() -> None:
    client = TestClient(_app_raising(NotFound("Item")))
    resp = client.get("/fail", headers={REQUEST_ID_HEADER: "  req-123  "})

    assert resp.json()["request_id"] == "req-123"
    assert resp.headers.get(REQUEST_ID_HEADER) == "req-123"


def test_overlong_client_request_id_is_replaced() -> None:
    client = TestClient(_app_raising(NotFound("Item")))
    resp = client.get("/fail", headers={REQUEST_ID_HEADER: "x" * 500})

    request_id = resp.json()["request_id"]
    assert request_id != "x" * 500
    assert len(request_id) == 32


def test_slow_request_emits_slow_log(monkeypatch: pytest.MonkeyPatch) -> None:
    warnings: list[tuple[str, dict[str, object]]] = []

    def _fake_warning(message: str, *args: object, **kwargs: object) -> None:
        _ = args
        extra = kwargs.get("extra")
        warnings.append((message, extra if isinstance(extra, dict) else {}))

    perf_ticks = iter((100.0, 100.2))

    monkeypatch.setattr(error_handling.settings, "request_log_slow_ms", 1)
    monkeypatch.setattr(error_handling, "perf_counter", lambda: next(perf_ticks))
    monkeypatch.setattr(error_handling.logger, "warning", _fake_warning)

    app = FastAPI()
    install_error_handling(app)

    @app.get("/board")
    def board() -> dict[str, str]:
        return {"ok": "1"}

    resp = TestClient(app).get("/board")

    assert resp.status_code == 200
    assert any(
        message == "http.request.slow" and extra.get("slow_threshold_ms") == 1
        for message, extra in warnings
    )


def test_fast_request_logs_completion(monkeypatch: pytest.MonkeyPatch) -> None:
    infos: list[tuple[str, dict[str, object]]] = []

    def _fake_info(message: str, *args: object, **kwargs: object) -> None:
        _ = args
        extra = kwargs.get("extra")
        infos.append((message, extra if isinstance(extra, dict) else {}))

    monkeypatch.setattr(error_handling.settings, "request_log_slow_ms", 0)
    monkeypatch.setattr(error_handling.logger, "info", _fake_info)

    app = FastAPI()
    install_error_handling(app)

    @app.get("/metrics")
    def metrics() -> dict[str, int]:
        return {"total_tasks": 0}

    TestClient(app).get("/metrics")

    assert [message for message, _ in infos] == ["http.request.complete"]
    assert infos[0][1]["path"] == "/metrics"
    assert infos[0][1]["status_code"] == 200


def test_health_route_skips_request_logs_when_disabled(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    logged: list[str] = []
    monkeypatch.setattr(error_handling.settings, "request_log_include_health", False)
    monkeypatch.setattr(error_handling.logger, "info", lambda message, *a, **k: logged.append(message))

    app = FastAPI()
    install_error_handling(app)

    @app.get("/healthz")
    def healthz() -> dict[str, bool]:
        return {"ok": True}

    resp = TestClient(app).get("/healthz")

    assert resp.status_code == 200
    assert isinstance(resp.headers.get(REQUEST_ID_HEADER), str)
    assert logged == []


def test_get_request_id_returns_none_for_missing_or_invalid_state() -> None:
    assert _get_request_id(Request({"type": "http", "headers": [], "state": {}})) is None
    assert (
        _get_request_id(Request({"type": "http", "headers": [], "state": {"request_id": 123}}))
        is None
    )
    assert (
        _get_request_id(Request({"type": "http", "headers": [], "state": {"request_id": ""}}))
        is None
    )


def test_error_payload_omits_request_id_when_none() -> None:
    assert _error_payload(detail="x", request_id=None) == {"detail": "x"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("handler", "expected"),
    [
        (_request_validation_exception_handler, "Expected RequestValidationError"),
        (_response_validation_exception_handler, "Expected ResponseValidationError"),
        (_http_exception_exception_handler, "Expected StarletteHTTPException"),
    ],
)
async def test_exception_wrappers_reject_wrong_exception(handler, expected) -> None:
    req = Request({"type": "http", "headers": [], "state": {}})
    with pytest.raises(TypeError, match=expected):
        await handler(req, Exception("x"))


def test_json_safe_covers_bytes_and_fallback_str() -> None:
    assert error_handling._json_safe(b"\xff") == "\ufffd"
    assert error_handling._json_safe(memoryview(b"\xff")) == "\ufffd"
    assert error_handling._json_safe({"fields": ("a", 1)}) == {"fields": ["a", 1]}

    class Weird:
        def __str__(self) -> str:
            return "weird"

    assert error_handling._json_safe(Weird()) == "weird"
