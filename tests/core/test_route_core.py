import json
import math
from pathlib import Path

import pytest
from aiohttp import web

from cgs_backend import config
from cgs_backend.features.geninfo.loras import LoraEntry
from cgs_backend.routes import build_route_table, register_routes
from cgs_backend.routes.core import request_json as rq
from cgs_backend.routes.core.paths import _guess_content_type_for_file, _normalize_path
from cgs_backend.routes.core.response import _json_response, _sanitize_json_payload, safe_error_message
from cgs_backend.server import _parse_args, create_app
from cgs_backend.shared import ErrorCode, Result


class _DummyContent:
    def __init__(self, chunks, exc=None):
        self._chunks = chunks
        self._exc = exc

    async def iter_chunked(self, _size):
        if self._exc is not None:
            raise self._exc
        for chunk in self._chunks:
            yield chunk


class _DummyRequest:
    def __init__(self, headers=None, chunks=None, exc=None):
        self.headers = headers or {}
        self.content = _DummyContent(chunks or [], exc=exc)


@pytest.mark.asyncio
async def test_read_json_variants() -> None:
    ok = await rq._read_json(_DummyRequest(chunks=[b'{"path": ', b'"/x"}']))
    assert ok.ok and ok.data == {"path": "/x"}

    empty = await rq._read_json(_DummyRequest(chunks=[]))
    assert empty.ok and empty.data == {}

    not_object = await rq._read_json(_DummyRequest(chunks=[b"[1, 2]"]))
    assert not_object.code == "INVALID_JSON"

    bad_utf8 = await rq._read_json(_DummyRequest(chunks=[b"\xff\xfe"]))
    assert bad_utf8.code == "INVALID_JSON"

    broken = await rq._read_json(_DummyRequest(exc=RuntimeError("reset")))
    assert broken.code == "INVALID_JSON"


@pytest.mark.asyncio
async def test_read_json_size_limits() -> None:
    declared = await rq._read_json(_DummyRequest(headers={"Content-Length": "5000"}), max_bytes=2048)
    assert declared.code == "INVALID_INPUT"
    assert declared.meta["limit"] == 2048

    streamed = await rq._read_json(_DummyRequest(chunks=[b"x" * 1500, b"x" * 1500]), max_bytes=2048)
    assert streamed.code == "INVALID_INPUT"

    # limits below the floor are raised to it
    tiny = await rq._read_json(_DummyRequest(chunks=[b'{"a": "' + b"x" * 100 + b'"}']), max_bytes=1)
    assert tiny.ok


def test_json_response_envelope() -> None:
    resp = _json_response(Result.Ok([LoraEntry("a", 0.5)], ratio=float("nan")))
    assert resp.status == 200
    payload = json.loads(resp.text)
    assert payload == {
        "ok": True,
        "data": [{"name": "a", "strengthModel": 0.5}],
        "error": None,
        "code": "OK",
        "meta": {"ratio": None},
    }

    err = _json_response(Result.Err(ErrorCode.METADATA_FAILED, "boom"), status=500)
    assert err.status == 500
    assert json.loads(err.text)["code"] == "METADATA_FAILED"


def test_sanitize_json_payload_handles_nested_values() -> None:
    assert _sanitize_json_payload({"a": [math.inf, (1.5, -math.inf)]}) == {"a": [None, [1.5, None]]}


def test_safe_error_message_respects_debug(monkeypatch) -> None:
    exc = RuntimeError("open failed for /srv/private/a.png")
    monkeypatch.setattr(config, "DEBUG", False)
    assert safe_error_message(exc, "Scan failed") == "Scan failed"
    monkeypatch.setattr(config, "DEBUG", True)
    detailed = safe_error_message(exc, "Scan failed")
    assert detailed.startswith("Scan failed: open failed")
    assert "/srv/private" not in detailed


def test_guess_content_type_for_file() -> None:
    assert _guess_content_type_for_file(Path("a.webp")) == "image/webp"
    assert _guess_content_type_for_file(Path("a.MOV")) == "video/quicktime"
    assert _guess_content_type_for_file(Path("a.unknownext")) == "application/octet-stream"


def test_normalize_path(tmp_path: Path) -> None:
    assert _normalize_path("") is None
    assert _normalize_path("a\x00b") is None
    assert _normalize_path(str(tmp_path / "x" / ".." / "y")) == (tmp_path / "y").resolve()


def test_route_table_and_idempotent_registration() -> None:
    paths = {(route.method, route.path) for route in build_route_table()}
    assert paths == {("POST", "/api/scan"), ("GET", "/api/image")}

    app = web.Application()
    register_routes(app)
    register_routes(app)
    registered = [r for r in app.router.routes() if r.resource is not None and r.resource.canonical == "/api/scan"]
    assert len(registered) == 1
    assert len(app.middlewares) == 1


def test_create_app_and_cli_defaults() -> None:
    sentinel = object()
    app = create_app(scanner=sentinel)
    from cgs_backend.routes.core import APP_KEY_SCANNER

    assert app[APP_KEY_SCANNER] is sentinel

    args = _parse_args(["--port", "9000", "--host", "0.0.0.0"])
    assert args.port == 9000
    assert args.host == "0.0.0.0"
    defaults = _parse_args([])
    assert defaults.port == config.SERVER_PORT
    assert defaults.host == config.SERVER_HOST
