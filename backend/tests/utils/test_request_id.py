import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from outreach.main import request_id_middleware
from outreach.utils.request_id import get_request_id, resolve_request_id, set_request_id


def test_request_id_set_and_get() -> None:
    set_request_id("req-abc")
    assert get_request_id() == "req-abc"
    set_request_id(None)
    assert get_request_id() is None


def test_resolve_keeps_usable_incoming_id() -> None:
    assert resolve_request_id("  req-1 ") == "req-1"


@pytest.mark.parametrize("incoming", [None, "", "   ", "x" * 200])
def test_resolve_generates_when_incoming_unusable(incoming: str | None) -> None:
    value = resolve_request_id(incoming)
    assert value
    assert value != incoming
    assert len(value) == 32


def _app() -> FastAPI:
    app = FastAPI()

    @app.get("/check")
    async def check() -> dict[str, str]:
        return {"rid": get_request_id() or ""}

    app.middleware("http")(request_id_middleware)
    return app


@pytest.mark.asyncio
async def test_request_id_middleware_generates_and_sets_header() -> None:
    transport = ASGITransport(app=_app())
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        resp = await client.get("/check")
    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID")
    assert resp.json()["rid"] == resp.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_request_id_middleware_uses_incoming_header() -> None:
    incoming = "req-custom-123"
    transport = ASGITransport(app=_app())
    async with AsyncClient(transport=transport, base_url="http://test", headers={"X-Request-ID": incoming}) as client:
        resp = await client.get("/check")
    assert resp.headers["X-Request-ID"] == incoming
    assert resp.json()["rid"] == incoming
