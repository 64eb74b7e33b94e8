"""
Request middleware tests: API key propagation and rebuilt JSON responses,
run against a small Starlette app instead of the full A2A server.
"""

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from langdock_agent.middleware import RequestMiddleware, format_body
from langdock_agent.request_context import current_credential


# ── Fixtures ─────────────────────────────────────────────────────────


async def whoami(request: Request) -> JSONResponse:
    return JSONResponse({"api_key": current_credential()})


async def cookies(request: Request) -> JSONResponse:
    response = JSONResponse({"ok": True})
    response.set_cookie("first", "1")
    response.set_cookie("second", "2")
    return response


async def plain(request: Request) -> PlainTextResponse:
    return PlainTextResponse("plain text")


def _make_client() -> TestClient:
    app = Starlette(
        routes=[
            Route("/whoami", whoami),
            Route("/cookies", cookies),
            Route("/plain", plain),
        ],
        middleware=[Middleware(RequestMiddleware)],
    )
    return TestClient(app)


# ── Credential ───────────────────────────────────────────────────────


def test_api_key_header_reaches_endpoint():
    client = _make_client()

    assert client.get("/whoami", headers={"X-API-Key": "sk-test"}).json() == {"api_key": "sk-test"}


def test_missing_or_empty_header_leaves_credential_absent():
    client = _make_client()

    assert client.get("/whoami").json() == {"api_key": None}
    assert client.get("/whoami", headers={"X-API-Key": ""}).json() == {"api_key": None}


# ── Responses ────────────────────────────────────────────────────────


def test_repeated_headers_survive_response_logging():
    client = _make_client()

    response = client.get("/cookies")

    assert response.json() == {"ok": True}
    set_cookies = response.headers.get_list("set-cookie")
    assert len(set_cookies) == 2
    assert any(cookie.startswith("first=1") for cookie in set_cookies)
    assert any(cookie.startswith("second=2") for cookie in set_cookies)


def test_non_json_response_passes_through():
    client = _make_client()

    response = client.get("/plain")

    assert response.status_code == 200
    assert response.text == "plain text"


def test_format_body():
    assert format_body(b'{"a":1}') == '{\n  "a": 1\n}'
    assert format_body(b"not json") == "not json"
