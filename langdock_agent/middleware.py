"""
HTTP middleware for the Langdock A2A server

Logs every request and JSON response, and exposes the X-API-Key header to the
agent executor through the request-scoped credential.
"""

import json
import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from langdock_agent.request_context import with_credential

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-API-Key"


def format_body(body: bytes) -> str:
    """Pretty-print a JSON body; fall back to the raw text."""
    try:
        return json.dumps(json.loads(body), indent=2)
    except ValueError:
        return body.decode("utf-8", errors="replace")


class RequestMiddleware(BaseHTTPMiddleware):
    """Request/response logging plus API key propagation."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        logger.info("→ %s %s", request.method, request.url.path)
        body = await request.body()
        if body:
            logger.info("  Request: %s", format_body(body))

        api_key = request.headers.get(API_KEY_HEADER)
        if api_key:
            response = await with_credential(api_key, lambda: call_next(request))
        else:
            response = await call_next(request)

        # Streaming responses are passed through without buffering
        if not response.headers.get("content-type", "").startswith("application/json"):
            return response

        chunks = [
            chunk if isinstance(chunk, bytes) else bytes(chunk, "utf-8")
            async for chunk in response.body_iterator
        ]
        response_body = b"".join(chunks)
        logger.info("← Response: %s", format_body(response_body))

        logged_response = Response(content=response_body, status_code=response.status_code)
        # Raw headers keep repeated fields such as several Set-Cookie lines
        logged_response.raw_headers = list(response.raw_headers)
        return logged_response
