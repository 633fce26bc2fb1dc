"""Outbound HTTP for integration blocks.

Non-2xx answers raise ``httpx.HTTPStatusError``; connection problems raise
``httpx.TransportError``. Handlers catch both and turn them into logs.
"""

import json
import logging
from typing import Any, Optional

import httpx

from flowblocks.exceptions import UpstreamError

logger = logging.getLogger(__name__)


def _bearer_headers(token: str) -> dict[str, str]:
    return {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {token}",
    }


def _parse_json(response: httpx.Response) -> Any:
    """Parse a response body as JSON; an empty body yields None."""
    text = response.text
    if not text.strip():
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise UpstreamError(
            f"Response from {response.url} is not valid JSON",
            url=str(response.url),
            details={"body": text[:500]},
        ) from exc


class HttpTransport:
    """Thin JSON-over-HTTP client with bearer authentication.

    Args:
        timeout_seconds: Per-request timeout applied to every call.
        client: Optional pre-built ``httpx.AsyncClient``; when given, the
            transport does not own it and never closes it. Tests pass a
            client built on ``httpx.MockTransport``.
    """

    def __init__(self, timeout_seconds: float = 30.0, client: Optional[httpx.AsyncClient] = None):
        self.timeout_seconds = timeout_seconds
        self._client = client

    async def _send(self, method: str, url: str, token: str, body: Any = None) -> Any:
        kwargs: dict[str, Any] = {"headers": _bearer_headers(token)}
        if body is not None:
            kwargs["json"] = body
        logger.debug("[HTTP] %s %s", method, url)
        if self._client is not None:
            response = await self._client.request(method, url, timeout=self.timeout_seconds, **kwargs)
        else:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.request(method, url, **kwargs)
        response.raise_for_status()
        return _parse_json(response)

    async def get_json(self, url: str, token: str) -> Any:
        """GET *url* and return the decoded JSON body."""
        return await self._send("GET", url, token)

    async def post_json(self, url: str, token: str, body: Any) -> Any:
        """POST *body* as JSON to *url* and return the decoded JSON body."""
        return await self._send("POST", url, token, body)
