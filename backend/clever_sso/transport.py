"""
HTTP transports for the Clever API.

Why: The reconciliation logic must not care which HTTP library talks to
Clever. It depends on the small `HttpClient` capability below; tests inject a
fake, applications pick `HttpxTransport` (native async) or `RequestsTransport`
(blocking requests calls moved off the event loop).

Contract:
- A transport returns every HTTP response, including 4xx/5xx, as a
  `JsonResponse`. Status interpretation belongs to the caller.
- `payload` is None when the body is not JSON.
- Only a request that produced no response at all raises `TransportError`.

Security: Headers carry credentials; never log them.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Any, Dict, Mapping, Optional, Protocol
import logging

from anyio import to_thread
import httpx

# Small indirection to ease monkeypatching in tests
import requests as http

from .errors import TransportError

logger = logging.getLogger("clever_sso.transport")

DEFAULT_TIMEOUT_SECONDS = 10


@dataclass(frozen=True)
class JsonResponse:
    status_code: int
    payload: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class HttpClient(Protocol):
    async def post_json(self, url: str, *, body: Mapping[str, Any], headers: Mapping[str, str]) -> JsonResponse:
        ...

    async def get_json(self, url: str, *, headers: Mapping[str, str]) -> JsonResponse:
        ...


def bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}", "Content-Type": "application/json"}


def _decode(resp: Any) -> Any:
    try:
        return resp.json()
    except ValueError:
        return None


class HttpxTransport:
    """Async transport backed by httpx.

    Pass an `httpx.AsyncClient` to share a connection pool (or a MockTransport
    in tests); otherwise a short-lived client is opened per request.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None, *, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        self._client = client
        self._timeout = timeout

    async def _send(self, method: str, url: str, **kwargs: Any) -> JsonResponse:
        try:
            if self._client is not None:
                resp = await self._client.request(method, url, **kwargs)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    resp = await client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, url, exc.__class__.__name__)
            raise TransportError("transport_failed") from exc
        return JsonResponse(status_code=resp.status_code, payload=_decode(resp))

    async def post_json(self, url: str, *, body: Mapping[str, Any], headers: Mapping[str, str]) -> JsonResponse:
        return await self._send("POST", url, json=dict(body), headers=dict(headers))

    async def get_json(self, url: str, *, headers: Mapping[str, str]) -> JsonResponse:
        return await self._send("GET", url, headers=dict(headers))


def http_post(url: str, json: Dict[str, Any], headers: Dict[str, str], timeout: float = DEFAULT_TIMEOUT_SECONDS):
    return http.post(url, json=json, headers=headers, timeout=timeout)


def http_get(url: str, headers: Dict[str, str], timeout: float = DEFAULT_TIMEOUT_SECONDS):
    return http.get(url, headers=headers, timeout=timeout)


class RequestsTransport:
    """Transport backed by requests; each call runs in a worker thread."""

    def __init__(self, *, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        self._timeout = timeout

    async def _run(self, method: str, url: str, fn, *args: Any) -> JsonResponse:
        try:
            resp = await to_thread.run_sync(partial(fn, *args, timeout=self._timeout))
        except http.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc.__class__.__name__)
            raise TransportError("transport_failed") from exc
        return JsonResponse(status_code=resp.status_code, payload=_decode(resp))

    async def post_json(self, url: str, *, body: Mapping[str, Any], headers: Mapping[str, str]) -> JsonResponse:
        return await self._run("POST", url, http_post, url, dict(body), dict(headers))

    async def get_json(self, url: str, *, headers: Mapping[str, str]) -> JsonResponse:
        return await self._run("GET", url, http_get, url, dict(headers))
