"""
Pytest configuration for backend tests.

Why: Force AnyIO to use the asyncio backend, make `clever_sso` importable
without an install, and provide a recording fake transport so the login flow
can be exercised without network access.
"""
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]
BACKEND_DIR = REPO_ROOT / "backend"
TESTS_DIR = BACKEND_DIR / "tests"
for p in (str(BACKEND_DIR), str(TESTS_DIR)):
    if p not in sys.path:
        sys.path.insert(0, p)

from clever_sso.config import CleverConfig  # noqa: E402
from clever_sso.transport import JsonResponse  # noqa: E402


TOKEN_URL = "https://clever.com/oauth/tokens"
API = "https://api.clever.com/v2.1"


class FakeTransport:
    """HttpClient double keyed by (method, url).

    A route maps to a JsonResponse or an exception instance to raise. Every
    call is recorded as (method, url, body, headers).
    """

    def __init__(self):
        self.routes = {}
        self.calls = []

    def on(self, method: str, url: str, result):
        self.routes[(method, url)] = result
        return self

    def calls_to(self, url: str):
        return [c for c in self.calls if c[1] == url]

    async def _dispatch(self, method, url, body, headers):
        self.calls.append((method, url, body, dict(headers)))
        result = self.routes.get((method, url))
        if result is None:
            return JsonResponse(status_code=404, payload={"error": "not found"})
        if isinstance(result, Exception):
            raise result
        return result

    async def post_json(self, url, *, body, headers):
        return await self._dispatch("POST", url, dict(body), headers)

    async def get_json(self, url, *, headers):
        return await self._dispatch("GET", url, None, headers)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def cfg() -> CleverConfig:
    return CleverConfig(
        client_id="client-123",
        client_secret="s3cret",
        redirect_uri="https://app.example.com/auth/clever",
    )


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture(autouse=True)
def _clear_clever_env(monkeypatch: pytest.MonkeyPatch):
    """Keep host CLEVER_* variables from leaking into config tests."""
    for var in (
        "CLEVER_CLIENT_ID",
        "CLEVER_CLIENT_SECRET",
        "CLEVER_REDIRECT_URI",
        "CLEVER_API_VERSION",
        "CLEVER_OAUTH_BASE_URL",
        "CLEVER_API_BASE_URL",
        "CLEVER_ENV",
    ):
        monkeypatch.delenv(var, raising=False)
    yield
