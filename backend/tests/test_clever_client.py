"""
CleverClient facade end to end.

Given:
- A CleverClient on a fake transport and the in-memory AccountStore
When:
- a teacher logs in three times (new, after sign-up by email, after linking)
Then:
- the outcomes move from NEW to MERGE to SUCCESS
"""
from __future__ import annotations

import pytest

from clever_sso import CleverClient, Status
from clever_sso.models import IdentityDescriptor
from clever_sso.stores import AccountRecord, AccountStore
from clever_sso.transport import HttpxTransport, JsonResponse

from conftest import API, TOKEN_URL


pytestmark = pytest.mark.anyio("asyncio")


def _install_api(transport):
    transport.on("POST", TOKEN_URL, JsonResponse(200, {"access_token": "tok1"}))
    transport.on(
        "GET",
        f"{API}/me",
        JsonResponse(200, {"type": "teacher", "data": {"id": "T1", "district": "D1", "type": "teacher"}}),
    )
    transport.on(
        "GET",
        f"{API}/teachers/T1",
        JsonResponse(200, {"data": {"id": "T1", "email": "Jane@School.org", "name": {"first": "Jane", "last": "Doe"}}}),
    )


def test_login_button_uri(cfg):
    client = CleverClient(cfg)
    assert client.get_login_button_uri() == cfg.login_button_uri()
    assert client.get_login_button_uri().startswith("https://clever.com/oauth/authorize?redirect_uri=")


def test_default_transport_is_httpx(cfg):
    assert isinstance(CleverClient(cfg).transport, HttpxTransport)


def test_from_env(monkeypatch: pytest.MonkeyPatch, transport):
    monkeypatch.setenv("CLEVER_CLIENT_ID", "cid")
    monkeypatch.setenv("CLEVER_CLIENT_SECRET", "sec")
    monkeypatch.setenv("CLEVER_REDIRECT_URI", "https://app/cb")
    client = CleverClient.from_env(transport=transport)
    assert client.cfg.client_id == "cid"
    assert client.transport is transport


async def test_step_methods(cfg, transport):
    _install_api(transport)
    client = CleverClient(cfg, transport=transport)

    token = await client.get_token("abc123")
    user = await client.get_user_info(token)
    profile = await client.get_user_profile(user, token)

    assert token == "tok1"
    assert user == IdentityDescriptor(type="teacher", id="T1", district="D1")
    assert profile.email == "Jane@School.org"


async def test_new_then_merge_then_success(cfg, transport):
    _install_api(transport)
    client = CleverClient(cfg, transport=transport)
    store = AccountStore()

    first = await client.reconcile("c1", store.by_clever_id, store.by_email)
    assert first.status is Status.NEW

    store.add(AccountRecord(account_id="acc-1", email="jane@school.org"))
    second = await client.reconcile("c2", store.by_clever_id, store.by_email)
    assert second.status is Status.MERGE
    assert second.body.account_id == "acc-1"

    store.link(account_id="acc-1", clever_id=second.provider_id)
    profile_calls = len(transport.calls_to(f"{API}/teachers/T1"))
    third = await client.reconcile("c3", store.by_clever_id, store.by_email)
    assert third.status is Status.SUCCESS
    assert third.body.clever_id == "T1"
    assert len(transport.calls_to(f"{API}/teachers/T1")) == profile_calls
