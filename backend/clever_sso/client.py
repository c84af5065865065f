"""
Clever SSO client for "Log In With Clever".

Covers the SSO flow only (no rostering): build the login button URL, exchange
the redirect code, read the current user and reconcile them against the
caller's user store.

Usage in a web adapter:

    CLEVER = CleverClient(CleverConfig.from_env())

    @app.get("/auth/clever/callback")
    async def clever_callback(code: str):
        outcome = await CLEVER.reconcile(code, users.by_clever_id, users.by_email)
        ...
"""
from __future__ import annotations

from typing import Optional

from .config import CleverConfig
from .exchange import TokenExchanger
from .models import IdentityDescriptor, Profile, ReconciliationOutcome
from .reconcile import IdentityReconciler, Lookup
from .transport import HttpClient, HttpxTransport


class CleverClient:
    def __init__(self, config: CleverConfig, transport: Optional[HttpClient] = None):
        self.cfg = config
        self.transport = transport or HttpxTransport()
        self.exchanger = TokenExchanger(config, self.transport)
        self.reconciler = IdentityReconciler(config, self.transport, exchanger=self.exchanger)
        self._button_uri = config.login_button_uri()

    @classmethod
    def from_env(cls, transport: Optional[HttpClient] = None) -> "CleverClient":
        return cls(CleverConfig.from_env(), transport=transport)

    def get_login_button_uri(self) -> str:
        """URL to open when the user clicks "Log in with Clever"."""
        return self._button_uri

    async def get_token(self, code: str) -> str:
        return await self.exchanger.exchange(code)

    async def get_user_info(self, token: str) -> IdentityDescriptor:
        return await self.reconciler.fetch_identity(token)

    async def get_user_profile(self, user: IdentityDescriptor, token: str) -> Profile:
        return await self.reconciler.fetch_profile(user, token)

    async def reconcile(
        self,
        code: str,
        lookup_by_provider_id: Lookup,
        lookup_by_email: Lookup,
    ) -> ReconciliationOutcome:
        return await self.reconciler.reconcile(code, lookup_by_provider_id, lookup_by_email)
