"""
Account reconciliation for "Log in with Clever".

Why: After a successful Clever login we must decide what the login means for
the caller's own user store. The store stays behind two injected lookups so
this module works with any persistence technology (ORM, SQL, in-memory).

Decision order (first match wins):
1. Account already linked to the Clever id        -> SUCCESS (no profile fetch)
2. Unlinked account with the profile's email       -> MERGE (offer linking)
3. Otherwise                                       -> NEW (offer sign-up)

Lookups report absence by returning None. Exceptions they raise are not
caught here; the caller keeps its persistence error semantics.
"""
from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional, Union
import inspect
import logging

from .config import CleverConfig
from .domain import id_tail
from .errors import TransportError, UpstreamProfileError
from .exchange import TokenExchanger
from .models import IdentityDescriptor, Profile, ReconciliationOutcome, Status
from .transport import HttpClient, JsonResponse, bearer

logger = logging.getLogger("clever_sso.identity")

Lookup = Callable[[str], Union[Awaitable[Optional[Any]], Optional[Any]]]


async def _call_lookup(lookup: Lookup, key: str) -> Optional[Any]:
    result = lookup(key)
    if inspect.isawaitable(result):
        result = await result
    return result


class IdentityReconciler:
    def __init__(self, cfg: CleverConfig, transport: HttpClient, exchanger: Optional[TokenExchanger] = None):
        self.cfg = cfg
        self.transport = transport
        self.exchanger = exchanger or TokenExchanger(cfg, transport)

    async def _get(self, url: str, token: str, what: str) -> JsonResponse:
        try:
            resp = await self.transport.get_json(url, headers=bearer(token))
        except TransportError as exc:
            raise UpstreamProfileError(f"{what}_unreachable") from exc
        if not resp.ok:
            logger.warning("%s fetch rejected: status=%s", what.capitalize(), resp.status_code)
            raise UpstreamProfileError(f"{what}_fetch_failed")
        return resp

    async def fetch_identity(self, token: str) -> IdentityDescriptor:
        """Return the principal behind `token` (GET /me)."""
        resp = await self._get(f"{self.cfg.api_url}/me", token, "identity")
        descriptor = IdentityDescriptor.from_payload(resp.payload)
        logger.info("Identity fetched: type=%s id_tail=%s", descriptor.type, id_tail(descriptor.id))
        return descriptor

    async def fetch_profile(self, descriptor: IdentityDescriptor, token: str) -> Profile:
        """Return the full teacher/student record for `descriptor`."""
        url = f"{self.cfg.api_url}/{descriptor.type}s/{descriptor.id}"
        resp = await self._get(url, token, "profile")
        return Profile.from_payload(resp.payload)

    async def decide(
        self,
        descriptor: IdentityDescriptor,
        token: str,
        lookup_by_provider_id: Lookup,
        lookup_by_email: Lookup,
    ) -> ReconciliationOutcome:
        existing = await _call_lookup(lookup_by_provider_id, descriptor.id)
        logger.info("Lookup by provider id: id_tail=%s found=%s", id_tail(descriptor.id), existing is not None)
        if existing is not None:
            return self._done(ReconciliationOutcome(Status.SUCCESS, existing, descriptor.id))

        profile = await self.fetch_profile(descriptor, token)
        if profile.email:
            match = await _call_lookup(lookup_by_email, profile.email)
            if match is not None:
                return self._done(ReconciliationOutcome(Status.MERGE, match, descriptor.id))

        return self._done(
            ReconciliationOutcome(Status.NEW, profile, descriptor.id, identity_type=descriptor.type)
        )

    async def reconcile(
        self,
        code: str,
        lookup_by_provider_id: Lookup,
        lookup_by_email: Lookup,
    ) -> ReconciliationOutcome:
        """Run the full login: code -> token -> identity -> decision.

        Raises UpstreamAuthError / UpstreamProfileError for provider failures;
        lookup errors propagate unchanged.
        """
        token = await self.exchanger.exchange(code)
        descriptor = await self.fetch_identity(token)
        return await self.decide(descriptor, token, lookup_by_provider_id, lookup_by_email)

    @staticmethod
    def _done(outcome: ReconciliationOutcome) -> ReconciliationOutcome:
        logger.info("Reconciliation outcome: status=%s id_tail=%s", outcome.status.value, id_tail(outcome.provider_id))
        return outcome
