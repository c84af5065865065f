"""
Authorization code exchange against Clever's token endpoint.

Why: The web adapter receives `?code=` on the redirect page and needs a bearer
token for the follow-up API calls. This module does exactly that one POST.

Behavior:
- Clever codes are single use. Exchanging the same code twice fails on the
  second attempt with `UpstreamAuthError("token_exchange_failed")`; that is
  the provider's contract, not a bug here.
- No retry. Any transport failure or non-2xx response is fatal.

Security: The token is returned to the caller and never logged or stored.
"""
from __future__ import annotations

import logging

from .config import CleverConfig
from .errors import TransportError, UpstreamAuthError
from .transport import HttpClient

logger = logging.getLogger("clever_sso.identity")


class TokenExchanger:
    def __init__(self, cfg: CleverConfig, transport: HttpClient):
        self.cfg = cfg
        self.transport = transport

    async def exchange(self, code: str) -> str:
        """Exchange an authorization code for an access token.

        Returns the `access_token` field verbatim; raises UpstreamAuthError.
        """
        if not code:
            raise UpstreamAuthError("invalid_code")
        body = {
            "code": code,
            "grant_type": "authorization_code",
            "redirect_uri": self.cfg.redirect_uri,
        }
        headers = {
            "Authorization": self.cfg.basic_authorization,
            "Content-Type": "application/json",
        }
        try:
            resp = await self.transport.post_json(self.cfg.token_endpoint, body=body, headers=headers)
        except TransportError as exc:
            raise UpstreamAuthError("token_exchange_unreachable") from exc
        if not resp.ok:
            logger.warning("Token exchange rejected: status=%s", resp.status_code)
            raise UpstreamAuthError("token_exchange_failed")
        token = resp.payload.get("access_token") if isinstance(resp.payload, dict) else None
        if not token or not isinstance(token, str):
            raise UpstreamAuthError("access_token_missing")
        logger.info("Access token acquired")
        return token
