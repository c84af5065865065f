"""
Error taxonomy for the Clever SSO flow.

Every error carries a short machine-readable `code` so web adapters can map
failures to responses without parsing messages. Upstream errors are fatal to
the current login attempt; callers decide whether to send the user back to the
login button.
"""
from __future__ import annotations


class CleverError(Exception):
    """Base class for failures raised by this package."""

    def __init__(self, code: str):
        super().__init__(code)
        self.code = code


class TransportError(CleverError):
    """Raised by a transport when the request never produced a response."""


class UpstreamAuthError(CleverError):
    """Token exchange failed (bad code, bad credentials, network failure)."""


class UpstreamProfileError(CleverError):
    """Identity or profile fetch failed after a token was obtained."""


__all__ = ["CleverError", "TransportError", "UpstreamAuthError", "UpstreamProfileError"]
