"""
Clever identity constants and simple helpers.

Why:
- Centralize the principal types we can reconcile so the URL builder and the
  descriptor parser never drift apart.
- Keep provider defaults (API version, hosts) in one place.
"""

from __future__ import annotations

# Clever reports more principal types (district_admin, school_admin, ...);
# only these two have a profile endpoint we reconcile against.
USER_TYPES = frozenset({"teacher", "student"})

DEFAULT_API_VERSION = "v2.1"
DEFAULT_OAUTH_BASE_URL = "https://clever.com"
DEFAULT_API_BASE_URL = "https://api.clever.com"


def id_tail(value: str | None) -> str:
    """Return the last six characters of an identifier for log lines."""
    return str(value or "")[-6:]


__all__ = [
    "USER_TYPES",
    "DEFAULT_API_VERSION",
    "DEFAULT_OAUTH_BASE_URL",
    "DEFAULT_API_BASE_URL",
    "id_tail",
]
