"""
Client configuration for the Clever SSO flow.

Why: The client credential is built once at startup and shared by every login
attempt. A frozen dataclass keeps it immutable so concurrent logins never see
each other's state.

Security: The client secret is excluded from `repr` and never logged. The
startup guard refuses obviously insecure production settings while keeping
local development permissive.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import urlencode
import base64
import logging
import os

from .domain import DEFAULT_API_BASE_URL, DEFAULT_API_VERSION, DEFAULT_OAUTH_BASE_URL

logger = logging.getLogger("clever_sso.config")


@dataclass(frozen=True)
class CleverConfig:
    client_id: str
    client_secret: str = field(repr=False)
    redirect_uri: str  # your frontend page Clever redirects to with ?code=
    api_version: str = DEFAULT_API_VERSION
    oauth_base_url: str = DEFAULT_OAUTH_BASE_URL  # browser-facing authorize + token host
    api_base_url: str = DEFAULT_API_BASE_URL

    @property
    def authorize_endpoint(self) -> str:
        return f"{self.oauth_base_url.rstrip('/')}/oauth/authorize"

    @property
    def token_endpoint(self) -> str:
        return f"{self.oauth_base_url.rstrip('/')}/oauth/tokens"

    @property
    def api_url(self) -> str:
        return f"{self.api_base_url.rstrip('/')}/{self.api_version}"

    @property
    def basic_authorization(self) -> str:
        """Authorization header value for the token endpoint."""
        raw = f"{self.client_id}:{self.client_secret}".encode("utf-8")
        return "Basic " + base64.b64encode(raw).decode("ascii")

    def login_button_uri(self) -> str:
        params = {
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "client_id": self.client_id,
        }
        return f"{self.authorize_endpoint}?{urlencode(params)}"

    @classmethod
    def from_env(cls) -> "CleverConfig":
        """Build a config from CLEVER_* environment variables.

        Raises ValueError naming the first missing required variable.
        """
        values = {}
        for var, key in (
            ("CLEVER_CLIENT_ID", "client_id"),
            ("CLEVER_CLIENT_SECRET", "client_secret"),
            ("CLEVER_REDIRECT_URI", "redirect_uri"),
        ):
            val = (os.getenv(var) or "").strip()
            if not val:
                raise ValueError(f"{var} must be set")
            values[key] = val
        optional = {
            "api_version": os.getenv("CLEVER_API_VERSION"),
            "oauth_base_url": os.getenv("CLEVER_OAUTH_BASE_URL"),
            "api_base_url": os.getenv("CLEVER_API_BASE_URL"),
        }
        for key, val in optional.items():
            if val and val.strip():
                values[key] = val.strip()
        return cls(**values)


def _is_prod_like(env: str) -> bool:
    env_l = (env or "").lower()
    return env_l in {"prod", "production", "stage", "staging"}


def ensure_secure_config_on_startup(cfg: CleverConfig) -> None:
    """Fail fast on insecure production configuration.

    Checks (prod/stage only, selected via CLEVER_ENV):
    - client secret is set and not a CHANGE_ME placeholder
    - redirect URI and both provider hosts use https
    """
    env = os.getenv("CLEVER_ENV", "dev")
    if not _is_prod_like(env):
        return

    secret = (cfg.client_secret or "").strip()
    if not secret or secret.upper().startswith("CHANGE_ME"):
        raise SystemExit(
            "Refusing to start: CLEVER_CLIENT_SECRET is unset or a placeholder in production."
        )

    for name, value in (
        ("CLEVER_REDIRECT_URI", cfg.redirect_uri),
        ("CLEVER_OAUTH_BASE_URL", cfg.oauth_base_url),
        ("CLEVER_API_BASE_URL", cfg.api_base_url),
    ):
        if value.strip().lower().startswith("http://"):
            raise SystemExit(f"Refusing to start: {name} must use https in production (got http).")

    logger.info("Clever config checked for env=%s client_id=%s", env.lower(), cfg.client_id)
