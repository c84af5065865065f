"""Clever SSO client with account reconciliation."""

from .client import CleverClient
from .config import CleverConfig, ensure_secure_config_on_startup
from .errors import CleverError, TransportError, UpstreamAuthError, UpstreamProfileError
from .exchange import TokenExchanger
from .models import IdentityDescriptor, Name, Profile, ReconciliationOutcome, Status
from .reconcile import IdentityReconciler
from .stores import AccountRecord, AccountStore
from .transport import HttpClient, HttpxTransport, JsonResponse, RequestsTransport

__all__ = [
    "CleverClient",
    "CleverConfig",
    "ensure_secure_config_on_startup",
    "CleverError",
    "TransportError",
    "UpstreamAuthError",
    "UpstreamProfileError",
    "TokenExchanger",
    "IdentityDescriptor",
    "Name",
    "Profile",
    "ReconciliationOutcome",
    "Status",
    "IdentityReconciler",
    "AccountRecord",
    "AccountStore",
    "HttpClient",
    "HttpxTransport",
    "JsonResponse",
    "RequestsTransport",
]
