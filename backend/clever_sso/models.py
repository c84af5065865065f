"""
Value objects for the Clever login flow.

Clever changed the profile envelope between API versions: older responses
are flat, v2.x nests the record under `data` next to `links`. Both are
normalized into one `Profile` here so the decision logic sees a single shape.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from .domain import USER_TYPES
from .errors import UpstreamProfileError


@dataclass(frozen=True)
class IdentityDescriptor:
    type: str
    id: str
    district: Optional[str] = None
    authorized_by: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "IdentityDescriptor":
        """Parse the `/me` response.

        Raises UpstreamProfileError("identity_invalid") when the principal id
        is missing and ("unsupported_user_type") for types we cannot reconcile.
        """
        if not isinstance(payload, dict) or not isinstance(payload.get("data"), dict):
            raise UpstreamProfileError("identity_invalid")
        data = payload["data"]
        uid = data.get("id")
        if not uid:
            raise UpstreamProfileError("identity_invalid")
        user_type = str(data.get("type") or payload.get("type") or "")
        if user_type not in USER_TYPES:
            raise UpstreamProfileError("unsupported_user_type")
        return cls(
            type=user_type,
            id=str(uid),
            district=_opt_str(data.get("district")),
            authorized_by=_opt_str(data.get("authorized_by")),
        )


@dataclass(frozen=True)
class Name:
    first: str = ""
    last: str = ""
    middle: Optional[str] = None

    @property
    def full(self) -> str:
        return " ".join(p for p in (self.first, self.middle, self.last) if p)


@dataclass(frozen=True)
class Profile:
    id: str
    name: Name = field(default_factory=Name)
    email: Optional[str] = None
    district: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_payload(cls, payload: Any) -> "Profile":
        if not isinstance(payload, dict):
            raise UpstreamProfileError("profile_invalid")
        data = payload.get("data") if isinstance(payload.get("data"), dict) else payload
        uid = data.get("id")
        if not uid:
            raise UpstreamProfileError("profile_invalid")
        name = data.get("name") if isinstance(data.get("name"), dict) else {}
        return cls(
            id=str(uid),
            name=Name(
                first=str(name.get("first") or ""),
                last=str(name.get("last") or ""),
                middle=_opt_str(name.get("middle")),
            ),
            # Empty strings show up for students without a district email
            email=_opt_str(data.get("email")),
            district=_opt_str(data.get("district")),
            raw=dict(payload),
        )


class Status(str, Enum):
    SUCCESS = "SUCCESS"
    MERGE = "MERGE"
    NEW = "NEW"


@dataclass(frozen=True)
class ReconciliationOutcome:
    """Result of one login attempt.

    SUCCESS and MERGE carry the caller's own account record as `body`; NEW
    carries the fetched `Profile` and the principal type so the caller can
    offer account creation.
    """

    status: Status
    body: Any
    provider_id: str
    identity_type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "status": self.status.value,
            "body": self.body,
            "provider_id": self.provider_id,
        }
        if self.identity_type is not None:
            out["identity_type"] = self.identity_type
        return out


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


__all__ = ["IdentityDescriptor", "Name", "Profile", "Status", "ReconciliationOutcome"]
