"""
In-memory account store for development and tests.

Why: `reconcile` only needs two async lookups. This store provides them for
local development and examples; production callers pass lookups backed by
their own database.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class AccountRecord:
    account_id: str
    email: Optional[str] = None
    clever_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)


class AccountStore:
    def __init__(self):
        self._by_id: Dict[str, AccountRecord] = {}

    def add(self, rec: AccountRecord) -> AccountRecord:
        self._by_id[rec.account_id] = rec
        return rec

    def link(self, *, account_id: str, clever_id: str) -> AccountRecord:
        """Attach a Clever id to an existing account (after a MERGE)."""
        rec = self._by_id[account_id]
        rec.clever_id = clever_id
        return rec

    async def by_clever_id(self, clever_id: str) -> Optional[AccountRecord]:
        for rec in self._by_id.values():
            if rec.clever_id == clever_id:
                return rec
        return None

    async def by_email(self, email: str) -> Optional[AccountRecord]:
        needle = (email or "").strip().lower()
        for rec in self._by_id.values():
            if rec.email and rec.email.lower() == needle:
                return rec
        return None
