from __future__ import annotations

import threading
from typing import Protocol
from uuid import uuid4

from authcore.services._shared.dto import AccountView, Role
from authcore.services._shared.errors import DuplicateEmail, DuplicateExternalId


class AccountDirectory(Protocol):
    """
    Port for account identity and role lookups.

    Uniqueness of ``email`` (and ``external_id``) MUST be enforced by the
    storage layer itself; a caller's pre-check is not race-free.
    """

    def find_by_email(self, email: str) -> AccountView | None: ...

    def find_by_external_id(self, external_id: str) -> AccountView | None: ...

    def insert(self, *, name: str, email: str, password_hash: str, role: Role) -> AccountView:
        """
        Create a local account.

        :raises DuplicateEmail: If the email is already present.
        """

    def insert_federated(
        self, *, name: str, email: str, external_id: str, role: Role
    ) -> AccountView:
        """
        Create an account originating from an external identity provider.

        :raises DuplicateEmail: If the email is already present.
        :raises DuplicateExternalId: If the external id is already linked.
        """

    def count_accounts(self) -> int:
        """Return the number of accounts ever created (none are deleted here)."""


class InMemoryAccountDirectory(AccountDirectory):
    """Dictionary-backed directory; the lock plays the unique index."""

    def __init__(self) -> None:
        self._by_id: dict[str, AccountView] = {}
        self._lock = threading.Lock()

    def find_by_email(self, email: str) -> AccountView | None:
        with self._lock:
            return next((a for a in self._by_id.values() if a.email == email), None)

    def find_by_external_id(self, external_id: str) -> AccountView | None:
        with self._lock:
            return next(
                (a for a in self._by_id.values() if a.external_id == external_id),
                None,
            )

    def _insert(self, account: AccountView) -> AccountView:
        with self._lock:
            rows = self._by_id.values()
            if account.external_id and any(r.external_id == account.external_id for r in rows):
                raise DuplicateExternalId(account.external_id)
            if any(r.email == account.email for r in rows):
                raise DuplicateEmail(account.email)
            self._by_id[account.id] = account
            return account

    def insert(self, *, name: str, email: str, password_hash: str, role: Role) -> AccountView:
        return self._insert(
            AccountView(
                id=str(uuid4()),
                name=name,
                email=email,
                role=role,
                password_hash=password_hash,
            )
        )

    def insert_federated(
        self, *, name: str, email: str, external_id: str, role: Role
    ) -> AccountView:
        return self._insert(
            AccountView(
                id=str(uuid4()),
                name=name,
                email=email,
                role=role,
                external_id=external_id,
            )
        )

    def count_accounts(self) -> int:
        with self._lock:
            return len(self._by_id)
