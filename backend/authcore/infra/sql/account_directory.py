from __future__ import annotations

from sqlalchemy.exc import IntegrityError

from authcore.models.account import Account
from authcore.services._shared.dto import AccountView, Role
from authcore.services._shared.errors import DuplicateEmail, DuplicateExternalId, violates
from authcore.services._shared.ports import AccountDirectory
from authcore.uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork

EMAIL_MARKERS = ("uq_accounts_email", "accounts.email")
EXTERNAL_ID_MARKERS = ("uq_accounts_external_id", "accounts.external_id")


class SQLAlchemyAccountDirectory(AccountDirectory):
    """
    Account directory backed by the ``accounts`` table.

    Every call opens its own Unit of Work, so the adapter is safe to share
    across requests. Unique constraints, not lookups, decide duplicate
    inserts.
    """

    def find_by_email(self, email: str) -> AccountView | None:
        with SQLAlchemyReadOnlyUnitOfWork() as uow:
            account = uow.accounts.get_by_email(email)
            return account.to_view() if account else None

    def find_by_external_id(self, external_id: str) -> AccountView | None:
        with SQLAlchemyReadOnlyUnitOfWork() as uow:
            account = uow.accounts.get_by_external_id(external_id)
            return account.to_view() if account else None

    def _insert(self, account: Account) -> AccountView:
        try:
            with SQLAlchemyUnitOfWork() as uow:
                uow.accounts.add(account)
                view = account.to_view()
        except IntegrityError as exc:
            if violates(exc, *EXTERNAL_ID_MARKERS):
                raise DuplicateExternalId(account.external_id or "") from exc
            if violates(exc, *EMAIL_MARKERS):
                raise DuplicateEmail(account.email) from exc
            raise
        return view

    def insert(self, *, name: str, email: str, password_hash: str, role: Role) -> AccountView:
        return self._insert(
            Account(name=name, email=email, password_hash=password_hash, role=role)
        )

    def insert_federated(
        self, *, name: str, email: str, external_id: str, role: Role
    ) -> AccountView:
        return self._insert(
            Account(name=name, email=email, external_id=external_id, role=role)
        )

    def count_accounts(self) -> int:
        with SQLAlchemyReadOnlyUnitOfWork() as uow:
            return uow.accounts.count()
