"""Unit of Work behaviour on the transactional test session."""

from __future__ import annotations

import pytest

from authcore.models.account import Account
from authcore.uow import SQLAlchemyReadOnlyUnitOfWork as ROuow
from authcore.uow import SQLAlchemyUnitOfWork as RWuow
from tests.factories import AccountFactory


class TestSQLAlchemyUnitOfWork:
    def test_commits_on_clean_exit(self, app_ctx):
        with RWuow() as uow:
            uow.accounts.add(Account(name="Ann Lee", email="ann@example.com", password_hash="h"))

        with ROuow() as uow:
            assert uow.accounts.get_by_email("ann@example.com") is not None

    def test_rolls_back_on_error(self, app_ctx):
        with pytest.raises(RuntimeError, match="boom"), RWuow() as uow:
            uow.accounts.add(Account(name="Ann Lee", email="ann@example.com", password_hash="h"))
            raise RuntimeError("boom")

        with ROuow() as uow:
            assert uow.accounts.get_by_email("ann@example.com") is None


class TestSQLAlchemyReadOnlyUnitOfWork:
    def test_blocks_orm_flush_writes(self, app_ctx):
        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            uow.session.add(AccountFactory.build())
            uow.session.flush()

    def test_sees_outer_uncommitted_rows(self, app_ctx):
        account = AccountFactory()
        with ROuow() as uow:
            assert uow.accounts.get(account.id) is not None
        # The outer transaction owner still sees its row.
        with ROuow() as uow:
            assert uow.accounts.count() == 1

    def test_disallows_commit(self, app_ctx):
        with ROuow() as uow, pytest.raises(RuntimeError, match="does not allow commit"):
            uow.commit()
