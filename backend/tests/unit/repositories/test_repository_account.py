"""Unit tests for AccountRepository and RefreshSessionRepository."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from authcore.repositories import AccountRepository, RefreshSessionRepository
from tests.factories import AccountFactory, RefreshSessionFactory


class TestAccountRepository:
    """Ensure ``AccountRepository`` performs core lookups."""

    @pytest.fixture()
    def repo(self, session):
        return AccountRepository(session=session())

    def test_get_by_email(self, repo):
        account = AccountFactory(email="alice@example.com")
        assert repo.get_by_email("alice@example.com").id == account.id
        assert repo.get_by_email("nobody@example.com") is None

    def test_get_by_external_id(self, repo):
        account = AccountFactory(federated=True)
        assert repo.get_by_external_id(account.external_id).id == account.id

    def test_find_one_and_count(self, repo):
        bob = AccountFactory(email="bob@example.com")
        AccountFactory()
        assert repo.find_one(email="bob@example.com") is bob
        assert repo.find_one(email="ghost@example.com") is None
        assert repo.count() == 2

    def test_rejects_unknown_filter(self, repo):
        with pytest.raises(ValueError, match="non-filterable"):
            repo.find_one(password_hash="x")


class TestRefreshSessionRepository:
    @pytest.fixture()
    def repo(self, session):
        return RefreshSessionRepository(session=session())

    def test_delete_by_id_reports_rowcount(self, repo):
        row = RefreshSessionFactory()
        assert repo.delete_by_id(row.id) is True
        assert repo.delete_by_id(row.id) is False

    def test_delete_expired_counts_rows(self, repo):
        now = datetime.now(UTC)
        RefreshSessionFactory(created_at=now - timedelta(days=2), expires_at=now - timedelta(days=1))
        RefreshSessionFactory(created_at=now - timedelta(days=3), expires_at=now - timedelta(hours=1))
        live = RefreshSessionFactory()

        assert repo.delete_expired(now) == 2
        assert repo.get(live.id) is not None
