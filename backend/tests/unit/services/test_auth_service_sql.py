# tests/unit/services/test_auth_service_sql.py
"""AuthService as wired by the application factory (SQL directory and store)."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from authcore.infra.sql import SQLAlchemyAccountDirectory
from authcore.models.refresh_session import RefreshSession
from authcore.services._shared.dto import Role
from authcore.services._shared.errors import (
    AccountExists,
    TokenExpired,
    TokenNotFoundOrAlreadyRotated,
)
from authcore.services.auth import AuthService, LoginIn, RefreshIn, RegisterIn, VerifyIn
from tests.factories import AccountFactory


@pytest.fixture()
def service(app_ctx) -> AuthService:
    return app_ctx.extensions["auth_service"]


def test_register_login_refresh_over_sql(service, session):
    service.register(RegisterIn(name="Ann Lee", email="ann@example.com", password="secret1"))
    pair = service.login(LoginIn(email="ann@example.com", password="secret1"))

    claims = service.signer.verify_refresh(pair.refresh_token)
    row = session.get(RefreshSession, claims.session_id)
    assert row is not None
    assert row.token_hash == service.verifier.hash_refresh_token(pair.refresh_token)

    rotated = service.refresh(RefreshIn(refresh_token=pair.refresh_token))
    assert service.verify_access(VerifyIn(token=rotated.access_token)).role is Role.SUPERADMIN

    with pytest.raises(TokenNotFoundOrAlreadyRotated):
        service.refresh(RefreshIn(refresh_token=pair.refresh_token))


def test_second_account_is_plain_user(service):
    AccountFactory()
    service.register(RegisterIn(name="Bob Ray", email="bob@example.com", password="secret1"))
    assert service.directory.find_by_email("bob@example.com").role is Role.USER


def test_login_with_factory_account(service):
    account = AccountFactory(email="carol@example.com", password="hunter22")
    pair = service.login(LoginIn(email="carol@example.com", password="hunter22"))
    assert service.verify_access(VerifyIn(token=pair.access_token)).account_id == account.id


def test_expired_session_is_reported_and_kept(service, session, monkeypatch):
    AccountFactory(email="dan@example.com", password="secret1")
    pair = service.login(LoginIn(email="dan@example.com", password="secret1"))
    session_id = service.signer.verify_refresh(pair.refresh_token).session_id

    monkeypatch.setattr(service, "now_utc", lambda: datetime.now(UTC) + timedelta(days=8))
    with pytest.raises(TokenExpired):
        service.refresh(RefreshIn(refresh_token=pair.refresh_token))

    assert service.sessions.find_by_id(session_id) is not None


class _BlindSQLDirectory(SQLAlchemyAccountDirectory):
    def find_by_email(self, email):
        return None


def test_duplicate_email_race_is_caught_by_unique_constraint(service):
    racing = AuthService(
        directory=_BlindSQLDirectory(),
        sessions=service.sessions,
        signer=service.signer,
        verifier=service.verifier,
    )
    racing.register(RegisterIn(name="Ann Lee", email="ann@example.com", password="secret1"))
    with pytest.raises(AccountExists):
        racing.register(RegisterIn(name="Ann Lee", email="ann@example.com", password="secret1"))
