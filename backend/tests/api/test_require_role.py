"""Bearer-token guard used by protected views."""

from __future__ import annotations

import pytest

from authcore.api.deps import current_identity, get_auth_service, require_role
from authcore.core.errors import Forbidden, Unauthorized
from authcore.services._shared.dto import Role
from tests.factories import AccountFactory


@require_role(Role.SUPERADMIN)
def _superadmin_only():
    return current_identity().account_id


def _bearer(app, role: Role) -> tuple[str, str]:
    account = AccountFactory(role=role)
    account_id = account.id
    with app.app_context():
        pair = get_auth_service().issue_session(account_id, role)
    return account_id, f"Bearer {pair.access_token}"


def test_user_token_is_forbidden_on_superadmin_view(app):
    _, header = _bearer(app, Role.USER)
    with app.test_request_context(headers={"Authorization": header}):
        with pytest.raises(Forbidden, match="Insufficient role"):
            _superadmin_only()


def test_superadmin_token_passes_and_exposes_identity(app):
    account_id, header = _bearer(app, Role.SUPERADMIN)
    with app.test_request_context(headers={"Authorization": header}):
        assert _superadmin_only() == account_id


@pytest.mark.parametrize("header", [None, "Basic abc", "Bearer ", "Bearer not-a-jwt"])
def test_missing_or_bad_token_is_unauthorized(app, header):
    headers = {"Authorization": header} if header else {}
    with app.test_request_context(headers=headers):
        with pytest.raises(Unauthorized):
            _superadmin_only()


def test_forbidden_renders_as_problem(app):
    _, header = _bearer(app, Role.USER)
    with app.test_request_context(headers={"Authorization": header}):
        with pytest.raises(Forbidden) as exc_info:
            _superadmin_only()
        problem = exc_info.value.to_problem().to_dict()

    assert problem["status"] == 403
    assert problem["code"] == "forbidden"
