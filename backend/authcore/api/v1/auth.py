"""Authentication endpoints backed by :class:`AuthService`."""

from __future__ import annotations

from flask import Blueprint, request

from authcore.api.deps import (
    current_identity,
    get_auth_service,
    json_response,
    require_role,
)
from authcore.schemas import (
    LoginSchema,
    MessageSchema,
    RefreshSchema,
    RegisterSchema,
    TokenPairSchema,
    VerifyResultSchema,
    VerifySchema,
    WhoAmISchema,
)
from authcore.services.auth import LoginIn, RefreshIn, RegisterIn, VerifyIn

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()
verify_schema = VerifySchema()
message_schema = MessageSchema()
token_pair_schema = TokenPairSchema()
verify_result_schema = VerifyResultSchema()
whoami_schema = WhoAmISchema()


def _payload() -> dict:
    return request.get_json(silent=True) or {}


@bp.post("/register")
def register():
    """Create a local account. No tokens are returned."""

    data = register_schema.load(_payload())
    message = get_auth_service().register(RegisterIn(**data))
    return json_response(message_schema.dump({"message": message}), status=201)


@bp.post("/login")
def login():
    """Authenticate credentials and issue a token pair."""

    data = login_schema.load(_payload())
    pair = get_auth_service().login(LoginIn(**data))
    return json_response(token_pair_schema.dump(pair))


@bp.post("/refresh")
def refresh():
    """Rotate a refresh token into a new token pair."""

    data = refresh_schema.load(_payload())
    pair = get_auth_service().refresh(RefreshIn(**data))
    return json_response(token_pair_schema.dump(pair))


@bp.post("/verify")
def verify():
    """Check an access token. Always 200; the body says whether it is valid."""

    data = verify_schema.load(_payload())
    result = get_auth_service().verify_access(VerifyIn(**data))
    return json_response(verify_result_schema.dump(result))


@bp.get("/me")
@require_role()
def me():
    """Return the identity asserted by the bearer access token."""

    return json_response(whoami_schema.dump(current_identity()))
