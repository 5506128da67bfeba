# authcore/services/auth/service.py
from __future__ import annotations

import hmac
import logging
from collections.abc import Callable

from authcore.services._shared.base import BaseService
from authcore.services._shared.dto import AccountView, RefreshSessionRecord, Role
from authcore.services._shared.errors import (
    AccountExists,
    AccountNotFound,
    DuplicateEmail,
    DuplicateExternalId,
    InvalidCredentials,
    InvalidToken,
    TokenExpired,
    TokenNotFoundOrAlreadyRotated,
)
from authcore.services._shared.ports import (
    AccessClaims,
    AccountDirectory,
    CredentialVerifier,
    SessionStore,
    TokenSigner,
)
from authcore.services.auth.dto import (
    ExternalIdentityIn,
    LoginIn,
    RefreshIn,
    RegisterIn,
    TokenPairOut,
    VerifyIn,
    VerifyOut,
)

logger = logging.getLogger(__name__)

REGISTERED_MESSAGE = "User registered successfully!"

RegisteredHook = Callable[[AccountView], None]


class AuthService(BaseService):
    """
    Authentication lifecycle service (register / login / refresh / verify).

    Issues token pairs through a :class:`TokenSigner`, keeps one server-side
    session per live refresh token in a :class:`SessionStore`, and resolves
    identities through an :class:`AccountDirectory`.

    Refresh tokens are single use: a session is deleted when redeemed, and
    the delete is the only step that decides between concurrent redemptions.
    """

    def __init__(
        self,
        *,
        directory: AccountDirectory,
        sessions: SessionStore,
        signer: TokenSigner,
        verifier: CredentialVerifier,
        on_registered: RegisteredHook | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param directory: Account lookups and unique inserts.
        :param sessions: Refresh session store with single-winner delete.
        :param signer: Access/refresh token minting and verification.
        :param verifier: Password hashing and refresh-token digests.
        :param on_registered: Optional callback run after a local account is
            created. Failures are logged, never raised.
        """
        self.directory = directory
        self.sessions = sessions
        self.signer = signer
        self.verifier = verifier
        self.on_registered = on_registered

    # ------------------------------------------------------------------ #
    # Register
    # ------------------------------------------------------------------ #

    def _bootstrap_role(self) -> Role:
        # Best effort: two concurrent first registrations may both see 0.
        return Role.SUPERADMIN if self.directory.count_accounts() == 0 else Role.USER

    def register(self, dto: RegisterIn) -> str:
        """
        Create a local account. No tokens are issued.

        The first account ever created becomes ``superadmin``.

        :param dto: Registration input (already validated).
        :returns: Success message.
        :raises AccountExists: If the email is taken (pre-check or lost race).
        """
        if self.directory.find_by_email(dto.email) is not None:
            logger.info("Registration rejected", extra={"reason": "email_taken"})
            raise AccountExists()

        role = self._bootstrap_role()
        password_hash = self.verifier.hash(dto.password)
        try:
            account = self.directory.insert(
                name=dto.name,
                email=dto.email,
                password_hash=password_hash,
                role=role,
            )
        except DuplicateEmail as exc:
            logger.info("Registration rejected", extra={"reason": "email_race"})
            raise AccountExists() from exc

        logger.info("Account registered", extra={"account_id": account.id, "role": role.value})
        self._notify_registered(account)
        return REGISTERED_MESSAGE

    def _notify_registered(self, account: AccountView) -> None:
        if self.on_registered is None:
            return
        try:
            self.on_registered(account)
        except Exception:
            logger.exception("on_registered hook failed", extra={"account_id": account.id})

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> TokenPairOut:
        """
        Authenticate credentials and issue a fresh token pair.

        :param dto: Login input.
        :returns: Access/refresh token pair.
        :raises AccountNotFound: If no account has this email.
        :raises InvalidCredentials: If the password does not match.
        """
        account = self.directory.find_by_email(dto.email)
        if account is None:
            logger.info("Login rejected", extra={"reason": "unknown_email"})
            raise AccountNotFound()

        if not self.verifier.compare(dto.password, account.password_hash):
            logger.info(
                "Login rejected",
                extra={"account_id": account.id, "reason": "bad_password"},
            )
            raise InvalidCredentials()

        pair = self.issue_session(account.id, account.role)
        logger.info("Login succeeded", extra={"account_id": account.id})
        return pair

    # ------------------------------------------------------------------ #
    # Session issuance (shared by login, refresh and federated login)
    # ------------------------------------------------------------------ #

    def issue_session(self, account_id: str, role: Role) -> TokenPairOut:
        """
        Mint a token pair and persist the refresh session by digest.

        The raw refresh token leaves this method only in the returned DTO.

        :param account_id: Subject account.
        :param role: Role to embed in both tokens.
        :returns: Access/refresh token pair.
        """
        claims = AccessClaims(account_id=account_id, role=role)
        access = self.signer.sign_access(claims)
        issued = self.signer.sign_refresh(claims)
        self.sessions.store(
            RefreshSessionRecord(
                id=issued.id,
                account_id=issued.account_id,
                token_hash=self.verifier.hash_refresh_token(issued.raw_token),
                created_at=issued.created_at,
                expires_at=issued.expires_at,
            )
        )
        logger.debug("Session issued", extra={"account_id": account_id, "session_id": issued.id})
        return TokenPairOut(access_token=access, refresh_token=issued.raw_token)

    # ------------------------------------------------------------------ #
    # Refresh
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Exchange a refresh token for a new pair, consuming the old session.

        Steps run in a fixed order: verify, look up, expiry, digest compare,
        delete, reissue. If persisting the new session fails after the delete
        the error propagates and the caller is logged out.

        :param dto: Refresh input.
        :returns: New access/refresh token pair.
        :raises InvalidToken: Bad signature/payload or digest mismatch.
        :raises TokenNotFoundOrAlreadyRotated: No live session for the token id,
            including losing a concurrent redemption.
        :raises TokenExpired: Session exists but is past its expiry.
        """
        claims = self.signer.verify_refresh(dto.refresh_token)
        if claims is None:
            logger.info("Refresh rejected", extra={"reason": "bad_signature"})
            raise InvalidToken()

        session = self.sessions.find_by_id(claims.session_id)
        if session is None:
            logger.warning(
                "Refresh rejected",
                extra={"session_id": claims.session_id, "reason": "not_found"},
            )
            raise TokenNotFoundOrAlreadyRotated()

        if session.expires_at <= self.now_utc():
            logger.info(
                "Refresh rejected",
                extra={"session_id": session.id, "reason": "expired"},
            )
            raise TokenExpired()

        digest = self.verifier.hash_refresh_token(dto.refresh_token)
        if not hmac.compare_digest(digest, session.token_hash):
            logger.warning(
                "Refresh rejected",
                extra={"session_id": session.id, "reason": "digest_mismatch"},
            )
            raise InvalidToken()

        if not self.sessions.delete_by_id(session.id):
            logger.warning(
                "Refresh rejected",
                extra={"session_id": session.id, "reason": "lost_rotation"},
            )
            raise TokenNotFoundOrAlreadyRotated()

        pair = self.issue_session(session.account_id, claims.role)
        logger.info(
            "Refresh rotated",
            extra={"account_id": session.account_id, "session_id": session.id},
        )
        return pair

    def purge_expired_sessions(self) -> int:
        """
        Sweep sessions past their expiry from the store.

        :returns: Number of sessions removed (``0`` for self-expiring stores).
        """
        removed = self.sessions.purge_expired(self.now_utc())
        logger.info("Expired sessions purged", extra={"removed": removed})
        return removed

    # ------------------------------------------------------------------ #
    # Verify
    # ------------------------------------------------------------------ #

    def verify_access(self, dto: VerifyIn) -> VerifyOut:
        """
        Stateless access-token check. Never raises.

        :param dto: Verify input.
        :returns: ``VerifyOut(valid=True, ...)`` or ``VerifyOut(valid=False)``.
        """
        claims = self.signer.verify_access(dto.token)
        if claims is None:
            return VerifyOut.invalid()
        return VerifyOut(valid=True, account_id=claims.account_id, role=claims.role)

    # ------------------------------------------------------------------ #
    # Federated identity
    # ------------------------------------------------------------------ #

    def login_or_register_external(self, dto: ExternalIdentityIn) -> TokenPairOut:
        """
        Sign in with an externally verified identity, creating the account on
        first sight.

        :param dto: Identity asserted by the provider.
        :returns: Access/refresh token pair.
        :raises AccountExists: If a different account already owns the email.
        """
        account = self.directory.find_by_external_id(dto.external_id)
        if account is None:
            account = self._register_external(dto)
        pair = self.issue_session(account.id, account.role)
        logger.info("External login succeeded", extra={"account_id": account.id})
        return pair

    def _register_external(self, dto: ExternalIdentityIn) -> AccountView:
        try:
            account = self.directory.insert_federated(
                name=dto.name,
                email=dto.email,
                external_id=dto.external_id,
                role=self._bootstrap_role(),
            )
        except (DuplicateExternalId, DuplicateEmail) as exc:
            # A concurrent first login for the same identity won; use its row.
            winner = self.directory.find_by_external_id(dto.external_id)
            if winner is not None:
                return winner
            if isinstance(exc, DuplicateEmail):
                logger.info(
                    "External registration rejected",
                    extra={"reason": "email_owned_by_other_account"},
                )
                raise AccountExists() from exc
            raise

        logger.info(
            "Account registered",
            extra={"account_id": account.id, "role": account.role.value, "reason": "external"},
        )
        return account
