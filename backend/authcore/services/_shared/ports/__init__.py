"""
authcore.services._shared.ports
===============================

Collection of *ports* (hexagonal interfaces) that define the contracts the
authentication orchestrator depends on.

Modules
-------
- :mod:`credential_verifier`:
    Defines :class:`~.CredentialVerifier`: password hashing and refresh-token digests.

- :mod:`token_signer`:
    Defines :class:`~.TokenSigner` and its claim types: signed token minting/verification.

- :mod:`session_store`:
    Defines :class:`~.SessionStore`: refresh session persistence with single-winner delete.

- :mod:`account_directory`:
    Defines :class:`~.AccountDirectory`: account lookups and unique inserts.

Concrete adapters (Werkzeug, PyJWT, SQLAlchemy, Redis) live under
``authcore.infra``. In-memory doubles live next to their ports for unit tests.
"""

from __future__ import annotations

from .account_directory import AccountDirectory, InMemoryAccountDirectory
from .credential_verifier import CredentialVerifier
from .session_store import InMemorySessionStore, SessionStore
from .token_signer import AccessClaims, IssuedRefreshToken, RefreshClaims, TokenSigner

__all__ = [
    "AccessClaims",
    "AccountDirectory",
    "CredentialVerifier",
    "InMemoryAccountDirectory",
    "InMemorySessionStore",
    "IssuedRefreshToken",
    "RefreshClaims",
    "SessionStore",
    "TokenSigner",
]
