from __future__ import annotations

from typing import Protocol


class CredentialVerifier(Protocol):
    """
    Port for password hashing and refresh-token digests.

    ``hash``/``compare`` are deliberately slow and salted; ``hash_refresh_token``
    is a fast deterministic digest of an already random token.
    """

    def hash(self, plaintext: str) -> str:
        """Return a salted, one-way hash of ``plaintext``."""

    def compare(self, plaintext: str, hashed: str | None) -> bool:
        """
        Check ``plaintext`` against ``hashed`` in constant time.

        MUST return ``False`` (not raise) for a missing or malformed hash.
        """

    def hash_refresh_token(self, raw: str) -> str:
        """Return the deterministic digest stored in place of a raw refresh token."""
