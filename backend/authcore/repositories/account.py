"""Account repository: lookups and inserts for the account directory."""

from __future__ import annotations

from sqlalchemy.orm import InstrumentedAttribute

from authcore.models.account import Account
from authcore.repositories.base import BaseRepository


class AccountRepository(BaseRepository[Account]):
    """Persistence-only repository for :class:`Account`.

    It NEVER hashes passwords or issues tokens; callers pass an already
    hashed password.
    """

    model = Account

    def _filterable_fields(self) -> dict[str, InstrumentedAttribute]:
        return {
            "email": Account.email,
            "external_id": Account.external_id,
        }

    def get_by_email(self, email: str) -> Account | None:
        """Fetch an account by email, compared exactly as stored.

        :param email: Email address.
        :type email: str
        :returns: Account or ``None`` when not found.
        :rtype: Account | None
        """
        return self.find_one(email=email)

    def get_by_external_id(self, external_id: str) -> Account | None:
        """Fetch a federated account by its provider-issued id."""
        return self.find_one(external_id=external_id)
