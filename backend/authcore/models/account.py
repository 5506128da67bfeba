"""Account model: the identity root of the directory."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Enum as SAEnum
from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from authcore.core.extensions import db
from authcore.services._shared.dto import AccountView, Role

from .base import ReprMixin, TimestampMixin, UUIDPKMixin

if TYPE_CHECKING:
    from .refresh_session import RefreshSession


class Account(UUIDPKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Authentication identity, either local (password) or federated (external id).

    Fields
    ------
    name : str
        Display name.
    email : str
        Login email. Unique and case-sensitive: stored exactly as received.
    password_hash : str | None
        Salted password hash. ``None`` for federated-only accounts.
    external_id : str | None
        Identifier issued by an external identity provider. Unique when set.
    role : Role
        ``user`` by default; the first account ever created is ``superadmin``.
    """

    __tablename__ = "accounts"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    external_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    role: Mapped[Role] = mapped_column(
        SAEnum(
            Role,
            name="account_role",
            native_enum=False,
            length=20,
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
        default=Role.USER,
    )

    sessions: Mapped[list[RefreshSession]] = relationship(
        back_populates="account",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        UniqueConstraint("email", name="uq_accounts_email"),
        UniqueConstraint("external_id", name="uq_accounts_external_id"),
    )

    # -------------------- Validators --------------------
    @validates("email")
    def _check_email(self, key: str, value: str) -> str:
        """
        Reject empty or obviously malformed emails without altering case.

        :raises ValueError: If email is missing or has no ``@``.
        """
        if not isinstance(value, str) or "@" not in value:
            raise ValueError("Email format looks invalid.")
        return value

    @validates("name")
    def _check_name(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Name is required.")
        return value.strip()

    # -------------------- Mapping --------------------
    def to_view(self) -> AccountView:
        """Project the ORM row onto the port-level :class:`AccountView`."""
        return AccountView(
            id=self.id,
            name=self.name,
            email=self.email,
            role=Role(self.role),
            password_hash=self.password_hash,
            external_id=self.external_id,
        )
