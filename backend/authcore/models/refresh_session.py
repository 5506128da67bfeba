"""Refresh session model: one row per live, unredeemed refresh token."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from authcore.core.extensions import db
from authcore.services._shared.dto import RefreshSessionRecord

from .base import ReprMixin, as_utc

if TYPE_CHECKING:
    from .account import Account


class RefreshSession(ReprMixin, db.Model):
    """
    Server-side state of an issued refresh token.

    The row is deleted when the token is rotated; there is no "used" flag.
    ``expires_at`` is indexed so expired rows can be swept in bulk.
    """

    __tablename__ = "refresh_sessions"

    # Id comes from the signed token payload, never generated here.
    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    account_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
    )
    token_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    account: Mapped[Account] = relationship(back_populates="sessions")

    __table_args__ = (
        Index("ix_refresh_sessions_account_id", "account_id"),
        Index("ix_refresh_sessions_expires_at", "expires_at"),
    )

    @classmethod
    def from_record(cls, record: RefreshSessionRecord) -> RefreshSession:
        return cls(
            id=record.id,
            account_id=record.account_id,
            token_hash=record.token_hash,
            created_at=record.created_at,
            expires_at=record.expires_at,
        )

    def to_record(self) -> RefreshSessionRecord:
        return RefreshSessionRecord(
            id=self.id,
            account_id=self.account_id,
            token_hash=self.token_hash,
            created_at=as_utc(self.created_at),
            expires_at=as_utc(self.expires_at),
        )
