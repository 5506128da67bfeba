"""Factory Boy definition for :class:`authcore.models.refresh_session.RefreshSession`."""

from __future__ import annotations

import hashlib
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import factory

from authcore.models.refresh_session import RefreshSession
from tests.factories import BaseFactory
from tests.factories.account import AccountFactory


class RefreshSessionFactory(BaseFactory):
    """Build persisted refresh sessions; live for a week unless overridden."""

    class Meta:
        model = RefreshSession

    class Params:
        raw_token = factory.LazyFunction(lambda: f"raw-{uuid4().hex}")

    id = factory.LazyFunction(lambda: str(uuid4()))
    account = factory.SubFactory(AccountFactory)
    token_hash = factory.LazyAttribute(
        lambda o: hashlib.sha256(o.raw_token.encode("utf-8")).hexdigest()
    )
    created_at = factory.LazyFunction(lambda: datetime.now(UTC))
    expires_at = factory.LazyAttribute(lambda o: o.created_at + timedelta(days=7))
