from sqlalchemy import Column, DateTime, String
from datetime import datetime

import config


def _now():
    return datetime.now(config.APP_TIMEZONE)


class TimestampMixin:
    """Mixin that provides created/updated timestamps and user info.

    Ledger rows are never soft-deleted: accounts move through an explicit lifecycle
    status and journals are either kept or removed with a compensating reversal.
    """
    # DateTime(timezone=True) ensures the timezone info is persisted in the database.
    created_at = Column(DateTime(timezone=True), default=_now)
    updated_at = Column(DateTime(timezone=True), onupdate=_now)
    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)
