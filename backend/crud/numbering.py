"""
Sequential, human-readable document numbers.

Numbers look like ``JU-202601-0007``: a prefix keyed by document type, the year
and month of the period, and a four-digit sequence. The sequence continues from the
highest sequence the tenant already holds for the prefix in any period, so it is
scoped per tenant and per prefix and a backdated document never reuses a number.
Reading the highest sequence and inserting the next one is not atomic; uniqueness
comes from the (tenant, number) constraint and `insert_with_number_retry`.
"""

import logging
from datetime import date
from typing import Callable, Optional, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import config
from exceptions import DuplicateNumberError
from models.journals import Journal, JournalType
from models.sales import Sale
from utils.dates import today

logger = logging.getLogger(__name__)

JOURNAL_PREFIXES = {
    JournalType.GENERAL: "JU",
    JournalType.SALES: "JP",
    JournalType.EXPENSE: "JK",
    JournalType.PURCHASE: "JB",
    JournalType.ADJUSTMENT: "JA",
    JournalType.PAYMENT: "PY",
}
DEFAULT_JOURNAL_PREFIX = "J"
SALE_PREFIX = "SALE"

T = TypeVar("T")


def journal_prefix(journal_type) -> str:
    try:
        return JOURNAL_PREFIXES[JournalType(journal_type)]
    except (KeyError, ValueError):
        return DEFAULT_JOURNAL_PREFIX


def parse_sequence(number: Optional[str]) -> int:
    """Trailing sequence of a document number, 0 when absent or unparsable."""
    if not number:
        return 0
    try:
        return int(number.rsplit("-", 1)[-1])
    except ValueError:
        return 0


def format_number(prefix: str, period: date, sequence: int) -> str:
    return f"{prefix}-{period.year:04d}{period.month:02d}-{sequence:04d}"


def _last_sequence(db: Session, column, tenant_column, tenant_id: str, prefix: str) -> int:
    # Numeric maximum, not the lexicographic last: periods need not arrive in order
    numbers = db.query(column).filter(
        tenant_column == tenant_id,
        column.like(f"{prefix}-%")
    ).all()
    return max((parse_sequence(number) for (number,) in numbers), default=0)


def next_journal_number(db: Session, tenant_id: str, journal_type, period: Optional[date] = None) -> str:
    prefix = journal_prefix(journal_type)
    sequence = _last_sequence(db, Journal.journal_no, Journal.tenant_id, tenant_id, prefix)
    return format_number(prefix, period or today(), sequence + 1)


def next_sale_number(db: Session, tenant_id: str, period: Optional[date] = None) -> str:
    sequence = _last_sequence(db, Sale.sale_no, Sale.tenant_id, tenant_id, SALE_PREFIX)
    return format_number(SALE_PREFIX, period or today(), sequence + 1)


def journal_number_exists(db: Session, tenant_id: str, journal_no: str) -> bool:
    return db.query(Journal.id).filter(
        Journal.tenant_id == tenant_id,
        Journal.journal_no == journal_no
    ).first() is not None


def sale_number_exists(db: Session, tenant_id: str, sale_no: str) -> bool:
    return db.query(Sale.id).filter(
        Sale.tenant_id == tenant_id,
        Sale.sale_no == sale_no
    ).first() is not None


def insert_with_number_retry(
    db: Session,
    allocate: Callable[[], str],
    build: Callable[[str], T],
    number_exists: Callable[[str], bool],
    label: str = "journal",
) -> T:
    """
    Allocate a number, build the rows that carry it and commit them as one unit.

    `build` adds and flushes everything belonging to the unit. When the commit hits
    the unique constraint on the number, the whole unit is rolled back and rebuilt
    with a freshly allocated number. Any other failure rolls back and propagates.
    """
    for attempt in range(1, config.JOURNAL_NUMBER_MAX_ATTEMPTS + 1):
        number = allocate()
        try:
            obj = build(number)
            db.commit()
        except IntegrityError:
            db.rollback()
            if not number_exists(number):
                raise
            logger.warning(f"{label.capitalize()} number {number} was taken concurrently (attempt {attempt}); retrying")
            continue
        except Exception:
            db.rollback()
            raise
        db.refresh(obj)
        return obj

    raise DuplicateNumberError(
        f"Could not allocate a unique {label} number after {config.JOURNAL_NUMBER_MAX_ATTEMPTS} attempts."
    )
