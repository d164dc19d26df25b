"""
Journal engine.

A journal is created in DRAFT, posted exactly once, and may be deleted in either
state. Posting applies every entry to the referenced account balances following the
normal-balance rule; deleting a POSTED journal first applies the exact inverse. Each
of these runs as a single transaction: on any failure the session is rolled back and
no balance or status change survives.
"""

import logging
from datetime import date
from typing import Iterable, Optional

from sqlalchemy.orm import Session, selectinload
from sqlalchemy.orm.exc import StaleDataError

from crud import accounts as crud_accounts
from crud import numbering
from exceptions import (
    AlreadyPostedError,
    ConflictError,
    InactiveAccountError,
    LedgerError,
    NotFoundError,
)
from models.journal_entries import JournalEntry
from models.journals import Journal, JournalStatus, JournalType
from models.sales import Sale
from schemas.journals import JournalCreate
from utils.dates import parse_date_range
from utils.ledger import entry_postings, opposite_side, to_money, validate_entries

logger = logging.getLogger(__name__)


def _journal_query(db: Session, tenant_id: str):
    return db.query(Journal).options(
        selectinload(Journal.entries).selectinload(JournalEntry.debit_account),
        selectinload(Journal.entries).selectinload(JournalEntry.credit_account),
    ).filter(Journal.tenant_id == tenant_id)


def get_journal(db: Session, journal_id: int, tenant_id: str) -> Optional[Journal]:
    return _journal_query(db, tenant_id).filter(Journal.id == journal_id).first()


def get_journals(
    db: Session,
    tenant_id: str,
    journal_type: Optional[JournalType] = None,
    status: Optional[JournalStatus] = None,
    start_date=None,
    end_date=None,
    skip: int = 0,
    limit: int = 100
):
    start_date, end_date = parse_date_range(start_date, end_date)
    query = _journal_query(db, tenant_id)

    if journal_type:
        query = query.filter(Journal.journal_type == journal_type)
    if status:
        query = query.filter(Journal.status == status)
    if start_date:
        query = query.filter(Journal.date >= start_date)
    if end_date:
        query = query.filter(Journal.date <= end_date)

    return query.order_by(Journal.date.desc(), Journal.id.desc()).offset(skip).limit(limit).all()


def check_accounts(db: Session, tenant_id: str, account_ids: Iterable[int]) -> None:
    """Every id must resolve to an active account of the tenant."""
    for account_id in sorted(set(account_ids)):
        account = crud_accounts.resolve_account(db, account_id, tenant_id)
        if not account.is_active:
            raise InactiveAccountError(f"Account {account.code} is inactive.")


def check_entry_accounts(db: Session, tenant_id: str, entries: Iterable) -> None:
    check_accounts(db, tenant_id, [
        account_id
        for entry in entries
        for account_id in (entry.debit_account_id, entry.credit_account_id)
        if account_id
    ])


def build_journal(
    db: Session,
    tenant_id: str,
    journal_no: str,
    journal_date: date,
    journal_type: JournalType,
    reference: Optional[str],
    entries: Iterable,
    total_amount,
    user: Optional[str] = None
) -> Journal:
    """Add a DRAFT journal and its entries to the session and flush. Does not commit."""
    db_journal = Journal(
        tenant_id=tenant_id,
        journal_no=journal_no,
        date=journal_date,
        reference=reference or f"Journal {journal_no}",
        journal_type=journal_type,
        total_amount=to_money(total_amount),
        status=JournalStatus.DRAFT,
        created_by=user
    )
    for entry in entries:
        db_journal.entries.append(JournalEntry(
            debit_account_id=entry.debit_account_id or None,
            credit_account_id=entry.credit_account_id or None,
            description=entry.description or f"Journal Entry {journal_no}",
            debit_amount=to_money(entry.debit_amount),
            credit_amount=to_money(entry.credit_amount),
            created_by=user
        ))
    db.add(db_journal)
    db.flush()
    return db_journal


def create_journal(
    db: Session,
    journal: JournalCreate,
    tenant_id: str,
    user: Optional[str] = None,
    period: Optional[date] = None
) -> Journal:
    """
    Validate, number and persist a DRAFT journal with its entries.

    Nothing is written unless the entries balance and every referenced account
    belongs to the tenant. `period` picks the month in the journal number and
    defaults to today.
    """
    total_amount = validate_entries(journal.entries)
    check_entry_accounts(db, tenant_id, journal.entries)

    db_journal = numbering.insert_with_number_retry(
        db,
        allocate=lambda: numbering.next_journal_number(db, tenant_id, journal.journal_type, period),
        build=lambda journal_no: build_journal(
            db, tenant_id, journal_no, journal.date, journal.journal_type,
            journal.reference, journal.entries, total_amount, user
        ),
        number_exists=lambda journal_no: numbering.journal_number_exists(db, tenant_id, journal_no),
    )
    logger.info(f"Journal {db_journal.journal_no} ({db_journal.journal_type.value}, {db_journal.total_amount}) created as DRAFT for tenant {tenant_id}")
    return db_journal


def _lock_journal(db: Session, journal_id: int, tenant_id: str) -> Journal:
    db_journal = db.query(Journal).filter(
        Journal.id == journal_id,
        Journal.tenant_id == tenant_id
    ).with_for_update().first()
    if db_journal is None:
        raise NotFoundError(f"Journal with id {journal_id} not found")
    return db_journal


def _apply_entries(db: Session, db_journal: Journal, tenant_id: str, reverse: bool = False) -> None:
    for entry in db_journal.entries:
        for account_id, side, amount in entry_postings(entry):
            if reverse:
                side = opposite_side(side)
            crud_accounts.apply_delta(db, account_id, amount, side, tenant_id=tenant_id)


def post_journal(db: Session, journal_id: int, tenant_id: str, user: Optional[str] = None) -> Journal:
    """Apply a DRAFT journal to account balances and mark it POSTED, all or nothing."""
    try:
        db_journal = _lock_journal(db, journal_id, tenant_id)
        if db_journal.status == JournalStatus.POSTED:
            raise AlreadyPostedError(f"Journal {db_journal.journal_no} is already posted")

        _apply_entries(db, db_journal, tenant_id)
        db_journal.status = JournalStatus.POSTED
        db_journal.updated_by = user
        db.commit()
    except StaleDataError:
        db.rollback()
        raise ConflictError(f"Journal {journal_id} was modified concurrently; nothing was posted")
    except LedgerError:
        db.rollback()
        raise
    except Exception:
        db.rollback()
        logger.exception(f"Posting journal {journal_id} failed for tenant {tenant_id}; rolled back")
        raise

    db.refresh(db_journal)
    logger.info(f"Journal {db_journal.journal_no} posted for tenant {tenant_id}")
    return db_journal


def delete_journal(db: Session, journal_id: int, tenant_id: str) -> None:
    """
    Remove a journal and its entries.

    A POSTED journal is reversed first: every balance change its posting made is
    undone in the same transaction. A sale pointing at the journal is released so it
    can be journaled again.
    """
    try:
        db_journal = _lock_journal(db, journal_id, tenant_id)
        journal_no = db_journal.journal_no
        was_posted = db_journal.status == JournalStatus.POSTED
        if was_posted:
            _apply_entries(db, db_journal, tenant_id, reverse=True)

        for sale in db.query(Sale).filter(Sale.journal_id == db_journal.id, Sale.tenant_id == tenant_id).all():
            sale.journal_id = None
        db.flush()

        db.delete(db_journal)
        db.commit()
    except StaleDataError:
        db.rollback()
        raise ConflictError(f"Journal {journal_id} was modified concurrently; nothing was deleted")
    except LedgerError:
        db.rollback()
        raise
    except Exception:
        db.rollback()
        logger.exception(f"Deleting journal {journal_id} failed for tenant {tenant_id}; rolled back")
        raise

    if was_posted:
        logger.info(f"Posted journal {journal_no} reversed and deleted for tenant {tenant_id}")
    else:
        logger.info(f"Draft journal {journal_no} deleted for tenant {tenant_id}")
