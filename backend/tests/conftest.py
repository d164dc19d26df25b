"""
Pytest fixtures for the ledger test suite.

The application reads its settings at import time, so the environment is pointed at
a throwaway SQLite database (and log directory) before anything from the app is
imported. Tables are recreated for every test.
"""

import os
import tempfile

_TEST_DIR = tempfile.mkdtemp(prefix="ledger-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TEST_DIR, 'ledger.db')}"
os.environ["LOG_DIR"] = os.path.join(_TEST_DIR, "logs")
os.environ["AUTO_CREATE_TABLES"] = "false"

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from database import Base, SessionLocal, engine
from crud import accounts as crud_accounts
from crud import journals as crud_journals
from main import app
from models.accounts import AccountType
from models.journals import JournalType
from schemas.accounts import AccountCreate
from schemas.journals import JournalCreate, JournalEntryCreate

TENANT = "tenant-a"
OTHER_TENANT = "tenant-b"
JOURNAL_DATE = date(2026, 1, 15)
PERIOD = date(2026, 1, 1)


@pytest.fixture
def db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    with TestClient(app) as test_client:
        yield test_client


def make_account(db, code, name, account_type, tenant_id=TENANT, opening_balance=0, category=None):
    return crud_accounts.create_account(
        db,
        AccountCreate(
            code=code,
            name=name,
            account_type=account_type,
            category=category,
            opening_balance=Decimal(str(opening_balance)),
        ),
        tenant_id,
    )


@pytest.fixture
def accounts(db):
    """A small chart of accounts for TENANT, keyed by role."""
    return {
        "cash": make_account(db, "101", "Cash", AccountType.ASSET, category="Current Asset"),
        "bank": make_account(db, "102", "Bank", AccountType.ASSET, category="Current Asset"),
        "payable": make_account(db, "201", "Accounts Payable", AccountType.LIABILITY, category="Current Liability"),
        "tax": make_account(db, "211", "Sales Tax Payable", AccountType.LIABILITY, category="Tax Liability"),
        "equity": make_account(db, "301", "Owner's Equity", AccountType.EQUITY, category="Owner Equity"),
        "sales": make_account(db, "401", "Sales Revenue", AccountType.REVENUE, category="Operating Revenue"),
        "expense": make_account(db, "601", "Rent Expense", AccountType.EXPENSE, category="Operating Expense"),
    }


def line(debit_account=None, credit_account=None, debit=0, credit=0, description=None):
    return JournalEntryCreate(
        debit_account_id=debit_account.id if debit_account is not None else None,
        credit_account_id=credit_account.id if credit_account is not None else None,
        debit_amount=Decimal(str(debit)),
        credit_amount=Decimal(str(credit)),
        description=description,
    )


def make_journal(db, entries, tenant_id=TENANT, journal_type=JournalType.GENERAL, on=JOURNAL_DATE, reference=None):
    return crud_journals.create_journal(
        db,
        JournalCreate(date=on, journal_type=journal_type, reference=reference, entries=entries),
        tenant_id,
        period=PERIOD,
    )


def post(db, journal, tenant_id=TENANT):
    return crud_journals.post_journal(db, journal.id, tenant_id)


def balance_of(db, account):
    db.refresh(account)
    return account.balance
