from datetime import date
from decimal import Decimal

import pytest

from conftest import OTHER_TENANT, TENANT, balance_of, make_account, post
from crud import journals as crud_journals
from crud import sales as crud_sales
from exceptions import (
    AlreadyJournaledError,
    ConflictError,
    CrossTenantAccountError,
    NotFoundError,
    UnbalancedEntriesError,
    ValidationError,
)
from models.accounts import AccountType
from models.journals import Journal, JournalStatus, JournalType
from models.sales import SaleStatus
from schemas.sales import SaleCreate


def make_sale(db, subtotal, tax=0, tenant_id=TENANT, customer_name="Toko Makmur", on=date(2026, 1, 15), status=SaleStatus.COMPLETED):
    return crud_sales.create_sale(
        db,
        SaleCreate(
            date=on,
            customer_name=customer_name,
            subtotal=Decimal(str(subtotal)),
            tax=Decimal(str(tax)),
            status=status,
        ),
        tenant_id,
    )


def journal_for(db, sale, accounts, with_tax=True, tenant_id=TENANT):
    return crud_sales.create_sales_journal(
        db,
        sale.id,
        tenant_id,
        cash_account_id=accounts["cash"].id,
        sales_account_id=accounts["sales"].id,
        tax_account_id=accounts["tax"].id if with_tax else None,
    )


def test_create_sale_numbers_and_totals(db):
    first = make_sale(db, 100000, 10000)
    second = make_sale(db, 500)

    assert first.sale_no == "SALE-202601-0001"
    assert second.sale_no == "SALE-202601-0002"
    assert first.total == Decimal("110000.00")
    assert first.journal_id is None
    assert crud_sales.get_sale(db, first.id, OTHER_TENANT) is None


def test_sales_journal_with_tax(db, accounts):
    sale = make_sale(db, 100000, 10000)

    journal = journal_for(db, sale, accounts)

    assert journal.status == JournalStatus.DRAFT
    assert journal.journal_type == JournalType.SALES
    assert journal.journal_no.startswith("JP-")
    assert journal.total_amount == Decimal("110000.00")
    assert [(e.debit_account_id, e.debit_amount) for e in journal.entries if e.debit_amount > 0] == [
        (accounts["cash"].id, Decimal("110000.00"))
    ]
    assert sorted((e.credit_account_id, e.credit_amount) for e in journal.entries if e.credit_amount > 0) == sorted([
        (accounts["sales"].id, Decimal("100000.00")),
        (accounts["tax"].id, Decimal("10000.00")),
    ])
    assert crud_sales.get_sale(db, sale.id, TENANT).journal_id == journal.id


def test_sales_journal_without_tax_has_two_lines(db, accounts):
    sale = make_sale(db, 2500)

    journal = journal_for(db, sale, accounts, with_tax=False)

    assert len(journal.entries) == 2
    assert journal.total_amount == Decimal("2500.00")


def test_sale_is_journaled_at_most_once(db, accounts):
    sale = make_sale(db, 1000)
    journal_for(db, sale, accounts)

    with pytest.raises(AlreadyJournaledError) as excinfo:
        journal_for(db, sale, accounts)

    assert isinstance(excinfo.value, ConflictError)
    assert db.query(Journal).filter(Journal.journal_type == JournalType.SALES).count() == 1


def test_taxed_sale_without_tax_account_is_unbalanced(db, accounts):
    sale = make_sale(db, 1000, 100)

    with pytest.raises(UnbalancedEntriesError):
        journal_for(db, sale, accounts, with_tax=False)

    assert db.query(Journal).count() == 0
    assert crud_sales.get_sale(db, sale.id, TENANT).journal_id is None


def test_foreign_account_is_rejected(db, accounts):
    sale = make_sale(db, 1000)
    foreign = make_account(db, "101", "Cash", AccountType.ASSET, tenant_id=OTHER_TENANT)

    with pytest.raises(CrossTenantAccountError):
        crud_sales.create_sales_journal(db, sale.id, TENANT, foreign.id, accounts["sales"].id)

    assert crud_sales.get_sale(db, sale.id, TENANT).journal_id is None


def test_unknown_sale(db, accounts):
    sale = make_sale(db, 1000, tenant_id=OTHER_TENANT)

    with pytest.raises(NotFoundError):
        journal_for(db, sale, accounts)


def test_posting_sales_journal_moves_balances(db, accounts):
    sale = make_sale(db, 100000, 10000)
    journal = journal_for(db, sale, accounts)

    post(db, journal)

    assert balance_of(db, accounts["cash"]) == Decimal("110000.00")
    assert balance_of(db, accounts["sales"]) == Decimal("100000.00")
    assert balance_of(db, accounts["tax"]) == Decimal("10000.00")


def test_deleting_sales_journal_frees_the_sale(db, accounts):
    sale = make_sale(db, 1000)
    journal = journal_for(db, sale, accounts)
    post(db, journal)

    crud_journals.delete_journal(db, journal.id, TENANT)

    assert crud_sales.get_sale(db, sale.id, TENANT).journal_id is None
    assert balance_of(db, accounts["cash"]) == Decimal("0.00")

    again = journal_for(db, sale, accounts)
    assert crud_sales.get_sale(db, sale.id, TENANT).journal_id == again.id


def test_backdated_sale_gets_the_next_free_number(db):
    february = make_sale(db, 100, on=date(2026, 2, 10))
    january = make_sale(db, 100, on=date(2026, 1, 10))
    january_again = make_sale(db, 100, on=date(2026, 1, 20))

    assert february.sale_no == "SALE-202602-0001"
    assert january.sale_no == "SALE-202601-0002"
    assert january_again.sale_no == "SALE-202601-0003"


def test_cancelled_sale_is_not_journaled(db, accounts):
    sale = make_sale(db, 1000, status=SaleStatus.CANCELLED)

    with pytest.raises(ValidationError):
        journal_for(db, sale, accounts)

    assert db.query(Journal).count() == 0
    assert crud_sales.get_sale(db, sale.id, TENANT).journal_id is None


def test_pending_sale_can_be_journaled(db, accounts):
    sale = make_sale(db, 1000, status=SaleStatus.PENDING)

    journal = journal_for(db, sale, accounts)

    assert crud_sales.get_sale(db, sale.id, TENANT).journal_id == journal.id
