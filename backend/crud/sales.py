import logging
from typing import Optional

from sqlalchemy.orm import Session

from crud import journals as crud_journals
from crud import numbering
from exceptions import AlreadyJournaledError, NotFoundError, ValidationError
from models.journals import Journal, JournalType
from models.sales import Sale, SaleStatus
from schemas.journals import JournalEntryCreate
from schemas.sales import SaleCreate
from utils.ledger import to_money, validate_entries

logger = logging.getLogger(__name__)


def get_sale(db: Session, sale_id: int, tenant_id: str) -> Optional[Sale]:
    return db.query(Sale).filter(
        Sale.id == sale_id,
        Sale.tenant_id == tenant_id
    ).first()


def create_sale(db: Session, sale: SaleCreate, tenant_id: str, user: Optional[str] = None) -> Sale:
    subtotal = to_money(sale.subtotal)
    tax = to_money(sale.tax)

    def build(sale_no: str) -> Sale:
        db_sale = Sale(
            tenant_id=tenant_id,
            sale_no=sale_no,
            date=sale.date,
            customer_name=sale.customer_name,
            subtotal=subtotal,
            tax=tax,
            total=subtotal + tax,
            status=sale.status,
            created_by=user
        )
        db.add(db_sale)
        db.flush()
        return db_sale

    db_sale = numbering.insert_with_number_retry(
        db,
        allocate=lambda: numbering.next_sale_number(db, tenant_id, sale.date),
        build=build,
        number_exists=lambda sale_no: numbering.sale_number_exists(db, tenant_id, sale_no),
        label="sale",
    )
    logger.info(f"Sale {db_sale.sale_no} ({db_sale.total}) recorded for tenant {tenant_id}")
    return db_sale


def sales_journal_entries(sale: Sale, cash_account_id: int, sales_account_id: int, tax_account_id: Optional[int] = None):
    """Cash debit for the total, revenue credit for the subtotal, tax credit when there is tax."""
    customer = sale.customer_name or "customer"
    entries = [
        JournalEntryCreate(
            debit_account_id=cash_account_id,
            description=f"Receipt from sale {sale.sale_no}",
            debit_amount=to_money(sale.total),
        ),
        JournalEntryCreate(
            credit_account_id=sales_account_id,
            description=f"Sale to {customer}",
            credit_amount=to_money(sale.subtotal),
        ),
    ]
    if to_money(sale.tax) > 0 and tax_account_id:
        entries.append(JournalEntryCreate(
            credit_account_id=tax_account_id,
            description=f"Sales tax {sale.sale_no}",
            credit_amount=to_money(sale.tax),
        ))
    return entries


def _check_journalable(db_sale: Optional[Sale], sale_id: int) -> Sale:
    if db_sale is None:
        raise NotFoundError(f"Sale with id {sale_id} not found")
    if db_sale.status == SaleStatus.CANCELLED:
        raise ValidationError(f"Sale {db_sale.sale_no} is cancelled and cannot be journaled")
    if db_sale.journal_id:
        raise AlreadyJournaledError(f"Sale {db_sale.sale_no} already has a journal")
    return db_sale


def create_sales_journal(
    db: Session,
    sale_id: int,
    tenant_id: str,
    cash_account_id: int,
    sales_account_id: int,
    tax_account_id: Optional[int] = None,
    user: Optional[str] = None
) -> Journal:
    """
    Generate the DRAFT sales journal for a sale and link it back to the sale.

    A sale carries at most one journal and a cancelled sale gets none. Posting stays a
    separate, explicit step.
    """
    def build(journal_no: str) -> Journal:
        # Rebuilt on every numbering attempt; the sale lock does not survive a rollback
        db_sale = db.query(Sale).filter(
            Sale.id == sale_id,
            Sale.tenant_id == tenant_id
        ).with_for_update().first()
        db_sale = _check_journalable(db_sale, sale_id)

        entries = sales_journal_entries(db_sale, cash_account_id, sales_account_id, tax_account_id)
        total_amount = validate_entries(entries)
        crud_journals.check_entry_accounts(db, tenant_id, entries)

        customer = db_sale.customer_name or "customer"
        db_journal = crud_journals.build_journal(
            db, tenant_id, journal_no, db_sale.date, JournalType.SALES,
            f"Sale {db_sale.sale_no} - {customer}", entries, total_amount, user
        )
        db_sale.journal_id = db_journal.id
        db.flush()
        return db_journal

    # Checked up front too, so an unknown sale or account fails before a number is allocated
    _check_journalable(get_sale(db, sale_id, tenant_id), sale_id)
    account_ids = [cash_account_id, sales_account_id] + ([tax_account_id] if tax_account_id else [])
    crud_journals.check_accounts(db, tenant_id, account_ids)

    db_journal = numbering.insert_with_number_retry(
        db,
        allocate=lambda: numbering.next_journal_number(db, tenant_id, JournalType.SALES),
        build=build,
        number_exists=lambda journal_no: numbering.journal_number_exists(db, tenant_id, journal_no),
    )
    logger.info(f"Sales journal {db_journal.journal_no} generated for sale {sale_id}, tenant {tenant_id}")
    return db_journal
