import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from exceptions import CrossTenantAccountError, DuplicateCodeError, NotFoundError
from models.accounts import Account, AccountStatus, AccountType
from schemas.accounts import AccountCreate, AccountUpdate
from utils.ledger import BalanceSide, signed_amount, to_money

logger = logging.getLogger(__name__)

DEFAULT_ACCOUNTS = [
    {"code": "101", "name": "Cash", "account_type": AccountType.ASSET, "category": "Current Asset"},
    {"code": "102", "name": "Bank", "account_type": AccountType.ASSET, "category": "Current Asset"},
    {"code": "111", "name": "Accounts Receivable", "account_type": AccountType.ASSET, "category": "Current Asset"},
    {"code": "121", "name": "Inventory", "account_type": AccountType.ASSET, "category": "Current Asset"},
    {"code": "131", "name": "Equipment", "account_type": AccountType.ASSET, "category": "Fixed Asset"},
    {"code": "201", "name": "Accounts Payable", "account_type": AccountType.LIABILITY, "category": "Current Liability"},
    {"code": "202", "name": "Bank Loan", "account_type": AccountType.LIABILITY, "category": "Long Term Liability"},
    {"code": "211", "name": "Sales Tax Payable", "account_type": AccountType.LIABILITY, "category": "Tax Liability"},
    {"code": "301", "name": "Owner's Equity", "account_type": AccountType.EQUITY, "category": "Owner Equity"},
    {"code": "302", "name": "Retained Earnings", "account_type": AccountType.EQUITY, "category": "Retained Earnings"},
    {"code": "401", "name": "Sales Revenue", "account_type": AccountType.REVENUE, "category": "Operating Revenue"},
    {"code": "402", "name": "Other Income", "account_type": AccountType.REVENUE, "category": "Other Revenue"},
    {"code": "501", "name": "Cost of Goods Sold", "account_type": AccountType.EXPENSE, "category": "Cost of Sales"},
    {"code": "601", "name": "Salaries Expense", "account_type": AccountType.EXPENSE, "category": "Operating Expense"},
    {"code": "602", "name": "Rent Expense", "account_type": AccountType.EXPENSE, "category": "Operating Expense"},
    {"code": "603", "name": "Utilities Expense", "account_type": AccountType.EXPENSE, "category": "Operating Expense"},
]


def get_account(db: Session, account_id: int, tenant_id: str) -> Optional[Account]:
    return db.query(Account).filter(
        Account.id == account_id,
        Account.tenant_id == tenant_id
    ).first()


def get_account_by_code(db: Session, code: str, tenant_id: str) -> Optional[Account]:
    return db.query(Account).filter(
        Account.code == code,
        Account.tenant_id == tenant_id
    ).first()


def get_accounts(
    db: Session,
    tenant_id: str,
    account_type: Optional[AccountType] = None,
    category: Optional[str] = None,
    active: Optional[bool] = None,
    skip: int = 0,
    limit: int = 100
):
    query = db.query(Account).filter(Account.tenant_id == tenant_id)

    if account_type:
        query = query.filter(Account.account_type == account_type)
    if category:
        query = query.filter(Account.category == category)
    if active is not None:
        status = AccountStatus.ACTIVE if active else AccountStatus.INACTIVE
        query = query.filter(Account.status == status)

    return query.order_by(Account.code).offset(skip).limit(limit).all()


def get_accounts_by_type(db: Session, tenant_id: str, account_type: AccountType):
    return db.query(Account).filter(
        Account.tenant_id == tenant_id,
        Account.account_type == account_type,
        Account.status == AccountStatus.ACTIVE
    ).order_by(Account.code).all()


def resolve_account(db: Session, account_id: int, tenant_id: str, for_update: bool = False) -> Account:
    """Load an account that must belong to the tenant."""
    query = db.query(Account).filter(
        Account.id == account_id,
        Account.tenant_id == tenant_id
    )
    if for_update:
        query = query.with_for_update()
    account = query.first()
    if account is None:
        raise CrossTenantAccountError(f"Account {account_id} does not belong to this business.")
    return account


def create_account(db: Session, account: AccountCreate, tenant_id: str, user: Optional[str] = None) -> Account:
    if get_account_by_code(db, account.code, tenant_id):
        raise DuplicateCodeError(f"Account with code {account.code} already exists")

    opening_balance = to_money(account.opening_balance)
    db_account = Account(
        **account.model_dump(exclude={"opening_balance"}),
        opening_balance=opening_balance,
        balance=opening_balance,
        status=AccountStatus.ACTIVE,
        tenant_id=tenant_id,
        created_by=user
    )
    db.add(db_account)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race against a concurrent insert of the same code
        db.rollback()
        raise DuplicateCodeError(f"Account with code {account.code} already exists")
    db.refresh(db_account)
    logger.info(f"Account {db_account.code} '{db_account.name}' ({db_account.account_type.value}) created for tenant {tenant_id}")
    return db_account


def update_account(db: Session, account_id: int, account_update: AccountUpdate, tenant_id: str, user: Optional[str] = None) -> Account:
    db_account = get_account(db, account_id, tenant_id)
    if not db_account:
        raise NotFoundError(f"Account with id {account_id} not found")

    update_data = account_update.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        setattr(db_account, key, value)
    db_account.updated_by = user

    db.commit()
    db.refresh(db_account)
    return db_account


def deactivate_account(db: Session, account_id: int, tenant_id: str, user: Optional[str] = None) -> Account:
    """Accounts are never removed; journal entries keep referencing them."""
    db_account = get_account(db, account_id, tenant_id)
    if not db_account:
        raise NotFoundError(f"Account with id {account_id} not found")

    db_account.status = AccountStatus.INACTIVE
    db_account.updated_by = user
    db.commit()
    db.refresh(db_account)
    logger.info(f"Account {db_account.code} deactivated for tenant {tenant_id}")
    return db_account


def apply_delta(db: Session, account_id: int, amount, side: BalanceSide, tenant_id: Optional[str] = None) -> Decimal:
    """
    Book `amount` on `side` of an account and return the signed change to its balance.

    Only the journal engine calls this, inside its own transaction; nothing is
    committed here. The account row is locked for the rest of that transaction.
    """
    query = db.query(Account).filter(Account.id == account_id)
    if tenant_id is not None:
        query = query.filter(Account.tenant_id == tenant_id)
    account = query.with_for_update().first()
    if account is None:
        raise NotFoundError(f"Account with id {account_id} not found")

    delta = signed_amount(account.account_type, side, amount)
    account.balance = to_money(account.balance) + delta
    db.add(account)
    return delta


def initialize_default_accounts(db: Session, tenant_id: str):
    """Seed the standard chart of accounts for a tenant, skipping codes it already has."""
    created = []
    for account_data in DEFAULT_ACCOUNTS:
        if not get_account_by_code(db, account_data["code"], tenant_id):
            logger.info(f"Seeding default account '{account_data['name']}' ({account_data['code']}) for tenant {tenant_id}")
            created.append(create_account(db, AccountCreate(**account_data), tenant_id))
    return created
