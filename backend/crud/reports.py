"""
Reports derived from the ledger.

Only POSTED journals contribute. The trial balance projects the stored account
balances; every other report aggregates journal entries by journal date and signs
them with the normal-balance rule.
"""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Dict, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, selectinload

import config
from exceptions import InvalidDateRangeError, NotFoundError
from models.accounts import Account, AccountStatus, AccountType
from models.journal_entries import JournalEntry
from models.journals import Journal, JournalStatus
from schemas.reports import (
    AccountBalanceLine,
    BalanceSheet,
    BalanceSheetLine,
    BalanceSheetSection,
    FinancialRatios,
    GeneralLedger,
    LedgerLine,
    ProfitAndLoss,
    ProfitAndLossLine,
)
from utils.dates import parse_date, parse_date_range
from utils.ledger import BalanceSide, signed_amount, to_money

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")
HUNDRED = Decimal("100")


def _use_snapshot(db: Session) -> None:
    """Read the whole report from one snapshot where the database supports it."""
    if db.get_bind().dialect.name == "postgresql" and not db.in_transaction():
        db.connection(execution_options={"isolation_level": "REPEATABLE READ"})


def _account_activity(db: Session, tenant_id: str, start_date=None, end_date=None, before=None) -> Dict[int, Tuple[Decimal, Decimal]]:
    """Posted (debit total, credit total) per account id within the date filters."""
    filters = [Journal.tenant_id == tenant_id, Journal.status == JournalStatus.POSTED]
    if start_date:
        filters.append(Journal.date >= start_date)
    if end_date:
        filters.append(Journal.date <= end_date)
    if before:
        filters.append(Journal.date < before)

    debit_rows = db.query(
        JournalEntry.debit_account_id, func.sum(JournalEntry.debit_amount)
    ).join(JournalEntry.journal).filter(
        JournalEntry.debit_account_id.isnot(None), *filters
    ).group_by(JournalEntry.debit_account_id).all()

    credit_rows = db.query(
        JournalEntry.credit_account_id, func.sum(JournalEntry.credit_amount)
    ).join(JournalEntry.journal).filter(
        JournalEntry.credit_account_id.isnot(None), *filters
    ).group_by(JournalEntry.credit_account_id).all()

    debits = defaultdict(lambda: ZERO)
    credits = defaultdict(lambda: ZERO)
    for account_id, total in debit_rows:
        debits[account_id] = to_money(total)
    for account_id, total in credit_rows:
        credits[account_id] = to_money(total)

    return {
        account_id: (debits[account_id], credits[account_id])
        for account_id in set(debits) | set(credits)
    }


def _net(account_type: AccountType, debit: Decimal, credit: Decimal) -> Decimal:
    return signed_amount(account_type, BalanceSide.DEBIT, debit) + signed_amount(account_type, BalanceSide.CREDIT, credit)


def get_trial_balance(db: Session, tenant_id: str):
    accounts = db.query(Account).filter(
        Account.tenant_id == tenant_id,
        Account.status == AccountStatus.ACTIVE
    ).order_by(Account.code).all()

    return [
        AccountBalanceLine(
            account_id=account.id,
            code=account.code,
            name=account.name,
            account_type=account.account_type,
            category=account.category,
            balance=to_money(account.balance),
        )
        for account in accounts
    ]


def get_profit_and_loss(db: Session, tenant_id: str, start_date, end_date) -> ProfitAndLoss:
    if start_date is None or end_date is None:
        raise InvalidDateRangeError("Both start date and end date are required.")
    start_date, end_date = parse_date_range(start_date, end_date)
    _use_snapshot(db)

    accounts = db.query(Account).filter(
        Account.tenant_id == tenant_id,
        Account.account_type.in_([AccountType.REVENUE, AccountType.EXPENSE])
    ).order_by(Account.code).all()
    activity = _account_activity(db, tenant_id, start_date=start_date, end_date=end_date)

    total_revenue = ZERO
    total_expense = ZERO
    details = []
    for account in accounts:
        debit, credit = activity.get(account.id, (ZERO, ZERO))
        # Revenue grows on credit, expense on debit
        balance = _net(account.account_type, debit, credit)
        if account.account_type == AccountType.REVENUE:
            total_revenue += balance
        else:
            total_expense += balance
        details.append(ProfitAndLossLine(
            account_id=account.id,
            code=account.code,
            name=account.name,
            account_type=account.account_type,
            category=account.category,
            total_debit=debit,
            total_credit=credit,
            balance=balance,
        ))

    return ProfitAndLoss(
        start_date=start_date,
        end_date=end_date,
        details=details,
        total_revenue=total_revenue,
        total_expense=total_expense,
        net_profit=total_revenue - total_expense,
    )


def get_balance_sheet(db: Session, tenant_id: str, as_of_date) -> BalanceSheet:
    if as_of_date is None:
        raise InvalidDateRangeError("An as-of date is required.")
    as_of_date = parse_date(as_of_date, "as-of date")
    _use_snapshot(db)

    accounts = db.query(Account).filter(Account.tenant_id == tenant_id).order_by(Account.code).all()
    activity = _account_activity(db, tenant_id, end_date=as_of_date)

    sections = {AccountType.ASSET: [], AccountType.LIABILITY: [], AccountType.EQUITY: []}
    current_earnings = ZERO
    for account in accounts:
        debit, credit = activity.get(account.id, (ZERO, ZERO))
        balance = to_money(account.opening_balance) + _net(account.account_type, debit, credit)

        if account.account_type == AccountType.REVENUE:
            current_earnings += balance
        elif account.account_type == AccountType.EXPENSE:
            current_earnings -= balance
        elif account.is_active or balance != 0:
            sections[account.account_type].append(BalanceSheetLine(
                account_id=account.id,
                code=account.code,
                name=account.name,
                account_type=account.account_type,
                category=account.category,
                balance=balance,
            ))

    # Revenue and expense not yet closed into equity belong to the owners
    sections[AccountType.EQUITY].append(BalanceSheetLine(
        name="Current Earnings",
        account_type=AccountType.EQUITY,
        category="Current Earnings",
        balance=current_earnings,
    ))

    totals = {account_type: sum((line.balance for line in lines), ZERO) for account_type, lines in sections.items()}
    total_assets = totals[AccountType.ASSET]
    total_liabilities = totals[AccountType.LIABILITY]
    total_equity = totals[AccountType.EQUITY]
    is_balanced = abs(total_assets - (total_liabilities + total_equity)) < config.BALANCE_TOLERANCE
    if not is_balanced:
        logger.warning(
            f"Balance sheet for tenant {tenant_id} as of {as_of_date} does not balance: "
            f"assets {total_assets}, liabilities {total_liabilities}, equity {total_equity}"
        )

    return BalanceSheet(
        as_of_date=as_of_date,
        assets=BalanceSheetSection(items=sections[AccountType.ASSET], total=total_assets),
        liabilities=BalanceSheetSection(items=sections[AccountType.LIABILITY], total=total_liabilities),
        equity=BalanceSheetSection(items=sections[AccountType.EQUITY], total=total_equity),
        total_assets=total_assets,
        total_liabilities=total_liabilities,
        total_equity=total_equity,
        is_balanced=is_balanced,
    )


def get_financial_ratios(db: Session, tenant_id: str, start_date, end_date) -> FinancialRatios:
    """
    ROI and a break-even estimate for a period.

    Fixed and variable costs are a flat FIXED_COST_RATIO split of total expense, a
    stand-in until accounts carry their own cost behaviour.
    """
    pl = get_profit_and_loss(db, tenant_id, start_date, end_date)
    bs = get_balance_sheet(db, tenant_id, pl.end_date)

    fixed_costs = to_money(pl.total_expense * config.FIXED_COST_RATIO)
    variable_costs = pl.total_expense - fixed_costs
    revenue = pl.total_revenue

    bep: Optional[Decimal]
    if revenue > 0:
        contribution_margin_ratio = 1 - variable_costs / revenue
        bep = to_money(fixed_costs / contribution_margin_ratio) if contribution_margin_ratio > 0 else None
    else:
        bep = ZERO

    roi = to_money(pl.net_profit / bs.total_assets * HUNDRED) if bs.total_assets != 0 else ZERO

    return FinancialRatios(
        start_date=pl.start_date,
        end_date=pl.end_date,
        total_revenue=revenue,
        total_expense=pl.total_expense,
        net_profit=pl.net_profit,
        total_assets=bs.total_assets,
        fixed_costs=fixed_costs,
        variable_costs=variable_costs,
        roi=roi,
        bep=bep,
    )


def get_general_ledger(db: Session, tenant_id: str, account_id: int, start_date=None, end_date=None) -> GeneralLedger:
    """Posted entries touching one account, oldest first, with a running balance."""
    start_date, end_date = parse_date_range(start_date, end_date)
    _use_snapshot(db)

    account = db.query(Account).filter(
        Account.id == account_id,
        Account.tenant_id == tenant_id
    ).first()
    if not account:
        raise NotFoundError(f"Account with id {account_id} not found")

    opening_balance = to_money(account.opening_balance)
    if start_date:
        debit, credit = _account_activity(db, tenant_id, before=start_date).get(account.id, (ZERO, ZERO))
        opening_balance += _net(account.account_type, debit, credit)

    query = db.query(JournalEntry).join(JournalEntry.journal).options(
        selectinload(JournalEntry.journal),
        selectinload(JournalEntry.debit_account),
        selectinload(JournalEntry.credit_account),
    ).filter(
        Journal.tenant_id == tenant_id,
        Journal.status == JournalStatus.POSTED,
        or_(JournalEntry.debit_account_id == account.id, JournalEntry.credit_account_id == account.id)
    )
    if start_date:
        query = query.filter(Journal.date >= start_date)
    if end_date:
        query = query.filter(Journal.date <= end_date)
    entries = query.order_by(Journal.date.asc(), Journal.id.asc(), JournalEntry.id.asc()).all()

    balance = opening_balance
    lines = []
    for entry in entries:
        debit = to_money(entry.debit_amount) if entry.debit_account_id == account.id else ZERO
        credit = to_money(entry.credit_amount) if entry.credit_account_id == account.id else ZERO
        balance += _net(account.account_type, debit, credit)
        lines.append(LedgerLine(
            entry_id=entry.id,
            journal_id=entry.journal.id,
            journal_no=entry.journal.journal_no,
            journal_type=entry.journal.journal_type,
            date=entry.journal.date,
            reference=entry.journal.reference,
            description=entry.description,
            debit_account_id=entry.debit_account_id,
            debit_account_name=entry.debit_account.name if entry.debit_account else None,
            credit_account_id=entry.credit_account_id,
            credit_account_name=entry.credit_account.name if entry.credit_account else None,
            debit=debit,
            credit=credit,
            balance=balance,
        ))

    return GeneralLedger(
        account_id=account.id,
        code=account.code,
        name=account.name,
        account_type=account.account_type,
        start_date=start_date,
        end_date=end_date,
        opening_balance=opening_balance,
        entries=lines,
        closing_balance=balance,
    )
