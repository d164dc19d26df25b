from pydantic import BaseModel
from typing import List, Optional
from datetime import date
from decimal import Decimal
from models.accounts import AccountType
from models.journals import JournalType


# Trial Balance
class AccountBalanceLine(BaseModel):
    account_id: int
    code: str
    name: str
    account_type: AccountType
    category: Optional[str] = None
    balance: Decimal


# Profit and Loss
class ProfitAndLossLine(BaseModel):
    account_id: int
    code: str
    name: str
    account_type: AccountType
    category: Optional[str] = None
    total_debit: Decimal
    total_credit: Decimal
    balance: Decimal


class ProfitAndLoss(BaseModel):
    start_date: date
    end_date: date
    details: List[ProfitAndLossLine]
    total_revenue: Decimal
    total_expense: Decimal
    net_profit: Decimal


# Balance Sheet
class BalanceSheetLine(BaseModel):
    account_id: Optional[int] = None  # None for the computed earnings line
    code: Optional[str] = None
    name: str
    account_type: AccountType
    category: Optional[str] = None
    balance: Decimal


class BalanceSheetSection(BaseModel):
    items: List[BalanceSheetLine]
    total: Decimal


class BalanceSheet(BaseModel):
    as_of_date: date
    assets: BalanceSheetSection
    liabilities: BalanceSheetSection
    equity: BalanceSheetSection
    total_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal
    is_balanced: bool


# Ratios
class FinancialRatios(BaseModel):
    start_date: date
    end_date: date
    total_revenue: Decimal
    total_expense: Decimal
    net_profit: Decimal
    total_assets: Decimal
    fixed_costs: Decimal
    variable_costs: Decimal
    roi: Decimal
    bep: Optional[Decimal] = None  # None when the contribution margin is not positive


# General Ledger
class LedgerLine(BaseModel):
    entry_id: int
    journal_id: int
    journal_no: str
    journal_type: JournalType
    date: date
    reference: Optional[str] = None
    description: Optional[str] = None
    debit_account_id: Optional[int] = None
    debit_account_name: Optional[str] = None
    credit_account_id: Optional[int] = None
    credit_account_name: Optional[str] = None
    debit: Decimal
    credit: Decimal
    balance: Decimal


class GeneralLedger(BaseModel):
    account_id: int
    code: str
    name: str
    account_type: AccountType
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    opening_balance: Decimal
    entries: List[LedgerLine]
    closing_balance: Decimal
