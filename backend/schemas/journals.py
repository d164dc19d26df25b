from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal
from models.journals import JournalType, JournalStatus
from schemas.accounts import AccountSummary


class JournalEntryCreate(BaseModel):
    debit_account_id: Optional[int] = None
    credit_account_id: Optional[int] = None
    description: Optional[str] = Field(None, max_length=255)
    debit_amount: Decimal = Field(Decimal("0"), ge=0, decimal_places=2)
    credit_amount: Decimal = Field(Decimal("0"), ge=0, decimal_places=2)


class JournalEntry(BaseModel):
    id: int
    journal_id: int
    debit_account_id: Optional[int] = None
    credit_account_id: Optional[int] = None
    description: Optional[str] = None
    debit_amount: Decimal
    credit_amount: Decimal
    debit_account: Optional[AccountSummary] = None
    credit_account: Optional[AccountSummary] = None

    model_config = ConfigDict(from_attributes=True)


class JournalBase(BaseModel):
    date: date
    journal_type: JournalType
    reference: Optional[str] = Field(None, max_length=255)


class JournalCreate(JournalBase):
    # Balance and account checks run in the ledger engine, before any write
    entries: List[JournalEntryCreate]


class Journal(JournalBase):
    id: int
    tenant_id: str
    journal_no: str
    total_amount: Decimal
    status: JournalStatus
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    entries: List[JournalEntry] = []

    model_config = ConfigDict(from_attributes=True)


class SalesJournalCreate(BaseModel):
    cash_account_id: int
    sales_account_id: int
    tax_account_id: Optional[int] = None
