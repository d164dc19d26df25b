from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal
from models.accounts import AccountType, AccountStatus


class AccountBase(BaseModel):
    code: str = Field(..., min_length=1, max_length=20)
    name: str = Field(..., min_length=1, max_length=100)
    account_type: AccountType
    category: Optional[str] = None

    @field_validator('code', 'name')
    @classmethod
    def strip_text(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class AccountCreate(AccountBase):
    opening_balance: Decimal = Field(Decimal("0"), decimal_places=2)


class AccountUpdate(BaseModel):
    # Type and balance are fixed once entries may reference the account
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    category: Optional[str] = None


class Account(AccountBase):
    id: int
    tenant_id: str
    opening_balance: Decimal
    balance: Decimal
    status: AccountStatus
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AccountSummary(BaseModel):
    id: int
    code: str
    name: str
    account_type: AccountType

    model_config = ConfigDict(from_attributes=True)
