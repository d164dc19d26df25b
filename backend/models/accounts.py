from sqlalchemy import Column, Integer, String, Numeric, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from database import Base
import enum
from models.audit_mixin import TimestampMixin


class AccountType(enum.Enum):
    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    REVENUE = "REVENUE"
    EXPENSE = "EXPENSE"


class AccountStatus(enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class Account(Base, TimestampMixin):
    __tablename__ = "accounts"
    __table_args__ = (
        UniqueConstraint('tenant_id', 'code', name='_tenant_account_code_uc'),
    )

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True, nullable=False)
    code = Column(String(20), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    account_type = Column(Enum(AccountType), nullable=False)
    category = Column(String(100), nullable=True)
    opening_balance = Column(Numeric(18, 2), nullable=False, default=0)
    # Only journal posting and reversal write this column
    balance = Column(Numeric(18, 2), nullable=False, default=0)
    status = Column(Enum(AccountStatus), nullable=False, default=AccountStatus.ACTIVE)

    debit_entries = relationship("JournalEntry", foreign_keys="JournalEntry.debit_account_id", back_populates="debit_account")
    credit_entries = relationship("JournalEntry", foreign_keys="JournalEntry.credit_account_id", back_populates="credit_account")

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE
