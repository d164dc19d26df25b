from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin


class JournalEntry(Base, TimestampMixin):
    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True, index=True)
    journal_id = Column(Integer, ForeignKey("journals.id", ondelete="CASCADE"), nullable=False, index=True)
    debit_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True, index=True)
    credit_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True, index=True)
    description = Column(String(255), nullable=True)
    debit_amount = Column(Numeric(18, 2), CheckConstraint('debit_amount >= 0'), nullable=False, default=0)
    credit_amount = Column(Numeric(18, 2), CheckConstraint('credit_amount >= 0'), nullable=False, default=0)

    # Relationships
    journal = relationship("Journal", back_populates="entries")
    debit_account = relationship("Account", foreign_keys=[debit_account_id], back_populates="debit_entries")
    credit_account = relationship("Account", foreign_keys=[credit_account_id], back_populates="credit_entries")

    __table_args__ = (
        CheckConstraint(
            'debit_account_id IS NOT NULL OR credit_account_id IS NOT NULL',
            name='check_entry_has_account'
        ),
    )
