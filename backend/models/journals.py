from sqlalchemy import Column, Integer, String, Numeric, Date, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from database import Base
import enum
from models.audit_mixin import TimestampMixin


class JournalType(enum.Enum):
    GENERAL = "GENERAL"
    SALES = "SALES"
    PURCHASE = "PURCHASE"
    EXPENSE = "EXPENSE"
    ADJUSTMENT = "ADJUSTMENT"
    PAYMENT = "PAYMENT"


class JournalStatus(enum.Enum):
    DRAFT = "DRAFT"
    POSTED = "POSTED"


class Journal(Base, TimestampMixin):
    __tablename__ = "journals"
    # Numbers are read-then-increment; this constraint is what makes them unique
    __table_args__ = (UniqueConstraint('tenant_id', 'journal_no', name='_tenant_journal_no_uc'),)

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True, nullable=False)
    journal_no = Column(String(30), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    reference = Column(String(255), nullable=True)
    journal_type = Column(Enum(JournalType), nullable=False)
    total_amount = Column(Numeric(18, 2), nullable=False, default=0)
    status = Column(Enum(JournalStatus), nullable=False, default=JournalStatus.DRAFT)
    version_id = Column(Integer, nullable=False)

    entries = relationship(
        "JournalEntry",
        back_populates="journal",
        cascade="all, delete-orphan",
        order_by="JournalEntry.id",
    )

    # Concurrent writers on the same journal fail with StaleDataError instead of racing
    __mapper_args__ = {"version_id_col": version_id}
