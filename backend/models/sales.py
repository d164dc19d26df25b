from sqlalchemy import Column, Integer, String, Numeric, Date, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from database import Base
import enum
from models.audit_mixin import TimestampMixin


class SaleStatus(enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class Sale(Base, TimestampMixin):
    __tablename__ = "sales"
    __table_args__ = (
        UniqueConstraint('tenant_id', 'sale_no', name='_tenant_sale_no_uc'),
        # At most one journal per sale
        UniqueConstraint('journal_id', name='_sale_journal_uc'),
    )

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True, nullable=False)
    sale_no = Column(String(30), nullable=False, index=True)
    date = Column(Date, nullable=False)
    customer_name = Column(String(100), nullable=True)
    subtotal = Column(Numeric(18, 2), nullable=False, default=0)
    tax = Column(Numeric(18, 2), nullable=False, default=0)
    total = Column(Numeric(18, 2), nullable=False, default=0)
    status = Column(Enum(SaleStatus), nullable=False, default=SaleStatus.PENDING)
    journal_id = Column(Integer, ForeignKey("journals.id"), nullable=True)

    journal = relationship("Journal")
