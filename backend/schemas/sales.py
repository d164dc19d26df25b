from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import date, datetime
from decimal import Decimal
from models.sales import SaleStatus


class SaleCreate(BaseModel):
    date: date
    customer_name: Optional[str] = Field(None, max_length=100)
    subtotal: Decimal = Field(..., ge=0, decimal_places=2)
    tax: Decimal = Field(Decimal("0"), ge=0, decimal_places=2)
    status: SaleStatus = SaleStatus.COMPLETED


class Sale(BaseModel):
    id: int
    tenant_id: str
    sale_no: str
    date: date
    customer_name: Optional[str] = None
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    status: SaleStatus
    journal_id: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
