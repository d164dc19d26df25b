from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import Optional
from database import get_db
from schemas.sales import Sale, SaleCreate
from schemas.journals import Journal, SalesJournalCreate
from crud import sales as sales_crud
from utils.tenancy import get_tenant_id, get_user_id

router = APIRouter(prefix="/sales", tags=["Sales"])


@router.post("/", response_model=Sale, status_code=status.HTTP_201_CREATED)
def create_sale(
    sale: SaleCreate,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    user: Optional[str] = Depends(get_user_id)
):
    return sales_crud.create_sale(db=db, sale=sale, tenant_id=tenant_id, user=user)


@router.get("/{sale_id}", response_model=Sale)
def get_sale(
    sale_id: int,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    db_sale = sales_crud.get_sale(db=db, sale_id=sale_id, tenant_id=tenant_id)
    if db_sale is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Sale not found")
    return db_sale


@router.post("/{sale_id}/journal", response_model=Journal, status_code=status.HTTP_201_CREATED)
def create_sales_journal(
    sale_id: int,
    accounts: SalesJournalCreate,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    user: Optional[str] = Depends(get_user_id)
):
    """Generate the DRAFT sales journal for a sale. Each sale can be journaled once."""
    return sales_crud.create_sales_journal(
        db=db,
        sale_id=sale_id,
        tenant_id=tenant_id,
        cash_account_id=accounts.cash_account_id,
        sales_account_id=accounts.sales_account_id,
        tax_account_id=accounts.tax_account_id,
        user=user
    )
