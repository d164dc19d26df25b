from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from database import get_db
from schemas.accounts import Account, AccountCreate, AccountUpdate
from models.accounts import AccountType
from crud import accounts as accounts_crud
from utils.tenancy import get_tenant_id, get_user_id

router = APIRouter(
    prefix="/accounts",
    tags=["Chart of Accounts"],
)


@router.post("/", response_model=Account, status_code=status.HTTP_201_CREATED)
def create_account(
    account: AccountCreate,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    user: Optional[str] = Depends(get_user_id)
):
    return accounts_crud.create_account(db=db, account=account, tenant_id=tenant_id, user=user)


@router.get("/", response_model=List[Account])
def get_accounts(
    account_type: Optional[AccountType] = None,
    category: Optional[str] = None,
    active: Optional[bool] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    return accounts_crud.get_accounts(
        db=db,
        tenant_id=tenant_id,
        account_type=account_type,
        category=category,
        active=active,
        skip=skip,
        limit=limit
    )


@router.post("/initialize", response_model=List[Account], status_code=status.HTTP_201_CREATED)
def initialize_default_accounts(
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    """Seed the standard chart of accounts. Returns only the accounts that were created."""
    return accounts_crud.initialize_default_accounts(db=db, tenant_id=tenant_id)


@router.get("/{account_id}", response_model=Account)
def get_account(
    account_id: int,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    account = accounts_crud.get_account(db=db, account_id=account_id, tenant_id=tenant_id)
    if not account:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Account with id {account_id} not found"
        )
    return account


@router.patch("/{account_id}", response_model=Account)
def update_account(
    account_id: int,
    account_update: AccountUpdate,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    user: Optional[str] = Depends(get_user_id)
):
    return accounts_crud.update_account(
        db=db, account_id=account_id, account_update=account_update, tenant_id=tenant_id, user=user
    )


@router.delete("/{account_id}", response_model=Account)
def deactivate_account(
    account_id: int,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    user: Optional[str] = Depends(get_user_id)
):
    """Deactivate the account. Accounts are never removed because entries reference them."""
    return accounts_crud.deactivate_account(db=db, account_id=account_id, tenant_id=tenant_id, user=user)
