from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
from database import get_db
from schemas.reports import AccountBalanceLine, ProfitAndLoss, BalanceSheet, FinancialRatios, GeneralLedger
from crud import reports as crud_reports
from utils.tenancy import get_tenant_id

router = APIRouter(
    prefix="/financial-reports",
    tags=["Financial Reports"],
)

# Dates arrive as raw strings; the report layer parses them and rejects bad ranges


@router.get("/trial-balance", response_model=List[AccountBalanceLine])
def get_trial_balance(
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    return crud_reports.get_trial_balance(db=db, tenant_id=tenant_id)


@router.get("/profit-and-loss", response_model=ProfitAndLoss)
def get_profit_and_loss(
    start_date: str,
    end_date: str,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    return crud_reports.get_profit_and_loss(
        db=db,
        tenant_id=tenant_id,
        start_date=start_date,
        end_date=end_date
    )


@router.get("/balance-sheet", response_model=BalanceSheet)
def get_balance_sheet(
    as_of_date: str,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    return crud_reports.get_balance_sheet(db=db, tenant_id=tenant_id, as_of_date=as_of_date)


@router.get("/ratios", response_model=FinancialRatios)
def get_financial_ratios(
    start_date: str,
    end_date: str,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    return crud_reports.get_financial_ratios(
        db=db,
        tenant_id=tenant_id,
        start_date=start_date,
        end_date=end_date
    )


@router.get("/general-ledger/{account_id}", response_model=GeneralLedger)
def get_general_ledger(
    account_id: int,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    return crud_reports.get_general_ledger(
        db=db,
        tenant_id=tenant_id,
        account_id=account_id,
        start_date=start_date,
        end_date=end_date
    )
