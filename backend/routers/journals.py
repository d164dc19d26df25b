from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from database import get_db
from schemas.journals import Journal, JournalCreate
from models.journals import JournalType, JournalStatus
from crud import journals as journals_crud
from utils.tenancy import get_tenant_id, get_user_id

router = APIRouter(
    prefix="/journals",
    tags=["Journals"],
)


@router.post("/", response_model=Journal, status_code=status.HTTP_201_CREATED)
def create_journal(
    journal: JournalCreate,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    user: Optional[str] = Depends(get_user_id)
):
    """
    Create a DRAFT journal.
    Entries must balance and reference accounts of this business; otherwise nothing is saved.
    """
    return journals_crud.create_journal(db=db, journal=journal, tenant_id=tenant_id, user=user)


@router.get("/", response_model=List[Journal])
def get_journals(
    journal_type: Optional[JournalType] = None,
    status: Optional[JournalStatus] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    return journals_crud.get_journals(
        db=db,
        tenant_id=tenant_id,
        journal_type=journal_type,
        status=status,
        start_date=start_date,
        end_date=end_date,
        skip=skip,
        limit=limit
    )


@router.get("/{journal_id}", response_model=Journal)
def get_journal(
    journal_id: int,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    db_journal = journals_crud.get_journal(db=db, journal_id=journal_id, tenant_id=tenant_id)
    if db_journal is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Journal not found")
    return db_journal


@router.post("/{journal_id}/post", response_model=Journal)
def post_journal(
    journal_id: int,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    user: Optional[str] = Depends(get_user_id)
):
    return journals_crud.post_journal(db=db, journal_id=journal_id, tenant_id=tenant_id, user=user)


@router.delete("/{journal_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_journal(
    journal_id: int,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id)
):
    """Delete a journal. A posted journal is reversed out of the account balances first."""
    journals_crud.delete_journal(db=db, journal_id=journal_id, tenant_id=tenant_id)
    return None
