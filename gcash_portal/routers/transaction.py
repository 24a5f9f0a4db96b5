# routers/transaction.py
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import desc, func
from sqlalchemy.orm import Session

from gcash_portal.models.transaction import Transaction
from gcash_portal.routers.auth import get_caller_db, get_current_user
from gcash_portal.routers.common import commit_or_forbid
from gcash_portal.schemas.transaction import (TransactionCreate, TransactionOut, TransactionSummary,
                                              TransactionUpdate, TypeSummary, compute_total,
                                              fits_money_column)
from gcash_portal.schemas.user import CurrentUser

router = APIRouter(prefix="/transaction", tags=["Transaction"])

REQUIRED_FIELDS = ("customer_name", "amount", "type")
MONEY_FIELDS = ("amount", "charge", "include_charge", "total")


def _own_transactions(db: Session, current_user: CurrentUser):
    # RLS applies the same predicate on Postgres; the filter keeps other dialects honest
    return db.query(Transaction).filter(Transaction.user_email == current_user.email)


def _get_own_transaction(db: Session, current_user: CurrentUser, transaction_id: int) -> Transaction:
    txn = _own_transactions(db, current_user).filter(Transaction.id == transaction_id).first()
    if not txn:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return txn


@router.post("/", response_model=TransactionOut, status_code=status.HTTP_201_CREATED)
def create_transaction(
    transaction: TransactionCreate,
    db: Session = Depends(get_caller_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    # date and status fall back to the column defaults when omitted
    new_txn = Transaction(
        user_email=current_user.email,
        **transaction.model_dump(exclude_none=True)
    )
    db.add(new_txn)
    commit_or_forbid(db)
    db.refresh(new_txn)
    return new_txn


@router.get("/", response_model=List[TransactionOut])
def list_transactions(
    type: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_caller_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    query = _own_transactions(db, current_user)
    if type:
        query = query.filter(Transaction.type == type)
    if date_from:
        query = query.filter(Transaction.date >= date_from)
    if date_to:
        query = query.filter(Transaction.date <= date_to)
    return query.order_by(desc(Transaction.date), desc(Transaction.id)).offset(offset).limit(limit).all()


@router.get("/summary", response_model=TransactionSummary)
def transaction_summary(
    db: Session = Depends(get_caller_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    rows = (
        db.query(
            Transaction.type,
            func.count(Transaction.id),
            func.coalesce(func.sum(Transaction.amount), 0),
            func.coalesce(func.sum(Transaction.charge), 0),
            func.coalesce(func.sum(Transaction.total), 0),
        )
        .filter(Transaction.user_email == current_user.email)
        .group_by(Transaction.type)
        .order_by(Transaction.type)
        .all()
    )

    by_type = []
    count, total_amount, total_charge, grand_total = 0, Decimal("0"), Decimal("0"), Decimal("0")
    for txn_type, txn_count, amount, charge, total in rows:
        by_type.append(TypeSummary(type=txn_type, count=txn_count, total=Decimal(str(total))))
        count += txn_count
        total_amount += Decimal(str(amount))
        total_charge += Decimal(str(charge))
        grand_total += Decimal(str(total))

    return TransactionSummary(
        count=count,
        total_amount=total_amount,
        total_charge=total_charge,
        grand_total=grand_total,
        by_type=by_type,
    )


@router.get("/{transaction_id}", response_model=TransactionOut)
def get_transaction(
    transaction_id: int,
    db: Session = Depends(get_caller_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    return _get_own_transaction(db, current_user, transaction_id)


@router.put("/{transaction_id}", response_model=TransactionOut)
def update_transaction(
    transaction_id: int,
    transaction: TransactionUpdate,
    db: Session = Depends(get_caller_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    txn = _get_own_transaction(db, current_user, transaction_id)

    changes = transaction.model_dump(exclude_unset=True)
    for field in REQUIRED_FIELDS:
        if field in changes and changes[field] is None:
            raise HTTPException(status_code=422, detail=f"{field} cannot be null")

    total = changes.pop("total", None)
    for field, value in changes.items():
        setattr(txn, field, value)

    if any(field in changes for field in MONEY_FIELDS) or total is not None:
        expected = compute_total(txn.amount, txn.charge, txn.include_charge)
        if not fits_money_column(expected):
            db.rollback()
            raise HTTPException(status_code=422, detail=f"total {expected} is too large")
        if total is not None and total != expected:
            db.rollback()
            raise HTTPException(status_code=422, detail=f"total must be {expected}")
        txn.total = expected

    commit_or_forbid(db)
    db.refresh(txn)
    return txn


@router.delete("/{transaction_id}")
def delete_transaction(
    transaction_id: int,
    db: Session = Depends(get_caller_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    txn = _get_own_transaction(db, current_user, transaction_id)
    db.delete(txn)
    commit_or_forbid(db)
    return {"msg": "Transaction deleted"}
