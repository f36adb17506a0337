from datetime import date, datetime, time, timedelta
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func, select
from sqlalchemy.orm import Session
from dailygreens.api.deps import get_db
from dailygreens.api.schemas import (
    HistoryListResponse, HistoryRead, PageMeta, TransactionDetailResponse,
)
from dailygreens.api.transactions import _detail, _load_by
from dailygreens.core.auth import Identity, get_current_identity
from dailygreens.db.models import Transaction, TransactionStatus

router = APIRouter()

@router.get("", response_model=HistoryListResponse)
def list_histories(page: int = Query(1, ge=1), limit: int = Query(5, ge=1, le=10),
                   date_: Optional[date] = Query(None, alias="date"),
                   status: Optional[TransactionStatus] = None,
                   identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    conds = [Transaction.user_id == identity.user_id]
    if date_ is not None:
        start = datetime.combine(date_, time.min)
        conds += [Transaction.date_transaction >= start,
                  Transaction.date_transaction < start + timedelta(days=1)]
    if status is not None:
        conds.append(Transaction.status == status)

    total = db.execute(select(func.count(Transaction.id)).where(*conds)).scalar_one()
    pages = (total + limit - 1) // limit
    if total and page > pages:
        raise HTTPException(status_code=400, detail="Page is out of range")

    rows = db.execute(
        select(Transaction).where(*conds)
        .order_by(Transaction.date_transaction.desc(), Transaction.id.desc())
        .offset((page - 1) * limit).limit(limit)
    ).scalars().all()
    return HistoryListResponse(
        message="Successfully retrieved transaction histories",
        data=[
            HistoryRead(id=t.id, no_invoice=t.no_invoice, date_transaction=t.date_transaction,
                        status=t.status, total_transaction=float(t.total_transaction))
            for t in rows
        ],
        meta=PageMeta(current_page=page if total else 0, per_page=limit,
                      total_data=total, total_pages=pages),
    )

@router.get("/{no_invoice}", response_model=TransactionDetailResponse)
def get_history(no_invoice: str, identity: Identity = Depends(get_current_identity),
                db: Session = Depends(get_db)):
    tx = _load_by(db, Transaction.no_invoice == no_invoice)
    if not tx or tx.user_id != identity.user_id:
        raise HTTPException(status_code=404, detail="History not found")
    return TransactionDetailResponse(message="Success get history detail", data=_detail(tx))
