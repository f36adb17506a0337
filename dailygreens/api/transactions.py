from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException
from redis import Redis
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload
from dailygreens.api.deps import get_db, get_cache
from dailygreens.api.schemas import (
    CheckoutPayload, CheckoutResponse, CheckoutData, TransactionDetail, TransactionDetailResponse,
    TransactionItemRead, StatusUpdate, MessageResponse,
)
from dailygreens.checkout.orchestrator import CheckoutService
from dailygreens.core.auth import Identity, get_current_identity, require_admin
from dailygreens.db.models import Transaction

router = APIRouter()
admin_router = APIRouter()

def _detail(tx: Transaction) -> TransactionDetail:
    return TransactionDetail(
        id=tx.id,
        user_id=tx.user_id,
        no_invoice=tx.no_invoice,
        date_transaction=tx.date_transaction,
        full_name=tx.full_name,
        email=tx.email,
        address=tx.address,
        phone=tx.phone,
        payment_method=tx.payment_method.name,
        order_method=tx.order_method.name,
        status=tx.status,
        delivery_fee=float(tx.delivery_fee or 0),
        admin_fee=float(tx.admin_fee or 0),
        tax=float(tx.tax),
        total_transaction=float(tx.total_transaction),
        items=[
            TransactionItemRead(
                id=it.id,
                transaction_id=it.transaction_id,
                product_id=it.product_id,
                product_name=it.product_name,
                product_price=float(it.product_price),
                discount_percent=float(it.discount_percent or 0),
                discount_price=float(it.discount_price),
                size=it.size,
                size_cost=float(it.size_cost or 0),
                variant=it.variant,
                variant_cost=float(it.variant_cost or 0),
                amount=it.amount,
                subtotal=float(it.subtotal),
            )
            for it in tx.items
        ],
    )

def _load_by(db: Session, cond) -> Transaction | None:
    stmt = (
        select(Transaction)
        .options(
            selectinload(Transaction.items),
            selectinload(Transaction.order_method),
            selectinload(Transaction.payment_method),
        )
        .where(cond)
    )
    return db.execute(stmt).scalars().first()

def _load(db: Session, transaction_id: int) -> Transaction | None:
    return _load_by(db, Transaction.id == transaction_id)

@router.post("", response_model=CheckoutResponse, status_code=201)
def checkout(payload: CheckoutPayload, identity: Identity = Depends(get_current_identity),
             db: Session = Depends(get_db), cache: Redis = Depends(get_cache)):
    result = CheckoutService(db, cache=cache).checkout(identity.user_id, payload.to_request())
    return CheckoutResponse(
        message="Checkout completed successfully",
        data=CheckoutData(
            transaction_id=result.transaction_id,
            no_invoice=result.invoice_number,
            date_transaction=result.date_transaction,
            delivery_fee=float(result.delivery_fee),
            admin_fee=float(result.admin_fee),
            tax=float(result.tax),
            total_transaction=float(result.total),
        ),
    )

@router.get("/{transaction_id}", response_model=TransactionDetailResponse)
def get_my_transaction(transaction_id: int, identity: Identity = Depends(get_current_identity),
                       db: Session = Depends(get_db)):
    tx = _load(db, transaction_id)
    if not tx or tx.user_id != identity.user_id:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return TransactionDetailResponse(message="Success get transaction detail", data=_detail(tx))

@admin_router.get("/{transaction_id}", response_model=TransactionDetailResponse)
def get_transaction(transaction_id: int, _: Identity = Depends(require_admin), db: Session = Depends(get_db)):
    tx = _load(db, transaction_id)
    if not tx:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return TransactionDetailResponse(message="Success get transaction detail", data=_detail(tx))

@admin_router.patch("/{transaction_id}", response_model=MessageResponse)
def update_transaction_status(transaction_id: int, payload: StatusUpdate,
                              identity: Identity = Depends(require_admin), db: Session = Depends(get_db)):
    tx = db.get(Transaction, transaction_id)
    if not tx:
        raise HTTPException(status_code=404, detail="Transaction not found")
    tx.status = payload.status
    tx.updated_by = identity.user_id
    tx.updated_at = datetime.utcnow()
    db.add(tx); db.commit()
    return MessageResponse(message="Transaction status updated successfully")
