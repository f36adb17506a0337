import logging
from datetime import datetime
from typing import Callable, Sequence
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from dailygreens.core.config import settings
from dailygreens.core.errors import InsufficientStock, PersistenceFailure
from dailygreens.checkout.types import (
    CartLine, CheckoutRequest, CheckoutTotals, CommittedTransaction, FeeQuote,
)
from dailygreens.db.models import Product, Transaction, TransactionItem, TransactionStatus

log = logging.getLogger(__name__)

def _free_invoice(db: Session, candidate: str, redraw: Callable[[], str], attempts: int) -> str:
    for _ in range(max(1, attempts)):
        taken = db.execute(
            select(Transaction.id).where(Transaction.no_invoice == candidate)
        ).first()
        if not taken:
            return candidate
        log.warning("invoice %s already used, drawing another", candidate)
        candidate = redraw()
    raise PersistenceFailure(f"Could not allocate a unique invoice number after {attempts} attempts")

def commit_transaction(
    db: Session,
    user_id: int,
    request: CheckoutRequest,
    fees: FeeQuote,
    totals: CheckoutTotals,
    lines: Sequence[CartLine],
    redraw_invoice: Callable[[], str],
    max_invoice_attempts: int = settings.INVOICE_MAX_ATTEMPTS,
) -> CommittedTransaction:
    """Write the order header, its lines and the stock decrements as one unit.

    Either everything is committed or the session is rolled back and an error
    raised; callers never see a partial transaction id.
    """
    try:
        step = "allocate invoice number"
        invoice = _free_invoice(db, totals.invoice_number, redraw_invoice, max_invoice_attempts)

        step = "insert transaction"
        now = datetime.utcnow()
        contact = request.contact
        header = Transaction(
            user_id=user_id,
            no_invoice=invoice,
            date_transaction=totals.date_transaction,
            full_name=str(contact.full_name),
            email=str(contact.email),
            address=str(contact.address),
            phone=str(contact.phone),
            payment_method_id=request.payment_method_id,
            order_method_id=request.order_method_id,
            delivery_fee=fees.delivery_fee,
            admin_fee=fees.admin_fee,
            tax=totals.tax,
            total_transaction=totals.total,
            status=TransactionStatus.IN_PROGRESS,
            created_at=now, updated_at=now, created_by=user_id, updated_by=user_id,
        )
        db.add(header)
        db.flush()

        for line in lines:
            step = "insert ordered product"
            db.add(TransactionItem(
                transaction_id=header.id,
                product_id=line.product_id,
                product_name=line.product_name,
                product_price=line.product_price,
                discount_percent=line.discount_percent,
                discount_price=line.discount_price,
                size=line.size_name,
                size_cost=line.size_cost,
                variant=line.variant_name,
                variant_cost=line.variant_cost,
                amount=line.amount,
                subtotal=line.subtotal,
                created_at=now, updated_at=now, created_by=user_id, updated_by=user_id,
            ))
            db.flush()

            step = "update stock of product"
            res = db.execute(
                update(Product)
                .where(Product.id == line.product_id, Product.stock >= line.amount)
                .values(stock=Product.stock - line.amount, updated_at=now)
            )
            if res.rowcount != 1:
                raise InsufficientStock(line.product_id, line.amount)

        step = "commit transaction"
        db.commit()
    except (InsufficientStock, PersistenceFailure):
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceFailure(f"Failed to {step}", e) from e
    except Exception:
        db.rollback()
        raise

    return CommittedTransaction(transaction_id=header.id, invoice_number=invoice)
