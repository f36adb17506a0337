from decimal import Decimal
from sqlalchemy import select
from sqlalchemy.orm import Session
from dailygreens.core.errors import InvalidReference
from dailygreens.checkout.types import FeeQuote
from dailygreens.db.models import OrderMethod, PaymentMethod

def resolve_fees(db: Session, order_method_id: int, payment_method_id: int) -> FeeQuote:
    # a null fee on an existing method means the method is free
    om = db.get(OrderMethod, order_method_id)
    if om is None:
        raise InvalidReference("orderMethodId", order_method_id, "Invalid order method id")
    pm = db.get(PaymentMethod, payment_method_id)
    if pm is None:
        raise InvalidReference("paymentMethodId", payment_method_id, "Invalid payment method id")
    return FeeQuote(
        delivery_fee=Decimal(om.delivery_fee or 0),
        admin_fee=Decimal(pm.admin_fee or 0),
    )

def list_order_methods(db: Session) -> list[OrderMethod]:
    return list(db.execute(select(OrderMethod).order_by(OrderMethod.id)).scalars().all())

def list_payment_methods(db: Session) -> list[PaymentMethod]:
    return list(db.execute(select(PaymentMethod).order_by(PaymentMethod.id)).scalars().all())
