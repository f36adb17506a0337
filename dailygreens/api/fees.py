from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from dailygreens.api.deps import get_db
from dailygreens.api.schemas import (
    OrderMethodRead, OrderMethodsResponse, PaymentMethodRead, PaymentMethodsResponse,
)
from dailygreens.checkout.fees import list_order_methods, list_payment_methods

router = APIRouter()

@router.get("/order-methods", response_model=OrderMethodsResponse)
def get_order_methods(db: Session = Depends(get_db)):
    rows = list_order_methods(db)
    return OrderMethodsResponse(
        message="Success get all order methods",
        data=[OrderMethodRead(id=m.id, name=m.name, delivery_fee=float(m.delivery_fee or 0)) for m in rows],
    )

@router.get("/payment-methods", response_model=PaymentMethodsResponse)
def get_payment_methods(db: Session = Depends(get_db)):
    rows = list_payment_methods(db)
    return PaymentMethodsResponse(
        message="Success get all payment methods",
        data=[PaymentMethodRead(id=m.id, name=m.name, admin_fee=float(m.admin_fee or 0)) for m in rows],
    )
