from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from dailygreens.api.deps import get_db
from dailygreens.api.schemas import CartAdd, CartLineRead, CartLineResponse, CartResponse, MessageResponse
from dailygreens.checkout.cart import add_to_cart, delete_cart_line, read_cart
from dailygreens.checkout.types import CartLine
from dailygreens.core.auth import Identity, get_current_identity

router = APIRouter()

def _read(line: CartLine) -> CartLineRead:
    return CartLineRead(
        id=line.cart_id,
        product_id=line.product_id,
        product_name=line.product_name,
        product_price=float(line.product_price),
        discount_percent=float(line.discount_percent),
        discount_price=float(line.discount_price),
        size_name=line.size_name,
        size_cost=float(line.size_cost),
        variant_name=line.variant_name,
        variant_cost=float(line.variant_cost),
        amount=line.amount,
        subtotal=float(line.subtotal),
    )

@router.get("", response_model=CartResponse)
def list_carts(identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    lines = read_cart(db, identity.user_id)
    return CartResponse(message="Success get list carts", data=[_read(l) for l in lines])

@router.post("", response_model=CartLineResponse, status_code=201)
def add_cart(payload: CartAdd, identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    try:
        line = add_to_cart(db, identity.user_id, payload.product_id, payload.size_id,
                           payload.variant_id, payload.amount)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return CartLineResponse(message="Cart added successfully", data=_read(line))

@router.delete("/{cart_id}", response_model=MessageResponse)
def delete_cart(cart_id: int, identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    if not delete_cart_line(db, identity.user_id, cart_id):
        raise HTTPException(status_code=404, detail="Cart not found")
    return MessageResponse(message="Cart deleted successfully")
