from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload
from dailygreens.checkout.types import CartLine
from dailygreens.db.models import Cart, Product, Size, Variant

CENT = Decimal("0.01")

def _money(v) -> Decimal:
    return Decimal(v or 0).quantize(CENT, rounding=ROUND_HALF_UP)

def discounted_price(price, discount_percent) -> Decimal:
    return _money(Decimal(price or 0) * (1 - Decimal(discount_percent or 0) / 100))

def line_subtotal(product: Product, size: Optional[Size], variant: Optional[Variant], amount: int) -> Decimal:
    unit = discounted_price(product.price, product.discount_percent)
    unit += Decimal(size.size_cost or 0) if size else 0
    unit += Decimal(variant.variant_cost or 0) if variant else 0
    return _money(unit * amount)

def _to_line(c: Cart) -> CartLine:
    p = c.product
    return CartLine(
        cart_id=c.id,
        product_id=c.product_id,
        product_name=p.name,
        product_price=_money(p.price),
        discount_percent=Decimal(p.discount_percent or 0),
        discount_price=discounted_price(p.price, p.discount_percent),
        size_name=c.size.name if c.size else None,
        size_cost=_money(c.size.size_cost) if c.size else Decimal("0.00"),
        variant_name=c.variant.name if c.variant else None,
        variant_cost=_money(c.variant.variant_cost) if c.variant else Decimal("0.00"),
        amount=c.amount,
        subtotal=_money(c.subtotal),
    )

def read_cart(db: Session, user_id: int) -> list[CartLine]:
    """Snapshot of the user's cart lines, most recently touched first.

    The read takes no locks; a concurrent cart edit may or may not be seen.
    """
    stmt = (
        select(Cart)
        .options(joinedload(Cart.product), joinedload(Cart.size), joinedload(Cart.variant))
        .where(Cart.user_id == user_id)
        .order_by(Cart.updated_at.desc(), Cart.id.desc())
    )
    return [_to_line(c) for c in db.execute(stmt).scalars().unique().all()]

def add_to_cart(db: Session, user_id: int, product_id: int, size_id: int, variant_id: int, amount: int) -> CartLine:
    if amount <= 0:
        raise ValueError("invalid amount, must be greater than 0")
    product = db.get(Product, product_id)
    if not product:
        raise LookupError("Product not found")
    size = db.get(Size, size_id)
    if not size:
        raise LookupError("Size not found")
    variant = db.get(Variant, variant_id)
    if not variant:
        raise LookupError("Variant not found")

    existing = db.execute(
        select(Cart).where(
            Cart.user_id == user_id,
            Cart.product_id == product_id,
            Cart.size_id == size_id,
            Cart.variant_id == variant_id,
        )
    ).scalars().first()
    new_amount = amount + (existing.amount if existing else 0)
    if new_amount > (product.stock or 0):
        raise ValueError("amount exceeds available stock")

    subtotal = line_subtotal(product, size, variant, new_amount)
    now = datetime.utcnow()
    if existing:
        existing.amount = new_amount
        existing.subtotal = subtotal
        existing.updated_at = now
        existing.updated_by = user_id
        cart = existing
    else:
        cart = Cart(
            user_id=user_id, product_id=product_id, size_id=size_id, variant_id=variant_id,
            amount=new_amount, subtotal=subtotal,
            created_at=now, updated_at=now, created_by=user_id, updated_by=user_id,
        )
    db.add(cart)
    db.commit()
    db.refresh(cart)
    return _to_line(cart)

def delete_cart_line(db: Session, user_id: int, cart_id: int) -> bool:
    cart = db.get(Cart, cart_id)
    if not cart or cart.user_id != user_id:
        return False
    db.delete(cart)
    db.commit()
    return True
