import random
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional
from dailygreens.checkout.types import CartLine, CheckoutTotals, FeeQuote

TAX_RATE = Decimal("0.10")
CENT = Decimal("0.01")
INVOICE_SUFFIX_RANGE = 99999

def quantize(v: Decimal) -> Decimal:
    return v.quantize(CENT, rounding=ROUND_HALF_UP)

def generate_invoice_number(when: datetime, rng: Optional[random.Random] = None) -> str:
    # suffix is drawn from [0, 99999); uniqueness is enforced by the committer
    n = (rng or random).randrange(INVOICE_SUFFIX_RANGE)
    return f"INV-{when:%Y%m%d}-{n:05d}"

def compute_totals(
    lines: Iterable[CartLine],
    fees: FeeQuote,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> CheckoutTotals:
    now = now or datetime.utcnow()
    subtotal = sum((Decimal(line.subtotal) for line in lines), Decimal("0"))
    tax = quantize(subtotal * TAX_RATE)
    total = quantize(subtotal + tax + fees.delivery_fee + fees.admin_fee)
    return CheckoutTotals(
        subtotal=quantize(subtotal),
        tax=tax,
        total=total,
        invoice_number=generate_invoice_number(now, rng),
        date_transaction=now,
    )
