from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional, Union


class _Unset:
    """Marker for a contact field the caller did not provide."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset()

Contact = Union[str, _Unset]


@dataclass(frozen=True)
class CartLine:
    cart_id: int
    product_id: int
    product_name: str
    product_price: Decimal
    discount_percent: Decimal
    discount_price: Decimal
    size_name: Optional[str]
    size_cost: Decimal
    variant_name: Optional[str]
    variant_cost: Decimal
    amount: int
    subtotal: Decimal


@dataclass(frozen=True)
class FeeQuote:
    delivery_fee: Decimal = Decimal("0")
    admin_fee: Decimal = Decimal("0")


@dataclass(frozen=True)
class Profile:
    full_name: str = ""
    email: str = ""
    address: str = ""
    phone: str = ""


@dataclass(frozen=True)
class ContactDetails:
    full_name: Contact = UNSET
    email: Contact = UNSET
    address: Contact = UNSET
    phone: Contact = UNSET

    def merged_with(self, profile: Profile) -> "ContactDetails":
        return ContactDetails(
            full_name=profile.full_name if self.full_name is UNSET else self.full_name,
            email=profile.email if self.email is UNSET else self.email,
            address=profile.address if self.address is UNSET else self.address,
            phone=profile.phone if self.phone is UNSET else self.phone,
        )

    def missing(self) -> list[str]:
        out = []
        for name in ("full_name", "email", "address", "phone"):
            value = getattr(self, name)
            if value is UNSET or not str(value).strip():
                out.append(name)
        return out


@dataclass(frozen=True)
class CheckoutRequest:
    payment_method_id: int
    order_method_id: int
    contact: ContactDetails = field(default_factory=ContactDetails)


@dataclass(frozen=True)
class CheckoutTotals:
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    invoice_number: str
    date_transaction: datetime


@dataclass(frozen=True)
class CommittedTransaction:
    transaction_id: int
    invoice_number: str


@dataclass(frozen=True)
class CheckoutResult:
    transaction_id: int
    invoice_number: str
    date_transaction: datetime
    delivery_fee: Decimal
    admin_fee: Decimal
    tax: Decimal
    total: Decimal
    line_count: int
