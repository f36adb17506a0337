from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional, List
from dailygreens.checkout.types import UNSET, CheckoutRequest, ContactDetails
from dailygreens.db.models import TransactionStatus

def _contact(v: Optional[str]):
    # omitted, null and blank all mean "use the profile value"
    if v is None or not v.strip():
        return UNSET
    return v.strip()

class CheckoutPayload(BaseModel):
    full_name: Optional[str] = Field(default=None, alias='fullName')
    email: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    payment_method_id: int = Field(alias='paymentMethodId', gt=0)
    order_method_id: int = Field(alias='orderMethodId', gt=0)
    class Config: populate_by_name = True

    def to_request(self) -> CheckoutRequest:
        return CheckoutRequest(
            payment_method_id=self.payment_method_id,
            order_method_id=self.order_method_id,
            contact=ContactDetails(
                full_name=_contact(self.full_name),
                email=_contact(self.email),
                address=_contact(self.address),
                phone=_contact(self.phone),
            ),
        )

class CheckoutData(BaseModel):
    transaction_id: int = Field(alias='transactionId')
    no_invoice: str = Field(alias='noInvoice')
    date_transaction: datetime = Field(alias='dateTransaction')
    delivery_fee: float = Field(alias='deliveryFee')
    admin_fee: float = Field(alias='adminFee')
    tax: float
    total_transaction: float = Field(alias='totalTransaction')
    class Config: populate_by_name = True

class CheckoutResponse(BaseModel):
    success: bool = True
    message: str
    data: CheckoutData

class TransactionItemRead(BaseModel):
    id: int
    transaction_id: int = Field(alias='transactionId')
    product_id: int = Field(alias='productId')
    product_name: str = Field(alias='productName')
    product_price: float = Field(alias='productPrice')
    discount_percent: float = Field(alias='discountPercent')
    discount_price: float = Field(alias='discountPrice')
    size: Optional[str] = None
    size_cost: float = Field(alias='sizeCost')
    variant: Optional[str] = None
    variant_cost: float = Field(alias='variantCost')
    amount: int
    subtotal: float
    class Config: populate_by_name = True

class TransactionDetail(BaseModel):
    id: int
    user_id: int = Field(alias='userId')
    no_invoice: str = Field(alias='noInvoice')
    date_transaction: datetime = Field(alias='dateTransaction')
    full_name: str = Field(alias='fullName')
    email: str
    address: str
    phone: str
    payment_method: str = Field(alias='paymentMethod')
    order_method: str = Field(alias='orderMethod')
    status: TransactionStatus
    delivery_fee: float = Field(alias='deliveryFee')
    admin_fee: float = Field(alias='adminFee')
    tax: float
    total_transaction: float = Field(alias='totalTransaction')
    items: List[TransactionItemRead] = Field(default=[], alias='transactionItems')
    class Config: populate_by_name = True

class TransactionDetailResponse(BaseModel):
    success: bool = True
    message: str
    data: TransactionDetail

class HistoryRead(BaseModel):
    id: int
    no_invoice: str = Field(alias='noInvoice')
    date_transaction: datetime = Field(alias='dateTransaction')
    status: TransactionStatus
    total_transaction: float = Field(alias='totalTransaction')
    class Config: populate_by_name = True

class PageMeta(BaseModel):
    current_page: int = Field(alias='currentPage')
    per_page: int = Field(alias='perPage')
    total_data: int = Field(alias='totalData')
    total_pages: int = Field(alias='totalPages')
    class Config: populate_by_name = True

class HistoryListResponse(BaseModel):
    success: bool = True
    message: str
    data: List[HistoryRead] = []
    meta: PageMeta

class StatusUpdate(BaseModel):
    status: TransactionStatus

class MessageResponse(BaseModel):
    success: bool = True
    message: str

class OrderMethodRead(BaseModel):
    id: int
    name: str
    delivery_fee: float = Field(alias='deliveryFee')
    class Config: populate_by_name = True

class PaymentMethodRead(BaseModel):
    id: int
    name: str
    admin_fee: float = Field(alias='adminFee')
    class Config: populate_by_name = True

class OrderMethodsResponse(BaseModel):
    success: bool = True
    message: str
    data: List[OrderMethodRead] = []

class PaymentMethodsResponse(BaseModel):
    success: bool = True
    message: str
    data: List[PaymentMethodRead] = []

class CartAdd(BaseModel):
    product_id: int = Field(alias='productId')
    size_id: int = Field(alias='sizeId')
    variant_id: int = Field(alias='variantId')
    amount: int = Field(ge=1)
    class Config: populate_by_name = True

class CartLineRead(BaseModel):
    id: int
    product_id: int = Field(alias='productId')
    product_name: str = Field(alias='productName')
    product_price: float = Field(alias='productPrice')
    discount_percent: float = Field(alias='discountPercent')
    discount_price: float = Field(alias='discountPrice')
    size_name: Optional[str] = Field(default=None, alias='sizeName')
    size_cost: float = Field(alias='sizeCost')
    variant_name: Optional[str] = Field(default=None, alias='variantName')
    variant_cost: float = Field(alias='variantCost')
    amount: int
    subtotal: float
    class Config: populate_by_name = True

class CartLineResponse(BaseModel):
    success: bool = True
    message: str
    data: CartLineRead

class CartResponse(BaseModel):
    success: bool = True
    message: str
    data: List[CartLineRead] = []
