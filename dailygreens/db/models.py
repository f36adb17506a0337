from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Integer, String, Text, Boolean, DateTime, ForeignKey, Numeric, Enum as SAEnum
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from dailygreens.db.session import Base

Money = Numeric(12, 2)

class TransactionStatus(str, Enum):
    IN_PROGRESS = "in progress"
    SENDING = "sending"
    FINISHED = "finished"
    CANCELLED = "cancelled"

class User(Base):
    __tablename__ = 'users'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    role: Mapped[str] = mapped_column(String(32), default='customer')
    created_at: Mapped[datetime] = mapped_column(DateTime(), default=lambda: datetime.utcnow())
    updated_at: Mapped[datetime] = mapped_column(DateTime(), default=lambda: datetime.utcnow())
    profile = relationship('Profile', back_populates='user', uselist=False, cascade='all, delete-orphan')

class Profile(Base):
    __tablename__ = 'profiles'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey('users.id', ondelete='CASCADE'), unique=True)
    full_name: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    phone_number: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    profile_photo: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    user = relationship('User', back_populates='profile')

class Product(Base):
    __tablename__ = 'products'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(240), nullable=False)
    description: Mapped[str] = mapped_column(Text, default='')
    price: Mapped[Decimal] = mapped_column(Money, nullable=False)
    discount_percent: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=Decimal('0'))
    is_flash_sale: Mapped[bool] = mapped_column(Boolean, default=False)
    stock: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(), default=lambda: datetime.utcnow())
    updated_at: Mapped[datetime] = mapped_column(DateTime(), default=lambda: datetime.utcnow())

class Size(Base):
    __tablename__ = 'sizes'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    size_cost: Mapped[Decimal] = mapped_column(Money, default=Decimal('0'))

class Variant(Base):
    __tablename__ = 'variants'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    variant_cost: Mapped[Decimal] = mapped_column(Money, default=Decimal('0'))

class Cart(Base):
    __tablename__ = 'carts'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey('users.id', ondelete='CASCADE'), index=True)
    product_id: Mapped[int] = mapped_column(ForeignKey('products.id', ondelete='CASCADE'))
    size_id: Mapped[int] = mapped_column(ForeignKey('sizes.id'))
    variant_id: Mapped[int] = mapped_column(ForeignKey('variants.id'))
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    subtotal: Mapped[Decimal] = mapped_column(Money, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(), default=lambda: datetime.utcnow())
    updated_at: Mapped[datetime] = mapped_column(DateTime(), default=lambda: datetime.utcnow())
    created_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    updated_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    product = relationship('Product')
    size = relationship('Size')
    variant = relationship('Variant')

class OrderMethod(Base):
    __tablename__ = 'order_methods'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    delivery_fee: Mapped[Optional[Decimal]] = mapped_column(Money, nullable=True)

class PaymentMethod(Base):
    __tablename__ = 'payment_methods'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    admin_fee: Mapped[Optional[Decimal]] = mapped_column(Money, nullable=True)

class Transaction(Base):
    __tablename__ = 'transactions'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey('users.id'), index=True)
    no_invoice: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    date_transaction: Mapped[datetime] = mapped_column(DateTime(), nullable=False)
    full_name: Mapped[str] = mapped_column(String(120), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    phone: Mapped[str] = mapped_column(String(32), nullable=False)
    payment_method_id: Mapped[int] = mapped_column(ForeignKey('payment_methods.id'))
    order_method_id: Mapped[int] = mapped_column(ForeignKey('order_methods.id'))
    delivery_fee: Mapped[Decimal] = mapped_column(Money, default=Decimal('0'))
    admin_fee: Mapped[Decimal] = mapped_column(Money, default=Decimal('0'))
    tax: Mapped[Decimal] = mapped_column(Money, nullable=False)
    total_transaction: Mapped[Decimal] = mapped_column(Money, nullable=False)
    status: Mapped[TransactionStatus] = mapped_column(SAEnum(TransactionStatus), default=TransactionStatus.IN_PROGRESS)
    created_at: Mapped[datetime] = mapped_column(DateTime(), default=lambda: datetime.utcnow())
    updated_at: Mapped[datetime] = mapped_column(DateTime(), default=lambda: datetime.utcnow())
    created_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    updated_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    order_method = relationship('OrderMethod')
    payment_method = relationship('PaymentMethod')
    items = relationship('TransactionItem', back_populates='transaction', cascade='all, delete-orphan',
                         order_by='TransactionItem.id')

class TransactionItem(Base):
    __tablename__ = 'transaction_items'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    transaction_id: Mapped[int] = mapped_column(ForeignKey('transactions.id', ondelete='CASCADE'), index=True)
    product_id: Mapped[int] = mapped_column(ForeignKey('products.id'))
    product_name: Mapped[str] = mapped_column(String(240), nullable=False)
    product_price: Mapped[Decimal] = mapped_column(Money, nullable=False)
    discount_percent: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=Decimal('0'))
    discount_price: Mapped[Decimal] = mapped_column(Money, nullable=False)
    size: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    size_cost: Mapped[Decimal] = mapped_column(Money, default=Decimal('0'))
    variant: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    variant_cost: Mapped[Decimal] = mapped_column(Money, default=Decimal('0'))
    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    subtotal: Mapped[Decimal] = mapped_column(Money, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(), default=lambda: datetime.utcnow())
    updated_at: Mapped[datetime] = mapped_column(DateTime(), default=lambda: datetime.utcnow())
    created_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    updated_by: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    transaction = relationship('Transaction', back_populates='items')
