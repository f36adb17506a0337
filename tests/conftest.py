"""Shared pytest fixtures: in-memory database, fake Redis and seeded shop data."""

import os
from datetime import datetime, timedelta
from decimal import Decimal
from fnmatch import fnmatch

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dailygreens.api.deps import get_cache, get_db
from dailygreens.core.config import settings
from dailygreens.db.models import (
    Cart, OrderMethod, PaymentMethod, Product, Profile, Size, User, Variant,
)
from dailygreens.db.session import Base
from dailygreens.main import app


class FakeRedis:
    """Just enough of the redis client for token revocation and cache invalidation."""

    def __init__(self):
        self.data = {}

    def set(self, key, value):
        self.data[key] = value

    def exists(self, *keys):
        return sum(1 for k in keys if k in self.data)

    def scan_iter(self, match="*"):
        return iter([k for k in list(self.data) if fnmatch(k, match)])

    def delete(self, *keys):
        removed = 0
        for k in keys:
            if self.data.pop(k, None) is not None:
                removed += 1
        return removed


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(eng)
    yield eng
    Base.metadata.drop_all(eng)
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def cache():
    return FakeRedis()


@pytest.fixture
def shop(db):
    """Two products in a cart, one delivery method, one payment method."""
    user = User(id=1, email="budi@example.com", role="customer")
    user.profile = Profile(full_name="Budi Santoso", phone_number="08123456789", address="Jl. Merdeka 1")
    admin = User(id=2, email="admin@example.com", role="admin")
    regular = Size(id=1, name="Regular", size_cost=Decimal("0"))
    hot = Variant(id=1, name="Hot", variant_cost=Decimal("0"))
    p1 = Product(id=1, name="Green Tea", price=Decimal("50.00"), discount_percent=Decimal("0"), stock=10)
    p2 = Product(id=2, name="Matcha Latte", price=Decimal("25.00"), discount_percent=Decimal("0"), stock=5)
    delivery = OrderMethod(id=1, name="Door Delivery", delivery_fee=Decimal("10.00"))
    pickup = OrderMethod(id=2, name="Pick Up", delivery_fee=None)
    transfer = PaymentMethod(id=1, name="Bank Transfer", admin_fee=Decimal("2.00"))
    cash = PaymentMethod(id=2, name="Cash", admin_fee=None)
    db.add_all([user, admin, regular, hot, p1, p2, delivery, pickup, transfer, cash])
    db.flush()
    now = datetime.utcnow()
    db.add_all([
        Cart(user_id=1, product_id=1, size_id=1, variant_id=1, amount=2, subtotal=Decimal("100.00"),
             created_at=now, updated_at=now),
        Cart(user_id=1, product_id=2, size_id=1, variant_id=1, amount=2, subtotal=Decimal("50.00"),
             created_at=now - timedelta(minutes=1), updated_at=now - timedelta(minutes=1)),
    ])
    db.commit()
    return {"user_id": 1, "admin_id": 2}


@pytest.fixture
def client(session_factory, cache):
    def _db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _db
    app.dependency_overrides[get_cache] = lambda: cache
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_token(user_id: int, role: str = "customer", token_type: str = "access") -> str:
    payload = {
        "sub": str(user_id),
        "role": role,
        "type": token_type,
        "exp": datetime.utcnow() + timedelta(minutes=15),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def auth_header(user_id: int, role: str = "customer") -> dict:
    return {"Authorization": f"Bearer {make_token(user_id, role)}"}
