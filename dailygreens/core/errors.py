"""Typed failures raised by the checkout pipeline.

Every ``CheckoutError`` knows the HTTP status it maps to; the application
exception handler turns it into the standard error envelope.
"""
from typing import Optional


class CheckoutError(Exception):
    status_code = 500

    def __init__(self, message: str, error: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error = error


class IncompletePaymentInfo(CheckoutError):
    status_code = 400

    def __init__(self, missing: list[str]):
        super().__init__(
            "Payment info is incomplete. Please update your profile or provide data in the request body",
            error="missing: " + ", ".join(missing),
        )
        self.missing = missing


class InvalidFeeSelection(CheckoutError):
    status_code = 400

    def __init__(self, field: str, message: str):
        super().__init__(message, error=f"unknown {field}")
        self.field = field


class EmptyCart(CheckoutError):
    status_code = 400

    def __init__(self):
        super().__init__("Cart is empty, cannot checkout")


class InsufficientStock(CheckoutError):
    status_code = 409

    def __init__(self, product_id: int, requested: int):
        super().__init__(
            f"Insufficient stock for product_id {product_id}",
            error=f"requested {requested}",
        )
        self.product_id = product_id
        self.requested = requested


class UserNotFound(CheckoutError):
    status_code = 404

    def __init__(self, user_id: int):
        super().__init__("User not found")
        self.user_id = user_id


class PersistenceFailure(CheckoutError):
    status_code = 500

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message, error=str(cause) if cause is not None else None)
        self.cause = cause


class InvalidReference(LookupError):
    """A fee lookup referenced a method id that does not exist."""

    def __init__(self, field: str, ref_id: int, message: str):
        super().__init__(message)
        self.field = field
        self.ref_id = ref_id
        self.message = message
