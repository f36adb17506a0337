"""Checkout pipeline: cart snapshot in, committed transaction out.

A checkout attempt walks ``Validating -> ResolvingFees -> ReadingCart ->
Computing -> Committing -> Done``; any stage may end in ``Failed`` with a
typed :class:`~dailygreens.core.errors.CheckoutError`. Nothing is retried.
"""
import logging
import random
from datetime import datetime
from enum import Enum
from typing import Callable, Optional
from redis import Redis
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from dailygreens.core.config import settings
from dailygreens.core.errors import (
    CheckoutError, EmptyCart, IncompletePaymentInfo, InvalidFeeSelection, InvalidReference,
    PersistenceFailure,
)
from dailygreens.checkout.calculator import compute_totals, generate_invoice_number
from dailygreens.checkout.cart import read_cart
from dailygreens.checkout.committer import commit_transaction
from dailygreens.checkout.fees import resolve_fees
from dailygreens.checkout.profile import get_profile
from dailygreens.checkout.types import CheckoutRequest, CheckoutResult
from dailygreens.store.cache import invalidate_product_cache

log = logging.getLogger(__name__)

class CheckoutStage(str, Enum):
    VALIDATING = "validating"
    RESOLVING_FEES = "resolving_fees"
    READING_CART = "reading_cart"
    COMPUTING = "computing"
    COMMITTING = "committing"
    DONE = "done"
    FAILED = "failed"

_READ_FAILURES = {
    CheckoutStage.VALIDATING: "Failed to fetch user profile from database",
    CheckoutStage.RESOLVING_FEES: "Failed to fetch fees from database",
    CheckoutStage.READING_CART: "Failed to fetch list carts from database",
}

class CheckoutService:
    def __init__(
        self,
        db: Session,
        cache: Optional[Redis] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self._db = db
        self._cache = cache
        self._rng = rng
        self._clock = clock
        self.stage = CheckoutStage.VALIDATING

    def _enter(self, stage: CheckoutStage, user_id: int) -> None:
        self.stage = stage
        log.debug("checkout user=%s stage=%s", user_id, stage.value)

    def checkout(self, user_id: int, request: CheckoutRequest) -> CheckoutResult:
        try:
            return self._run(user_id, request)
        except CheckoutError as e:
            failed_at = self.stage
            self.stage = CheckoutStage.FAILED
            if e.status_code >= 500:
                log.error("checkout failed user=%s stage=%s: %s", user_id, failed_at.value, e.message,
                          exc_info=True)
            else:
                log.warning("checkout rejected user=%s stage=%s: %s", user_id, failed_at.value, e.message)
            raise
        except Exception:
            log.exception("checkout crashed user=%s stage=%s", user_id, self.stage.value)
            self.stage = CheckoutStage.FAILED
            raise

    def _run(self, user_id: int, request: CheckoutRequest) -> CheckoutResult:
        try:
            return self._pipeline(user_id, request)
        except SQLAlchemyError as e:
            self._db.rollback()
            raise PersistenceFailure(_READ_FAILURES.get(self.stage, "Failed to checkout"), e) from e

    def _pipeline(self, user_id: int, request: CheckoutRequest) -> CheckoutResult:
        self._enter(CheckoutStage.VALIDATING, user_id)
        profile = get_profile(self._db, user_id)
        contact = request.contact.merged_with(profile)
        missing = contact.missing()
        if missing:
            raise IncompletePaymentInfo(missing)
        request = CheckoutRequest(
            payment_method_id=request.payment_method_id,
            order_method_id=request.order_method_id,
            contact=contact,
        )

        self._enter(CheckoutStage.RESOLVING_FEES, user_id)
        try:
            fees = resolve_fees(self._db, request.order_method_id, request.payment_method_id)
        except InvalidReference as e:
            raise InvalidFeeSelection(e.field, e.message) from e

        self._enter(CheckoutStage.READING_CART, user_id)
        lines = read_cart(self._db, user_id)
        if not lines:
            raise EmptyCart()

        self._enter(CheckoutStage.COMPUTING, user_id)
        totals = compute_totals(lines, fees, now=self._clock(), rng=self._rng)

        self._enter(CheckoutStage.COMMITTING, user_id)
        committed = commit_transaction(
            self._db, user_id, request, fees, totals, lines,
            redraw_invoice=lambda: generate_invoice_number(totals.date_transaction, self._rng),
        )
        if self._cache is not None:
            invalidate_product_cache(self._cache, settings.product_cache_patterns)

        self._enter(CheckoutStage.DONE, user_id)
        log.info("checkout committed user=%s transaction=%s invoice=%s lines=%d total=%s",
                 user_id, committed.transaction_id, committed.invoice_number, len(lines), totals.total)
        return CheckoutResult(
            transaction_id=committed.transaction_id,
            invoice_number=committed.invoice_number,
            date_transaction=totals.date_transaction,
            delivery_fee=fees.delivery_fee,
            admin_fee=fees.admin_fee,
            tax=totals.tax,
            total=totals.total,
            line_count=len(lines),
        )
