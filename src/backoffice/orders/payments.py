"""Payment aggregation helpers for sticker orders."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any

from backoffice.core.config import get_settings

from .enums import CONFIRMED_PAYMENT_STATUSES, OrderStatus, PaymentStatus
from .types import PaymentInfo, PaymentRecord

_PAYMENT_STATUS_BY_ORDER_STATUS: dict[str, PaymentStatus] = {
    OrderStatus.ORDERED: PaymentStatus.PENDING,
    OrderStatus.PAID: PaymentStatus.VERIFIED,
    OrderStatus.PRINTING: PaymentStatus.PAID,
    OrderStatus.SHIPPED: PaymentStatus.PAID,
    OrderStatus.ACTIVE: PaymentStatus.PAID,
    OrderStatus.REJECTED: PaymentStatus.REJECTED,
    OrderStatus.CANCELLED: PaymentStatus.CANCELLED,
    # A lost sticker keeps its payment settled.
    OrderStatus.LOST: PaymentStatus.PAID,
}


def _coerce_record(payment: PaymentRecord | Mapping[str, Any]) -> PaymentRecord:
    if isinstance(payment, PaymentRecord):
        return payment
    return PaymentRecord.model_validate(payment)


def analyze_payments(
    payments: Iterable[PaymentRecord | Mapping[str, Any]],
    *,
    default_currency: str | None = None,
) -> PaymentInfo:
    """Summarise an order's payments into a :class:`PaymentInfo`.

    The caller's sequence is never reordered. When several payments share the
    most recent ``created_at``, the one appearing first in the input wins.
    Without ``default_currency`` the configured ``orders.default_currency``
    applies to orders with no currency on record.
    """

    records = [_coerce_record(payment) for payment in payments]

    total_amount = sum((record.amount for record in records), Decimal("0"))
    currency = records[0].currency if records else None
    if not currency:
        currency = default_currency or get_settings().orders.default_currency

    has_confirmed_payment = any(
        record.status in CONFIRMED_PAYMENT_STATUSES for record in records
    )
    has_pending_payment = any(
        record.status is PaymentStatus.PENDING for record in records
    )
    has_rejected_payment = any(
        record.status is PaymentStatus.REJECTED for record in records
    )

    # sorted() is stable with reverse=True, so ties keep input order.
    by_recency = sorted(records, key=lambda record: record.created_at, reverse=True)
    latest_status = by_recency[0].status if by_recency else None

    return PaymentInfo(
        total_amount=total_amount,
        currency=currency,
        has_confirmed_payment=has_confirmed_payment,
        has_pending_payment=has_pending_payment,
        has_rejected_payment=has_rejected_payment,
        latest_status=latest_status,
        payment_count=len(records),
    )


def payment_status_for_order_status(order_status: str) -> PaymentStatus | None:
    """Return the payment status that keeps payments in step with an order."""

    return _PAYMENT_STATUS_BY_ORDER_STATUS.get(order_status)
