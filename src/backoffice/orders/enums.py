from __future__ import annotations

from enum import StrEnum


class OrderStatus(StrEnum):
    """Lifecycle stages of a physical sticker order."""

    ORDERED = "ORDERED"
    PAID = "PAID"
    PRINTING = "PRINTING"
    SHIPPED = "SHIPPED"
    ACTIVE = "ACTIVE"
    LOST = "LOST"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class PaymentStatus(StrEnum):
    """States of a single payment attempt attached to an order."""

    PENDING = "PENDING"
    VERIFIED = "VERIFIED"
    REJECTED = "REJECTED"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


class TransitionDirection(StrEnum):
    """How a catalogued transition moves an order through its lifecycle."""

    FORWARD = "forward"
    BACKWARD = "backward"
    SPECIAL = "special"


class PaymentActionKind(StrEnum):
    """Payment mutation requested alongside an order transition."""

    CREATE = "create"
    UPDATE = "update"


CONFIRMED_PAYMENT_STATUSES: frozenset[PaymentStatus] = frozenset(
    {PaymentStatus.PAID, PaymentStatus.VERIFIED}
)
