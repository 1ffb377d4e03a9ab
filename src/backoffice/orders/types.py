from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .enums import OrderStatus, PaymentActionKind, PaymentStatus, TransitionDirection

__all__ = [
    "PaymentRecord",
    "OrderSnapshot",
    "PaymentInfo",
    "OrderStatusTransition",
    "DisplayStatus",
    "ConsistencyReport",
    "PaymentDisplayInfo",
    "PaymentAction",
    "TransitionPlan",
    "OrderInconsistency",
    "InconsistencyAudit",
    "StatusRepair",
]


def _upper_status(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().upper()
    return value


class PaymentRecord(BaseModel):
    """Snapshot of one payment row as read by the caller.

    Callers store the amount either as ``amount`` or ``amountCents``; both are
    accepted and summed as plain numbers in a single unit.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    id: str | None = None
    amount: Decimal = Field(
        validation_alias=AliasChoices("amount", "amountCents", "amount_cents"),
    )
    currency: str | None = None
    status: PaymentStatus
    created_at: datetime = Field(
        validation_alias=AliasChoices("created_at", "createdAt"),
    )

    @field_validator("status", mode="before")
    @classmethod
    def _normalise_status(cls, value: Any) -> Any:
        return _upper_status(value)

    @field_validator("created_at")
    @classmethod
    def _ensure_timezone(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class OrderSnapshot(BaseModel):
    """An order together with every payment attached to it."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    id: str
    status: OrderStatus
    owner_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("owner_id", "ownerId"),
    )
    payments: tuple[PaymentRecord, ...] = Field(
        default=(),
        validation_alias=AliasChoices("payments", "Payment"),
    )

    @field_validator("status", mode="before")
    @classmethod
    def _normalise_status(cls, value: Any) -> Any:
        return _upper_status(value)


@dataclass(frozen=True, slots=True)
class PaymentInfo:
    """Aggregate view over the payments of a single order.

    ``total_amount`` sums every record regardless of its status.
    """

    total_amount: Decimal
    currency: str
    has_confirmed_payment: bool
    has_pending_payment: bool
    has_rejected_payment: bool
    latest_status: PaymentStatus | None
    payment_count: int


@dataclass(frozen=True, slots=True)
class OrderStatusTransition:
    status: OrderStatus
    direction: TransitionDirection
    requires_payment: bool
    description: str


@dataclass(frozen=True, slots=True)
class DisplayStatus:
    """Status shown to an operator, with the stored label kept as a badge."""

    primary_status: OrderStatus | str
    secondary_statuses: tuple[OrderStatus, ...] = ()
    description: str = ""


@dataclass(frozen=True, slots=True)
class ConsistencyReport:
    issues: tuple[str, ...] = ()

    @property
    def is_consistent(self) -> bool:
        return not self.issues


@dataclass(frozen=True, slots=True)
class PaymentDisplayInfo:
    amount: str
    status: str
    status_color: str
    description: str


@dataclass(frozen=True, slots=True)
class PaymentAction:
    """Payment row the caller must create or update to follow a transition."""

    kind: PaymentActionKind
    payment_id: str | None
    status: PaymentStatus
    amount: Decimal | None = None
    currency: str | None = None
    reference: str | None = None
    order_id: str | None = None
    user_id: str | None = None
    quantity: int | None = None


@dataclass(frozen=True, slots=True)
class TransitionPlan:
    order_id: str
    previous_status: OrderStatus
    new_status: OrderStatus
    payment_actions: tuple[PaymentAction, ...] = ()
    message: str = ""


@dataclass(frozen=True, slots=True)
class OrderInconsistency:
    order_id: str
    current_status: OrderStatus
    suggested_status: OrderStatus | str
    reason: str
    issues: tuple[str, ...]
    payment_info: PaymentInfo


@dataclass(frozen=True, slots=True)
class InconsistencyAudit:
    total_orders: int
    inconsistencies: tuple[OrderInconsistency, ...] = field(default_factory=tuple)

    @property
    def inconsistent_count(self) -> int:
        return len(self.inconsistencies)


@dataclass(frozen=True, slots=True)
class StatusRepair:
    order_id: str
    old_status: OrderStatus
    new_status: OrderStatus | str
    reason: str
