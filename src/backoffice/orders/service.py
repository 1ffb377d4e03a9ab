from __future__ import annotations

import uuid
from collections.abc import Callable, Iterable
from datetime import UTC, datetime

import structlog

from backoffice.core.config import Settings, get_settings
from backoffice.core.logging import order_context

from .consistency import check_order_consistency
from .display import get_display_status
from .enums import OrderStatus, PaymentActionKind, PaymentStatus
from .exceptions import InvalidStatusTransitionError
from .payments import analyze_payments
from .transitions import is_valid_status_transition, parse_order_status
from .types import (
    InconsistencyAudit,
    OrderInconsistency,
    OrderSnapshot,
    PaymentAction,
    PaymentInfo,
    PaymentRecord,
    StatusRepair,
    TransitionPlan,
)

Clock = Callable[[], datetime]

_PAYMENT_STATUS_FOR_TARGET: dict[OrderStatus, PaymentStatus] = {
    OrderStatus.PAID: PaymentStatus.VERIFIED,
    OrderStatus.REJECTED: PaymentStatus.REJECTED,
}


class OrderTransitionService:
    """Plans order transitions and bulk repairs without touching storage.

    The caller loads an :class:`OrderSnapshot`, asks for a plan and applies
    it atomically; a stale snapshot is the caller's concern.
    """

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._clock = clock or self._now
        self._logger = structlog.get_logger(__name__)

    def analyze(self, order: OrderSnapshot) -> PaymentInfo:
        return analyze_payments(
            order.payments,
            default_currency=self._settings.orders.default_currency,
        )

    def plan_transition(self, order: OrderSnapshot, new_status: str) -> TransitionPlan:
        target = parse_order_status(new_status)
        payment_info = self.analyze(order)

        with order_context(order.id):
            if not is_valid_status_transition(order.status, target, payment_info):
                self._logger.warning(
                    "order_transition_rejected",
                    current_status=order.status.value,
                    requested_status=target.value,
                    payment_count=payment_info.payment_count,
                    has_confirmed_payment=payment_info.has_confirmed_payment,
                    has_pending_payment=payment_info.has_pending_payment,
                )
                raise InvalidStatusTransitionError(order.status, target)

            actions = self._plan_payment_actions(order, target)
            if target is OrderStatus.REJECTED:
                message = "Pago rechazado correctamente"
            else:
                message = f"Orden actualizada a estado: {target.value}"

            self._logger.info(
                "order_transition_planned",
                previous_status=order.status.value,
                new_status=target.value,
                payment_actions=[action.kind.value for action in actions],
            )

        return TransitionPlan(
            order_id=order.id,
            previous_status=order.status,
            new_status=target,
            payment_actions=actions,
            message=message,
        )

    def find_inconsistencies(self, orders: Iterable[OrderSnapshot]) -> InconsistencyAudit:
        total = 0
        found: list[OrderInconsistency] = []

        for order in orders:
            total += 1
            payment_info = self.analyze(order)
            display = get_display_status(order.status, payment_info)
            if display.primary_status == order.status:
                continue

            entry = OrderInconsistency(
                order_id=order.id,
                current_status=order.status,
                suggested_status=display.primary_status,
                reason=display.description,
                issues=check_order_consistency(order.status, payment_info).issues,
                payment_info=payment_info,
            )
            self._logger.info(
                "order_inconsistency_detected",
                order_id=order.id,
                current_status=order.status.value,
                suggested_status=str(display.primary_status),
                reason=display.description,
            )
            found.append(entry)

        return InconsistencyAudit(total_orders=total, inconsistencies=tuple(found))

    def plan_repairs(self, orders: Iterable[OrderSnapshot]) -> list[StatusRepair]:
        audit = self.find_inconsistencies(orders)
        repairs = [
            StatusRepair(
                order_id=entry.order_id,
                old_status=entry.current_status,
                new_status=entry.suggested_status,
                reason=entry.reason,
            )
            for entry in audit.inconsistencies
        ]
        self._logger.info(
            "order_repairs_planned",
            total_orders=audit.total_orders,
            repair_count=len(repairs),
        )
        return repairs

    def _plan_payment_actions(
        self, order: OrderSnapshot, target: OrderStatus
    ) -> tuple[PaymentAction, ...]:
        payment_status = _PAYMENT_STATUS_FOR_TARGET.get(target)
        if payment_status is None:
            return ()

        if not order.payments:
            return (self._manual_payment(order, payment_status),)

        pending = self._latest_pending(order.payments)
        if pending is None:
            return ()

        return (
            PaymentAction(
                kind=PaymentActionKind.UPDATE,
                payment_id=pending.id,
                status=payment_status,
                order_id=order.id,
            ),
        )

    def _manual_payment(
        self, order: OrderSnapshot, status: PaymentStatus
    ) -> PaymentAction:
        orders_settings = self._settings.orders
        timestamp_ms = int(self._clock().timestamp() * 1000)
        reference = (
            f"{orders_settings.payment_reference_prefix}-{order.id}-{timestamp_ms}"
        )
        return PaymentAction(
            kind=PaymentActionKind.CREATE,
            payment_id=str(uuid.uuid4()),
            status=status,
            amount=orders_settings.manual_payment_amount,
            currency=orders_settings.manual_payment_currency,
            reference=reference,
            order_id=order.id,
            user_id=order.owner_id,
            quantity=1,
        )

    @staticmethod
    def _latest_pending(payments: Iterable[PaymentRecord]) -> PaymentRecord | None:
        pending = [
            payment for payment in payments if payment.status is PaymentStatus.PENDING
        ]
        if not pending:
            return None
        return max(pending, key=lambda payment: payment.created_at)

    @staticmethod
    def _now() -> datetime:
        return datetime.now(UTC)
