from __future__ import annotations

from decimal import Decimal

import pytest
from structlog.testing import capture_logs

from backoffice.core.config import OrderSettings, Settings
from backoffice.orders.enums import OrderStatus, PaymentActionKind, PaymentStatus
from backoffice.orders.exceptions import (
    InvalidStatusTransitionError,
    UnknownOrderStatusError,
)
from backoffice.orders.service import OrderTransitionService
from backoffice.orders.types import OrderSnapshot
from tests.conftest import FIXED_NOW
from tests.factories import order_factory, payment_record_factory

FIXED_MILLIS = int(FIXED_NOW.timestamp() * 1000)


def test_paid_without_payments_creates_verified_payment(
    service: OrderTransitionService,
) -> None:
    order = order_factory(OrderStatus.ORDERED, order_id="sticker-1")

    plan = service.plan_transition(order, OrderStatus.PAID)

    assert plan.previous_status is OrderStatus.ORDERED
    assert plan.new_status is OrderStatus.PAID
    assert plan.message == "Orden actualizada a estado: PAID"
    (action,) = plan.payment_actions
    assert action.kind is PaymentActionKind.CREATE
    assert action.status is PaymentStatus.VERIFIED
    assert action.amount == Decimal("6990")
    assert action.currency == "CLP"
    assert action.reference == f"STK-sticker-1-{FIXED_MILLIS}"
    assert action.payment_id
    assert action.order_id == "sticker-1"
    assert action.user_id == order.owner_id
    assert action.user_id is not None
    assert action.quantity == 1


def test_paid_updates_most_recent_pending_payment(
    service: OrderTransitionService,
) -> None:
    order = order_factory(
        OrderStatus.ORDERED,
        payment_record_factory(PaymentStatus.PENDING, minutes=0, payment_id="old"),
        payment_record_factory(PaymentStatus.PENDING, minutes=20, payment_id="new"),
        payment_record_factory(PaymentStatus.REJECTED, minutes=40, payment_id="rej"),
    )

    plan = service.plan_transition(order, "PAID")

    (action,) = plan.payment_actions
    assert action.kind is PaymentActionKind.UPDATE
    assert action.payment_id == "new"
    assert action.order_id == order.id
    assert action.status is PaymentStatus.VERIFIED
    assert action.amount is None
    assert action.quantity is None


def test_paid_without_pending_payment_leaves_payments_alone(
    service: OrderTransitionService,
) -> None:
    order = order_factory(
        OrderStatus.ORDERED, payment_record_factory(PaymentStatus.REJECTED)
    )

    plan = service.plan_transition(order, OrderStatus.PAID)

    assert plan.payment_actions == ()


def test_rejected_without_payments_creates_rejected_payment(
    service: OrderTransitionService,
) -> None:
    order = order_factory(OrderStatus.ORDERED)

    plan = service.plan_transition(order, OrderStatus.REJECTED)

    assert plan.new_status is OrderStatus.REJECTED
    assert plan.message == "Pago rechazado correctamente"
    (action,) = plan.payment_actions
    assert action.kind is PaymentActionKind.CREATE
    assert action.status is PaymentStatus.REJECTED


def test_rejected_updates_pending_payment(service: OrderTransitionService) -> None:
    order = order_factory(
        OrderStatus.PAID,
        payment_record_factory(PaymentStatus.PENDING, payment_id="pending-1"),
    )

    plan = service.plan_transition(order, OrderStatus.REJECTED)

    (action,) = plan.payment_actions
    assert action.kind is PaymentActionKind.UPDATE
    assert action.payment_id == "pending-1"
    assert action.status is PaymentStatus.REJECTED


def test_other_targets_plan_no_payment_changes(
    service: OrderTransitionService,
) -> None:
    order = order_factory(
        OrderStatus.PAID,
        payment_record_factory(PaymentStatus.VERIFIED),
        payment_record_factory(PaymentStatus.PENDING, minutes=5),
    )

    plan = service.plan_transition(order, "printing")

    assert plan.new_status is OrderStatus.PRINTING
    assert plan.payment_actions == ()
    assert plan.message == "Orden actualizada a estado: PRINTING"


def test_invalid_transition_raises_and_logs(service: OrderTransitionService) -> None:
    order = order_factory(OrderStatus.ORDERED, order_id="sticker-9")

    with capture_logs() as logs, pytest.raises(InvalidStatusTransitionError) as exc:
        service.plan_transition(order, OrderStatus.SHIPPED)

    assert exc.value.current == OrderStatus.ORDERED
    assert exc.value.requested == OrderStatus.SHIPPED
    assert "Transición de estado no válida" in str(exc.value)
    (entry,) = [log for log in logs if log["event"] == "order_transition_rejected"]
    assert entry["log_level"] == "warning"
    assert entry["requested_status"] == "SHIPPED"


def test_printing_blocked_without_confirmed_payment(
    service: OrderTransitionService,
) -> None:
    order = order_factory(
        OrderStatus.PAID, payment_record_factory(PaymentStatus.PENDING)
    )

    with pytest.raises(InvalidStatusTransitionError):
        service.plan_transition(order, OrderStatus.PRINTING)


def test_unknown_target_status_raises(service: OrderTransitionService) -> None:
    order = order_factory(OrderStatus.ORDERED)

    with pytest.raises(UnknownOrderStatusError):
        service.plan_transition(order, "ARCHIVED")


def test_planned_transition_is_logged(service: OrderTransitionService) -> None:
    order = order_factory(OrderStatus.ORDERED)

    with capture_logs() as logs:
        service.plan_transition(order, OrderStatus.LOST)

    (entry,) = [log for log in logs if log["event"] == "order_transition_planned"]
    assert entry["previous_status"] == "ORDERED"
    assert entry["new_status"] == "LOST"
    assert entry["payment_actions"] == []


def test_manual_payment_uses_configured_defaults() -> None:
    settings = Settings(
        orders=OrderSettings(
            manual_payment_amount=Decimal("12000"),
            manual_payment_currency="usd",
            payment_reference_prefix="SAFE",
        )
    )
    service = OrderTransitionService(settings=settings, clock=lambda: FIXED_NOW)
    order = order_factory(OrderStatus.ORDERED, order_id="abc")

    (action,) = service.plan_transition(order, OrderStatus.PAID).payment_actions

    assert action.amount == Decimal("12000")
    assert action.currency == "USD"
    assert action.reference == f"SAFE-abc-{FIXED_MILLIS}"


def test_find_inconsistencies_lists_only_drifted_orders(
    service: OrderTransitionService,
) -> None:
    consistent = order_factory(OrderStatus.ORDERED, order_id="ok")
    active_pending = order_factory(
        OrderStatus.ACTIVE,
        payment_record_factory(PaymentStatus.PAID, amount=100, minutes=0),
        payment_record_factory(PaymentStatus.PENDING, amount=50, minutes=5),
        order_id="active",
    )
    paid_unconfirmed = order_factory(
        OrderStatus.PAID,
        payment_record_factory(PaymentStatus.PENDING),
        order_id="paid",
    )
    ordered_verified = order_factory(
        OrderStatus.ORDERED,
        payment_record_factory(PaymentStatus.VERIFIED),
        order_id="ordered",
    )

    with capture_logs() as logs:
        audit = service.find_inconsistencies(
            order
            for order in (consistent, active_pending, paid_unconfirmed, ordered_verified)
        )

    assert audit.total_orders == 4
    assert audit.inconsistent_count == 3
    by_id = {entry.order_id: entry for entry in audit.inconsistencies}
    assert set(by_id) == {"active", "paid", "ordered"}

    active = by_id["active"]
    assert active.current_status is OrderStatus.ACTIVE
    assert active.suggested_status is OrderStatus.SHIPPED
    assert active.reason == "Inconsistencia: Activa con pagos pendientes"
    assert "Orden activa con pagos pendientes" in active.issues
    assert active.payment_info.total_amount == 150
    assert active.payment_info.payment_count == 2

    assert by_id["paid"].suggested_status is OrderStatus.ORDERED
    assert by_id["ordered"].suggested_status is OrderStatus.PAID
    assert by_id["ordered"].reason == ""

    detected = [log for log in logs if log["event"] == "order_inconsistency_detected"]
    assert {log["order_id"] for log in detected} == {"active", "paid", "ordered"}


def test_plan_repairs(service: OrderTransitionService) -> None:
    orders = [
        order_factory(OrderStatus.SHIPPED, order_id="shipped"),
        order_factory(
            OrderStatus.PRINTING,
            payment_record_factory(PaymentStatus.PAID),
            order_id="printing",
        ),
    ]

    repairs = service.plan_repairs(orders)

    assert len(repairs) == 1
    (repair,) = repairs
    assert repair.order_id == "shipped"
    assert repair.old_status is OrderStatus.SHIPPED
    assert repair.new_status is OrderStatus.ORDERED
    assert repair.reason == "Inconsistencia: Enviada sin pagos"


def test_audit_of_no_orders_is_empty(service: OrderTransitionService) -> None:
    audit = service.find_inconsistencies([])

    assert audit.total_orders == 0
    assert audit.inconsistent_count == 0


def test_order_snapshot_from_raw_row(service: OrderTransitionService) -> None:
    order = OrderSnapshot.model_validate(
        {
            "id": "sticker-raw",
            "status": "shipped",
            "ownerId": "user-1",
            "Payment": [
                {
                    "id": "p1",
                    "amount": 6990,
                    "currency": "CLP",
                    "status": "PAID",
                    "createdAt": "2024-05-01T10:00:00Z",
                }
            ],
        }
    )

    plan = service.plan_transition(order, OrderStatus.ACTIVE)

    assert order.status is OrderStatus.SHIPPED
    assert order.owner_id == "user-1"
    assert plan.new_status is OrderStatus.ACTIVE
    assert service.analyze(order).currency == "CLP"
