"""Detection of drift between stored order statuses and payment records."""

from __future__ import annotations

from .enums import OrderStatus
from .types import ConsistencyReport, PaymentInfo


def check_order_consistency(
    current_status: str,
    payment_info: PaymentInfo,
) -> ConsistencyReport:
    """List every inconsistency between an order status and its payments.

    Checks are independent, so several issues may be reported for one order.
    """

    issues: list[str] = []

    if current_status == OrderStatus.ACTIVE and payment_info.has_pending_payment:
        issues.append("Orden activa con pagos pendientes")

    if current_status == OrderStatus.PAID and not payment_info.has_confirmed_payment:
        issues.append("Orden marcada como pagada sin confirmación de pago")

    if current_status == OrderStatus.ORDERED and payment_info.has_confirmed_payment:
        issues.append("Orden creada con pago confirmado (debería estar como pagada)")

    if (
        current_status == OrderStatus.SHIPPED
        and not payment_info.has_confirmed_payment
        and payment_info.has_pending_payment
    ):
        issues.append(
            "Orden enviada con solo pagos pendientes (debería estar como creada)"
        )

    if current_status == OrderStatus.SHIPPED and payment_info.payment_count == 0:
        issues.append("Orden enviada sin pagos (debería estar como creada)")

    if current_status == OrderStatus.ACTIVE and payment_info.payment_count == 0:
        issues.append("Orden activa sin pagos (debería estar como creada)")

    if current_status == OrderStatus.ACTIVE and not payment_info.has_confirmed_payment:
        issues.append("Orden activa sin pago confirmado (debería estar como creada)")

    if current_status == OrderStatus.ORDERED and payment_info.has_rejected_payment:
        issues.append("Orden creada con pago rechazado (debería estar como rechazada)")

    return ConsistencyReport(issues=tuple(issues))
