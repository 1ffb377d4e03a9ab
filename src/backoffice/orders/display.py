"""Presentation helpers for the order listing and payment badges."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Final

from backoffice.core.config import DisplaySettings, get_settings

from .enums import OrderStatus
from .types import DisplayStatus, PaymentDisplayInfo, PaymentInfo

NO_PAYMENT_LABEL: Final[str] = "Sin pago"
UNKNOWN_STATUS_DESCRIPTION: Final[str] = "Estado desconocido"

_KNOWN_STATUSES: Final[frozenset[str]] = frozenset(OrderStatus)


def get_display_status(
    current_status: str,
    payment_info: PaymentInfo,
) -> DisplayStatus:
    """Compute the status an operator should see for an order.

    When the stored status disagrees with the payments, the status implied
    by the payments is shown and the stored one is kept as a secondary
    badge. The first matching rule wins.
    """

    if current_status == OrderStatus.ACTIVE and payment_info.has_pending_payment:
        return DisplayStatus(
            primary_status=OrderStatus.SHIPPED,
            secondary_statuses=(OrderStatus.ACTIVE,),
            description="Inconsistencia: Activa con pagos pendientes",
        )

    if current_status == OrderStatus.PAID and not payment_info.has_confirmed_payment:
        return DisplayStatus(
            primary_status=OrderStatus.ORDERED,
            secondary_statuses=(OrderStatus.PAID,),
            description="Inconsistencia: Pagada sin confirmación de pago",
        )

    if (
        current_status == OrderStatus.SHIPPED
        and not payment_info.has_confirmed_payment
        and payment_info.has_pending_payment
    ):
        return DisplayStatus(
            primary_status=OrderStatus.ORDERED,
            secondary_statuses=(OrderStatus.SHIPPED,),
            description="Inconsistencia: Enviada con solo pagos pendientes",
        )

    if current_status == OrderStatus.SHIPPED and payment_info.payment_count == 0:
        return DisplayStatus(
            primary_status=OrderStatus.ORDERED,
            secondary_statuses=(OrderStatus.SHIPPED,),
            description="Inconsistencia: Enviada sin pagos",
        )

    if current_status == OrderStatus.ACTIVE and payment_info.payment_count == 0:
        return DisplayStatus(
            primary_status=OrderStatus.ORDERED,
            secondary_statuses=(OrderStatus.ACTIVE,),
            description="Inconsistencia: Activa sin pagos",
        )

    if current_status == OrderStatus.ACTIVE and not payment_info.has_confirmed_payment:
        return DisplayStatus(
            primary_status=OrderStatus.ORDERED,
            secondary_statuses=(OrderStatus.ACTIVE,),
            description="Inconsistencia: Activa sin pago confirmado",
        )

    if current_status == OrderStatus.ORDERED and payment_info.has_rejected_payment:
        return DisplayStatus(
            primary_status=OrderStatus.REJECTED,
            description="Pago rechazado",
        )

    if current_status == OrderStatus.ORDERED:
        if payment_info.has_confirmed_payment:
            return DisplayStatus(primary_status=OrderStatus.PAID)
        return DisplayStatus(primary_status=OrderStatus.ORDERED)

    if current_status in _KNOWN_STATUSES:
        return DisplayStatus(primary_status=OrderStatus(current_status))

    return DisplayStatus(
        primary_status=current_status,
        description=UNKNOWN_STATUS_DESCRIPTION,
    )


def format_amount(
    amount: Decimal | int | float,
    currency: str,
    display: DisplaySettings | None = None,
) -> str:
    """Format an amount as a whole-unit currency string, e.g. ``$6.990``.

    Without ``display`` the configured display settings are used.
    """

    display = display or get_settings().display
    value = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    digits = f"{abs(value):,.0f}".replace(",", display.grouping_separator)

    symbol = display.symbol_for(currency)
    if symbol is None:
        return f"{sign}{currency.upper()} {digits}"
    return f"{sign}{symbol}{digits}"


def get_payment_display_info(
    payment_info: PaymentInfo,
    display: DisplaySettings | None = None,
) -> PaymentDisplayInfo:
    """Classify an order's payments for the payment badge."""

    if payment_info.payment_count == 0:
        return PaymentDisplayInfo(
            amount=NO_PAYMENT_LABEL,
            status=NO_PAYMENT_LABEL,
            status_color="gray",
            description="No hay pagos registrados",
        )

    amount = format_amount(payment_info.total_amount, payment_info.currency, display)

    if payment_info.has_confirmed_payment and not payment_info.has_pending_payment:
        return PaymentDisplayInfo(
            amount=amount,
            status="Pagado",
            status_color="green",
            description="Pago confirmado",
        )

    if payment_info.has_confirmed_payment and payment_info.has_pending_payment:
        return PaymentDisplayInfo(
            amount=amount,
            status="Parcial",
            status_color="orange",
            description="Pago confirmado con pagos pendientes",
        )

    if payment_info.has_pending_payment:
        return PaymentDisplayInfo(
            amount=amount,
            status="Pendiente",
            status_color="yellow",
            description="Pago pendiente de confirmación",
        )

    return PaymentDisplayInfo(
        amount=amount,
        status="Rechazado",
        status_color="red",
        description="Pago rechazado",
    )
