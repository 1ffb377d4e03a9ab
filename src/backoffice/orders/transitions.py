"""Order lifecycle transition rules.

:func:`is_valid_status_transition` is the only authority on legality. The
catalogue below only describes the edges an operator may be offered; every
entry is filtered through the validator before it is returned.
"""

from __future__ import annotations

from typing import Final

from .enums import OrderStatus, TransitionDirection
from .exceptions import UnknownOrderStatusError
from .types import OrderStatusTransition, PaymentInfo

_REJECTABLE_STATUSES: Final[frozenset[OrderStatus]] = frozenset(
    {OrderStatus.ORDERED, OrderStatus.PAID}
)


def _edge(
    status: OrderStatus,
    direction: TransitionDirection,
    description: str,
    *,
    requires_payment: bool = False,
) -> OrderStatusTransition:
    return OrderStatusTransition(
        status=status,
        direction=direction,
        requires_payment=requires_payment,
        description=description,
    )


_MARK_LOST = _edge(
    OrderStatus.LOST, TransitionDirection.SPECIAL, "Marcar como perdida"
)
_RESTART = _edge(
    OrderStatus.ORDERED, TransitionDirection.FORWARD, "Reiniciar proceso"
)

TRANSITION_CATALOG: Final[dict[OrderStatus, tuple[OrderStatusTransition, ...]]] = {
    OrderStatus.ORDERED: (
        _edge(
            OrderStatus.PAID,
            TransitionDirection.FORWARD,
            "Marcar como pagada (requiere pago confirmado)",
            requires_payment=True,
        ),
        _edge(
            OrderStatus.REJECTED,
            TransitionDirection.SPECIAL,
            "Marcar como rechazada (pago rechazado)",
        ),
        _MARK_LOST,
    ),
    OrderStatus.PAID: (
        _edge(OrderStatus.PRINTING, TransitionDirection.FORWARD, "Iniciar impresión"),
        _edge(OrderStatus.ORDERED, TransitionDirection.BACKWARD, "Volver a creada"),
        _MARK_LOST,
    ),
    OrderStatus.PRINTING: (
        _edge(OrderStatus.SHIPPED, TransitionDirection.FORWARD, "Marcar como enviada"),
        _edge(OrderStatus.PAID, TransitionDirection.BACKWARD, "Volver a pagada"),
        _MARK_LOST,
    ),
    OrderStatus.SHIPPED: (
        _edge(
            OrderStatus.ACTIVE,
            TransitionDirection.FORWARD,
            "Marcar como activa (sin pagos pendientes)",
        ),
        _edge(
            OrderStatus.PRINTING,
            TransitionDirection.BACKWARD,
            "Volver a imprimiendo",
        ),
        _MARK_LOST,
    ),
    OrderStatus.ACTIVE: (
        _MARK_LOST,
        _edge(OrderStatus.SHIPPED, TransitionDirection.BACKWARD, "Volver a enviada"),
    ),
    OrderStatus.LOST: (_RESTART,),
    OrderStatus.REJECTED: (
        _edge(OrderStatus.ORDERED, TransitionDirection.FORWARD, "Reintentar pago"),
        _edge(OrderStatus.CANCELLED, TransitionDirection.SPECIAL, "Cancelar orden"),
    ),
    OrderStatus.CANCELLED: (_RESTART,),
}


def parse_order_status(value: object) -> OrderStatus:
    """Resolve a raw status value, tolerating case and surrounding whitespace.

    Raises:
        UnknownOrderStatusError: If ``value`` does not name an order status.
    """

    if isinstance(value, OrderStatus):
        return value
    if not isinstance(value, str):
        raise UnknownOrderStatusError(value)

    try:
        return OrderStatus(value.strip().upper())
    except ValueError as exc:
        raise UnknownOrderStatusError(value) from exc


def is_valid_status_transition(
    current_status: str,
    new_status: str,
    payment_info: PaymentInfo,
) -> bool:
    """Return True if an order may move from ``current_status`` to ``new_status``.

    Unknown statuses are never valid; the function does not raise.
    """

    # Rejection is only reachable before printing starts.
    if new_status == OrderStatus.REJECTED:
        return current_status in _REJECTABLE_STATUSES

    if current_status == OrderStatus.ORDERED:
        return new_status in {OrderStatus.PAID, OrderStatus.LOST}

    if current_status == OrderStatus.PAID:
        if new_status == OrderStatus.PRINTING:
            return payment_info.has_confirmed_payment
        return new_status in {OrderStatus.ORDERED, OrderStatus.LOST}

    if current_status == OrderStatus.PRINTING:
        if new_status == OrderStatus.SHIPPED:
            return payment_info.has_confirmed_payment
        return new_status in {OrderStatus.PAID, OrderStatus.LOST}

    if current_status == OrderStatus.SHIPPED:
        if new_status == OrderStatus.ACTIVE:
            return (
                payment_info.has_confirmed_payment
                and not payment_info.has_pending_payment
            )
        return new_status in {OrderStatus.PRINTING, OrderStatus.LOST}

    if current_status == OrderStatus.ACTIVE:
        return new_status in {OrderStatus.LOST, OrderStatus.SHIPPED}

    if current_status in {OrderStatus.LOST, OrderStatus.CANCELLED}:
        return new_status == OrderStatus.ORDERED

    if current_status == OrderStatus.REJECTED:
        return new_status in {OrderStatus.ORDERED, OrderStatus.CANCELLED}

    return False


def get_available_status_transitions(
    current_status: str,
    payment_info: PaymentInfo,
) -> list[OrderStatusTransition]:
    """Return the catalogued transitions currently open to an order."""

    return [
        transition
        for transition in TRANSITION_CATALOG.get(current_status, ())
        if is_valid_status_transition(current_status, transition.status, payment_info)
    ]


def suggest_next_status(
    current_status: str,
    payment_info: PaymentInfo,
) -> OrderStatus | None:
    """Return the first forward transition available, if any."""

    for transition in get_available_status_transitions(current_status, payment_info):
        if transition.direction is TransitionDirection.FORWARD:
            return transition.status
    return None
