"""Order module exceptions."""

from __future__ import annotations


class OrderError(Exception):
    """Base exception for the orders module."""


class UnknownOrderStatusError(OrderError, ValueError):
    """Raised when a raw value does not name a known order status."""

    def __init__(self, value: object) -> None:
        super().__init__(f"Invalid state: {value!r}")
        self.value = value


class InvalidStatusTransitionError(OrderError):
    """Raised when an order cannot move to the requested status."""

    def __init__(self, current: str, requested: str) -> None:
        super().__init__(
            f"Transición de estado no válida: {current} -> {requested}"
        )
        self.current = current
        self.requested = requested
