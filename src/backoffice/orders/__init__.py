"""Order domain: reconciliation of sticker order statuses with payments."""

from .consistency import check_order_consistency
from .display import format_amount, get_display_status, get_payment_display_info
from .enums import OrderStatus, PaymentActionKind, PaymentStatus, TransitionDirection
from .exceptions import (
    InvalidStatusTransitionError,
    OrderError,
    UnknownOrderStatusError,
)
from .payments import analyze_payments, payment_status_for_order_status
from .service import OrderTransitionService
from .transitions import (
    TRANSITION_CATALOG,
    get_available_status_transitions,
    is_valid_status_transition,
    parse_order_status,
    suggest_next_status,
)
from .types import (
    ConsistencyReport,
    DisplayStatus,
    InconsistencyAudit,
    OrderInconsistency,
    OrderSnapshot,
    OrderStatusTransition,
    PaymentAction,
    PaymentDisplayInfo,
    PaymentInfo,
    PaymentRecord,
    StatusRepair,
    TransitionPlan,
)

__all__ = [
    "TRANSITION_CATALOG",
    "ConsistencyReport",
    "DisplayStatus",
    "InconsistencyAudit",
    "InvalidStatusTransitionError",
    "OrderError",
    "OrderInconsistency",
    "OrderSnapshot",
    "OrderStatus",
    "OrderStatusTransition",
    "OrderTransitionService",
    "PaymentAction",
    "PaymentActionKind",
    "PaymentDisplayInfo",
    "PaymentInfo",
    "PaymentRecord",
    "PaymentStatus",
    "StatusRepair",
    "TransitionDirection",
    "TransitionPlan",
    "UnknownOrderStatusError",
    "analyze_payments",
    "check_order_consistency",
    "format_amount",
    "get_available_status_transitions",
    "get_display_status",
    "get_payment_display_info",
    "is_valid_status_transition",
    "parse_order_status",
    "payment_status_for_order_status",
    "suggest_next_status",
]
