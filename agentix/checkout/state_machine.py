from typing import Dict, FrozenSet, Union
from agentix.schema.full_schema import CheckoutStatus

StatusLike = Union[CheckoutStatus, str]

VALID_TRANSITIONS: Dict[CheckoutStatus, FrozenSet[CheckoutStatus]] = {
    CheckoutStatus.CREATED: frozenset({
        CheckoutStatus.ITEMS_ADDED, CheckoutStatus.CANCELLED, CheckoutStatus.EXPIRED,
    }),
    CheckoutStatus.ITEMS_ADDED: frozenset({
        CheckoutStatus.SHIPPING_SET, CheckoutStatus.ITEMS_ADDED, CheckoutStatus.CANCELLED, CheckoutStatus.EXPIRED,
    }),
    CheckoutStatus.SHIPPING_SET: frozenset({
        CheckoutStatus.PAYMENT_PENDING, CheckoutStatus.SHIPPING_SET, CheckoutStatus.CANCELLED, CheckoutStatus.EXPIRED,
    }),
    CheckoutStatus.PAYMENT_PENDING: frozenset({
        CheckoutStatus.COMPLETED, CheckoutStatus.FAILED, CheckoutStatus.CANCELLED, CheckoutStatus.EXPIRED,
    }),
    CheckoutStatus.COMPLETED: frozenset(),
    CheckoutStatus.CANCELLED: frozenset(),
    CheckoutStatus.EXPIRED: frozenset(),
    # retry path
    CheckoutStatus.FAILED: frozenset({CheckoutStatus.PAYMENT_PENDING, CheckoutStatus.CANCELLED}),
}

TERMINAL_STATUSES: FrozenSet[CheckoutStatus] = frozenset({
    CheckoutStatus.COMPLETED, CheckoutStatus.CANCELLED, CheckoutStatus.EXPIRED,
})


def can_transition(from_status: StatusLike, to_status: StatusLike) -> bool:
    return CheckoutStatus(to_status) in VALID_TRANSITIONS[CheckoutStatus(from_status)]


def is_terminal(status: StatusLike) -> bool:
    return CheckoutStatus(status) in TERMINAL_STATUSES


def advance_status(current: StatusLike, items_changed: bool, has_address: bool) -> CheckoutStatus:
    """Walk forward ITEMS_ADDED -> SHIPPING_SET -> PAYMENT_PENDING, taking each step only when legal."""
    status = CheckoutStatus(current)
    if items_changed and can_transition(status, CheckoutStatus.ITEMS_ADDED):
        status = CheckoutStatus.ITEMS_ADDED
    if has_address:
        for target in (CheckoutStatus.SHIPPING_SET, CheckoutStatus.PAYMENT_PENDING):
            if can_transition(status, target):
                status = target
    return status
