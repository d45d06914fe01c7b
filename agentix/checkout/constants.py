from agentix.common.logging_setup import get_logger
from agentix.schema.full_schema import Protocol

logger = get_logger("agentix.checkout")

BUYER_METADATA_KEYS = {
    "first_name": "buyer_first_name",
    "last_name": "buyer_last_name",
    "phone": "buyer_phone",
}

# per-protocol vocabulary: error code prefix, resource noun and audit event names
PROTOCOL_TERMS = {
    Protocol.ACP: {
        "code_prefix": "CHECKOUT",
        "noun": "Checkout",
        "created": "CHECKOUT_CREATED",
        "updated": "CHECKOUT_UPDATED",
        "completed": "CHECKOUT_COMPLETED",
        "cancelled": "CHECKOUT_CANCELLED",
        "complete_action": "complete checkout",
    },
    Protocol.UCP: {
        "code_prefix": "CART",
        "noun": "Cart",
        "created": "CART_CREATED",
        "updated": "CART_UPDATED",
        "completed": "ORDER_CREATED",
        "cancelled": "CART_CANCELLED",
        "complete_action": "create order from cart",
    },
}

PAYMENT_DECLINED_TEXT = "Invalid payment token. Token must start with 'spt_'."
