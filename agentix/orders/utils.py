from agentix.orders.constants import ORDER_NUMBER_PREFIX


def order_number_for(checkout_id: str) -> str:
    return f"{ORDER_NUMBER_PREFIX}{checkout_id.replace('-', '')[:8].upper()}"
