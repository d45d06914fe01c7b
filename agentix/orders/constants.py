from agentix.common.logging_setup import get_logger

logger = get_logger("agentix.orders")

ORDER_NUMBER_PREFIX = "ORD-"
