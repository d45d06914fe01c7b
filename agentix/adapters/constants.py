from agentix.common.logging_setup import get_logger

logger = get_logger("agentix.adapters")

DEFAULT_RESERVATION_TTL = 15  # minutes
