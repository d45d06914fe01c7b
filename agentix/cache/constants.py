from agentix.common.logging_setup import get_logger

logger = get_logger("agentix.cache")

KEY_PREFIX = "agx"
