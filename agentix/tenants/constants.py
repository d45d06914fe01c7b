from agentix.common.logging_setup import get_logger

logger = get_logger("agentix.tenants")

# AES-256-GCM parameters for stored platform credentials
IV_LENGTH = 16
TAG_LENGTH = 16
