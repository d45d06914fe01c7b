from agentix.config.settings import config_settings
from agentix.common.logging_setup import get_logger

logger = get_logger("agentix.common")

CHECKOUT_EXPIRY_MINUTES = config_settings.CHECKOUT_EXPIRY_MINUTES
DEFAULT_PAGE_LIMIT = config_settings.DEFAULT_PAGE_LIMIT
MAX_PAGE_LIMIT = config_settings.MAX_PAGE_LIMIT
RESERVATION_TTL_MINUTES = 15

DEFAULT_CURRENCY = "USD"
PAYMENT_TOKEN_PREFIX = "spt_"
API_KEY_HEADER = "X-API-Key"
